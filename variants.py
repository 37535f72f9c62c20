# variants.py
# Bu dosya, bir kategori yapılandırmasını rekoru bulmak için gereken
# somut liderlik tablosu sorgularına genişletir.

import itertools
import logging
from typing import NamedTuple, Optional, Tuple

from models import SourceCategory

logger = logging.getLogger(__name__)


class Variant(NamedTuple):
    """
    Tek bir liderlik tablosu sorgusu. `filter`, değişken id'sine göre sıralı
    (değişken id, değer id) çiftleridir; filtresiz tablo için None.
    """
    category: SourceCategory
    filter: Optional[Tuple[Tuple[str, str], ...]] = None
    level_id: Optional[str] = None


def expand_filters(variable_state):
    """
    Verilen değişken durumu için tüm tam filtreleri, yani her değişkenin
    izin verilen değerlerinin Kartezyen çarpımını döndürür. Boş durum filtre
    üretmez; değeri olmayan bir değişken çarpımı boşaltır.
    """
    if not variable_state:
        return []
    var_ids = sorted(variable_state)
    value_lists = [sorted(variable_state[var_id]) for var_id in var_ids]
    return [tuple(zip(var_ids, values)) for values in itertools.product(*value_lists)]


class VariantExpander:
    def __init__(self, entity_cache):
        self.entity_cache = entity_cache

    def expand(self, category_config):
        """
        Bir kategori yapılandırmasının varyant listesini döndürür. Bölüm bazlı
        kategorileri ayırt etmek için kaynak kategoriler varlık önbelleğinden
        alınır, bu yüzden UpstreamError fırlatabilir.
        """
        if category_config.variable_state:
            filters = expand_filters(category_config.variable_state)
        else:
            filters = [None]
        levels = sorted(category_config.levels)

        variants = []
        for category_id in sorted(category_config.src_categories):
            src_category = self.entity_cache.category(category_id)
            if src_category.is_individual_level() and not levels:
                logger.warning(f"Per-level category {category_id} has no levels configured.")
            for run_filter in filters:
                if src_category.is_individual_level():
                    variants.extend(Variant(src_category, run_filter, level_id) for level_id in levels)
                else:
                    variants.append(Variant(src_category, run_filter))
        logger.debug(f"Expanded {len(category_config.src_categories)} source categories into {len(variants)} variants")
        return variants
