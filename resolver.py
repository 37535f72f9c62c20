# resolver.py
# Bu dosya, yapılandırılmış bir kategorinin güncel rekor(lar)ını belirler.

import logging

from entity_cache import EntityCache
from errors import ConfigurationError
from variants import VariantExpander

logger = logging.getLogger(__name__)


def tied_fastest(runs):
    """İlk koşuyla aynı süreye sahip baştaki koşuları döndürür."""
    if not runs:
        return []
    fastest_time = runs[0].time
    tied = []
    for run in runs:
        if run.time != fastest_time:
            break
        tied.append(run)
    return tied


class RecordResolver:
    """
    Her yapılandırılmış kategorinin izlenebilir en hızlı koşu(lar)ını çözer.

    Varlık önbelleği ve (oyun, kategori) sonuç önbelleği çözücüye aittir ve
    onunla birlikte yaşar. Burada yalnızca `unwatchable` uygulanır; izlenmiş
    ve ertelenmiş koşular çağırana bırakılır, böylece önbellekteki sonuçlar
    izleme listesi değişse de geçerli kalır.
    """

    def __init__(self, games, client, watch_data):
        self.games = {game.name: game for game in games}
        self.client = client
        self.watch_data = watch_data
        self.entity_cache = EntityCache(client)
        self.expander = VariantExpander(self.entity_cache)
        self._records = {}

    def resolve(self, game_name, category_name):
        return list(self._resolve(game_name, category_name, ()))

    def source_games(self, game_name):
        """Yapılandırılmış bir oyuna bağlı speedrun.com oyunlarını döndürür."""
        return [self.entity_cache.game(game_id) for game_id in self._game(game_name).src_games]

    def _game(self, game_name):
        try:
            return self.games[game_name]
        except KeyError:
            raise ConfigurationError(f"Game {game_name!r} is not configured") from None

    def _resolve(self, game_name, category_name, chain):
        key = (game_name, category_name)
        if key in self._records:
            logger.debug(f"Cache hit for {game_name} / {category_name}")
            return self._records[key]
        if category_name in chain:
            cycle = ' -> '.join(chain + (category_name,))
            raise ConfigurationError(f"Subcategory cycle in game {game_name!r}: {cycle}")

        game = self._game(game_name)
        try:
            category_config = game.categories[category_name]
        except KeyError:
            raise ConfigurationError(f"Reference to unconfigured category {category_name!r} in game {game_name!r}") from None

        pool = []
        for variant in self.expander.expand(category_config):
            pool.extend(self._variant_candidates(variant))
        for subcategory_name in sorted(category_config.subcategories):
            pool.extend(self._resolve(game_name, subcategory_name, chain + (category_name,)))

        records = []
        if pool:
            fastest_time = min(run.time for run in pool)
            seen = set()
            for run in pool:
                if run.time == fastest_time and run.id not in seen:
                    seen.add(run.id)
                    records.append(run)

        logger.info(f"{game_name} / {category_name}: {len(records)} record run(s)")
        self._records[key] = records
        return records

    def _variant_candidates(self, variant):
        if variant.level_id is None:
            runs = self.client.leaderboard(variant.category, variant.filter)
        else:
            level = self.entity_cache.level(variant.level_id)
            runs = self.client.level_leaderboard(level, variant.category, variant.filter)
        watchable = [run for run in runs if not self.watch_data.is_unwatchable(run.id)]
        return tied_fastest(watchable)
