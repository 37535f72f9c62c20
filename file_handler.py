# file_handler.py
# Bu dosya, ayarlar ve izleme verisi tarafından paylaşılan
# temel JSON dosya okuma ve yazma işlemlerini içerir.

import json
import logging
import os

logger = logging.getLogger(__name__)


def load_json_file(filename, default_data=None):
    """
    Bir JSON dosyasını güvenli bir şekilde yükler.
    Dosya yoksa veya bozuksa, belirtilen varsayılan veriyi döndürür.
    """
    if default_data is None:
        default_data = {}
    if os.path.exists(filename):
        try:
            with open(filename, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.error(f"Error loading data from {filename}: {e}", exc_info=True)
    return default_data


def save_json_file(filename, data):
    """
    Veriyi girintili JSON olarak yazar. Dosya önce geçici bir yola
    yazılır, ardından yerine taşınır.
    """
    directory = os.path.dirname(os.path.abspath(filename))
    os.makedirs(directory, exist_ok=True)
    tmp_filename = f"{filename}.tmp"
    try:
        with open(tmp_filename, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=4, ensure_ascii=False)
        os.replace(tmp_filename, filename)
    except (IOError, OSError, TypeError) as e:
        logger.error(f"Error saving data to {filename}: {e}", exc_info=True)
        raise
