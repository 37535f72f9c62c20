# entity_cache.py
# Bu dosya, bir çalıştırma boyunca speedrun.com oyun, kategori ve bölüm
# nesnelerini önbellekte tutar.

import logging

logger = logging.getLogger(__name__)

SOURCE_CATEGORY = 'category'
SOURCE_GAME = 'game'
LEVEL = 'level'


class EntityCache:
    """
    Her (tür, id) çiftini istemciden en fazla bir kez getirir. Başarısız
    istekler saklanmaz, böylece tekrar sormak isteği yeniden dener.
    """

    def __init__(self, client):
        self.client = client
        self._fetchers = {
            SOURCE_CATEGORY: client.fetch_category,
            SOURCE_GAME: client.fetch_game,
            LEVEL: client.fetch_level,
        }
        self._entities = {}

    def get_or_fetch(self, kind, entity_id):
        if kind not in self._fetchers:
            raise ValueError(f"Unknown entity kind: {kind!r}")
        key = (kind, entity_id)
        if key in self._entities:
            return self._entities[key]
        logger.debug(f"Fetching {kind} {entity_id}")
        entity = self._fetchers[kind](entity_id)
        self._entities[key] = entity
        return entity

    def category(self, category_id):
        return self.get_or_fetch(SOURCE_CATEGORY, category_id)

    def game(self, game_id):
        return self.get_or_fetch(SOURCE_GAME, game_id)

    def level(self, level_id):
        return self.get_or_fetch(LEVEL, level_id)

    def __len__(self):
        return len(self._entities)
