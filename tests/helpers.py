# tests/helpers.py

from errors import UpstreamError
from models import CategoryConfig, Game, Run


class FakeClient:
    """
    In-memory leaderboard source. Leaderboards are keyed by
    (category id, level id or None, filter or None).
    """

    def __init__(self, categories=(), levels=(), games=(), leaderboards=None, notifications=()):
        self.categories = {category.id: category for category in categories}
        self.levels = {level.id: level for level in levels}
        self.games = {game.id: game for game in games}
        self.leaderboards = leaderboards or {}
        self.notifications = list(notifications)
        self.failing = set()
        self.calls = []

    def _lookup(self, kind, table, entity_id):
        self.calls.append((kind, entity_id))
        if (kind, entity_id) in self.failing or entity_id not in table:
            raise UpstreamError(f"{kind} {entity_id} not found", status_code=404)
        return table[entity_id]

    def fetch_category(self, category_id):
        return self._lookup('category', self.categories, category_id)

    def fetch_level(self, level_id):
        return self._lookup('level', self.levels, level_id)

    def fetch_game(self, game_id):
        return self._lookup('game', self.games, game_id)

    def _board(self, key):
        self.calls.append(('leaderboard',) + key)
        if key in self.failing:
            raise UpstreamError(f"leaderboard {key} failed", status_code=503)
        return list(self.leaderboards.get(key, []))

    def leaderboard(self, category, run_filter=None):
        return self._board((category.id, None, run_filter))

    def level_leaderboard(self, level, category, run_filter=None):
        return self._board((category.id, level.id, run_filter))

    def fetch_notifications(self):
        self.calls.append(('notifications',))
        return list(self.notifications)

    def leaderboard_calls(self):
        return [call for call in self.calls if call[0] == 'leaderboard']


class FakeWatchData:
    def __init__(self, unwatchable=(), watched=(), deferred=None):
        self.unwatchable = set(unwatchable)
        self.watched = set(watched)
        self.deferred = dict(deferred or {})

    def is_unwatchable(self, run_id):
        return run_id in self.unwatchable

    def is_watched(self, run_id):
        return run_id in self.watched

    def is_deferred(self, run_id, now=None):
        until = self.deferred.get(run_id)
        return until is not None and until > now


def run(run_id, time, **kwargs):
    return Run(id=run_id, time=time, **kwargs)


def category_config(src_categories=(), variable_state=None, levels=(), subcategories=()):
    return CategoryConfig(
        src_categories=frozenset(src_categories),
        variable_state={var_id: frozenset(values) for var_id, values in (variable_state or {}).items()},
        levels=frozenset(levels),
        subcategories=frozenset(subcategories),
    )


def game(name='game', categories=None, src_games=None):
    return Game(name=name, src_games=src_games or {}, categories=categories or {})
