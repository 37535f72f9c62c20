# settings.py
# Bu dosya, kullanıcının oyun ve kategori yapılandırmasını yükler.

import json
import logging
import os

from config import CONFIG_FILE
from errors import ConfigurationError
from models import CategoryConfig, Game

logger = logging.getLogger(__name__)


def _id_set(value, what):
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigurationError(f"{what} must be a list of strings")
    return frozenset(value)


def _expect_dict(value, what):
    if not isinstance(value, dict):
        raise ConfigurationError(f"{what} must be an object")
    return value


def parse_category(game_name, category_name, data):
    where = f"category {category_name!r} in game {game_name!r}"
    data = _expect_dict(data, where)
    variable_state = _expect_dict(data.get('variableState', {}), f"variableState of {where}")
    return CategoryConfig(
        src_categories=_id_set(data.get('srcCategories', []), f"srcCategories of {where}"),
        variable_state={
            var_id: _id_set(values, f"values of variable {var_id!r} of {where}")
            for var_id, values in variable_state.items()
        },
        levels=_id_set(data.get('levels', []), f"levels of {where}"),
        subcategories=_id_set(data.get('subcategories', []), f"subcategories of {where}"),
    )


def parse_game(game_name, data):
    data = _expect_dict(data, f"game {game_name!r}")
    src_games = _expect_dict(data.get('srcGames', {}), f"srcGames of game {game_name!r}")
    categories = _expect_dict(data.get('categories', {}), f"categories of game {game_name!r}")
    return Game(
        name=game_name,
        src_games={
            game_id: tuple(sorted(_id_set(ignored or [], f"ignored categories of source game {game_id!r}")))
            for game_id, ignored in src_games.items()
        },
        categories={
            category_name: parse_category(game_name, category_name, category_data)
            for category_name, category_data in categories.items()
        },
    )


class SettingsManager:
    """
    Yapılandırma dosyasını okur. İzleme verisinin aksine, eksik veya
    geçersiz bir yapılandırma hatadır.
    """
    def __init__(self, filename=CONFIG_FILE):
        self.filename = filename
        self.settings = self.load_settings()
        self.api_key = self.settings.get('apiKey')
        self.games = [parse_game(name, data) for name, data in _expect_dict(self.settings.get('games', {}), "games").items()]

    def load_settings(self):
        if not os.path.exists(self.filename):
            raise ConfigurationError(f"Missing configuration file: {self.filename}")
        try:
            with open(self.filename, 'r', encoding='utf-8') as f:
                settings = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Error in config file {self.filename}: {e}") from e
        except IOError as e:
            raise ConfigurationError(f"Could not read config file {self.filename}: {e}") from e
        logger.info(f"Loaded configuration from {self.filename}")
        return _expect_dict(settings, "configuration")
