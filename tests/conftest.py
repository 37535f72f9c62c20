import pytest

from models import Level, SourceCategory, SourceGame


@pytest.fixture
def full_game_category():
    return SourceCategory(id='abc123', name='Any%', game_id='g1')


@pytest.fixture
def level_category():
    return SourceCategory(id='il1', name='Stage RTA', game_id='g1', type='per-level')


@pytest.fixture
def levels():
    return [Level(id='lv1', name='Level 1'), Level(id='lv2', name='Level 2')]


@pytest.fixture
def source_game():
    return SourceGame(id='g1', name='Example Game', weblink='https://www.speedrun.com/example')
