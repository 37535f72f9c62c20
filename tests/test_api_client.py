import pytest
import requests

import api_client
from api_client import SpeedrunClient, parse_run
from errors import UpstreamError
from models import Level, Notification, SourceCategory


class FakeResponse:
    def __init__(self, payload=None, status_code=200, headers=None, invalid_json=False):
        self.payload = payload
        self.status_code = status_code
        self.headers = headers or {}
        self.invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        if self.invalid_json:
            raise ValueError("No JSON object could be decoded")
        return self.payload


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.headers = {}
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    sleeps = []
    monkeypatch.setattr(api_client.time, 'sleep', sleeps.append)
    return sleeps


def make_client(*responses, **kwargs):
    return SpeedrunClient(session=FakeSession(responses), **kwargs)


LEADERBOARD = {
    'data': {
        'runs': [
            {'place': 1, 'run': {
                'id': 'r1', 'weblink': 'https://www.speedrun.com/run/r1',
                'times': {'primary_t': 55.5}, 'date': '2024-05-01',
                'status': {'status': 'verified', 'verify-date': '2024-05-02T10:00:00Z'},
                'players': [{'rel': 'user', 'id': 'u1'}, {'rel': 'guest', 'name': 'Guest'}],
                'videos': {'links': [{'uri': 'https://youtu.be/x'}]},
            }},
            {'place': 2, 'run': {
                'id': 'r2', 'times': {'primary_t': 60}, 'date': None,
                'status': {'status': 'new'}, 'players': [{'rel': 'user', 'id': 'u2'}], 'videos': None,
            }},
        ],
        'players': {'data': [
            {'id': 'u1', 'names': {'international': 'Alice'}},
            {'id': 'u2', 'names': {'international': 'Bob'}},
        ]},
    },
}


def test_leaderboard_parses_runs_in_order():
    client = make_client(FakeResponse(LEADERBOARD))
    category = SourceCategory(id='abc123', name='Any%', game_id='g1')
    runs = client.leaderboard(category, (('platform', 'pc'),))

    url, params = client.session.requests[0]
    assert url == 'https://www.speedrun.com/api/v1/leaderboards/g1/category/abc123'
    assert params == {'embed': 'players', 'var-platform': 'pc'}

    assert [run.id for run in runs] == ['r1', 'r2']
    first, second = runs
    assert first.time == 55.5
    assert first.runners == ('Alice', 'Guest')
    assert first.verify_date == '2024-05-02T10:00:00Z'
    assert first.videos == ('https://youtu.be/x',)
    assert second.status == 'new'
    assert second.videos == ()
    assert second.runners == ('Bob',)


def test_level_leaderboard_url():
    client = make_client(FakeResponse({'data': {'runs': []}}))
    category = SourceCategory(id='il1', name='Stage', game_id='g1', type='per-level')
    assert client.level_leaderboard(Level(id='lv1', name='Level 1'), category) == []
    url, params = client.session.requests[0]
    assert url.endswith('/leaderboards/g1/level/lv1/il1')
    assert params == {'embed': 'players'}


def test_fetch_category_reads_game_link():
    client = make_client(FakeResponse({'data': {
        'id': 'il1', 'name': 'Stage', 'type': 'per-level',
        'links': [{'rel': 'self', 'uri': 'https://www.speedrun.com/api/v1/categories/il1'},
                  {'rel': 'game', 'uri': 'https://www.speedrun.com/api/v1/games/g1'}],
    }}))
    category = client.fetch_category('il1')
    assert category.game_id == 'g1'
    assert category.is_individual_level()


def test_fetch_game_and_level():
    client = make_client(
        FakeResponse({'data': {'id': 'g1', 'names': {'international': 'Example'}, 'weblink': 'https://w'}}),
        FakeResponse({'data': {'id': 'lv1', 'name': 'Level 1'}}),
    )
    assert client.fetch_game('g1').name == 'Example'
    assert client.fetch_level('lv1').name == 'Level 1'


def test_fetch_run_with_embedded_players():
    client = make_client(FakeResponse({'data': {
        'id': 'r1', 'times': {'primary_t': 10}, 'status': {'status': 'verified'},
        'players': {'data': [{'rel': 'user', 'id': 'u1', 'names': {'international': 'Alice'}}]},
    }}))
    assert client.fetch_run('r1').runners == ('Alice',)


def test_fetch_notifications_keeps_unread():
    client = make_client(FakeResponse({'data': [
        {'id': 'n1', 'text': 'Run verified', 'status': 'unread',
         'item': {'rel': 'run', 'uri': 'https://www.speedrun.com/run/r1'}},
        {'id': 'n2', 'text': 'Old news', 'status': 'read'},
        {'id': 'n3', 'text': 'No link'},
    ]}))
    notifications = client.fetch_notifications()
    assert notifications == [
        Notification(id='n1', text='Run verified', weblink='https://www.speedrun.com/run/r1'),
        Notification(id='n3', text='No link'),
    ]
    url, params = client.session.requests[0]
    assert url.endswith('/notifications')
    assert params == {'max': 200, 'direction': 'desc'}


def test_fetch_notifications_unexpected_format():
    client = make_client(FakeResponse({'data': [{'text': 'missing id'}]}))
    with pytest.raises(UpstreamError, match='notification'):
        client.fetch_notifications()


def test_api_key_header():
    client = make_client(api_key='secret')
    assert client.session.headers['X-API-Key'] == 'secret'


def test_retries_rate_limit_then_succeeds(no_sleep):
    client = make_client(
        FakeResponse(status_code=429, headers={'Retry-After': '7'}),
        requests.exceptions.Timeout(),
        FakeResponse({'data': {'id': 'lv1', 'name': 'Level 1'}}),
    )
    assert client.fetch_level('lv1').id == 'lv1'
    assert no_sleep == [7, 2]


def test_gives_up_after_max_retries(no_sleep):
    client = make_client(*[requests.exceptions.ConnectionError()] * 3, max_retries=3)
    with pytest.raises(UpstreamError, match='Max retries'):
        client.fetch_level('lv1')
    assert no_sleep == [1, 2]


def test_not_found_is_not_retried():
    client = make_client(FakeResponse(status_code=404))
    with pytest.raises(UpstreamError) as excinfo:
        client.fetch_category('missing')
    assert excinfo.value.status_code == 404
    assert isinstance(excinfo.value.__cause__, requests.exceptions.HTTPError)
    assert len(client.session.requests) == 1


def test_invalid_json():
    client = make_client(FakeResponse(invalid_json=True))
    with pytest.raises(UpstreamError, match='Invalid JSON'):
        client.fetch_level('lv1')


def test_unexpected_payload():
    client = make_client(FakeResponse({'errors': []}))
    with pytest.raises(UpstreamError):
        client.fetch_game('g1')


def test_parse_run_requires_time():
    with pytest.raises(UpstreamError):
        parse_run({'id': 'r1', 'times': {}})
