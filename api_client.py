# api_client.py
# Bu dosya, speedrun.com API'si ile engelleyici (senkron) iletişimi yönetir.
# Yeniden deneme ve yanıt ayrıştırma burada yapılır; üst katmanlar yalnızca
# model nesnelerini ve UpstreamError'ı görür.

import logging
import time

import requests

from config import (
    API_BASE_URL, USER_AGENT, REQUEST_TIMEOUT,
    RETRY_MAX_ATTEMPTS, RETRY_INITIAL_DELAY, RETRYABLE_STATUS_CODES, NOTIFICATIONS_MAX,
)
from errors import UpstreamError
from models import Level, Notification, Run, SourceCategory, SourceGame

logger = logging.getLogger(__name__)


def _link_id(links, rel):
    """Verilen rel değerine sahip ilk bağlantının son yol parçasını döndürür."""
    for link in links or []:
        if isinstance(link, dict) and link.get('rel') == rel and link.get('uri'):
            return link['uri'].rstrip('/').rsplit('/', 1)[-1]
    return None


def _player_names(run_obj, players_embed):
    """
    Koşucu isimlerini çıkarır. Kayıtlı kullanıcılar gömülü oyuncu listesinden
    bulunur, misafir oyuncuların ismi koşunun içindedir.
    """
    player_id_map = {p['id']: p for p in players_embed if isinstance(p, dict) and p.get('id')}
    names = []
    players = run_obj.get('players', [])
    if isinstance(players, dict):
        # Tekil koşu isteklerinde oyuncular yerinde gömülüdür
        players = players.get('data', [])
    for player in players:
        if not isinstance(player, dict):
            continue
        if player.get('rel') == 'guest':
            names.append(player.get('name') or 'Unknown player')
            continue
        p_data = player_id_map.get(player.get('id'), player)
        names.append(p_data.get('names', {}).get('international') or p_data.get('name') or p_data.get('id') or 'Unknown player')
    return tuple(names)


def parse_run(run_obj, players_embed=()):
    try:
        status = run_obj.get('status') or {}
        videos = run_obj.get('videos') or {}
        return Run(
            id=run_obj['id'],
            time=float(run_obj['times']['primary_t']),
            date=run_obj.get('date'),
            status=status.get('status', 'new'),
            verify_date=status.get('verify-date'),
            runners=_player_names(run_obj, players_embed),
            weblink=run_obj.get('weblink'),
            videos=tuple(link['uri'] for link in videos.get('links') or [] if link.get('uri')),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise UpstreamError(f"Unexpected run format: {e}") from e


class SpeedrunClient:
    """
    speedrun.com REST API'sini kullanan liderlik tablosu kaynağı.
    """

    def __init__(self, api_key=None, base_url=API_BASE_URL, max_retries=RETRY_MAX_ATTEMPTS,
                 initial_retry_delay=RETRY_INITIAL_DELAY, request_timeout=REQUEST_TIMEOUT, session=None):
        self.base_url = base_url.rstrip('/')
        self.max_retries = max_retries
        self.initial_retry_delay = initial_retry_delay
        self.request_timeout = request_timeout
        self.session = session or requests.Session()
        self.session.headers['User-Agent'] = USER_AGENT
        if api_key:
            self.session.headers['X-API-Key'] = api_key

    def _request_with_retries(self, path, params=None):
        """
        Bir GET isteği gönderir; zaman aşımı, bağlantı hatası ve hız sınırında
        üstel backoff ile yeniden dener. Çözülmüş JSON gövdesini döndürür.
        """
        url = f"{self.base_url}/{path}"
        last_exception_type = None

        for attempt in range(self.max_retries):
            delay = self.initial_retry_delay * (2 ** attempt)
            try:
                response = self.session.get(url, params=params, timeout=self.request_timeout)
                response.raise_for_status()
                try:
                    return response.json()
                except ValueError as e:
                    logger.error(f"Failed to parse API response (invalid JSON): {url}", exc_info=True)
                    raise UpstreamError("Invalid JSON in API response", url=url) from e
            except requests.exceptions.Timeout:
                last_exception_type = "Timeout"
                logger.warning(f"API request timed out: {url}")
            except requests.exceptions.ConnectionError:
                last_exception_type = "ConnectionError"
                logger.warning(f"API connection error: {url}")
            except requests.exceptions.HTTPError as e:
                status_code = e.response.status_code if e.response is not None else None
                if status_code not in RETRYABLE_STATUS_CODES:
                    logger.error(f"API request error: {e} URL: {url}")
                    raise UpstreamError(f"HTTP error {status_code}", url=url, status_code=status_code) from e
                last_exception_type = f"HTTP {status_code}"
                retry_after = e.response.headers.get('Retry-After')
                if status_code == 429 and retry_after:
                    try:
                        delay = int(retry_after)
                    except ValueError:
                        pass
                logger.warning(f"API request returned {status_code}: {url}")
            except requests.exceptions.RequestException as e:
                logger.error(f"API request error: {e} URL: {url}", exc_info=True)
                raise UpstreamError(f"Request failed: {e}", url=url) from e

            if attempt < self.max_retries - 1:
                logger.info(f"{attempt + 1}/{self.max_retries} retrying in {delay} seconds: {url}")
                time.sleep(delay)

        logger.error(f"Max retries exceeded ({self.max_retries}) for {url}. Last error type: {last_exception_type}.")
        raise UpstreamError(f"Max retries exceeded ({self.max_retries}), last error: {last_exception_type}", url=url)

    def _get_data(self, path, params=None):
        payload = self._request_with_retries(path, params)
        if not isinstance(payload, dict) or 'data' not in payload:
            raise UpstreamError("API response has no 'data' field", url=f"{self.base_url}/{path}")
        return payload['data']

    def fetch_game(self, game_id):
        data = self._get_data(f"games/{game_id}")
        try:
            return SourceGame(id=data['id'], name=data['names']['international'], weblink=data.get('weblink'))
        except (KeyError, TypeError) as e:
            raise UpstreamError(f"Unexpected game format: {e}") from e

    def fetch_category(self, category_id):
        data = self._get_data(f"categories/{category_id}")
        try:
            game_id = _link_id(data.get('links'), 'game')
            if game_id is None:
                raise KeyError('game link')
            return SourceCategory(id=data['id'], name=data['name'], game_id=game_id,
                                  type=data.get('type', 'per-game'), weblink=data.get('weblink'))
        except (KeyError, TypeError) as e:
            raise UpstreamError(f"Unexpected category format: {e}") from e

    def fetch_level(self, level_id):
        data = self._get_data(f"levels/{level_id}")
        try:
            return Level(id=data['id'], name=data['name'], weblink=data.get('weblink'))
        except (KeyError, TypeError) as e:
            raise UpstreamError(f"Unexpected level format: {e}") from e

    def fetch_run(self, run_id):
        return parse_run(self._get_data(f"runs/{run_id}", {'embed': 'players'}))

    def fetch_notifications(self):
        """
        API anahtarının sahibine ait okunmamış bildirimleri döndürür.
        Yalnızca API anahtarı ayarlanmışsa çalışır.
        """
        data = self._get_data("notifications", {'max': NOTIFICATIONS_MAX, 'direction': 'desc'})
        try:
            notifications = [
                Notification(id=note['id'], text=note.get('text') or '', status=note.get('status', 'unread'),
                             weblink=(note.get('item') or {}).get('uri'))
                for note in data
            ]
        except (KeyError, TypeError, AttributeError) as e:
            raise UpstreamError(f"Unexpected notification format: {e}") from e
        return [note for note in notifications if note.status != 'read']

    def _leaderboard_params(self, run_filter):
        params = {'embed': 'players'}
        for var_id, value_id in run_filter or ():
            params[f"var-{var_id}"] = value_id
        return params

    def _fetch_leaderboard(self, path, run_filter):
        data = self._get_data(path, self._leaderboard_params(run_filter))
        try:
            players_embed = (data.get('players') or {}).get('data', [])
            return [parse_run(entry['run'], players_embed) for entry in data.get('runs', [])]
        except (KeyError, TypeError, AttributeError) as e:
            raise UpstreamError(f"Unexpected leaderboard format: {e}") from e

    def leaderboard(self, category, run_filter=None):
        """
        Tam oyun liderlik tablosundaki koşuları sıralamaya göre döndürür.
        `run_filter`, (değişken id, değer id) çiftlerinden oluşur.
        """
        return self._fetch_leaderboard(f"leaderboards/{category.game_id}/category/{category.id}", run_filter)

    def level_leaderboard(self, level, category, run_filter=None):
        return self._fetch_leaderboard(f"leaderboards/{category.game_id}/level/{level.id}/{category.id}", run_filter)
