# watch_data.py
# Bu dosya, koşuların izlenme durumunu (izlendi, izlenemez, ertelendi) yönetir.

import logging
from datetime import datetime, timezone

from config import WATCH_DATA_FILE
from file_handler import load_json_file, save_json_file

logger = logging.getLogger(__name__)


def parse_timestamp(value):
    """ISO-8601 zaman damgasını çözer. Saat dilimi yoksa UTC kabul edilir."""
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class WatchDataManager:
    """
    İzleme listesini yükler ve kaydeder.
    Dosya yoksa veya bozuksa boş bir izleme listesi kullanılır.
    """
    def __init__(self, filename=WATCH_DATA_FILE):
        self.filename = filename
        self.runs = self.load_runs()

    def load_runs(self):
        data = load_json_file(self.filename, {'runs': {}})
        runs = data.get('runs') if isinstance(data, dict) else None
        if not isinstance(runs, dict):
            logger.warning(f"Ignoring malformed watch data in {self.filename}")
            return {}
        return {run_id: run_data for run_id, run_data in runs.items() if isinstance(run_data, dict)}

    def save(self):
        save_json_file(self.filename, {'runs': self.runs})

    def _run(self, run_id):
        return self.runs.get(run_id, {})

    def _entry(self, run_id):
        return self.runs.setdefault(run_id, {'watched': False, 'unwatchable': False, 'deferred': None})

    def _flag(self, run_id, name):
        # Elle düzenlenmiş "false" gibi değerler işaretli sayılmaz
        value = self._run(run_id).get(name, False)
        if not isinstance(value, bool):
            logger.warning(f"Ignoring non-boolean {name} value for run {run_id}: {value!r}")
            return False
        return value

    def is_unwatchable(self, run_id):
        return self._flag(run_id, 'unwatchable')

    def is_watched(self, run_id):
        return self._flag(run_id, 'watched')

    def deferred_until(self, run_id):
        deferred = self._run(run_id).get('deferred')
        if deferred is None:
            return None
        if not isinstance(deferred, str):
            logger.warning(f"Ignoring non-string deferred value for run {run_id}: {deferred!r}")
            return None
        try:
            return parse_timestamp(deferred)
        except ValueError:
            logger.warning(f"Ignoring invalid deferred timestamp for run {run_id}: {deferred!r}")
            return None

    def is_deferred(self, run_id, now=None):
        deferred = self.deferred_until(run_id)
        if deferred is None:
            return False
        return deferred > (now or datetime.now(timezone.utc))

    def mark_watched(self, run_id):
        self._entry(run_id)['watched'] = True
        logger.info(f"Marked run {run_id} as watched")

    def mark_unwatchable(self, run_id):
        self._entry(run_id)['unwatchable'] = True
        logger.info(f"Marked run {run_id} as unwatchable")

    def defer(self, run_id, until):
        self._entry(run_id)['deferred'] = until.astimezone(timezone.utc).isoformat()
        logger.info(f"Deferred run {run_id} until {until.isoformat()}")
