# report.py
# Bu dosya, çözülen rekorlardan izlenecek yeni rekorlar listesini oluşturur.

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from errors import RecordError
from models import Run, SourceGame
from utils import format_time

logger = logging.getLogger(__name__)


@dataclass
class GameSection:
    name: str
    src_games: List[SourceGame] = field(default_factory=list)
    records: List[Tuple[str, Run]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def fastest_time(self) -> Optional[float]:
        return min((run.time for _, run in self.records), default=None)


def unread_notifications(client, api_key):
    """
    API anahtarı ayarlanmışsa okunmamış speedrun.com bildirimlerini getirir.
    Anahtar yoksa boş liste döner.
    """
    if not api_key:
        return []
    notifications = client.fetch_notifications()
    logger.info(f"{len(notifications)} unread notification(s)")
    return notifications


def pick_record(records, watch_data, now):
    """
    İzleme listesini bir kategorinin berabere rekorlarına uygular.
    Berabere koşulardan biri izlenmişse veya hepsi ertelenmişse None döner.
    """
    if any(watch_data.is_watched(run.id) for run in records):
        return None
    for run in records:
        if not watch_data.is_deferred(run.id, now):
            return run
    return None


def build_game_section(game, resolver, watch_data, now):
    section = GameSection(game.name)
    try:
        section.src_games = resolver.source_games(game.name)
    except RecordError as e:
        logger.error(f"Could not load source games of {game.name}: {e}")
        section.errors.append(f"Could not load games: {e}")

    for category_name in game.categories:
        try:
            records = resolver.resolve(game.name, category_name)
        except RecordError as e:
            logger.error(f"Could not resolve {game.name} / {category_name}: {e}", exc_info=True)
            section.errors.append(f"{category_name}: {e}")
            continue
        run = pick_record(records, watch_data, now)
        if run is not None:
            section.records.append((category_name, run))

    section.records.sort(key=lambda record: record[1].time)
    return section


def build_report(games, resolver, watch_data, now=None):
    """
    Tüm yapılandırılmış kategorileri çözer ve gösterilecek bir şeyi olan
    oyun bölümlerini en hızlı oyun önce olacak şekilde döndürür.
    """
    now = now or datetime.now(timezone.utc)
    sections = [build_game_section(game, resolver, watch_data, now) for game in games]
    sections = [section for section in sections if section.records or section.errors]
    sections.sort(key=lambda section: (section.fastest_time is None, section.fastest_time or 0))
    return sections


def _status_line(run):
    if run.status == 'verified':
        return f"Verified {run.verify_date}" if run.verify_date else "Verified in the Old Days"
    if run.status == 'rejected':
        return "REJECTED"
    return "Not yet verified"


def _with_link(text, weblink):
    return f"{text} ({weblink})" if weblink else text


def render_report(sections, notifications=()):
    """Rapor bölümlerini ve bildirimleri düz metin satırlarına dönüştürür."""
    total = len(notifications) + sum(len(section.records) for section in sections)
    lines = [f"{total} new item(s)"]
    if notifications:
        lines.append("")
        lines.append("Notifications")
        for note in notifications:
            lines.append(f"  {_with_link(note.text, note.weblink)}")
    for section in sections:
        lines.append("")
        lines.append(section.name)
        for src_game in section.src_games:
            lines.append(f"  Game: {_with_link(src_game.name, src_game.weblink)}")
        for category_name, run in section.records:
            lines.append(f"  New WR in {category_name}: {format_time(run.time)}")
            lines.append(f"    Run: {_with_link(run.id, run.weblink)}")
            for runner in run.runners:
                lines.append(f"    Runner: {runner}")
            lines.append(f"    Recorded {run.date}" if run.date else "    Recorded in the Old Days")
            lines.append(f"    {_status_line(run)}")
        for error in section.errors:
            lines.append(f"  Error: {error}")
    return lines
