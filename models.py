# models.py
# Bu dosya, kullanıcının oyun/kategori yapılandırmasını ve çözücünün
# kullandığı speedrun.com varlıklarını temsil eden veri sınıflarını içerir.

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class CategoryConfig:
    """
    Kullanıcının yapılandırdığı tek bir mantıksal kategori.

    src_categories: aynı liderlik tablosu sayılan speedrun.com kategori id'leri.
    variable_state: değişken id -> izin verilen değer id'leri. Boşsa filtre yok.
    levels: bölüm id'leri, yalnızca bölüm bazlı kategorilerde kullanılır.
    subcategories: rekorları bu kategoriye sayılan, aynı oyundaki diğer
        kategorilerin isimleri.
    """
    src_categories: FrozenSet[str] = frozenset()
    variable_state: Dict[str, FrozenSet[str]] = field(default_factory=dict)
    levels: FrozenSet[str] = frozenset()
    subcategories: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class Game:
    name: str
    src_games: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    categories: Dict[str, CategoryConfig] = field(default_factory=dict)

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class SourceGame:
    id: str
    name: str
    weblink: Optional[str] = None

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class SourceCategory:
    id: str
    name: str
    game_id: str
    type: str = 'per-game'
    weblink: Optional[str] = None

    def is_individual_level(self):
        return self.type == 'per-level'

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Level:
    id: str
    name: str
    weblink: Optional[str] = None

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Run:
    """Tek bir liderlik tablosu koşusu. `time`, saniye cinsinden birincil süredir."""
    id: str
    time: float
    date: Optional[str] = None
    status: str = 'verified'
    verify_date: Optional[str] = None
    runners: Tuple[str, ...] = ()
    weblink: Optional[str] = None
    videos: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Notification:
    id: str
    text: str
    status: str = 'unread'
    weblink: Optional[str] = None

    def __str__(self):
        return self.text
