"""
Tile Model

Defines the 34 tile kinds shared by every variant:
- 9 Characters (万) x4 = 36
- 9 Bamboos (条) x4 = 36
- 9 Dots (筒) x4 = 36
- 4 Winds (东南西北) x4 = 16
- 3 Dragons (中发白) x4 = 12
Total: 136 tiles, plus 8 flower tiles for variants that use them.

Also provides the shorthand notation used by tests and callers:
"123m456p789s1122z", where 0 stands for a red five and honors are
1z-4z for East-North, 5z white, 6z green, 7z red.
"""

import re
from enum import IntEnum
from dataclasses import dataclass
from typing import List, Optional, Iterable
import numpy as np


class TileSuit(IntEnum):
    """Tile suits"""
    CHARACTERS = 0  # 万 (Wan) - Numbers 1-9
    BAMBOOS = 1     # 条 (Tiao) - Numbers 1-9
    DOTS = 2        # 筒 (Tong) - Numbers 1-9
    WINDS = 3       # 风 (Feng) - East, South, West, North
    DRAGONS = 4     # 箭 (Jian) - Red, Green, White


NUMBERED_SUITS = (TileSuit.CHARACTERS, TileSuit.BAMBOOS, TileSuit.DOTS)


class WindType(IntEnum):
    """Wind tile types"""
    EAST = 0   # 东
    SOUTH = 1  # 南
    WEST = 2   # 西
    NORTH = 3  # 北


class DragonType(IntEnum):
    """Dragon tile types"""
    RED = 0    # 中 (Zhong)
    GREEN = 1  # 发 (Fa)
    WHITE = 2  # 白 (Bai)


class FlowerType(IntEnum):
    """
    Bonus flower tiles. They never enter the 34-kind count and only
    matter to variants that score them.
    """
    SPRING = 0   # 春
    SUMMER = 1   # 夏
    AUTUMN = 2   # 秋
    WINTER = 3   # 冬
    PLUM = 4     # 梅
    ORCHID = 5   # 兰
    BAMBOO = 6   # 竹
    CHRYSANTHEMUM = 7  # 菊

    @property
    def seat(self) -> WindType:
        """Seat wind this flower belongs to (春/梅 East, 夏/兰 South, ...)"""
        return WindType(self.value % 4)

    def __str__(self) -> str:
        return "春夏秋冬梅兰竹菊"[self.value]


@dataclass(frozen=True)
class Tile:
    """
    Represents a single Mahjong tile.

    Attributes:
        suit: The suit of the tile (Characters, Bamboos, Dots, Winds, Dragons)
        value: The value within the suit (1-9 for numbered suits, 0-3/0-2 for honors)
        id: Identifier for this specific tile instance (0-135)
        is_red: Red five bonus instance
    """
    suit: TileSuit
    value: int
    id: int = 0
    is_red: bool = False

    def __post_init__(self):
        """Validate tile values"""
        if self.suit in NUMBERED_SUITS:
            if not 1 <= self.value <= 9:
                raise ValueError(f"Numbered suits must have value 1-9, got {self.value}")
            if self.is_red and self.value != 5:
                raise ValueError(f"Only fives can be red, got {self.value}")
        elif self.suit == TileSuit.WINDS:
            if not 0 <= self.value <= 3:
                raise ValueError(f"Wind tiles must have value 0-3, got {self.value}")
        elif self.suit == TileSuit.DRAGONS:
            if not 0 <= self.value <= 2:
                raise ValueError(f"Dragon tiles must have value 0-2, got {self.value}")
        if self.is_red and self.suit not in NUMBERED_SUITS:
            raise ValueError("Honor tiles cannot be red")

    @property
    def is_numbered(self) -> bool:
        return self.suit in NUMBERED_SUITS

    @property
    def is_honor(self) -> bool:
        """Check if tile is an honor tile (Wind or Dragon)"""
        return self.suit in (TileSuit.WINDS, TileSuit.DRAGONS)

    @property
    def is_terminal(self) -> bool:
        """Check if tile is a terminal (1 or 9 of numbered suits)"""
        if self.suit in NUMBERED_SUITS:
            return self.value in (1, 9)
        return False

    @property
    def is_terminal_or_honor(self) -> bool:
        return self.is_terminal or self.is_honor

    @property
    def is_simple(self) -> bool:
        """Check if tile is a simple (2-8 of numbered suits)"""
        if self.suit in NUMBERED_SUITS:
            return 2 <= self.value <= 8
        return False

    @property
    def is_green(self) -> bool:
        """Check if tile is a green tile (for All Green pattern)"""
        if self.suit == TileSuit.BAMBOOS:
            return self.value in (2, 3, 4, 6, 8)
        if self.suit == TileSuit.DRAGONS:
            return self.value == DragonType.GREEN
        return False

    @property
    def tile_index(self) -> int:
        """
        Get unique index for this tile kind (0-33).
        Used for count arrays; ignores instance id and the red flag.
        """
        if self.suit == TileSuit.CHARACTERS:
            return self.value - 1  # 0-8
        elif self.suit == TileSuit.BAMBOOS:
            return 9 + self.value - 1  # 9-17
        elif self.suit == TileSuit.DOTS:
            return 18 + self.value - 1  # 18-26
        elif self.suit == TileSuit.WINDS:
            return 27 + self.value  # 27-30
        else:  # DRAGONS
            return 31 + self.value  # 31-33

    def __eq__(self, other) -> bool:
        """Two tiles are equal if they have same suit and value"""
        if not isinstance(other, Tile):
            return NotImplemented
        return self.suit == other.suit and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.suit, self.value))

    def __lt__(self, other) -> bool:
        if not isinstance(other, Tile):
            return NotImplemented
        if self.suit != other.suit:
            return self.suit < other.suit
        return self.value < other.value

    def __le__(self, other) -> bool:
        if not isinstance(other, Tile):
            return NotImplemented
        return self == other or self < other

    def __repr__(self) -> str:
        red = ", red" if self.is_red else ""
        return f"Tile({self.suit.name}, {self.value}{red})"

    def __str__(self) -> str:
        """Human-readable string representation"""
        if self.suit == TileSuit.CHARACTERS:
            return f"{self.value}万"
        elif self.suit == TileSuit.BAMBOOS:
            return f"{self.value}条"
        elif self.suit == TileSuit.DOTS:
            return f"{self.value}筒"
        elif self.suit == TileSuit.WINDS:
            return "东南西北"[self.value]
        else:
            return "中发白"[self.value]

    @property
    def notation(self) -> str:
        """Shorthand code such as '5m', '0p' (red five) or '7z'"""
        if self.suit in NUMBERED_SUITS:
            digit = 0 if self.is_red else self.value
            return f"{digit}{_SUIT_LETTERS[self.suit]}"
        return f"{_honor_number(self)}z"

    @classmethod
    def from_index(cls, tile_index: int, instance_id: int = 0) -> 'Tile':
        """
        Create a tile from its kind index (0-33) and instance id.
        """
        if not 0 <= tile_index < TileSet.NUM_TILE_TYPES:
            raise ValueError(f"Tile index must be 0-33, got {tile_index}")
        if tile_index < 9:
            return cls(TileSuit.CHARACTERS, tile_index + 1, instance_id)
        elif tile_index < 18:
            return cls(TileSuit.BAMBOOS, tile_index - 9 + 1, instance_id)
        elif tile_index < 27:
            return cls(TileSuit.DOTS, tile_index - 18 + 1, instance_id)
        elif tile_index < 31:
            return cls(TileSuit.WINDS, tile_index - 27, instance_id)
        else:
            return cls(TileSuit.DRAGONS, tile_index - 31, instance_id)

    @classmethod
    def from_string(cls, s: str, instance_id: int = 0) -> 'Tile':
        """
        Create tile from either display form ("1万", "东", "中") or
        shorthand ("1m", "0p", "5z").
        """
        s = s.strip()
        if len(s) == 2 and s[0].isdigit() and s[1] in _LETTER_SUITS:
            return _tile_from_code(int(s[0]), s[1], instance_id)

        if len(s) == 2 and s[0].isdigit():
            value = int(s[0])
            suit_char = s[1]
            if suit_char == '万':
                return cls(TileSuit.CHARACTERS, value, instance_id)
            elif suit_char == '条':
                return cls(TileSuit.BAMBOOS, value, instance_id)
            elif suit_char == '筒':
                return cls(TileSuit.DOTS, value, instance_id)

        wind_map = {"东": 0, "南": 1, "西": 2, "北": 3}
        dragon_map = {"中": 0, "发": 1, "白": 2}

        if s in wind_map:
            return cls(TileSuit.WINDS, wind_map[s], instance_id)
        elif s in dragon_map:
            return cls(TileSuit.DRAGONS, dragon_map[s], instance_id)

        raise ValueError(f"Cannot parse tile string: {s}")


class TileSet:
    """
    A multiset of tiles with utility methods.
    Used to represent concealed hands, visible tiles, etc.
    """

    # Total number of unique tile types
    NUM_TILE_TYPES = 34
    # Total tiles in a complete set
    NUM_TILES = 136
    # Copies of each tile type
    COPIES_PER_TYPE = 4

    def __init__(self, tiles: Optional[Iterable[Tile]] = None):
        self.tiles: List[Tile] = list(tiles) if tiles else []

    def add(self, tile: Tile) -> None:
        self.tiles.append(tile)

    def remove(self, tile: Tile) -> bool:
        """
        Remove a tile from the set (matches by suit and value).
        Prefers a plain copy over a red one when both are held.
        Returns True if removed, False if not found.
        """
        candidates = [i for i, t in enumerate(self.tiles) if t == tile]
        if not candidates:
            return False
        plain = [i for i in candidates if self.tiles[i].is_red == tile.is_red]
        self.tiles.pop(plain[0] if plain else candidates[0])
        return True

    def contains(self, tile: Tile) -> bool:
        return tile in self.tiles

    def count(self, tile: Tile) -> int:
        """Count occurrences of a tile kind"""
        return sum(1 for t in self.tiles if t == tile)

    def sort(self) -> None:
        self.tiles.sort()

    def to_count_array(self) -> np.ndarray:
        """
        Convert to a 34-element array counting each tile kind.
        """
        counts = np.zeros(self.NUM_TILE_TYPES, dtype=np.int8)
        for tile in self.tiles:
            counts[tile.tile_index] += 1
        return counts

    @classmethod
    def from_count_array(cls, counts: np.ndarray) -> 'TileSet':
        """Build a tile set holding counts[i] copies of kind i"""
        tiles = []
        for idx in range(cls.NUM_TILE_TYPES):
            for copy in range(int(counts[idx])):
                tiles.append(Tile.from_index(idx, idx * cls.COPIES_PER_TYPE + copy))
        return cls(tiles)

    def count_red(self) -> int:
        return sum(1 for t in self.tiles if t.is_red)

    def copy(self) -> 'TileSet':
        return TileSet(self.tiles)

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self):
        return iter(self.tiles)

    def __getitem__(self, index):
        return self.tiles[index]

    def __repr__(self) -> str:
        return f"TileSet({len(self.tiles)} tiles)"

    def __str__(self) -> str:
        return " ".join(str(t) for t in sorted(self.tiles))


# Shorthand notation
_SUIT_LETTERS = {
    TileSuit.CHARACTERS: 'm',
    TileSuit.DOTS: 'p',
    TileSuit.BAMBOOS: 's',
}
_LETTER_SUITS = {'m': TileSuit.CHARACTERS, 'p': TileSuit.DOTS, 's': TileSuit.BAMBOOS, 'z': None}
_GROUP_RE = re.compile(r"(\d+)([mpsz])")


def _honor_number(tile: Tile) -> int:
    if tile.suit == TileSuit.WINDS:
        return tile.value + 1
    # 5z white, 6z green, 7z red
    return 7 - tile.value


def _tile_from_code(digit: int, letter: str, instance_id: int = 0) -> Tile:
    if letter == 'z':
        if 1 <= digit <= 4:
            return Tile(TileSuit.WINDS, digit - 1, instance_id)
        if 5 <= digit <= 7:
            return Tile(TileSuit.DRAGONS, 7 - digit, instance_id)
        raise ValueError(f"Honor code must be 1-7, got {digit}z")
    suit = _LETTER_SUITS[letter]
    if digit == 0:
        return Tile(suit, 5, instance_id, is_red=True)
    return Tile(suit, digit, instance_id)


def parse_tiles(text: str) -> List[Tile]:
    """
    Parse shorthand notation into tiles.

    Whitespace is ignored. Instance ids are assigned per kind in order of
    appearance (kind_index * 4 + copy), so parsed tiles are distinguishable.

    Example:
        parse_tiles("123m055p") -> [1万, 2万, 3万, 0p (red 5筒), 5筒, 5筒]
    """
    compact = "".join(text.split())
    tiles: List[Tile] = []
    copies = [0] * TileSet.NUM_TILE_TYPES
    pos = 0
    for match in _GROUP_RE.finditer(compact):
        if match.start() != pos:
            raise ValueError(f"Cannot parse tile notation near {compact[pos:]!r}")
        pos = match.end()
        digits, letter = match.groups()
        for ch in digits:
            tile = _tile_from_code(int(ch), letter)
            idx = tile.tile_index
            tiles.append(Tile(tile.suit, tile.value,
                              idx * TileSet.COPIES_PER_TYPE + copies[idx], tile.is_red))
            copies[idx] += 1
    if pos != len(compact):
        raise ValueError(f"Cannot parse tile notation near {compact[pos:]!r}")
    return tiles


def format_tiles(tiles: Iterable[Tile]) -> str:
    """Format tiles as sorted shorthand, suits in m/p/s/z order"""
    groups = {'m': [], 'p': [], 's': [], 'z': []}
    for tile in sorted(tiles, key=lambda t: (t.tile_index, not t.is_red)):
        code = tile.notation
        groups[code[1]].append(code[0])
    if groups['z']:
        groups['z'].sort()
    return "".join("".join(digits) + letter for letter, digits in groups.items() if digits)


# Convenience functions for creating specific tiles
def char(value: int, instance_id: int = 0) -> Tile:
    """Create a Characters tile (1-9万)"""
    return Tile(TileSuit.CHARACTERS, value, instance_id)

def bam(value: int, instance_id: int = 0) -> Tile:
    """Create a Bamboos tile (1-9条)"""
    return Tile(TileSuit.BAMBOOS, value, instance_id)

def dot(value: int, instance_id: int = 0) -> Tile:
    """Create a Dots tile (1-9筒)"""
    return Tile(TileSuit.DOTS, value, instance_id)

def wind(wind_type: WindType, instance_id: int = 0) -> Tile:
    """Create a Wind tile (东南西北)"""
    return Tile(TileSuit.WINDS, wind_type, instance_id)

def dragon(dragon_type: DragonType, instance_id: int = 0) -> Tile:
    """Create a Dragon tile (中发白)"""
    return Tile(TileSuit.DRAGONS, dragon_type, instance_id)


# Named wind tiles
EAST = Tile(TileSuit.WINDS, WindType.EAST)
SOUTH = Tile(TileSuit.WINDS, WindType.SOUTH)
WEST = Tile(TileSuit.WINDS, WindType.WEST)
NORTH = Tile(TileSuit.WINDS, WindType.NORTH)

# Named dragon tiles
RED_DRAGON = Tile(TileSuit.DRAGONS, DragonType.RED)
GREEN_DRAGON = Tile(TileSuit.DRAGONS, DragonType.GREEN)
WHITE_DRAGON = Tile(TileSuit.DRAGONS, DragonType.WHITE)
