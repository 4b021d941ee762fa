"""
Structural errors raised by the hand engine.

These signal an inconsistent hand or configuration and are raised before any
search begins. A rejected win declaration is not an error; see
``mahjong_core.rules.IllegalWinDeclaration``.
"""


class MahjongError(Exception):
    """Base class for all engine errors"""


class InvalidHandSize(MahjongError, ValueError):
    """Concealed tiles plus melds do not add up to the size a query expects"""

    def __init__(self, actual: int, expected):
        self.actual = actual
        self.expected = expected
        super().__init__(f"Hand has {actual} tiles, expected {expected}")


class TileSupplyExceeded(MahjongError, ValueError):
    """A tile kind is referenced more often than the physical supply allows"""

    def __init__(self, tile, count: int, supply: int = 4):
        self.tile = tile
        self.count = count
        self.supply = supply
        super().__init__(f"{tile} referenced {count} times, supply is {supply}")


class MalformedMeld(MahjongError, ValueError):
    """A meld's tiles do not form a run, triplet or quad"""


class UnsupportedShape(MahjongError, LookupError):
    """A variant-specific path was requested but the variant is not registered"""


class WinTileNotHeld(MahjongError, ValueError):
    """The winning tile named by a WinContext is not among the concealed tiles"""

    def __init__(self, tile):
        self.tile = tile
        super().__init__(f"Winning tile {tile} is not in the concealed hand")
