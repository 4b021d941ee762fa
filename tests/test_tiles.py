"""
Tests for the tile model and shorthand notation
"""

import pytest
import numpy as np

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mahjong_core.tiles import (
    Tile, TileSet, TileSuit, WindType, DragonType, FlowerType,
    char, bam, dot, wind, dragon, EAST, SOUTH, NORTH,
    RED_DRAGON, GREEN_DRAGON, WHITE_DRAGON,
    parse_tiles, format_tiles,
)


class TestTiles:
    """Test tile system"""

    def test_tile_creation(self):
        """Test creating tiles"""
        t1 = char(1)
        assert t1.suit == TileSuit.CHARACTERS
        assert t1.value == 1

        t2 = bam(5)
        assert t2.suit == TileSuit.BAMBOOS
        assert t2.value == 5

        t3 = dot(9)
        assert t3.suit == TileSuit.DOTS
        assert t3.value == 9

    def test_invalid_values(self):
        """Out-of-range values and red non-fives are rejected"""
        with pytest.raises(ValueError):
            Tile(TileSuit.CHARACTERS, 10)
        with pytest.raises(ValueError):
            Tile(TileSuit.WINDS, 4)
        with pytest.raises(ValueError):
            Tile(TileSuit.DOTS, 3, is_red=True)

    def test_honor_tiles(self):
        """Test honor tile properties"""
        east = wind(WindType.EAST)
        assert east.is_honor
        assert not east.is_terminal

        red = dragon(DragonType.RED)
        assert red.is_honor
        assert not red.is_simple

    def test_terminal_tiles(self):
        """Test terminal tile properties"""
        assert char(1).is_terminal
        assert char(9).is_terminal
        assert not char(5).is_terminal
        assert char(1).is_terminal_or_honor
        assert not char(5).is_terminal_or_honor
        assert char(5).is_simple

    def test_green_tiles(self):
        """Test green tile identification"""
        for t in [bam(2), bam(3), bam(4), bam(6), bam(8), GREEN_DRAGON]:
            assert t.is_green, f"{t} should be green"
        for t in [bam(1), bam(5), bam(7), RED_DRAGON, char(3)]:
            assert not t.is_green, f"{t} should not be green"

    def test_tile_index(self):
        """Test tile index calculation"""
        assert char(1).tile_index == 0
        assert char(9).tile_index == 8
        assert bam(1).tile_index == 9
        assert dot(1).tile_index == 18
        assert EAST.tile_index == 27
        assert NORTH.tile_index == 30
        assert RED_DRAGON.tile_index == 31
        assert WHITE_DRAGON.tile_index == 33

    def test_tile_from_index(self):
        """Every kind index round-trips"""
        for idx in range(34):
            assert Tile.from_index(idx).tile_index == idx
        with pytest.raises(ValueError):
            Tile.from_index(34)

    def test_tile_from_string(self):
        """Display form and shorthand both parse"""
        assert Tile.from_string("1万") == char(1)
        assert Tile.from_string("东") == EAST
        assert Tile.from_string("中") == RED_DRAGON
        assert Tile.from_string("7s") == bam(7)
        assert Tile.from_string("5z") == WHITE_DRAGON
        red = Tile.from_string("0p")
        assert red == dot(5)
        assert red.is_red

    def test_equality_ignores_instance(self):
        """Instances of the same kind compare equal"""
        assert char(5, 16) == char(5, 17)
        assert Tile(TileSuit.CHARACTERS, 5, is_red=True) == char(5)
        assert len({char(5, 16), char(5, 17)}) == 1

    def test_flower_seats(self):
        """Flowers map onto seat winds"""
        assert FlowerType.SPRING.seat == WindType.EAST
        assert FlowerType.PLUM.seat == WindType.EAST
        assert FlowerType.SUMMER.seat == WindType.SOUTH
        assert FlowerType.CHRYSANTHEMUM.seat == WindType.NORTH


class TestTileSet:
    """Test TileSet operations"""

    def test_full_count_array(self):
        """Four copies of every kind build the 136-tile set"""
        full_set = TileSet.from_count_array(np.full(34, 4, dtype=np.int8))
        assert len(full_set) == 136
        assert len({t.id for t in full_set}) == 136
        assert all(full_set.count(Tile.from_index(i)) == 4 for i in range(34))

    def test_tile_counts(self):
        """Test counting tiles"""
        ts = TileSet([char(1), char(1), char(1), bam(5)])
        assert ts.count(char(1)) == 3
        assert ts.count(bam(5)) == 1
        assert ts.count(dot(1)) == 0

    def test_to_count_array(self):
        """Test conversion to count array"""
        ts = TileSet([char(1), char(1), bam(5), EAST])
        counts = ts.to_count_array()
        assert counts.shape == (34,)
        assert counts.dtype == np.int8
        assert counts[0] == 2
        assert counts[13] == 1
        assert counts[27] == 1
        assert counts.sum() == 4

    def test_from_count_array(self):
        """Count arrays build tile sets with distinct ids"""
        counts = np.zeros(34, dtype=np.int8)
        counts[4] = 3
        ts = TileSet.from_count_array(counts)
        assert len(ts) == 3
        assert len({t.id for t in ts}) == 3
        assert np.array_equal(ts.to_count_array(), counts)

    def test_add_remove(self):
        """Test adding and removing tiles"""
        ts = TileSet()
        ts.add(char(1))
        ts.add(char(2))
        assert len(ts) == 2
        assert ts.remove(char(1))
        assert len(ts) == 1
        assert not ts.remove(char(1))

    def test_remove_prefers_matching_red_flag(self):
        """Removing a plain five keeps the red one"""
        ts = TileSet(parse_tiles("055m"))
        ts.remove(char(5))
        assert ts.count_red() == 1
        assert len(ts) == 2


class TestNotation:
    """Test shorthand parsing and formatting"""

    def test_parse_basic(self):
        """Groups of digits followed by a suit letter"""
        tiles = parse_tiles("123m456p789s11222z")
        assert len(tiles) == 14
        assert tiles[0] == char(1)
        assert tiles[3] == dot(4)
        assert tiles[6] == bam(7)
        assert tiles[9] == EAST
        assert tiles[11] == SOUTH

    def test_parse_dragons(self):
        """5z white, 6z green, 7z red"""
        assert parse_tiles("567z") == [WHITE_DRAGON, GREEN_DRAGON, RED_DRAGON]

    def test_parse_red_five(self):
        """0 stands for a red five"""
        tiles = parse_tiles("055p")
        assert all(t == dot(5) for t in tiles)
        assert sum(1 for t in tiles if t.is_red) == 1

    def test_parse_assigns_distinct_ids(self):
        """Copies of a kind get distinct instance ids"""
        tiles = parse_tiles("1111m")
        assert sorted(t.id for t in tiles) == [0, 1, 2, 3]

    def test_parse_ignores_whitespace(self):
        assert parse_tiles("123m 456p") == parse_tiles("123m456p")

    @pytest.mark.parametrize("text", ["123x", "m123", "123m4", "8z"])
    def test_parse_rejects_garbage(self, text):
        with pytest.raises(ValueError):
            parse_tiles(text)

    def test_format_sorts_by_suit(self):
        """Formatting sorts into m/p/s/z order"""
        assert format_tiles(parse_tiles("1z789s456p123m")) == "123m456p789s1z"

    def test_format_red_first(self):
        assert format_tiles(parse_tiles("55m0m123p")) == "055m123p"

    def test_round_trip(self):
        text = "119m19p19s1234567z"
        assert format_tiles(parse_tiles(text)) == text
