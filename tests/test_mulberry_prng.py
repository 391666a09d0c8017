"""Tests for the seeded Mulberry32 PRNG."""

import pytest
from stained_glass.core.mulberry_prng import (
    Mulberry32PRNG, create_prng, hash_string, layout_seed
)


class TestHashString:
    """Test seed string hashing."""

    @pytest.mark.parametrize("seed,expected", [
        ("", 0),
        ("a", 97),
        ("ab", 31 * 97 + 98),
        ("hello", 99162322),
    ])
    def test_known_values(self, seed, expected):
        """Test hashes that match the classic 31*h + c string hash."""
        assert hash_string(seed) == expected

    def test_wraps_to_unsigned(self):
        """Test that a hash overflowing to INT_MIN comes back unsigned."""
        assert hash_string("polygenelubricants") == 2 ** 31

    def test_result_is_32_bit(self):
        """Test that long seeds stay in 32 bits."""
        h = hash_string("x" * 1000)
        assert 0 <= h < 2 ** 32

    def test_astral_characters_use_surrogate_pairs(self):
        """Test that characters outside the BMP hash as two UTF-16 code units."""
        assert hash_string("\U0001F600") == 31 * 0xD83D + 0xDE00


class TestMulberry32PRNG:
    """Test the generator stream."""

    @pytest.mark.parametrize("seed,expected", [
        ("a", [0.5655837582889944, 0.21950005996041, 0.8339510657824576,
               0.5390815360005945, 0.3220484664198011]),
        ("seed-A", [0.9110596415121108, 0.8083279633428901, 0.012875982327386737,
                    0.26933805481530726, 0.8042953098192811]),
    ])
    def test_browser_stream(self, seed, expected):
        """Test the first draws against the browser's mulberry32 output."""
        prng = Mulberry32PRNG(seed)
        assert [prng.random() for _ in range(5)] == expected

    def test_values_in_unit_interval(self):
        """Test that every value lies in [0, 1)."""
        prng = Mulberry32PRNG("range")
        for _ in range(2000):
            value = prng.random()
            assert 0.0 <= value < 1.0

    def test_same_seed_same_stream(self):
        """Test that same seed produces the same sequence."""
        a = Mulberry32PRNG("test_seed")
        b = Mulberry32PRNG("test_seed")
        assert [a.random() for _ in range(50)] == [b.random() for _ in range(50)]

    def test_different_seeds(self):
        """Test that different seeds produce different sequences."""
        a = Mulberry32PRNG("seed1")
        b = Mulberry32PRNG("seed2")
        assert [a.random() for _ in range(10)] != [b.random() for _ in range(10)]

    def test_string_seed_equals_hashed_integer_seed(self):
        """Test that a string seed is just its hash as the initial state."""
        a = Mulberry32PRNG("a")
        b = Mulberry32PRNG(97)
        assert [a.random() for _ in range(10)] == [b.random() for _ in range(10)]

    def test_call_count(self):
        """Test that each draw is counted."""
        prng = Mulberry32PRNG("count")
        for _ in range(7):
            prng.random()
        assert prng.call_count == 7

    def test_uniform_bounds(self):
        """Test uniform() stays within its range."""
        prng = Mulberry32PRNG("uniform")
        for _ in range(500):
            value = prng.uniform(5.0, 10.0)
            assert 5.0 <= value < 10.0

    def test_reasonable_distribution(self):
        """Test that the mean of many draws is close to 0.5."""
        prng = Mulberry32PRNG("mean")
        values = [prng.random() for _ in range(10000)]
        assert abs(sum(values) / len(values) - 0.5) < 0.02


class TestCreatePrng:
    """Test generator construction."""

    def test_seeded(self):
        """Test that a seeded generator matches a direct construction."""
        a = create_prng("layout")
        b = Mulberry32PRNG("layout")
        assert a.random() == b.random()

    def test_unseeded_instances_are_independent(self):
        """Test that unseeded generators do not share a stream."""
        a = create_prng()
        b = create_prng()
        assert a is not b
        assert [a.random() for _ in range(5)] != [b.random() for _ in range(5)]


def test_layout_seed():
    """Test the viewer's image/shuffle seed format."""
    assert layout_seed("/uploads/cat.png") == "/uploads/cat.png__0"
    assert layout_seed("/uploads/cat.png", 3) == "/uploads/cat.png__3"
