"""
Tests for the random source and weighted selection.

Tests:
- Seeded replay
- Integer ranges and dice
- Weighted and uniform selection
"""

from ..catalog.schema import WeightedCandidate
from ..engine_core.rng import GameRandom
from ..engine_core.selector import select_uniform, select_weighted_candidate
from .conftest import ScriptedRandom


class TestGameRandom:
    """Tests for GameRandom."""

    def test_same_seed_same_sequence(self):
        """Two sources with the same seed produce the same draws."""
        a = GameRandom(123)
        b = GameRandom(123)
        assert [a.next() for _ in range(20)] == [b.next() for _ in range(20)]

    def test_set_seed_restarts_sequence(self):
        """set_seed replays from the start."""
        rng = GameRandom(5)
        first = [rng.next() for _ in range(5)]
        rng.set_seed(5)
        assert [rng.next() for _ in range(5)] == first

    def test_unseeded_source_reports_seed(self):
        """An unseeded source still exposes the seed it drew."""
        rng = GameRandom()
        replay = GameRandom(rng.seed)
        assert rng.next() == replay.next()

    def test_next_int_range(self):
        """next_int stays in [0, n)."""
        rng = GameRandom(1)
        values = {rng.next_int(4) for _ in range(200)}
        assert values <= {0, 1, 2, 3}

    def test_next_int_non_positive(self):
        """next_int of zero or less is zero."""
        rng = GameRandom(1)
        assert rng.next_int(0) == 0
        assert rng.next_int(-3) == 0

    def test_roll_die_bounds(self):
        """Dice rolls are between 1 and 6."""
        rng = GameRandom(9)
        rolls = {rng.roll_die() for _ in range(300)}
        assert rolls <= {1, 2, 3, 4, 5, 6}

    def test_roll_die_extremes(self):
        """Lowest and highest draws map to 1 and 6."""
        rng = ScriptedRandom([0.0, 0.999])
        assert rng.roll_die() == 1
        assert rng.roll_die() == 6

    def test_randint_inclusive(self):
        """randint_inclusive covers both ends."""
        rng = ScriptedRandom([0.0, 0.99])
        assert rng.randint_inclusive(2, 4) == 2
        assert rng.randint_inclusive(2, 4) == 4

    def test_chance(self):
        """chance compares the draw against p."""
        rng = ScriptedRandom([0.2, 0.8])
        assert rng.chance(0.5) is True
        assert rng.chance(0.5) is False


class TestSelector:
    """Tests for weighted and uniform selection."""

    def test_empty_pool(self):
        """No candidates selects nothing."""
        assert select_weighted_candidate([], GameRandom(1)) is None

    def test_zero_total_weight(self):
        """Only zero or negative weights selects nothing."""
        candidates = [WeightedCandidate("A", 0), WeightedCandidate("B", -2)]
        assert select_weighted_candidate(candidates, GameRandom(1)) is None

    def test_weighted_draw(self):
        """The draw is proportional to weight."""
        candidates = [WeightedCandidate("A", 1), WeightedCandidate("B", 3)]
        assert select_weighted_candidate(candidates, ScriptedRandom([0.2])) == "A"
        assert select_weighted_candidate(candidates, ScriptedRandom([0.5])) == "B"

    def test_negative_weight_never_selected(self):
        """Negative weights count as zero."""
        candidates = [WeightedCandidate("A", -5), WeightedCandidate("B", 1)]
        rng = GameRandom(3)
        assert {select_weighted_candidate(candidates, rng) for _ in range(50)} == {"B"}

    def test_uniform(self):
        """Uniform selection indexes by the draw."""
        assert select_uniform(["A", "B", "C"], ScriptedRandom([0.0])) == "A"
        assert select_uniform(["A", "B", "C"], ScriptedRandom([0.7])) == "C"
        assert select_uniform([], GameRandom(1)) is None
