"""Tests for brand candidate scoring."""

import pytest

from sustainify.services.geometry import BoundingPoly
from sustainify.services.scoring import score_brand_candidate, score_candidate
from sustainify.services.combiner import TextCandidate
from helpers import rect

# Small box near the bottom: no area or position bonus
BOTTOM_SMALL = rect(0, 900, 10, 10)


class TestExclusion:
    """Excluded text scores exactly zero."""

    @pytest.mark.parametrize("text", ["330ml", "Nutrition Facts", "1234567890", "www.brand.com", "A"])
    def test_excluded_text_scores_zero(self, text):
        """Test excluded text scores zero."""
        assert score_brand_candidate(text, rect(0, 0, 200, 100)) == 0

    @pytest.mark.parametrize("text", ["Heinz", "Ab", "The Original Snack Company™"])
    def test_brand_like_text_scores_above_zero(self, text):
        """Test brand-like text scores above zero."""
        assert score_brand_candidate(text, BOTTOM_SMALL) > 0


class TestBonuses:
    """Each signal adds its bonus to the base score of 50."""

    def test_base_score_only(self):
        """Test text without bonuses gets the base score."""
        assert score_brand_candidate("Ab", BOTTOM_SMALL) == 50

    def test_length_bonus(self):
        """Test length bonus for typical brand lengths."""
        assert score_brand_candidate("Brand", BOTTOM_SMALL) == 60

    @pytest.mark.parametrize("text,expected", [
        ("Ab", 50),
        ("Abc", 60),
        ("A" * 20, 60),
        ("A" * 21, 50),
    ])
    def test_length_bounds(self, text, expected):
        """Test length bonus boundaries."""
        assert score_brand_candidate(text, BOTTOM_SMALL) == expected

    @pytest.mark.parametrize("box,expected", [
        (rect(0, 900, 40, 30), 75),   # area 1200
        (rect(0, 900, 100, 35), 85),  # area 3500
        (rect(0, 900, 100, 60), 95),  # area 6000
        (rect(0, 900, 100, 10), 60),  # area 1000, no bonus
    ])
    def test_area_tiers(self, box, expected):
        """Test area bonus tiers."""
        assert score_brand_candidate("Brand", box) == expected

    def test_upper_position_bonus(self):
        """Test upper-half position bonus."""
        # relative y = 50 / 120
        assert score_brand_candidate("Ab", rect(0, 0, 10, 100)) == 65

    def test_top_position_bonus(self):
        """Test top-of-image position bonus."""
        box = BoundingPoly.from_points([[0, 0], [10, 0], [10, 0], [0, 10]])
        assert score_brand_candidate("Ab", box) == 75

    def test_missing_geometry_uses_defaults(self):
        """Test missing box uses default position."""
        # area 0, relative y 0.5 -> upper position bonus
        assert score_brand_candidate("Brand", None) == 75

    @pytest.mark.parametrize("symbol", ["™", "®", "©"])
    def test_trademark_bonus(self, symbol):
        """Test trademark symbols add a bonus."""
        text = f"The Original Snack Company{symbol}"
        assert score_brand_candidate(text, BOTTOM_SMALL) == 90


class TestClamp:
    """Bonuses accumulate past 100 and are clamped at the end."""

    def test_saturates_at_100(self):
        """Test score saturates at 100."""
        assert score_brand_candidate("Oreo®", rect(0, 0, 200, 50)) == 100

    @pytest.mark.parametrize("text", ["Oreo®", "Brand", "Ab", "x" * 50, "330ml"])
    @pytest.mark.parametrize("box", [None, BOTTOM_SMALL, rect(0, 0, 500, 500)])
    def test_always_in_range(self, text, box):
        """Test score always stays within 0..100."""
        assert 0 <= score_brand_candidate(text, box) <= 100


class TestScoreCandidate:
    """Test scoring of combiner candidates."""

    def test_wraps_candidate(self):
        """Test candidate score keeps the candidate."""
        candidate = TextCandidate(text="Coca Cola", bounding_box=rect(10, 10, 55, 20), combined=True, source_indices=(0, 1))
        scored = score_candidate(candidate)

        assert scored.candidate is candidate
        assert scored.text == "Coca Cola"
        assert scored.combined is True
        assert scored.confidence == 90
