"""Tests for the obvious non-brand filter."""

import pytest

from sustainify.services.exclusion import is_obviously_not_brand


class TestRejects:
    """Text that must never be taken as a brand."""

    @pytest.mark.parametrize("text", ["330ml", "12oz", "500g", "2lb", "250cal", "100%", "Contains 20g protein"])
    def test_measurements(self, text):
        """Test measurement strings are rejected."""
        assert is_obviously_not_brand(text) is True

    @pytest.mark.parametrize("text", [
        "INGREDIENTS: sugar, water",
        "Nutrition Facts",
        "Expires 12/2025",
        "BEST BEFORE END",
        "Use by 01.02",
    ])
    def test_label_vocabulary(self, text):
        """Test nutrition and label words are rejected."""
        assert is_obviously_not_brand(text) is True

    @pytest.mark.parametrize("text", ["", "A", "7"])
    def test_too_short(self, text):
        """Test strings shorter than two characters are rejected."""
        assert is_obviously_not_brand(text) is True

    def test_pure_number(self):
        """Test purely numeric strings are rejected."""
        assert is_obviously_not_brand("2024") is True

    def test_barcode(self):
        """Test long digit runs such as barcodes are rejected."""
        assert is_obviously_not_brand("5000112637922") is True

    @pytest.mark.parametrize("text", ["www.example.org", "https://brand.example", "HTTP", ".com"])
    def test_urls(self, text):
        """Test web addresses are rejected."""
        assert is_obviously_not_brand(text) is True


class TestAccepts:
    """Real brand names must pass the filter."""

    @pytest.mark.parametrize("text", [
        "Coca-Cola",
        "Nike",
        "Heinz",
        "Ben & Jerry's",
        "Dr Pepper",
        "7UP",
        "M&M's",
        "Oreo®",
        "Kellogg's",
        "Coca Cola",
        "Lay's Classic",
        "Go",
    ])
    def test_brand_like_text(self, text):
        """Test brand-like strings pass the filter."""
        assert is_obviously_not_brand(text) is False

    def test_uppercase_units_are_not_measurements(self):
        """Measurement units are matched lowercase only."""
        assert is_obviously_not_brand("500ML") is False
