"""Tests for roadmap.ui.colors – color blending and constants."""

from __future__ import annotations

import pytest

from roadmap.ui.colors import RoadmapColors, blend_hex, level_color


# ===========================================================================
# RoadmapColors – constants exist
# ===========================================================================

class TestRoadmapColors:
    @pytest.mark.parametrize("name", ["BG_TOP", "BG_BOTTOM", "GOLD", "GOLD_LIGHT", "GOLD_DARK", "TRACK"])
    def test_hex_constants(self, name):
        value = getattr(RoadmapColors, name)
        assert value.startswith("#")
        assert len(value) == 7

    def test_card_bg_is_rgba(self):
        assert RoadmapColors.CARD_BG.startswith("rgba(")


# ===========================================================================
# blend_hex
# ===========================================================================

class TestBlendHex:
    def test_t_zero_returns_a(self):
        assert blend_hex("#FF0000", "#0000FF", 0.0) == "#FF0000"

    def test_t_one_returns_b(self):
        assert blend_hex("#FF0000", "#0000FF", 1.0) == "#0000FF"

    def test_midpoint(self):
        assert blend_hex("#000000", "#FFFFFF", 0.5) == "#7F7F7F"

    def test_uppercase_output(self):
        assert blend_hex("#ff0000", "#ff0000", 0.3) == "#FF0000"

    def test_t_clamped(self):
        assert blend_hex("#000000", "#FFFFFF", 5) == "#FFFFFF"
        assert blend_hex("#000000", "#FFFFFF", -1) == "#000000"

    @pytest.mark.parametrize("a, b", [("red", "#FFFFFF"), ("#000000", "blue"), ("#12345", "#FFFFFF"), ("#GGGGGG", "#FFFFFF")])
    def test_invalid_returns_a(self, a, b):
        assert blend_hex(a, b, 0.5) == a

    def test_non_numeric_t(self):
        assert blend_hex("#000000", "#FFFFFF", "half") == "#000000"  # type: ignore[arg-type]


# ===========================================================================
# level_color
# ===========================================================================

class TestLevelColor:
    def test_ends(self):
        assert level_color(0) == RoadmapColors.GOLD_DARK.upper()
        assert level_color(5) == RoadmapColors.GOLD_LIGHT.upper()

    def test_monotonic_red_channel(self):
        reds = [int(level_color(level)[1:3], 16) for level in range(6)]
        assert reds == sorted(reds)
