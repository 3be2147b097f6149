"""Tests for shared utilities."""

import logging

import pytest
from PIL import Image

from spatial_annotator.models import DetectType
from spatial_annotator.utils import detect_type_from_task, encode_png, label_hue, string_to_hsl_color


class TestLabelColor:
    """Tests for label_hue and string_to_hsl_color."""

    def test_known_hues(self) -> None:
        """Test the hash matches known values."""
        assert label_hue("") == 0
        assert label_hue("a") == 97
        assert label_hue("ab") == 225

    def test_hue_in_range(self) -> None:
        """Test hues stay within [0, 360) for long labels that overflow 32 bits."""
        for label in ["fissure", "peinture écaillée", "x" * 200, "🧱 brique"]:
            assert 0 <= label_hue(label) < 360

    def test_same_label_same_color(self) -> None:
        """Test equal labels get equal colors."""
        assert string_to_hsl_color("fissure") == string_to_hsl_color("fissure")

    def test_rgb_tuple(self) -> None:
        """Test the color is an RGB triple."""
        color = string_to_hsl_color("tache d'eau")

        assert len(color) == 3
        assert all(0 <= c <= 255 for c in color)


class TestTaskParameter:
    """Tests for detect_type_from_task."""

    @pytest.mark.parametrize(
        ("task", "expected"),
        [
            ("2d-bounding-boxes", DetectType.BOUNDING_BOXES_2D),
            ("segmentation-masks", DetectType.SEGMENTATION_MASKS),
            ("points", DetectType.POINTS),
            (None, None),
            ("", None),
        ],
    )
    def test_task_mapping(self, task, expected) -> None:
        """Test recognized task values select their detection type."""
        assert detect_type_from_task(task) == expected

    def test_unknown_task_logged(self, caplog) -> None:
        """Test unknown task values are ignored with a warning."""
        with caplog.at_level(logging.WARNING):
            assert detect_type_from_task("3d-boxes") is None

        assert "3d-boxes" in caplog.text


class TestEncodePng:
    """Tests for encode_png."""

    def test_png_signature(self) -> None:
        """Test the output is PNG data."""
        assert encode_png(Image.new("RGB", (2, 2))).startswith(b"\x89PNG")
