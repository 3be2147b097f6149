"""Tests for composite image construction."""

from io import BytesIO

import pytest
from PIL import Image

from spatial_annotator.schemas import FreehandStroke
from spatial_annotator.services.compositing import build_composite, composite_image, scaled_size


class TestScaledSize:
    """Tests for scaled_size."""

    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            ((1280, 720), (640, 360)),
            ((720, 1280), (360, 640)),
            ((640, 640), (640, 640)),
            ((100, 50), (640, 320)),
        ],
    )
    def test_longer_side_fits(self, size, expected) -> None:
        """Test the longer side becomes the maximum size."""
        assert scaled_size(*size, 640) == expected


class TestCompositeImage:
    """Tests for composite_image and build_composite."""

    def test_without_strokes(self) -> None:
        """Test a plain image is only resized."""
        source = Image.new("RGB", (320, 160), (10, 20, 30))

        result = composite_image(source, [], 6)

        assert result.size == (640, 320)
        assert result.getpixel((100, 100)) == (10, 20, 30)

    def test_strokes_are_burned_in(self) -> None:
        """Test strokes are filled in their color along their path."""
        source = Image.new("RGB", (200, 100), "white")
        stroke = FreehandStroke(points=[(0.25, 0.5), (0.75, 0.5)], color="rgb(213, 40, 40)")

        result = composite_image(source, [stroke], 10)

        assert result.getpixel((320, 160)) == (213, 40, 40)
        assert result.getpixel((320, 20)) == (255, 255, 255)
        assert source.getpixel((100, 50)) == (255, 255, 255)

    def test_sharp_turn_is_covered(self) -> None:
        """Test a stroke that doubles back still paints the sample it turns on."""
        source = Image.new("RGB", (640, 640), "white")
        stroke = FreehandStroke(points=[(0.1, 0.5), (0.8, 0.5), (0.1, 0.53)], color="rgb(0, 0, 0)")

        result = composite_image(source, [stroke], 20)

        assert result.getpixel((512, 320)) == (0, 0, 0)
        assert result.getpixel((518, 320)) == (0, 0, 0)

    def test_single_sample_stroke(self) -> None:
        """Test a tap is drawn as a dot."""
        source = Image.new("RGB", (640, 640), "white")
        stroke = FreehandStroke(points=[(0.5, 0.5)], color="rgb(0, 0, 0)")

        result = composite_image(source, [stroke], 12)

        assert result.getpixel((320, 320)) == (0, 0, 0)

    def test_rgba_source_is_flattened(self) -> None:
        """Test the composite is always RGB."""
        source = Image.new("RGBA", (50, 50), (0, 255, 0, 255))

        assert composite_image(source, [], 6).mode == "RGB"

    def test_build_composite_png(self) -> None:
        """Test the composite is encoded as PNG."""
        data = build_composite(Image.new("RGB", (1000, 500), "white"), [], 6)

        assert data.startswith(b"\x89PNG")
        assert Image.open(BytesIO(data)).size == (640, 320)
