"""Tests for overlay rendering."""

import pytest

from spatial_annotator.components.overlay import render_overlay, rendered_size
from spatial_annotator.constants import SEGMENTATION_COLORS_RGB
from spatial_annotator.geometry import Size
from spatial_annotator.models import DetectType
from spatial_annotator.schemas import BoundingBox2D, Point, SegmentationMask, UnitPoint
from spatial_annotator.state import AnnotationStore
from spatial_annotator.utils import string_to_hsl_color

WHITE = (255, 255, 255, 255)


class TestRenderedSize:
    """Tests for rendered_size."""

    def test_fitted_size(self) -> None:
        """Test the media is fitted inside the container."""
        assert rendered_size(Size(200, 100), Size(400, 400)) == (400, 200)

    @pytest.mark.parametrize(("media", "container"), [(Size(0, 0), Size(100, 100)), (Size(10, 10), Size(0, 50))])
    def test_unknown_size(self, media, container) -> None:
        """Test nothing is rendered while a size is zero."""
        assert rendered_size(media, container) is None


class TestRenderOverlay:
    """Tests for render_overlay."""

    def test_no_source(self) -> None:
        """Test nothing is rendered without an image."""
        assert render_overlay(AnnotationStore(), Size(400, 400)) is None

    def test_image_only(self, store) -> None:
        """Test the image is fitted to the container with nothing on top."""
        overlay = render_overlay(store, Size(400, 400))

        assert overlay.size == (400, 200)
        assert overlay.getpixel((200, 100)) == WHITE

    def test_box_outline_uses_label_color(self, store) -> None:
        """Test box outlines are drawn in the label color around an untouched interior."""
        store.show_labels = False
        store.replace_boxes([BoundingBox2D(x=0.25, y=0.25, width=0.5, height=0.5, label="chat")])

        overlay = render_overlay(store, Size(400, 400))

        assert overlay.getpixel((200, 50))[:3] == string_to_hsl_color("chat")
        assert overlay.getpixel((200, 100)) == WHITE

    def test_hidden_boxes(self, store) -> None:
        """Test outlines are skipped when boxes are hidden."""
        store.show_labels = False
        store.show_boxes = False
        store.replace_boxes([BoundingBox2D(x=0.25, y=0.25, width=0.5, height=0.5, label="chat")])

        overlay = render_overlay(store, Size(400, 400))

        assert overlay.getpixel((200, 50)) == WHITE

    def test_only_active_mode_is_drawn(self, store) -> None:
        """Test boxes are not drawn while points are the active type."""
        store.show_labels = False
        store.replace_boxes([BoundingBox2D(x=0.25, y=0.25, width=0.5, height=0.5, label="chat")])
        store.set_mode(DetectType.POINTS)

        overlay = render_overlay(store, Size(400, 400))

        assert overlay.getpixel((200, 50)) == WHITE

    def test_mask_is_tinted_at_half_opacity(self, store, make_mask_url) -> None:
        """Test a full mask blends its palette color over the image."""
        store.set_mode(DetectType.SEGMENTATION_MASKS)
        store.show_labels = False
        store.show_boxes = False
        store.replace_masks(
            [SegmentationMask(x=0, y=0, width=1, height=1, label="peinture", image_data=make_mask_url((8, 8)))]
        )

        overlay = render_overlay(store, Size(400, 400))

        pixel = overlay.getpixel((200, 100))
        expected = [round(c * 128 / 255 + 255 * 127 / 255) for c in SEGMENTATION_COLORS_RGB[0]]
        assert list(pixel[:3]) == pytest.approx(expected, abs=2)

    def test_invalid_mask_is_skipped(self, store) -> None:
        """Test an undecodable mask does not break rendering."""
        store.set_mode(DetectType.SEGMENTATION_MASKS)
        store.show_labels = False
        store.show_boxes = False
        store.replace_masks([SegmentationMask(x=0, y=0, width=1, height=1, label="bad", image_data="???")])

        overlay = render_overlay(store, Size(400, 400))

        assert overlay.getpixel((200, 100)) == WHITE

    def test_point_is_drawn(self, store) -> None:
        """Test points are drawn as circles in the label color."""
        store.set_mode(DetectType.POINTS)
        store.show_labels = False
        store.replace_points([Point(point=UnitPoint(x=0.5, y=0.5), label="brique")])

        overlay = render_overlay(store, Size(400, 400))

        assert overlay.getpixel((200, 100))[:3] == string_to_hsl_color("brique")

    def test_labels_render(self, store) -> None:
        """Test labelled boxes and points render without error."""
        store.replace_boxes([BoundingBox2D(x=0.1, y=0.1, width=0.3, height=0.3, label="fissure")])
        assert render_overlay(store, Size(400, 400)) is not None

        store.set_mode(DetectType.POINTS)
        store.replace_points([Point(point=UnitPoint(x=0.5, y=0.02), label="brique")])
        assert render_overlay(store, Size(400, 400)) is not None

    def test_strokes_are_drawn(self, store) -> None:
        """Test freehand strokes appear on the overlay."""
        store.active_color = "rgb(0, 0, 0)"
        store.begin_stroke()
        store.append_stroke_point((0.1, 0.9))
        store.append_stroke_point((0.4, 0.9))

        overlay = render_overlay(store, Size(400, 400))

        assert overlay.getpixel((100, 180))[:3] == (0, 0, 0)
