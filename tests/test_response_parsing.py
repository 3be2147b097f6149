"""Tests for detection response parsing."""

import json

import pytest

from spatial_annotator.errors import DetectionError, ResponseParseError, SchemaMismatchError
from spatial_annotator.models import DetectType
from spatial_annotator.services.response_parsing import (
    BoxesResult,
    MasksResult,
    PointsResult,
    extract_json_payload,
    parse_response,
)


def _fenced(items) -> str:
    return f"Voici les résultats :\n```json\n{json.dumps(items)}\n```\nFin."


class TestExtractJsonPayload:
    """Tests for extract_json_payload."""

    def test_fenced(self) -> None:
        """Test the content of the json fence is extracted."""
        assert extract_json_payload('blah ```json\n[1, 2]\n``` trailing').strip() == "[1, 2]"

    def test_unfenced(self) -> None:
        """Test text without a fence is returned whole."""
        assert extract_json_payload("[1, 2]") == "[1, 2]"

    def test_first_fence_only(self) -> None:
        """Test only the first json fence is used."""
        text = '```json\n["a"]\n```\n```json\n["b"]\n```'

        assert json.loads(extract_json_payload(text)) == ["a"]


class TestParseBoxes:
    """Tests for 2D bounding box responses."""

    def test_normalizes_coordinates(self) -> None:
        """Test [ymin, xmin, ymax, xmax] on 0-1000 becomes unit x, y, width, height."""
        result = parse_response(DetectType.BOUNDING_BOXES_2D, _fenced([{"box_2d": [100, 200, 300, 600], "label": "a"}]))

        assert isinstance(result, BoxesResult)
        box = result.items[0]
        assert (box.x, box.y, box.width, box.height) == pytest.approx((0.2, 0.1, 0.4, 0.2))
        assert box.label == "a"

    def test_keeps_response_order(self) -> None:
        """Test boxes are stored in the order received."""
        items = [
            {"box_2d": [0, 0, 10, 10], "label": "small"},
            {"box_2d": [0, 0, 900, 900], "label": "big"},
        ]

        result = parse_response(DetectType.BOUNDING_BOXES_2D, json.dumps(items))

        assert [b.label for b in result.items] == ["small", "big"]

    def test_empty_list(self) -> None:
        """Test an empty array is a valid, empty result."""
        assert parse_response(DetectType.BOUNDING_BOXES_2D, "```json\n[]\n```").items == []


class TestParseMasks:
    """Tests for segmentation responses."""

    def test_sorted_by_descending_area(self) -> None:
        """Test masks are ordered largest box first."""
        items = [
            {"box_2d": [0, 0, 100, 1000], "mask": "m1", "label": "tenth"},
            {"box_2d": [0, 0, 500, 1000], "mask": "m5", "label": "half"},
            {"box_2d": [0, 0, 300, 1000], "mask": "m3", "label": "third"},
        ]

        result = parse_response(DetectType.SEGMENTATION_MASKS, _fenced(items))

        assert isinstance(result, MasksResult)
        assert [m.label for m in result.items] == ["half", "third", "tenth"]
        assert [m.image_data for m in result.items] == ["m5", "m3", "m1"]

    def test_missing_mask_field(self) -> None:
        """Test a mask entry without a mask payload is rejected."""
        with pytest.raises(SchemaMismatchError):
            parse_response(DetectType.SEGMENTATION_MASKS, json.dumps([{"box_2d": [0, 0, 1, 1], "label": "x"}]))


class TestParsePoints:
    """Tests for point responses."""

    def test_normalizes_y_x(self) -> None:
        """Test [y, x] on 0-1000 becomes unit x and y."""
        result = parse_response(DetectType.POINTS, _fenced([{"point": [500, 250], "label": "p"}]))

        assert isinstance(result, PointsResult)
        point = result.items[0].point
        assert (point.x, point.y) == pytest.approx((0.25, 0.5))


class TestParseErrors:
    """Tests for malformed responses."""

    def test_invalid_json(self) -> None:
        """Test an unterminated array raises a parse error."""
        with pytest.raises(ResponseParseError):
            parse_response(DetectType.BOUNDING_BOXES_2D, '```json\n[{"box_2d": [1, 2, 3, 4]\n```')

    def test_prose_only(self) -> None:
        """Test a reply without JSON raises a parse error."""
        with pytest.raises(ResponseParseError):
            parse_response(DetectType.POINTS, "Je ne vois aucun défaut.")

    @pytest.mark.parametrize(
        "payload",
        [
            {"box_2d": [1, 2, 3, 4], "label": "not a list"},
            [{"box_2d": [1, 2, 3], "label": "short"}],
            [{"box_2d": [1, 2, 3, 4]}],
            [{"point": [1, 2], "label": "wrong schema"}],
        ],
    )
    def test_schema_mismatch(self, payload) -> None:
        """Test JSON that does not match the box schema is rejected."""
        with pytest.raises(SchemaMismatchError):
            parse_response(DetectType.BOUNDING_BOXES_2D, json.dumps(payload))

    def test_errors_share_a_base(self) -> None:
        """Test parse failures are detection errors."""
        assert issubclass(ResponseParseError, DetectionError)
        assert issubclass(SchemaMismatchError, DetectionError)
