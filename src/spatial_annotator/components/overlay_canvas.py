"""Interactive overlay canvas.

In draw mode the rendered overlay is the background of a freehand drawing
canvas (streamlit-drawable-canvas); every path drawn on it is added to the
store as a stroke with all of its pointer samples. Otherwise the overlay is
shown with streamlit-image-coordinates and a click selects the result under it
for label editing.
"""

from __future__ import annotations

import base64
from collections.abc import Sequence
from typing import Any

import streamlit as st
from PIL import Image
from streamlit_drawable_canvas import st_canvas
from streamlit_image_coordinates import streamlit_image_coordinates

from spatial_annotator.components.overlay import render_overlay
from spatial_annotator.geometry import Size, find_nearest_point, find_smallest_box_at, to_unit
from spatial_annotator.models import CollectionKind, DetectType
from spatial_annotator.state import AnnotationStore
from spatial_annotator.utils import encode_png

EDITING_KEY = "editing_label"
CANVAS_SESSION_KEY = "draw_canvas"
FABRIC_VERSION = "4.4.0"


def path_samples(path: Sequence[Sequence[Any]]) -> list[tuple[float, float]]:
    """Extract the pointer samples of a freehand path in canvas pixels.

    Freehand paths are an ``M`` move to the first sample, one ``Q`` curve per
    following sample whose control point is the sample itself, and an ``L``
    line to the last sample.
    """
    samples: list[tuple[float, float]] = []
    for command in path:
        if not command:
            continue
        op, args = command[0], command[1:]
        if op in ("M", "L") and len(args) >= 2:
            samples.append((float(args[0]), float(args[1])))
        elif op == "Q" and len(args) >= 4:
            samples.append((float(args[0]), float(args[1])))
    return samples


def record_canvas_paths(
    store: AnnotationStore,
    objects: Sequence[dict[str, Any]],
    seen: int,
    canvas_size: Size,
) -> int:
    """Add the canvas paths after the first ``seen`` objects to the store as strokes.

    Args:
        store: Session state receiving the strokes.
        objects: Drawing objects reported by the canvas, oldest first.
        seen: Number of objects already recorded.
        canvas_size: Canvas size in pixels, used to convert samples to unit coordinates.

    Returns:
        The number of objects recorded after this call.
    """
    for obj in objects[seen:]:
        if obj.get("type") != "path":
            continue
        samples = path_samples(obj.get("path") or [])
        if not samples:
            continue
        store.begin_stroke(obj.get("stroke") or store.active_color)
        for sample in samples:
            store.append_stroke_point(to_unit(sample, canvas_size))
    if len(objects) > seen:
        store.image_sent = False
    return max(seen, len(objects))


def background_drawing(image: Image.Image) -> dict[str, Any]:
    """Build an initial canvas drawing whose background is the given image."""
    encoded = base64.b64encode(encode_png(image.convert("RGB"))).decode("ascii")
    return {
        "version": FABRIC_VERSION,
        "objects": [],
        "backgroundImage": {
            "type": "image",
            "version": FABRIC_VERSION,
            "originX": "left",
            "originY": "top",
            "left": 0,
            "top": 0,
            "width": image.width,
            "height": image.height,
            "scaleX": 1,
            "scaleY": 1,
            "src": f"data:image/png;base64,{encoded}",
        },
    }


def _canvas_session(store: AnnotationStore, image: Image.Image) -> dict[str, Any]:
    """Get the drawing session, starting a new one when the image, epoch or strokes changed under it."""
    session = st.session_state.get(CANVAS_SESSION_KEY)
    expected_strokes = None if session is None else session["base_strokes"] + session["recorded"]
    if (
        session is None
        or session["epoch"] != store.epoch
        or session["size"] != image.size
        or len(store.strokes) != expected_strokes
    ):
        generation = 0 if session is None else session["generation"] + 1
        session = {
            "generation": generation,
            "epoch": store.epoch,
            "size": image.size,
            "base_strokes": len(store.strokes),
            "recorded": 0,
            "seen": 0,
            "drawing": background_drawing(image),
        }
        st.session_state[CANVAS_SESSION_KEY] = session
    return session


def _draw_canvas(store: AnnotationStore, image: Image.Image, key: str) -> None:
    """Show the drawing canvas and record new freehand paths."""
    session = _canvas_session(store, image)
    result = st_canvas(
        stroke_width=store.line_thickness,
        stroke_color=store.active_color,
        background_color="rgba(0, 0, 0, 0)",
        initial_drawing=session["drawing"],
        update_streamlit=True,
        height=image.height,
        width=image.width,
        drawing_mode="freedraw",
        display_toolbar=False,
        key=f"{key}_draw_{session['generation']}",
    )
    if result.json_data is None:
        return

    objects = result.json_data.get("objects", [])
    strokes_before = len(store.strokes)
    session["seen"] = record_canvas_paths(store, objects, session["seen"], Size(*image.size))
    session["recorded"] += len(store.strokes) - strokes_before


def _handle_click(store: AnnotationStore, x: float, y: float, size: Size) -> None:
    """Select the result under the click for label editing."""
    if store.mode == DetectType.POINTS:
        index = find_nearest_point((x, y), [(p.point.x, p.point.y) for p in store.points], size)
        kind = CollectionKind.POINT
    elif store.mode == DetectType.SEGMENTATION_MASKS:
        index = find_smallest_box_at(to_unit((x, y), size), store.masks)
        kind = CollectionKind.MASK
    else:
        index = find_smallest_box_at(to_unit((x, y), size), store.boxes)
        kind = CollectionKind.BOX_2D

    st.session_state[EDITING_KEY] = (kind, index) if index is not None else None


def _is_new_event(value: dict[str, Any], key: str) -> bool:
    """Check that a component value has not been handled on a previous rerun."""
    state_key = f"_last_event_time_{key}"
    current_time = value.get("unix_time")
    if current_time is not None and current_time == st.session_state.get(state_key):
        return False
    st.session_state[state_key] = current_time
    return True


def overlay_canvas(store: AnnotationStore, container_size: Size, key: str = "overlay_canvas") -> None:
    """Render the overlay and process pointer input.

    Args:
        store: Session state to render and update.
        container_size: Space available for the image, in pixels.
        key: Unique key for the Streamlit components.
    """
    image = render_overlay(store, container_size)
    if image is None:
        st.info("No image yet. Upload one, pick an example or start the camera.")
        return

    if store.draw_mode:
        _draw_canvas(store, image, key)
        return

    st.session_state.pop(CANVAS_SESSION_KEY, None)
    value = streamlit_image_coordinates(image.convert("RGB"), key=f"{key}_select", width=image.width)
    if not value or not _is_new_event(value, key):
        return
    if "x" in value and "y" in value:
        _handle_click(store, value["x"], value["y"], Size(*image.size))
        st.rerun()
