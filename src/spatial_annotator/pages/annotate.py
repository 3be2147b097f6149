"""Annotation page: overlay canvas, prompt and detection request."""

import streamlit as st

from spatial_annotator.components import (
    overlay_canvas,
    render_drawing_controls,
    render_label_editor,
    render_mode_toggle,
    render_prompt_controls,
    render_send_button,
    render_temperature,
)
from spatial_annotator.constants import CANVAS_HEIGHT, CANVAS_WIDTH
from spatial_annotator.geometry import Size
from spatial_annotator.services import DetectionPipeline
from spatial_annotator.state import AnnotationStore


def _render_display_toggles(store: AnnotationStore) -> None:
    """Render the show labels / show boxes toggles."""
    labels_col, boxes_col = st.columns(2)
    with labels_col:
        store.show_labels = st.checkbox("Show labels", value=store.show_labels, key="show_labels")
    with boxes_col:
        store.show_boxes = st.checkbox("Show boxes", value=store.show_boxes, key="show_boxes")


def _render_instructions(store: AnnotationStore) -> None:
    """Render the instructions panel."""
    st.markdown("---")
    st.caption("**Instructions:**")
    if store.draw_mode:
        st.caption("Click and drag on the image to draw. Strokes are sent with the image.")
    else:
        st.caption("Click a result on the image to select its label.")
        st.caption("Edit labels in the list above.")


def render(store: AnnotationStore, pipeline: DetectionPipeline) -> None:
    """Render the annotation page."""
    st.header("Annotate")

    mode_col, temperature_col = st.columns([2, 1])
    with mode_col:
        render_mode_toggle(store)
    with temperature_col:
        render_temperature(store)

    st.divider()

    main_col, sidebar_col = st.columns([3, 1])

    with main_col:
        overlay_canvas(store, Size(CANVAS_WIDTH, CANVAS_HEIGHT))
        render_drawing_controls(store)
        _render_display_toggles(store)

        st.subheader("Prompt")
        render_prompt_controls(store)
        render_send_button(store, pipeline)

    with sidebar_col:
        render_label_editor(store)
        _render_instructions(store)
