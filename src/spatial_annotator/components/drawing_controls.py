"""Freehand drawing controls: palette, thickness, clear and done."""

import streamlit as st
from PIL import ImageColor

from spatial_annotator.constants import MAX_LINE_THICKNESS, MIN_LINE_THICKNESS, STROKE_COLORS
from spatial_annotator.state import AnnotationStore


def _swatch(color: str, selected: bool) -> str:
    """HTML for a color swatch."""
    border = "3px solid #3B68FF" if selected else "1px solid #888"
    return (
        f"<div style='width: 20px; height: 20px; background: {color}; "
        f"border: {border}; border-radius: 50%; margin: auto;'></div>"
    )


def render_drawing_controls(store: AnnotationStore) -> None:
    """Render draw mode toggle and, while drawing, palette and stroke controls."""
    if not store.draw_mode:
        if st.button("Draw on image", key="draw_mode_on"):
            store.draw_mode = True
            st.rerun()
        return

    palette_cols = st.columns(len(STROKE_COLORS))
    for col, color in zip(palette_cols, STROKE_COLORS, strict=True):
        with col:
            st.markdown(_swatch(color, color == store.active_color), unsafe_allow_html=True)
            hex_color = "#{:02x}{:02x}{:02x}".format(*ImageColor.getrgb(color)[:3])
            if st.button(" ", key=f"color_{hex_color}", help=color):
                store.active_color = color
                st.rerun()

    store.line_thickness = st.slider(
        "Thickness",
        min_value=MIN_LINE_THICKNESS,
        max_value=MAX_LINE_THICKNESS,
        value=store.line_thickness,
        key="line_thickness_slider",
    )

    clear_col, done_col = st.columns(2)
    with clear_col:
        if st.button("Clear", key="clear_strokes"):
            store.clear_strokes()
            st.rerun()
    with done_col:
        if st.button("Done", key="draw_mode_off"):
            store.draw_mode = False
            st.rerun()
