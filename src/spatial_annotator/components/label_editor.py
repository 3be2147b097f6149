"""Editable list of result labels."""

import streamlit as st

from spatial_annotator.components.overlay_canvas import EDITING_KEY
from spatial_annotator.models import CollectionKind, DetectType
from spatial_annotator.state import AnnotationStore
from spatial_annotator.utils import string_to_hsl_color

KIND_FOR_MODE = {
    DetectType.BOUNDING_BOXES_2D: CollectionKind.BOX_2D,
    DetectType.SEGMENTATION_MASKS: CollectionKind.MASK,
    DetectType.POINTS: CollectionKind.POINT,
}


def render_label_editor(store: AnnotationStore) -> None:
    """Render one text input per result of the active detection type.

    Edits are written back through ``AnnotationStore.update_label``. The entry
    selected by clicking on the image is highlighted.
    """
    kind = KIND_FOR_MODE[store.mode]
    entries = store.collection_for(store.mode)

    st.subheader(f"Results ({len(entries)})")
    if not entries:
        st.info("No results yet. Press Send to run a detection.")
        return

    editing = st.session_state.get(EDITING_KEY)
    for idx, entry in enumerate(entries):
        r, g, b = string_to_hsl_color(entry.label)
        selected = editing == (kind, idx)
        marker = "▶ " if selected else ""
        st.markdown(
            f"<div style='display: flex; align-items: center;'>"
            f"<div style='width: 12px; height: 12px; background: rgb({r}, {g}, {b}); "
            f"border-radius: 3px; margin-right: 8px;'></div>"
            f"<span>{marker}#{idx + 1}</span></div>",
            unsafe_allow_html=True,
        )
        new_label = st.text_input(
            "Label",
            value=entry.label,
            key=f"label_{kind.value}_{store.epoch}_{idx}_{entry.label}",
            label_visibility="collapsed",
        )
        if new_label != entry.label:
            store.update_label(kind, idx, new_label)
            st.rerun()
