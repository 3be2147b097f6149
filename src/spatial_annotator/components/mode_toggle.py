"""Detection type toggle component."""

import streamlit as st

from spatial_annotator.models import DetectType
from spatial_annotator.state import AnnotationStore

MODE_DESCRIPTIONS = {
    DetectType.BOUNDING_BOXES_2D: "Detect objects as labelled 2D boxes",
    DetectType.SEGMENTATION_MASKS: "Segment regions with a mask per instance",
    DetectType.POINTS: "Point at specific locations",
}


def render_mode_toggle(store: AnnotationStore, key: str = "mode_radio") -> DetectType:
    """Render the detection type toggle and return the selected type.

    Args:
        store: Session state holding the current mode.
        key: Unique key for the radio button widget.

    Returns:
        The currently selected DetectType.
    """
    mode_list = list(DetectType)
    current_index = mode_list.index(store.mode)

    selected = st.radio(
        "Detection Type",
        options=mode_list,
        index=current_index,
        horizontal=True,
        key=key,
        format_func=lambda mode: mode.value,
        disabled=store.is_loading,
    )

    # Update store if mode changed
    if selected != store.mode:
        store.set_mode(selected)
        st.rerun()

    st.caption(MODE_DESCRIPTIONS[store.mode])

    return store.mode
