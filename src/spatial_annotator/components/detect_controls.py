"""Send button and temperature control for detection requests."""

import streamlit as st

from spatial_annotator.constants import MAX_TEMPERATURE, MIN_TEMPERATURE
from spatial_annotator.errors import DetectionError, StaleResultError
from spatial_annotator.services import DetectionPipeline
from spatial_annotator.state import AnnotationStore


def render_temperature(store: AnnotationStore, key: str = "temperature_slider") -> None:
    """Render the temperature slider."""
    store.temperature = st.slider(
        "Temperature",
        min_value=MIN_TEMPERATURE,
        max_value=MAX_TEMPERATURE,
        value=store.temperature,
        step=0.05,
        key=key,
        disabled=store.is_loading,
    )


def render_send_button(store: AnnotationStore, pipeline: DetectionPipeline) -> None:
    """Render the Send button and run a detection request when clicked."""
    no_source = store.active_source is None
    if not st.button(
        "Send",
        type="primary",
        disabled=store.is_loading or no_source,
        help="Send the image and prompt to the model",
    ):
        return

    try:
        with st.spinner("Sending..."):
            result = pipeline.run()
    except StaleResultError:
        st.warning("The image changed while the request was running; results were discarded.")
        return
    except DetectionError as e:
        st.error(f"Detection failed: {e}")
        return

    st.session_state.last_result_count = len(result.items)
    st.rerun()
