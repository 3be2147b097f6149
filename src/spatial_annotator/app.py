"""Streamlit application entry point."""

import logging

import streamlit as st

from spatial_annotator.config import settings
from spatial_annotator.pages import annotate, sources
from spatial_annotator.services import DetectionPipeline, GeminiClient, fetch_example_images
from spatial_annotator.state import AnnotationStore, ImageReference
from spatial_annotator.utils import detect_type_from_task

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@st.cache_resource
def _load_examples() -> list[ImageReference]:
    """Fetch the example images once per server process."""
    return fetch_example_images(settings.example_images_base_url)


def _init_session_state(examples: list[ImageReference]) -> None:
    """Create the session's annotation store on first run."""
    if "store" in st.session_state:
        return

    store = AnnotationStore()
    detect_type = detect_type_from_task(st.query_params.get("task"))
    if detect_type is not None:
        store.set_mode(detect_type)
    if examples:
        store.set_image(examples[0])

    st.session_state.store = store
    st.session_state.pipeline = DetectionPipeline(
        store,
        GeminiClient.from_settings(settings),
        max_image_size=settings.max_image_size,
    )


st.set_page_config(
    page_title="Spatial Annotator",
    page_icon="🎯",
    layout="wide",
)

st.title("Spatial Annotator")

examples = _load_examples()
_init_session_state(examples)

# Navigation
page = st.sidebar.radio(
    "Navigation",
    ["Annotate", "Images"],
    index=0,
)

# Render selected page
if page == "Annotate":
    annotate.render(st.session_state.store, st.session_state.pipeline)
elif page == "Images":
    sources.render(st.session_state.store, examples)
