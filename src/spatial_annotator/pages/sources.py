"""Image source page: upload, example gallery and camera stream."""

import logging

import streamlit as st
from PIL import UnidentifiedImageError

from spatial_annotator.components import GalleryConfig, image_gallery
from spatial_annotator.constants import UPLOAD_TYPES
from spatial_annotator.models import ImageOrigin
from spatial_annotator.state import AnnotationStore, CameraStream, ImageReference

logger = logging.getLogger(__name__)


def _stop_stream(store: AnnotationStore) -> None:
    """Stop and clear the live stream, if any."""
    if store.stream is not None:
        store.stream.stop()
        store.set_stream(None)


def _select_image(store: AnnotationStore, ref: ImageReference) -> None:
    """Make ref the active image and start a new session epoch."""
    _stop_stream(store)
    store.set_image(ref)
    store.reset()


def _render_upload(store: AnnotationStore) -> None:
    """Render the file uploader."""
    uploaded = st.file_uploader("Upload an image", type=UPLOAD_TYPES)
    if not uploaded or uploaded.file_id == st.session_state.get("last_upload_id"):
        return
    st.session_state.last_upload_id = uploaded.file_id

    try:
        ref = ImageReference.from_bytes(uploaded.getvalue(), ImageOrigin.UPLOAD, name=uploaded.name)
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Rejected upload {uploaded.name}: {e}")
        st.error(f"Could not read {uploaded.name} as an image")
        return

    _select_image(store, ref)
    st.success(f"Loaded {uploaded.name}")


def _render_gallery(store: AnnotationStore, examples: list[ImageReference]) -> None:
    """Render the example gallery, inline or expanded."""
    show_all = st.toggle("Show all examples", key="gallery_show_all")
    current = store.image.name if store.image and store.stream is None else None

    def handle_select(ref: ImageReference) -> None:
        _select_image(store, ref)
        st.rerun()

    image_gallery(
        examples,
        config=GalleryConfig(
            max_images=None if show_all else GalleryConfig().max_images,
            key_prefix="examples_",
            selected_name=current,
        ),
        on_select=handle_select,
    )


def _render_camera(store: AnnotationStore) -> None:
    """Render camera stream start/stop and snapshot capture."""
    stream = store.stream
    if stream is None:
        if st.button("Start camera", key="start_camera"):
            store.set_stream(CameraStream())
            store.reset()
            st.rerun()
        return

    snapshot = st.camera_input("Current frame", key="camera_frame")
    if snapshot is not None and isinstance(stream, CameraStream):
        stream.push_frame(snapshot.getvalue())

    if st.button("Stop camera", key="stop_camera"):
        _stop_stream(store)
        store.reset()
        st.rerun()


def render(store: AnnotationStore, examples: list[ImageReference]) -> None:
    """Render the image source page."""
    st.header("Images")

    _render_upload(store)
    st.divider()

    st.subheader("Examples")
    _render_gallery(store, examples)
    st.divider()

    st.subheader("Camera")
    _render_camera(store)
