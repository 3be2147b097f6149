"""Example image gallery component."""

from collections.abc import Callable
from dataclasses import dataclass

import streamlit as st

from spatial_annotator.constants import GALLERY_INLINE_COUNT
from spatial_annotator.state import ImageReference


@dataclass
class GalleryConfig:
    """Configuration options for the image gallery."""

    columns: int = GALLERY_INLINE_COUNT
    max_images: int | None = GALLERY_INLINE_COUNT
    thumbnail_size: int = 96
    key_prefix: str = ""
    selected_name: str | None = None


def image_gallery(
    images: list[ImageReference],
    config: GalleryConfig | None = None,
    on_select: Callable[[ImageReference], None] | None = None,
) -> int | None:
    """Display a tiled gallery of example images.

    Args:
        images: Decoded example images.
        config: Gallery configuration options. Uses defaults if not provided.
        on_select: Callback when an image is selected.

    Returns:
        Selected image index if any, else None.
    """
    if not images:
        st.info("No example images available")
        return None

    config = config or GalleryConfig()
    selected_idx = None
    display_images = images[: config.max_images] if config.max_images else images
    cols = st.columns(min(len(display_images), config.columns))

    for idx, ref in enumerate(display_images):
        with cols[idx % config.columns]:
            thumbnail = ref.image.copy()
            thumbnail.thumbnail((config.thumbnail_size, config.thumbnail_size))
            st.image(thumbnail, use_container_width=True)

            is_selected = ref.name == config.selected_name
            if st.button(
                "Selected" if is_selected else "Select",
                key=f"{config.key_prefix}select_{idx}",
                disabled=is_selected,
            ):
                selected_idx = idx
                if on_select:
                    on_select(ref)

    return selected_idx
