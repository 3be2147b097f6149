"""Reusable UI components."""

from spatial_annotator.components.detect_controls import render_send_button, render_temperature
from spatial_annotator.components.drawing_controls import render_drawing_controls
from spatial_annotator.components.image_gallery import GalleryConfig, image_gallery
from spatial_annotator.components.label_editor import render_label_editor
from spatial_annotator.components.mode_toggle import render_mode_toggle
from spatial_annotator.components.overlay import render_overlay
from spatial_annotator.components.overlay_canvas import overlay_canvas
from spatial_annotator.components.prompt_controls import render_prompt_controls

__all__ = [
    "GalleryConfig",
    "image_gallery",
    "overlay_canvas",
    "render_drawing_controls",
    "render_label_editor",
    "render_mode_toggle",
    "render_overlay",
    "render_prompt_controls",
    "render_send_button",
    "render_temperature",
]
