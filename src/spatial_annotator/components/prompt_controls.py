"""Prompt template editing controls."""

import streamlit as st

from spatial_annotator.models import DetectType
from spatial_annotator.prompts import build_instruction
from spatial_annotator.state import AnnotationStore


def _render_template_inputs(store: AnnotationStore, mode: DetectType) -> None:
    """Render the editable subject of the mode's template plus its mode-specific options."""
    prompts = store.prompts
    parts = prompts.parts.setdefault(mode, ["", "", ""])
    while len(parts) < 3:
        parts.append("")

    st.write(parts[0])
    parts[1] = st.text_area(
        "Subject",
        value=parts[1],
        placeholder="What kinds of objects do you want to detect?",
        key=f"prompt_subject_{mode.value}",
        height=68,
        disabled=store.is_loading,
    )

    if mode == DetectType.BOUNDING_BOXES_2D:
        prompts.label_prompt = st.text_input(
            "Label each one with (optional)",
            value=prompts.label_prompt,
            placeholder="How should the objects be labelled?",
            key="prompt_label_2d",
            disabled=store.is_loading,
        )
    elif mode == DetectType.SEGMENTATION_MASKS:
        prompts.segmentation_language = st.text_input(
            "Label language (e.g. English, Deutsch, Español, 中文)",
            value=prompts.segmentation_language,
            key="prompt_language",
            disabled=store.is_loading,
        )


def render_prompt_controls(store: AnnotationStore) -> None:
    """Render the prompt editor for the active detection type."""
    mode = store.mode
    prompts = store.prompts

    custom_col, raw_col = st.columns(2)
    with custom_col:
        prompts.use_custom_prompt = st.checkbox(
            "Custom prompt",
            value=prompts.use_custom_prompt,
            key="use_custom_prompt",
            disabled=store.is_loading,
        )
    with raw_col:
        show_raw = st.checkbox("Show raw prompt", key="show_raw_prompt", disabled=store.is_loading)

    if prompts.use_custom_prompt:
        prompts.custom[mode] = st.text_area(
            "Custom prompt",
            value=prompts.custom.get(mode, ""),
            key=f"custom_prompt_{mode.value}",
            height=140,
            disabled=store.is_loading,
        )
    elif show_raw:
        st.caption(build_instruction(prompts, mode))
    else:
        _render_template_inputs(store, mode)
