"""Instruction text sent with each detection request."""

from spatial_annotator.constants import (
    DEFAULT_LABEL_CLAUSE,
    DEFAULT_LABEL_INSTRUCTION,
    DEFAULT_LABEL_LANGUAGE,
    MAX_BOX_ITEMS,
)
from spatial_annotator.models import DetectType
from spatial_annotator.schemas import PromptTemplates


def build_2d_prompt(target: str, label_prompt: str = "") -> str:
    """Build the bounding box instruction for the given target classes."""
    label = label_prompt or DEFAULT_LABEL_INSTRUCTION
    return (
        f"Détectez {target}, avec un maximum de {MAX_BOX_ITEMS} éléments. Sortez une liste json où chaque "
        f'entrée contient la boîte englobante 2D dans "box_2d" et {label} dans "label".'
    )


def localize_suffix(suffix: str, language: str) -> str:
    """Rewrite the label clause of a segmentation suffix to request another label language.

    The suffix is returned unchanged when ``language`` is blank or the default
    language. Otherwise the default label clause is stripped from the end (when
    present) and a clause naming ``language`` is appended.
    """
    if not language or not language.strip() or language.lower() == DEFAULT_LABEL_LANGUAGE.lower():
        return suffix

    if suffix.endswith(DEFAULT_LABEL_CLAUSE):
        suffix = suffix[: -len(DEFAULT_LABEL_CLAUSE)]
    return (
        f"{suffix} l'étiquette de texte en langue {language} dans la clé \"label\". Utiliser des étiquettes "
        f"descriptives en {language}. S'assurer que les étiquettes sont en {language}."
    )


def build_segmentation_prompt(parts: list[str], language: str) -> str:
    """Build the segmentation instruction from its prefix, subject and suffix."""
    prefix, items, suffix = parts[0], parts[1], parts[2]
    return f"{prefix} {items}{localize_suffix(suffix, language)}"


def build_generic_prompt(parts: list[str]) -> str:
    """Join a three-part template; shorter templates are joined with spaces."""
    if len(parts) < 3:
        return " ".join(parts)
    prefix, items, suffix = parts[0], parts[1], parts[2]
    return f"{prefix} {items}{suffix}"


def build_instruction(templates: PromptTemplates, mode: DetectType) -> str:
    """Return the instruction that a detection request for ``mode`` sends.

    A custom prompt, when enabled, replaces the constructed instruction.
    """
    if templates.use_custom_prompt:
        return templates.custom.get(mode, "")

    parts = templates.parts.get(mode, [])
    if mode == DetectType.BOUNDING_BOXES_2D:
        target = parts[1] if len(parts) > 1 else ""
        return build_2d_prompt(target, templates.label_prompt)
    if mode == DetectType.SEGMENTATION_MASKS and len(parts) >= 3:
        return build_segmentation_prompt(parts, templates.segmentation_language)
    return build_generic_prompt(parts)
