"""Spatial annotator: object detection annotation backed by a multimodal model."""

__version__ = "0.1.0"
