"""Output renderers for battle state."""

from .text_renderer import TextRenderer

__all__ = ["TextRenderer"]
