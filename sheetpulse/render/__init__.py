"""Reference implementations of the rendering contract."""

from .base import NullRenderer, Renderer

__all__ = ["NullRenderer", "Renderer"]
