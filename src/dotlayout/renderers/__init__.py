from dotlayout.renderers.base import Renderer
from dotlayout.renderers.svg import SvgRenderer

__all__ = ["Renderer", "SvgRenderer"]
