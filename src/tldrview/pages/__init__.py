"""Page parsing and rendering.

* :func:`parse_page` -- page markdown (either marker syntax) to a
  :class:`~tldrview.models.ParsedPage`.
* :class:`Renderer` -- a parsed page plus a style config to terminal text.
"""

from tldrview.pages.parser import classify_line, parse_page
from tldrview.pages.renderer import Renderer

__all__ = ["Renderer", "classify_line", "parse_page"]
