"""Output rendering."""

from topquestions.renderer.json_renderer import render_items


__all__ = ["render_items"]
