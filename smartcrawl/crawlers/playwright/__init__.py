"""Playwright module for the crawler."""

from .browser import build_launch_args, open_session
from .pages import configure_page, handle_route, should_block
from .scroll import auto_scroll

__all__ = [
    "build_launch_args",
    "open_session",
    "configure_page",
    "handle_route",
    "should_block",
    "auto_scroll",
]
