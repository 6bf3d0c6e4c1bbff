"""
Rendering toolkit for the hex board.

This package turns snapshots into display-ready frames (pure layout and
highlight classification) and provides the view bindings frames are pushed
into, including a web view that streams frames to browsers.
"""

from .frame import ControlState, RenderFrame
from .render_state import (
    BoardRenderer,
    CellDescriptor,
    RenderDescriptor,
    RowDescriptor,
    SelectorDescriptor,
)
from .view import BoardView
from .web_view import WebView

__all__ = [
    "BoardRenderer",
    "CellDescriptor",
    "RowDescriptor",
    "SelectorDescriptor",
    "RenderDescriptor",
    "ControlState",
    "RenderFrame",
    "BoardView",
    "WebView",
]
