"""
hexboard - client that mirrors a remote hexagonal game board.

This package keeps a local view of the board synchronized with the board
controller that owns it, and renders the highlighted number across tiles
and selector controls.

Quick Start:
    from infra.board_client import BoardClient
    from hexboard import StateSynchronizer, WebView

    view = WebView()
    sync = StateSynchronizer(BoardClient("http://catan.local"), view)
    sync.start()
    await sync.start_session()
    await sync.roll_dice()
    print(view.current)
"""

__version__ = "1.0.0"

# Core types
from .core import (
    MalformedResponse,
    ResourceKind,
    RuleFlag,
    SizeMode,
    SyncError,
    TransportFailure,
)

# Snapshot models
from .snapshot import BoardDescription, RuleFlags, SessionState, Snapshot

# Rendering
from .rendering import (
    BoardRenderer,
    BoardView,
    ControlState,
    RenderDescriptor,
    RenderFrame,
    WebView,
)

# Synchronization
from .sync import StateSynchronizer

__all__ = [
    # Core types
    "SizeMode",
    "ResourceKind",
    "RuleFlag",
    "SyncError",
    "TransportFailure",
    "MalformedResponse",

    # Snapshots
    "BoardDescription",
    "RuleFlags",
    "SessionState",
    "Snapshot",

    # Rendering
    "BoardRenderer",
    "RenderDescriptor",
    "ControlState",
    "RenderFrame",
    "BoardView",
    "WebView",

    # Synchronization
    "StateSynchronizer",
]
