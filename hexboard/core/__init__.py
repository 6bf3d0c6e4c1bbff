"""Core types and errors for the hexboard client."""

from .errors import MalformedResponse, SyncError, TransportFailure
from .types import (
    NO_SELECTION,
    NO_TOKEN,
    NO_TOKEN_TEXT,
    ROBBER_VALUE,
    ROW_LENGTHS,
    SELECTABLE_VALUES,
    SELECTOR_VALUES,
    TOKEN_VALUES,
    ResourceKind,
    RuleFlag,
    SizeMode,
)

__all__ = [
    "SizeMode",
    "ResourceKind",
    "RuleFlag",
    "ROW_LENGTHS",
    "NO_TOKEN",
    "NO_TOKEN_TEXT",
    "NO_SELECTION",
    "ROBBER_VALUE",
    "TOKEN_VALUES",
    "SELECTABLE_VALUES",
    "SELECTOR_VALUES",
    "SyncError",
    "TransportFailure",
    "MalformedResponse",
]
