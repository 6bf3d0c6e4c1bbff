"""
Core type definitions shared by the synchronizer and the renderer.

This module contains:
- Board size modes and their row geometry
- Resource kinds with the remote's fixed integer encoding
- Rule flags with their wire names
- Number-token constants (sentinel, robber value, selector values)
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Dict, Tuple


class SizeMode(Enum):
    """Board size mode. The remote encodes it as the ``extension`` bool."""

    STANDARD = "standard"
    EXTENDED = "extended"

    @classmethod
    def from_extension(cls, extension: bool) -> SizeMode:
        return cls.EXTENDED if extension else cls.STANDARD

    @property
    def is_extension(self) -> bool:
        return self is SizeMode.EXTENDED

    @property
    def row_lengths(self) -> Tuple[int, ...]:
        return ROW_LENGTHS[self]

    @property
    def tile_count(self) -> int:
        return sum(ROW_LENGTHS[self])


class ResourceKind(IntEnum):
    """Resource kind codes. Values must match the remote's encoding."""

    SHEEP = 0
    WOOD = 1
    WHEAT = 2
    BRICK = 3
    ORE = 4
    DESERT = 5

    @property
    def css_class(self) -> str:
        return RESOURCE_CLASSES[self]

    @property
    def is_desert(self) -> bool:
        return self is ResourceKind.DESERT


class RuleFlag(Enum):
    """
    Board-generation toggles owned by the remote.

    The value doubles as the snapshot field name and the endpoint path.
    """

    EIGHT_SIX_CAN_TOUCH = "eightSixCanTouch"
    TWO_TWELVE_CAN_TOUCH = "twoTwelveCanTouch"
    SAME_NUMBERS_CAN_TOUCH = "sameNumbersCanTouch"
    SAME_RESOURCE_CAN_TOUCH = "sameResourceCanTouch"
    MANUAL_DICE = "manualDice"

    @property
    def path(self) -> str:
        return f"/{self.value}"


ROW_LENGTHS: Dict[SizeMode, Tuple[int, ...]] = {
    SizeMode.STANDARD: (3, 4, 5, 4, 3),
    SizeMode.EXTENDED: (4, 5, 6, 6, 5, 4),
}

RESOURCE_CLASSES: Dict[ResourceKind, str] = {
    ResourceKind.SHEEP: "light-green",
    ResourceKind.WOOD: "dark-green",
    ResourceKind.WHEAT: "yellow",
    ResourceKind.BRICK: "brick",
    ResourceKind.ORE: "grey",
    ResourceKind.DESERT: "desert",
}

# Number tokens
NO_TOKEN = 0
NO_TOKEN_TEXT = "--"
NO_SELECTION = 0
ROBBER_VALUE = 7
TOKEN_VALUES: Tuple[int, ...] = (2, 3, 4, 5, 6, 8, 9, 10, 11, 12)
SELECTABLE_VALUES: Tuple[int, ...] = (2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12)

# Selector controls, in display order (robber control last)
SELECTOR_VALUES: Tuple[int, ...] = TOKEN_VALUES + (ROBBER_VALUE,)
