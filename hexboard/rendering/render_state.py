"""
Pure layout and highlight classification for the hexagonal board.

The renderer turns a BoardDescription plus the currently selected number
into rows of display-ready cells, and classifies the number selector
controls against the same selected number. Nothing here holds state: the
same input always yields an equal RenderDescriptor, so re-rendering on every
poll tick is harmless.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..core.types import (
    NO_SELECTION,
    NO_TOKEN,
    NO_TOKEN_TEXT,
    ROBBER_VALUE,
    SELECTOR_VALUES,
    ResourceKind,
    SizeMode,
)
from ..snapshot import BoardDescription

OFFSET_LEFT = "left"
OFFSET_RIGHT = "right"


@dataclass(frozen=True)
class CellDescriptor:
    """One hex tile, ready for display."""

    resource_class: str
    display_text: str
    highlighted: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resource_class": self.resource_class,
            "display_text": self.display_text,
            "highlighted": self.highlighted,
        }


@dataclass(frozen=True)
class RowDescriptor:
    """A row of cells; ``offset`` shifts Extended-mode rows into the two-lobed shape."""

    cells: Tuple[CellDescriptor, ...]
    offset: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "offset": self.offset,
            "cells": [cell.to_dict() for cell in self.cells],
        }


@dataclass(frozen=True)
class SelectorDescriptor:
    """A number selector control."""

    value: int
    highlighted: bool

    @property
    def is_robber(self) -> bool:
        return self.value == ROBBER_VALUE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "highlighted": self.highlighted,
            "robber": self.is_robber,
        }


@dataclass(frozen=True)
class RenderDescriptor:
    """Positioned, classified board plus selector classification."""

    rows: Tuple[RowDescriptor, ...]
    selectors: Tuple[SelectorDescriptor, ...]

    @property
    def cells(self) -> List[CellDescriptor]:
        """All cells in scan order."""
        return [cell for row in self.rows for cell in row.cells]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows": [row.to_dict() for row in self.rows],
            "selectors": [selector.to_dict() for selector in self.selectors],
        }


class BoardRenderer:
    """Build RenderDescriptors from board descriptions."""

    @staticmethod
    def build(board: BoardDescription, selected_value: int) -> RenderDescriptor:
        """
        Render the board and the selector controls for one selected number.

        Args:
            board: Board layout from the latest snapshot
            selected_value: 0 for no selection, otherwise 2..12

        Returns:
            RenderDescriptor combining rows and selector classification
        """
        return RenderDescriptor(
            rows=BoardRenderer.layout_rows(board, selected_value),
            selectors=BoardRenderer.classify_selectors(selected_value),
        )

    @staticmethod
    def layout_rows(board: BoardDescription, selected_value: int) -> Tuple[RowDescriptor, ...]:
        """
        Lay the tiles out row by row.

        Tiles are consumed in one left-to-right, top-to-bottom scan. The scan
        stops as soon as either array runs out, even mid-row.
        """
        row_lengths = board.size_mode.row_lengths
        available = min(len(board.resources), len(board.numbers))
        midpoint = len(row_lengths) // 2

        rows: List[RowDescriptor] = []
        index = 0
        for row_number, length in enumerate(row_lengths):
            if index >= available:
                break

            cells: List[CellDescriptor] = []
            for _ in range(length):
                if index >= available:
                    break
                cells.append(
                    BoardRenderer.classify_tile(
                        board.resources[index], board.numbers[index], selected_value
                    )
                )
                index += 1

            rows.append(
                RowDescriptor(
                    cells=tuple(cells),
                    offset=BoardRenderer._row_offset(board.size_mode, row_number, midpoint),
                )
            )

        return tuple(rows)

    @staticmethod
    def classify_tile(resource: ResourceKind, number: int, selected_value: int) -> CellDescriptor:
        """Resolve a single tile's class, text and highlight."""
        resource = ResourceKind(resource)
        display_text = BoardRenderer.tile_text(resource, number)
        return CellDescriptor(
            resource_class=resource.css_class,
            display_text=display_text,
            highlighted=BoardRenderer.is_tile_highlighted(display_text, selected_value),
        )

    @staticmethod
    def tile_text(resource: ResourceKind, number: int) -> str:
        # Deserts never show a number, whatever the numbers array says
        if resource.is_desert or number == NO_TOKEN:
            return NO_TOKEN_TEXT
        return str(number)

    @staticmethod
    def is_tile_highlighted(display_text: str, selected_value: int) -> bool:
        if selected_value == NO_SELECTION:
            return False
        if selected_value == ROBBER_VALUE:
            return True
        return display_text == str(selected_value)

    @staticmethod
    def classify_selectors(
        selected_value: int, values: Sequence[int] = SELECTOR_VALUES
    ) -> Tuple[SelectorDescriptor, ...]:
        """Highlight exactly the selector whose value is selected (none for 0)."""
        return tuple(
            SelectorDescriptor(value=value, highlighted=value == selected_value)
            for value in values
        )

    @staticmethod
    def _row_offset(size_mode: SizeMode, row_number: int, midpoint: int) -> Optional[str]:
        if size_mode is not SizeMode.EXTENDED:
            return None
        return OFFSET_LEFT if row_number < midpoint else OFFSET_RIGHT
