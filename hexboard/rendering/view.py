"""
View binding interface.

The synchronizer never looks UI elements up on its own; it is handed a
BoardView at construction and pushes every rendered frame into it.
"""

from abc import ABC, abstractmethod

from .frame import RenderFrame


class BoardView(ABC):
    """
    Abstract presentation target for render frames.

    Subclasses must implement:
    - apply(): Show one frame. Called once per adopted snapshot, including
      snapshots identical to the previous one.
    """

    @abstractmethod
    def apply(self, frame: RenderFrame) -> None:
        """
        Apply a render frame to the presentation.

        Args:
            frame: Board rows, selector classification and control state
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
