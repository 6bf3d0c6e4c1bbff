from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from ..core.types import RuleFlag
from ..snapshot import SessionState, Snapshot
from .render_state import BoardRenderer, RenderDescriptor


@dataclass(frozen=True)
class ControlState:
    """
    Enabled/visible state of the non-board controls.

    While a session is active the number controls are shown (all of them
    only in manual dice mode, otherwise just the roll control) and the mode
    switch and rule toggles are locked. Toggle checked states always mirror
    the remote's flags.
    """

    number_selectors_visible: bool
    roll_control_visible: bool
    mode_controls_enabled: bool
    rule_toggles_enabled: bool
    start_control_visible: bool
    end_control_visible: bool
    rule_toggles_checked: Dict[str, bool] = field(default_factory=dict)

    @classmethod
    def from_session(cls, session: SessionState) -> ControlState:
        active = session.active
        manual = session.rule_flags.get(RuleFlag.MANUAL_DICE)
        return cls(
            number_selectors_visible=active and manual,
            roll_control_visible=active,
            mode_controls_enabled=not active,
            rule_toggles_enabled=not active,
            start_control_visible=not active,
            end_control_visible=active,
            rule_toggles_checked=session.rule_flags.as_wire(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number_selectors_visible": self.number_selectors_visible,
            "roll_control_visible": self.roll_control_visible,
            "mode_controls_enabled": self.mode_controls_enabled,
            "rule_toggles_enabled": self.rule_toggles_enabled,
            "start_control_visible": self.start_control_visible,
            "end_control_visible": self.end_control_visible,
            "rule_toggles_checked": dict(self.rule_toggles_checked),
        }


@dataclass(frozen=True)
class RenderFrame:
    """
    Everything one render pass hands to the view binding.
    """

    snapshot: Snapshot
    board: RenderDescriptor
    controls: ControlState

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> RenderFrame:
        return cls(
            snapshot=snapshot,
            board=BoardRenderer.build(snapshot.board, snapshot.session.selected_value),
            controls=ControlState.from_session(snapshot.session),
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the frame into a JSON-friendly dictionary.
        """
        return {
            "size_mode": self.snapshot.board.size_mode.value,
            "active": self.snapshot.session.active,
            "selected_value": self.snapshot.session.selected_value,
            "board": self.board.to_dict(),
            "controls": self.controls.to_dict(),
        }
