"""
Snapshot models for the state received from the remote board controller.

A snapshot is atomic truth: it is parsed and validated as a whole, and only
a fully valid snapshot ever replaces the local one. The wire format uses the
remote's camelCase names; the in-memory models use ours.

Wire shape:
    {
        "resources": [5, 0, 1, ...],     # ResourceKind codes
        "numbers": [0, 6, 8, ...],       # 0 = no token
        "extension": false,
        "gameStarted": true,
        "selectedNumber": 6,
        "manualDice": false,
        "eightSixCanTouch": true,
        "twoTwelveCanTouch": true,
        "sameNumbersCanTouch": true,
        "sameResourceCanTouch": true
    }
"""

from __future__ import annotations

from typing import Any, Dict, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    ValidationError,
    field_validator,
    model_validator,
)

from .core.errors import MalformedResponse
from .core.types import (
    NO_SELECTION,
    NO_TOKEN,
    SELECTABLE_VALUES,
    TOKEN_VALUES,
    ResourceKind,
    RuleFlag,
    SizeMode,
)


def validate_selected_value(value: int) -> int:
    """Raise ValueError unless value is 0 (no selection) or 2..12."""
    if value != NO_SELECTION and value not in SELECTABLE_VALUES:
        raise ValueError(f"Selected number must be 0 or 2-12, got {value}")
    return value


class RuleFlags(BaseModel):
    """The five remote-owned toggles, mirrored read-only."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    eight_six_can_touch: StrictBool = Field(alias=RuleFlag.EIGHT_SIX_CAN_TOUCH.value)
    two_twelve_can_touch: StrictBool = Field(alias=RuleFlag.TWO_TWELVE_CAN_TOUCH.value)
    same_numbers_can_touch: StrictBool = Field(alias=RuleFlag.SAME_NUMBERS_CAN_TOUCH.value)
    same_resource_can_touch: StrictBool = Field(alias=RuleFlag.SAME_RESOURCE_CAN_TOUCH.value)
    manual_dice: StrictBool = Field(alias=RuleFlag.MANUAL_DICE.value)

    def get(self, flag: RuleFlag) -> bool:
        return self.as_wire()[flag.value]

    def as_wire(self) -> Dict[str, bool]:
        """Flag values keyed by wire name."""
        return self.model_dump(by_alias=True)


class BoardDescription(BaseModel):
    """Tile layout: resource kinds and number tokens in scan order."""

    model_config = ConfigDict(frozen=True)

    size_mode: SizeMode
    resources: Tuple[ResourceKind, ...]
    numbers: Tuple[StrictInt, ...]

    @field_validator("resources", mode="before")
    @classmethod
    def _parse_resources(cls, codes: Any) -> Any:
        # Wire codes must be plain ints; "1" or 1.0 is a bad body
        if not isinstance(codes, (list, tuple)):
            return codes
        for code in codes:
            if isinstance(code, bool) or not isinstance(code, int):
                raise ValueError(f"Resource code must be an int, got {code!r}")
        return tuple(ResourceKind(code) for code in codes)

    @field_validator("numbers")
    @classmethod
    def _check_tokens(cls, numbers: Tuple[int, ...]) -> Tuple[int, ...]:
        for number in numbers:
            if number != NO_TOKEN and number not in TOKEN_VALUES:
                raise ValueError(f"Invalid number token: {number}")
        return numbers

    @model_validator(mode="after")
    def _check_lengths(self) -> BoardDescription:
        expected = self.size_mode.tile_count
        if len(self.resources) != expected or len(self.numbers) != expected:
            raise ValueError(
                f"{self.size_mode.value} board needs {expected} tiles, got "
                f"{len(self.resources)} resources and {len(self.numbers)} numbers"
            )
        return self

    @property
    def tile_count(self) -> int:
        return len(self.resources)


class SessionState(BaseModel):
    """Play-session state: active flag, highlighted number, rule flags."""

    model_config = ConfigDict(frozen=True)

    active: StrictBool
    selected_value: StrictInt
    rule_flags: RuleFlags

    @field_validator("selected_value")
    @classmethod
    def _check_selected(cls, value: int) -> int:
        return validate_selected_value(value)


class Snapshot(BaseModel):
    """Board plus session, as last confirmed by the remote."""

    model_config = ConfigDict(frozen=True)

    board: BoardDescription
    session: SessionState

    @classmethod
    def from_payload(cls, payload: Any) -> Snapshot:
        """
        Build a snapshot from a decoded JSON body.

        Raises:
            MalformedResponse: If any field is missing or invalid. Nothing
                is partially built; the caller gets a snapshot or an error.
        """
        if not isinstance(payload, dict):
            raise MalformedResponse(f"Snapshot must be a JSON object, got {type(payload).__name__}")

        try:
            board = BoardDescription(
                size_mode=SizeMode.from_extension(_require_bool(payload, "extension")),
                resources=payload["resources"],
                numbers=payload["numbers"],
            )
            session = SessionState(
                active=_require_bool(payload, "gameStarted"),
                selected_value=payload["selectedNumber"],
                rule_flags=RuleFlags.model_validate(payload),
            )
        except KeyError as exc:
            raise MalformedResponse(f"Snapshot missing field {exc.args[0]!r}") from exc
        except ValidationError as exc:
            raise MalformedResponse(f"Invalid snapshot: {exc}") from exc

        return cls(board=board, session=session)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize back to the wire shape."""
        payload: Dict[str, Any] = {
            "resources": [int(kind) for kind in self.board.resources],
            "numbers": list(self.board.numbers),
            "extension": self.board.size_mode.is_extension,
            "gameStarted": self.session.active,
            "selectedNumber": self.session.selected_value,
        }
        payload.update(self.session.rule_flags.as_wire())
        return payload

    def with_selected_value(self, value: int) -> Snapshot:
        """Return a new snapshot generation differing only in the selected number."""
        session = self.session.model_copy(update={"selected_value": validate_selected_value(value)})
        return self.model_copy(update={"session": session})


def _require_bool(payload: Dict[str, Any], key: str) -> bool:
    value = payload[key]
    if not isinstance(value, bool):
        raise MalformedResponse(f"Snapshot field {key!r} must be a bool, got {value!r}")
    return value
