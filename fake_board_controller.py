"""
In-memory stand-in for the remote board controller, for tests and demos.

Serves the controller's GET endpoints through ``httpx.MockTransport`` so a
real BoardClient can talk to it without a network.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Dict, List, Optional, Set

import httpx

from infra.board_client import BoardClient

# Standard: desert first, then the 18 tokens in order
STANDARD_RESOURCES = [5, 0, 1, 2, 3, 4, 0, 1, 2, 3, 4, 0, 1, 2, 0, 1, 2, 3, 4]
STANDARD_NUMBERS = [0, 2, 3, 3, 4, 4, 5, 5, 6, 6, 8, 8, 9, 9, 10, 10, 11, 11, 12]

# Extended: deserts at both ends
EXTENDED_RESOURCES = [5] + [0] * 6 + [1] * 6 + [2] * 6 + [3] * 5 + [4] * 5 + [5]
EXTENDED_NUMBERS = (
    [0, 2, 2, 3, 3, 3, 4, 4, 4, 5, 5, 5, 6, 6, 6, 8, 8, 8, 9, 9, 9, 10, 10, 10, 11, 11, 11, 12, 12]
    + [0]
)

RULE_FIELDS = (
    "eightSixCanTouch",
    "twoTwelveCanTouch",
    "sameNumbersCanTouch",
    "sameResourceCanTouch",
    "manualDice",
)


def make_payload(extension: bool = False, **overrides: Any) -> Dict[str, Any]:
    """A well-formed snapshot body; keyword overrides replace fields."""
    payload: Dict[str, Any] = {
        "resources": list(EXTENDED_RESOURCES if extension else STANDARD_RESOURCES),
        "numbers": list(EXTENDED_NUMBERS if extension else STANDARD_NUMBERS),
        "extension": extension,
        "gameStarted": False,
        "selectedNumber": 0,
        "manualDice": False,
        "eightSixCanTouch": True,
        "twoTwelveCanTouch": True,
        "sameNumbersCanTouch": True,
        "sameResourceCanTouch": True,
    }
    payload.update(overrides)
    return payload


Handler = Callable[[httpx.Request], Any]


class FakeBoardController:
    """
    Mutable fake of the remote's game state and endpoints.

    Attributes:
        state: Snapshot body served by the JSON endpoints
        next_roll: Value /rollDice will produce
        unreachable: Paths that fail with a connection error
        overrides: Per-path handlers replacing the default behavior
        requests: Every request received, in order
    """

    def __init__(self, state: Optional[Dict[str, Any]] = None, next_roll: int = 8):
        self.state: Dict[str, Any] = state if state is not None else make_payload()
        self.next_roll = next_roll
        self.unreachable: Set[str] = set()
        self.overrides: Dict[str, Handler] = {}
        self.requests: List[httpx.Request] = []

        self._routes: Dict[str, Handler] = {
            "/getboard": self._get_board,
            "/getnumber": self._get_number,
            "/setclassic": lambda request: self._set_mode(False),
            "/setextension": lambda request: self._set_mode(True),
            "/startgame": self._start_game,
            "/endgame": self._end_game,
            "/selectNumber": self._select_number,
            "/rollDice": self._roll_dice,
        }
        for field in RULE_FIELDS:
            self._routes[f"/{field}"] = self._rule_setter(field)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def client(self, base_url: str = "http://board.test") -> BoardClient:
        return BoardClient(base_url, transport=self.transport)

    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path in self.unreachable:
            raise httpx.ConnectError("board controller unreachable", request=request)

        handler = self.overrides.get(path) or self._routes.get(path)
        if handler is None:
            return httpx.Response(404, text="Not found")

        result = handler(request)
        if hasattr(result, "__await__"):
            result = await result
        return result

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------
    def _json(self) -> httpx.Response:
        return httpx.Response(200, json=copy.deepcopy(self.state))

    def _get_board(self, request: httpx.Request) -> httpx.Response:
        return self._json()

    def _get_number(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=str(self.state["selectedNumber"]))

    def _set_mode(self, extension: bool) -> httpx.Response:
        keep = {key: self.state[key] for key in RULE_FIELDS + ("gameStarted", "selectedNumber")}
        self.state = make_payload(extension=extension, **keep)
        return self._json()

    def _start_game(self, request: httpx.Request) -> httpx.Response:
        self.state["gameStarted"] = True
        return self._json()

    def _end_game(self, request: httpx.Request) -> httpx.Response:
        self.state["gameStarted"] = False
        self.state["selectedNumber"] = 0
        return self._json()

    def _select_number(self, request: httpx.Request) -> httpx.Response:
        value = request.url.params.get("value", "0")
        self.state["selectedNumber"] = int(value)
        return httpx.Response(200, text=value)

    def _roll_dice(self, request: httpx.Request) -> httpx.Response:
        self.state["selectedNumber"] = self.next_roll
        return httpx.Response(200, text=str(self.next_roll))

    def _rule_setter(self, field: str) -> Handler:
        def handler(request: httpx.Request) -> httpx.Response:
            self.state[field] = request.url.params.get("value") == "1"
            return httpx.Response(200, text=f"{field} updated")

        return handler
