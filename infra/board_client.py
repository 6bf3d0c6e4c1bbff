"""Async client for the remote board controller's HTTP endpoints."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from hexboard.core.errors import MalformedResponse, TransportFailure
from hexboard.core.types import RuleFlag, SizeMode
from hexboard.snapshot import Snapshot, validate_selected_value

SNAPSHOT_PATH = "/getboard"
SELECTED_NUMBER_PATH = "/getnumber"
MODE_PATHS = {
    SizeMode.STANDARD: "/setclassic",
    SizeMode.EXTENDED: "/setextension",
}
START_SESSION_PATH = "/startgame"
END_SESSION_PATH = "/endgame"
SELECT_NUMBER_PATH = "/selectNumber"
ROLL_DICE_PATH = "/rollDice"


class BoardClient:
    """
    Thin wrapper over ``httpx.AsyncClient``, one method per remote endpoint.

    Every method raises TransportFailure or MalformedResponse and nothing
    else; callers decide what a failure means.
    """

    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 5.0,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> BoardClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------
    async def fetch_snapshot(self) -> Snapshot:
        return await self._get_snapshot(SNAPSHOT_PATH)

    async def set_size_mode(self, mode: SizeMode) -> Snapshot:
        """Switch (or reshuffle) the board; the remote answers with a full snapshot."""
        return await self._get_snapshot(MODE_PATHS[mode])

    async def start_session(self) -> Snapshot:
        return await self._get_snapshot(START_SESSION_PATH)

    async def end_session(self) -> Snapshot:
        return await self._get_snapshot(END_SESSION_PATH)

    async def select_number(self, value: int) -> int:
        """Ask the remote to highlight ``value``; returns the number it confirmed."""
        return await self._get_number(SELECT_NUMBER_PATH, params={"value": str(value)})

    async def roll_dice(self) -> int:
        return await self._get_number(ROLL_DICE_PATH)

    async def fetch_selected_number(self) -> int:
        return await self._get_number(SELECTED_NUMBER_PATH)

    async def set_rule_flag(self, flag: RuleFlag, enabled: bool) -> None:
        """Propose a rule flag value. The response body is ignored."""
        await self._get(flag.path, params={"value": "1" if enabled else "0"})

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    async def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> httpx.Response:
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            raise TransportFailure(f"GET {path} failed: {exc}") from exc

        if response.is_error:
            raise TransportFailure(
                f"GET {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response

    async def _get_snapshot(self, path: str) -> Snapshot:
        response = await self._get(path)
        try:
            payload = response.json()
        except ValueError as exc:
            raise MalformedResponse(f"GET {path} returned non-JSON body: {response.text[:80]!r}") from exc
        return Snapshot.from_payload(payload)

    async def _get_number(self, path: str, params: Optional[Dict[str, str]] = None) -> int:
        response = await self._get(path, params=params)
        text = response.text.strip()
        try:
            return validate_selected_value(int(text))
        except ValueError as exc:
            raise MalformedResponse(f"GET {path} returned {text[:80]!r}, expected a number") from exc
