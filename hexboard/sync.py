"""
StateSynchronizer - keeps the local board view in step with the remote.

The remote board controller is the only source of truth. The synchronizer
polls it on a fixed cadence and also forwards user actions to it; in both
cases the answer replaces the local snapshot as a whole and triggers one
render pass. Nothing is applied optimistically.

Usage:
    client = BoardClient("http://catan.local")
    sync = StateSynchronizer(client, WebView())
    sync.start()                 # schedules the poll task
    await sync.select_number(6)  # any time, concurrently with polling
    await sync.stop()

Consistency:
    Polls and actions run as independent coroutines on one event loop.
    Whichever response completes last wins; a stale generation is replaced
    by the next poll, so local state trails the remote by at most one poll
    interval. Rule toggles in particular are proposals: the checked state
    shown is always the remote's, overwritten on every render pass.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Awaitable, Optional

from infra.logger import get_logger

from .core.errors import SyncError
from .core.types import RuleFlag, SizeMode
from .rendering.frame import RenderFrame
from .rendering.view import BoardView
from .snapshot import Snapshot, validate_selected_value

if TYPE_CHECKING:
    from infra.board_client import BoardClient

logger = get_logger(__name__)


class StateSynchronizer:
    """
    Single writer of the local Snapshot.

    Attributes:
        client: Remote board controller client
        view: View binding every frame is pushed into
        poll_interval: Seconds between poll ticks
        render_count: Render passes performed so far
    """

    def __init__(self, client: BoardClient, view: BoardView, poll_interval: float = 1.0):
        if poll_interval <= 0:
            raise ValueError(f"Poll interval must be positive: {poll_interval}")

        self.client = client
        self.view = view
        self.poll_interval = poll_interval
        self.render_count = 0

        self._snapshot: Optional[Snapshot] = None
        self._poll_task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def snapshot(self) -> Optional[Snapshot]:
        """Latest server-confirmed snapshot (None before the first one)."""
        return self._snapshot

    @property
    def running(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    # ------------------------------------------------------------------
    # Poll lifecycle
    # ------------------------------------------------------------------
    def start(self) -> None:
        """Schedule the poll task on the running event loop."""
        if self.running:
            return
        self._poll_task = asyncio.get_running_loop().create_task(
            self._poll_loop(), name="hexboard-poll"
        )
        logger.info("Polling %s every %.2fs", self.client.base_url, self.poll_interval)

    async def stop(self) -> None:
        """Cancel the poll task and wait for it to finish."""
        task, self._poll_task = self._poll_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Polling stopped")

    async def poll_once(self) -> bool:
        """
        Fetch one snapshot and adopt it.

        Returns:
            True if a snapshot was adopted, False if the poll failed
        """
        try:
            snapshot = await self.client.fetch_snapshot()
        except SyncError as exc:
            logger.warning("Poll failed, keeping previous state: %s", exc)
            return False
        self._adopt(snapshot, "poll")
        return True

    async def _poll_loop(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            started = loop.time()
            try:
                await self.poll_once()
            except Exception:
                logger.exception("Poll tick failed")
            elapsed = loop.time() - started
            await asyncio.sleep(max(0.0, self.poll_interval - elapsed))

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    async def set_size_mode(self, mode: SizeMode) -> bool:
        """
        Switch the board to ``mode`` (the remote also reshuffles it).

        A response reporting the other mode is stale, superseded by a newer
        mode request, and is discarded without touching local state.

        Returns:
            True if the response was adopted
        """
        snapshot = await self._request(self.client.set_size_mode(mode), f"set {mode.value} mode")
        if snapshot is None:
            return False
        if snapshot.board.size_mode is not mode:
            logger.info(
                "Discarding %s response for %s mode request",
                snapshot.board.size_mode.value,
                mode.value,
            )
            return False
        self._adopt(snapshot, f"set {mode.value} mode")
        return True

    async def set_standard(self) -> bool:
        return await self.set_size_mode(SizeMode.STANDARD)

    async def set_extended(self) -> bool:
        return await self.set_size_mode(SizeMode.EXTENDED)

    async def start_session(self) -> bool:
        return await self._adopt_response(self.client.start_session(), "start session")

    async def end_session(self) -> bool:
        return await self._adopt_response(self.client.end_session(), "end session")

    async def select_number(self, value: int) -> bool:
        """
        Highlight ``value`` (0 clears, 7 is the robber).

        Raises:
            ValueError: If value is not 0 or 2..12
        """
        validate_selected_value(value)
        return await self._adopt_number(self.client.select_number(value), f"select {value}")

    async def roll_dice(self) -> bool:
        return await self._adopt_number(self.client.roll_dice(), "roll dice")

    async def refresh_selected_number(self) -> bool:
        """Re-read just the selected number, without a full snapshot."""
        return await self._adopt_number(self.client.fetch_selected_number(), "refresh number")

    async def set_rule_flag(self, flag: RuleFlag, enabled: bool) -> bool:
        """
        Propose a rule flag value. Fire-and-forget: nothing local changes,
        the next snapshot carries the remote's decision.

        Returns:
            True if the remote accepted the request
        """
        try:
            await self.client.set_rule_flag(flag, enabled)
        except SyncError as exc:
            logger.warning("Setting %s=%s failed: %s", flag.value, enabled, exc)
            return False
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    async def _request(self, call: Awaitable, label: str):
        try:
            return await call
        except SyncError as exc:
            logger.warning("Action '%s' failed: %s", label, exc)
            return None

    async def _adopt_response(self, call: Awaitable[Snapshot], label: str) -> bool:
        snapshot = await self._request(call, label)
        if snapshot is None:
            return False
        self._adopt(snapshot, label)
        return True

    async def _adopt_number(self, call: Awaitable[int], label: str) -> bool:
        value = await self._request(call, label)
        if value is None:
            return False
        # Built from whichever generation is current once the response lands
        current = self._snapshot
        if current is None:
            logger.warning("Action '%s' returned %d before any snapshot; discarding", label, value)
            return False
        self._adopt(current.with_selected_value(value), label)
        return True

    def _adopt(self, snapshot: Snapshot, source: str) -> None:
        self._snapshot = snapshot
        logger.debug(
            "Adopted snapshot from %s (%s, active=%s, selected=%d)",
            source,
            snapshot.board.size_mode.value,
            snapshot.session.active,
            snapshot.session.selected_value,
        )
        try:
            self._render(snapshot)
        except Exception:
            # The snapshot stays adopted; the next render pass redraws it
            logger.exception("Render pass failed after %s", source)

    def _render(self, snapshot: Snapshot) -> None:
        frame = RenderFrame.from_snapshot(snapshot)
        self.render_count += 1
        self.view.apply(frame)
