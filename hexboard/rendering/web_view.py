"""
Web view binding.

Keeps the latest frame and a bounded history, and fans each frame out to
the browser connections registered by the web shell. The shell owns the
sockets; this class only hands out queues.
"""

from __future__ import annotations

import asyncio
import json
from collections import deque
from pathlib import Path
from typing import Any, Deque, Dict, List, Optional, Set

from infra.logger import get_logger

from .frame import RenderFrame
from .view import BoardView

logger = get_logger(__name__)


class WebView(BoardView):
    """Frame store and broadcaster for connected browsers."""

    def __init__(self, history_limit: int = 300, queue_size: int = 8):
        self.history: Deque[Dict[str, Any]] = deque(maxlen=history_limit)
        self.current: Optional[Dict[str, Any]] = None
        self.render_count = 0

        self._queue_size = queue_size
        self._subscribers: Set[asyncio.Queue] = set()

    def apply(self, frame: RenderFrame) -> None:
        """
        Record the frame and push it to every subscriber.

        Args:
            frame: Frame produced by the synchronizer's render pass
        """
        payload = frame.to_dict()
        self.current = payload
        self.history.append(payload)
        self.render_count += 1

        for queue in list(self._subscribers):
            self._offer(queue, payload)

    def subscribe(self) -> asyncio.Queue:
        """Register a new browser connection; the current frame is queued first."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_size)
        if self.current is not None:
            queue.put_nowait(self.current)
        self._subscribers.add(queue)
        logger.debug("View subscriber added (%d total)", len(self._subscribers))
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)
        logger.debug("View subscriber removed (%d total)", len(self._subscribers))

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def recent(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Most recent frames, oldest first."""
        frames = list(self.history)
        if limit is not None:
            frames = frames[-limit:] if limit > 0 else []
        return frames

    def save(self, filename: str) -> None:
        """Persist the recorded history to disk as JSON."""
        payload = {"version": "1.0", "frames": list(self.history)}
        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info("Saved %d frames to %s", len(self.history), path)

    def clear(self) -> None:
        """Forget recorded frames."""
        self.history.clear()
        self.current = None

    @staticmethod
    def _offer(queue: asyncio.Queue, payload: Dict[str, Any]) -> None:
        # Slow consumers only care about the newest frame
        if queue.full():
            try:
                queue.get_nowait()
            except asyncio.QueueEmpty:
                pass
        queue.put_nowait(payload)
