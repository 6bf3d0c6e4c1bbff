"""HTTP API and live view for the synchronized board."""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from hexboard import RuleFlag, SizeMode, StateSynchronizer, WebView
from infra.board_client import BoardClient
from infra.logger import get_logger
from infra.settings import Settings

logger = get_logger(__name__)


class NumberRequest(BaseModel):
    value: int


class RuleRequest(BaseModel):
    enabled: bool


def create_app(
    settings: Optional[Settings] = None,
    synchronizer: Optional[StateSynchronizer] = None,
    view: Optional[WebView] = None,
) -> FastAPI:
    """
    Build the web shell.

    Without an injected synchronizer, one is created at startup from
    ``settings`` (or the environment) and its client is closed at shutdown.
    The poll task lives exactly as long as the app.
    """
    settings = settings or Settings.from_env()
    if synchronizer is not None and view is None:
        if not isinstance(synchronizer.view, WebView):
            raise ValueError("Injected synchronizer must render into a WebView")
        view = synchronizer.view
    view = view or WebView(history_limit=settings.history_limit)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned_client: Optional[BoardClient] = None
        sync = synchronizer
        if sync is None:
            owned_client = BoardClient(settings.remote_url)
            sync = StateSynchronizer(owned_client, view, poll_interval=settings.poll_interval)
        app.state.sync = sync
        sync.start()
        logger.info("Web shell mirroring %s", sync.client.base_url)
        try:
            yield
        finally:
            await sync.stop()
            if owned_client is not None:
                await owned_client.close()

    app = FastAPI(title="hexboard", lifespan=lifespan)
    app.state.view = view

    # Allow a browser-based board page served from another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _sync() -> StateSynchronizer:
        return app.state.sync

    @app.get("/status")
    def status():
        sync = _sync()
        return {
            "running": sync.running,
            "has_snapshot": sync.snapshot is not None,
            "render_count": sync.render_count,
            "remote_url": sync.client.base_url,
        }

    @app.get("/api/frame")
    def frame():
        if view.current is None:
            raise HTTPException(404, "No frame rendered yet")
        return view.current

    @app.get("/api/history")
    def history(limit: int = 50):
        frames = view.recent(limit)
        return {"frames": frames, "total": len(frames)}

    @app.post("/api/mode/{mode}")
    async def set_mode(mode: str):
        try:
            size_mode = SizeMode(mode)
        except ValueError as exc:
            raise HTTPException(400, f"Unknown mode '{mode}'") from exc
        return {"applied": await _sync().set_size_mode(size_mode)}

    @app.post("/api/session/start")
    async def start_session():
        return {"applied": await _sync().start_session()}

    @app.post("/api/session/end")
    async def end_session():
        return {"applied": await _sync().end_session()}

    @app.post("/api/number")
    async def select_number(request: NumberRequest):
        try:
            applied = await _sync().select_number(request.value)
        except ValueError as exc:
            raise HTTPException(400, str(exc)) from exc
        return {"applied": applied}

    @app.post("/api/roll")
    async def roll():
        return {"applied": await _sync().roll_dice()}

    @app.post("/api/refresh-number")
    async def refresh_number():
        return {"applied": await _sync().refresh_selected_number()}

    @app.post("/api/rules/{flag}")
    async def set_rule(flag: str, request: RuleRequest):
        try:
            rule = RuleFlag(flag)
        except ValueError as exc:
            raise HTTPException(400, f"Unknown rule flag '{flag}'") from exc
        return {"accepted": await _sync().set_rule_flag(rule, request.enabled)}

    @app.websocket("/ws")
    async def frames(websocket: WebSocket):
        await websocket.accept()
        queue = view.subscribe()

        async def pump():
            while True:
                await websocket.send_json(await queue.get())

        sender = asyncio.create_task(pump())
        try:
            # Inbound messages are ignored; this only watches for disconnect
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass
        finally:
            sender.cancel()
            await asyncio.gather(sender, return_exceptions=True)
            view.unsubscribe(queue)

    return app


app = create_app()
