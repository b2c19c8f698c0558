"""FastAPI application: HTTP endpoints in front of the turn router.

Endpoints:

  POST /conversations/{key}/activities    One inbound activity → replies
  POST /conversations/{key}/reservation   Start the reservation waterfall
  GET  /conversations/{key}               Persisted state and identity
  GET  /health                            Health check

The transport (chat channel) posts each user message as an activity and
sends the returned replies back to the user, in order.  Turns for one
conversation must be posted one at a time.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from hotelbot.config import settings
from hotelbot.errors import MalformedStateError, PersistenceError, TurnFailedError
from hotelbot.models.activity import Activity, ActivityType
from hotelbot.router import TurnRouter
from hotelbot.storage.state_store import StateStore, create_backend

log = logging.getLogger("hotelbot.app")

_START_TIME = time.time()


class ActivityIn(BaseModel):
    type: str = ActivityType.MESSAGE
    text: str = ""


def create_app(router: TurnRouter | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    router = router or TurnRouter(store=StateStore(create_backend()))

    app = FastAPI(
        title="Hotel Reservation Bot",
        description="Turn-based room reservation dialog",
        version="0.1.0",
    )
    app.state.router = router

    # ── Health check ───────────────────────────────────────────

    @app.get("/health")
    async def health() -> JSONResponse:
        uptime = round(time.time() - _START_TIME, 1)
        return JSONResponse({"status": "ok", "uptime": uptime})

    # ── Turns ──────────────────────────────────────────────────

    @app.post("/conversations/{key}/activities")
    async def post_activity(key: str, body: ActivityIn) -> JSONResponse:
        activity = Activity(conversation_key=key, type=body.type, text=body.text)
        try:
            result = await router.on_turn(activity)
        except TurnFailedError as e:
            return JSONResponse({"replies": e.replies, "error": "turn_failed"}, status_code=500)
        except PersistenceError as e:
            log.error("Turn for %s not committed: %s", key, e)
            raise HTTPException(status_code=503, detail="State store unavailable, retry the turn.")
        return JSONResponse({"replies": result.replies})

    @app.post("/conversations/{key}/reservation")
    async def start_reservation(key: str) -> JSONResponse:
        try:
            result = await router.start_reservation(key)
        except TurnFailedError as e:
            return JSONResponse({"replies": e.replies, "error": "turn_failed"}, status_code=500)
        except PersistenceError as e:
            log.error("Reservation start for %s not committed: %s", key, e)
            raise HTTPException(status_code=503, detail="State store unavailable, retry the turn.")
        return JSONResponse({"replies": result.replies})

    # ── Inspection ─────────────────────────────────────────────

    @app.get("/conversations/{key}")
    async def get_conversation(key: str) -> JSONResponse:
        try:
            state = await router.store.load(key)
            identity = await router.store.load_identity(key)
        except PersistenceError as e:
            log.error("Inspection of %s failed: %s", key, e)
            raise HTTPException(status_code=503, detail="State store unavailable.")
        except MalformedStateError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return JSONResponse({
            "state": state.model_dump(mode="json"),
            "identity": identity.model_dump(mode="json"),
        })

    return app


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
    )
    for warning in settings.validate_startup():
        log.warning(warning)

    log_config = uvicorn.config.LOGGING_CONFIG
    log_config["formatters"]["default"]["fmt"] = (
        "%(asctime)s %(name)-12s %(levelname)-8s %(message)s"
    )

    uvicorn.run(
        "hotelbot.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=log_config,
    )
