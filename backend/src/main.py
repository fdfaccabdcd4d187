import json
import asyncio
import logging
import uuid
from typing import Iterable, Optional
from datetime import datetime, timezone

from pydantic import ValidationError as SchemaValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi import FastAPI, File, Form, UploadFile, WebSocket, WebSocketDisconnect

from engine import DistributionEngine
from models import Connection, Scope
from schemas import INBOUND_EVENTS, AddCommentEvent, CreateGroupEvent, Inbound, JoinEvent, JoinGroupEvent, PublishContentEvent
from utilities import make_error, make_pong
from utilities import MAX_UPLOAD_BYTES, SEED_GROUPS, UPLOAD_DIR, UPLOAD_URL_PREFIX
from utilities.app_logging import configure_logging
from utilities.uploads import UploadRejected, store_asset, validate_image

logger = logging.getLogger(__name__)

# -------------- WebSocket handling --------------
async def connection_sender_loop(conn: Connection):
    """
    Background task per connection: read from queue and send over websocket.
    """
    websocket = conn.websocket
    try:
        while conn.connected:
            item = await conn.queue.get()
            # item should already be serializable dict
            try:
                await websocket.send_text(json.dumps(item))
            except Exception:
                # (broken pipe / closed) -> stop
                break
    except asyncio.CancelledError:
        # Graceful cancellation
        pass
    finally:
        conn.connected = False

async def dispatch(engine: DistributionEngine, conn: Connection, event: Inbound):
    cid = conn.client_id
    if isinstance(event, JoinEvent):
        await engine.join(cid, event.display_name, event.request_id)
    elif isinstance(event, CreateGroupEvent):
        await engine.create_group(cid, event.name, event.request_id)
    elif isinstance(event, JoinGroupEvent):
        await engine.join_group(cid, event.name, event.request_id)
    elif isinstance(event, PublishContentEvent):
        await engine.publish_from(cid, Scope.parse(event.scope), event.caption, event.asset_ref, event.request_id)
    elif isinstance(event, AddCommentEvent):
        await engine.add_comment(cid, event.content_id, event.text, event.request_id)

# -------------- App factory --------------
def create_app(seed_groups: Iterable[str] = SEED_GROUPS, upload_dir: str = UPLOAD_DIR) -> FastAPI:
    configure_logging()
    app = FastAPI(title="In-memory photo sharing")
    engine = DistributionEngine(seed_groups)
    app.state.engine = engine
    app.state.started_at = datetime.now(timezone.utc)
    # directory is created on first upload
    app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=upload_dir, check_dir=False), name="uploads")

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket):
        await ws.accept()
        conn = Connection(uuid.uuid4().hex, ws)
        conn.sender_task = asyncio.create_task(connection_sender_loop(conn))
        await engine.attach(conn)
        logger.info("connection %s opened", conn.client_id)
        try:
            while True:
                data = await ws.receive_text()
                try:
                    payload = json.loads(data)
                except json.JSONDecodeError:
                    conn.offer(make_error(None, "BAD_REQUEST", "invalid json"))
                    continue
                if not isinstance(payload, dict):
                    conn.offer(make_error(None, "BAD_REQUEST", "event must be an object"))
                    continue
                typ = payload.get("type")
                request_id = payload.get("request_id")
                if not isinstance(typ, str):
                    conn.offer(make_error(request_id, "BAD_REQUEST", "type must be a string"))
                    continue
                # ping
                if typ == "ping":
                    conn.offer(make_pong(request_id))
                    continue
                model = INBOUND_EVENTS.get(typ)
                if model is None:
                    conn.offer(make_error(request_id, "BAD_REQUEST", f"unknown type: {typ}"))
                    continue
                try:
                    event = model.model_validate(payload)
                except SchemaValidationError as e:
                    fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
                    conn.offer(make_error(request_id, "BAD_REQUEST", f"invalid fields: {fields}"))
                    continue
                await dispatch(engine, conn, event)
        except WebSocketDisconnect:
            pass
        except Exception:
            # Unexpected error; attempt to send internal error before closing
            logger.exception("connection %s failed", conn.client_id)
            try:
                await ws.send_text(json.dumps(make_error(None, "INTERNAL", "server error")))
            except Exception:
                pass
        finally:
            await engine.disconnect(conn.client_id)

    # -------------- REST endpoints --------------
    @app.post("/upload")
    async def rest_upload(
        photo: Optional[UploadFile] = File(None),
        username: str = Form(""),
        group: str = Form("all"),
        caption: str = Form(""),
    ):
        if photo is None:
            return JSONResponse(status_code=400, content={"error": "No file uploaded"})
        if not username.strip():
            return JSONResponse(status_code=400, content={"error": "username required"})
        # read one byte past the ceiling so oversize is detectable without reading it all
        data = await photo.read(MAX_UPLOAD_BYTES + 1)
        try:
            ext = validate_image(photo.filename, photo.content_type, len(data))
        except UploadRejected as e:
            return JSONResponse(status_code=400, content={"error": str(e)})
        # disk write off the event loop
        asset_ref = await asyncio.to_thread(store_asset, upload_dir, ext, data)
        item = await engine.publish_content(username.strip(), Scope.parse(group), caption, asset_ref)
        return {"success": True, "photo": item.to_dict()}

    @app.get("/groups")
    async def rest_list_groups():
        return {"groups": await engine.group_summaries()}

    @app.get("/participants")
    async def rest_list_participants():
        return {"participants": await engine.roster()}

    @app.get("/health")
    async def rest_health():
        now = datetime.now(timezone.utc)
        uptime_sec = int((now - app.state.started_at).total_seconds())
        stats = await engine.stats()
        return {"uptime_sec": uptime_sec, "connections": stats["connections"], "participants": stats["participants"]}

    @app.get("/stats")
    async def rest_stats():
        return await engine.stats()

    return app

app = create_app()
