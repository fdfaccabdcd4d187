from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

def now_ts() -> str:
    return datetime.now(timezone.utc).isoformat()

# Server -> client messages are built as dicts
def make_pong(request_id: Optional[str]):
    return {"type": "pong", "request_id": request_id, "ts": now_ts()}

def make_error(request_id: Optional[str], code: str, message: str):
    return {"type": "error", "request_id": request_id, "error": {"code": code, "message": message}, "ts": now_ts()}

def make_backlog(items: List[dict]):
    return {"type": "backlog", "items": items, "ts": now_ts()}

def make_group_names(names: List[str]):
    return {"type": "group_names", "names": names, "ts": now_ts()}

def make_roster(participants: Iterable[Tuple[str, str]]):
    roster = [{"id": cid, "display_name": name} for cid, name in participants]
    return {"type": "roster", "participants": roster, "ts": now_ts()}

def make_participant_joined(connection_id: str, display_name: str):
    return {"type": "participant_joined", "id": connection_id, "display_name": display_name, "ts": now_ts()}

def make_participant_left(connection_id: str, display_name: str):
    return {"type": "participant_left", "id": connection_id, "display_name": display_name, "ts": now_ts()}

def make_group_created(name: str, creator: str):
    return {"type": "group_created", "name": name, "creator": creator, "ts": now_ts()}

def make_group_feed(name: str, items: List[dict]):
    return {"type": "group_feed", "name": name, "items": items, "ts": now_ts()}

def make_group_joiner(name: str, display_name: str):
    return {"type": "group_joiner", "name": name, "display_name": display_name, "ts": now_ts()}

def make_new_content(item: dict):
    return {"type": "new_content", "item": item, "ts": now_ts()}

def make_new_comment(content_id: int, comment: dict):
    return {"type": "new_comment", "content_id": content_id, "comment": comment, "ts": now_ts()}
