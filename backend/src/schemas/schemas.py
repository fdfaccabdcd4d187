from typing import Dict, Optional, Type
from pydantic import BaseModel

# Client -> server events, keyed by their "type" field.
# request_id is optional on every event and echoed back in error replies.

class Inbound(BaseModel):
    request_id: Optional[str] = None

class JoinEvent(Inbound):
    display_name: str

class CreateGroupEvent(Inbound):
    name: str

class JoinGroupEvent(Inbound):
    name: str

class PublishContentEvent(Inbound):
    scope: Optional[str] = "all"
    caption: Optional[str] = ""
    asset_ref: str

class AddCommentEvent(Inbound):
    content_id: int
    text: str

INBOUND_EVENTS: Dict[str, Type[Inbound]] = {
    "join": JoinEvent,
    "create_group": CreateGroupEvent,
    "join_group": JoinGroupEvent,
    "publish_content": PublishContentEvent,
    "add_comment": AddCommentEvent,
}
