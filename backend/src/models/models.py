import asyncio
from fastapi import WebSocket
from typing import Dict, List, Optional
from utilities import make_error
from utilities import CONNECTION_QUEUE_SIZE, GLOBAL_SCOPE

# ------------ Transport ------------
class Connection:
    ''' Represents one live client connection (joined or not).'''

    def __init__(self, client_id: str, websocket: Optional[WebSocket] = None):

        # initialize fields
        self.client_id = client_id
        self.websocket = websocket

        # per connection outbound buffer
        # the engine never waits for a slow client
        # if the client is slow messages accumulate up to CONNECTION_QUEUE_SIZE
        # if queue is full, oldest message is dropped and SLOW_CONSUMER error is enqueued
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=CONNECTION_QUEUE_SIZE)

        # background async task that pops from queue and sends via WebSocket
        self.sender_task: Optional[asyncio.Task] = None
        self.connected = True
        self.dropped = 0

    def offer(self, event: dict):
        ''' Enqueue without blocking; fire-and-forget from the engine's side.'''
        if not self.connected:
            return
        if self.queue.full():
            # drop the two oldest: one slot for the SLOW_CONSUMER notice, one for the event
            for _ in range(2):
                try:
                    _ = self.queue.get_nowait()
                except asyncio.QueueEmpty:
                    break
                self.dropped += 1
            self.queue.put_nowait(make_error(None, "SLOW_CONSUMER", "Connection queue overflow; oldest message dropped"))
        self.queue.put_nowait(event)

    def drain(self) -> List[dict]:
        ''' Pop everything currently queued without waiting.'''
        out = []
        while True:
            try:
                out.append(self.queue.get_nowait())
            except asyncio.QueueEmpty:
                return out

    # graceful cleanup
    async def stop(self):
        self.connected = False
        if self.sender_task:
            self.sender_task.cancel()
            try:
                await self.sender_task
            except asyncio.CancelledError:
                pass

# ------------ Domain ------------
class Scope:
    ''' Audience selector: the global audience or exactly one group.'''

    __slots__ = ("group_name",)

    def __init__(self, group_name: Optional[str] = None):
        self.group_name = group_name

    @classmethod
    def everyone(cls) -> "Scope":
        return cls(None)

    @classmethod
    def group(cls, name: str) -> "Scope":
        if not name or name == GLOBAL_SCOPE:
            raise ValueError(f"invalid group scope: {name!r}")
        return cls(name)

    @classmethod
    def parse(cls, raw: Optional[str]) -> "Scope":
        # missing/empty -> global, as uploads without a group default to "all"
        if not raw or raw == GLOBAL_SCOPE:
            return cls.everyone()
        return cls.group(raw)

    @property
    def is_global(self) -> bool:
        return self.group_name is None

    @property
    def wire(self) -> str:
        return GLOBAL_SCOPE if self.group_name is None else self.group_name

    def __eq__(self, other):
        return isinstance(other, Scope) and other.group_name == self.group_name

    def __hash__(self):
        return hash(self.group_name)

    def __repr__(self):
        return f"Scope({self.wire!r})"


class Participant:
    def __init__(self, connection_id: str, display_name: str):
        self.connection_id = connection_id
        self.display_name = display_name
        # ordered set of group names
        self.groups: Dict[str, None] = {}


class Comment:
    def __init__(self, author: str, text: str, timestamp: str):
        self.author = author
        self.text = text
        self.timestamp = timestamp

    def to_dict(self) -> dict:
        return {"author": self.author, "text": self.text, "timestamp": self.timestamp}


class ContentItem:
    def __init__(self, item_id: int, author: str, scope: Scope, caption: str, asset_ref: Optional[str], timestamp: str):
        self.id = item_id
        self.author = author
        self._scope = scope
        self.caption = caption
        self.asset_ref = asset_ref
        self.timestamp = timestamp
        self.comments: List[Comment] = []

    @property
    def scope(self) -> Scope:
        return self._scope

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "author": self.author,
            "scope": self.scope.wire,
            "caption": self.caption,
            "asset_ref": self.asset_ref,
            "timestamp": self.timestamp,
            "comments": [c.to_dict() for c in self.comments],
        }


class Group:
    def __init__(self, name: str):
        self.name = name
        self.members: Dict[str, None] = {}
        self.feed: List[ContentItem] = []
