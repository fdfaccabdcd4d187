"""
Distribution engine: applies connection events to the membership directory,
group registry and content store, then fans the resulting events out.

All three stores are owned here and only mutated while holding ``self.lock``.
Each operation collects its deliveries as (target connections, event) pairs
while locked, with the targets copied into a list, and enqueues them after
the lock is released. Enqueueing never blocks (see ``Connection.offer``).
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from models import Connection, ContentItem, Group, Participant, Scope
from utilities import SEED_GROUPS
from utilities import (
    make_backlog,
    make_error,
    make_group_created,
    make_group_feed,
    make_group_joiner,
    make_group_names,
    make_new_comment,
    make_new_content,
    make_participant_joined,
    make_participant_left,
    make_roster,
)
from .content import ContentStore
from .directory import MembershipDirectory
from .errors import Conflict, NotFound, ValidationError
from .groups import GroupRegistry

logger = logging.getLogger(__name__)

Delivery = Tuple[List[Connection], dict]


class DistributionEngine:
    def __init__(self, seed_groups: Iterable[str] = SEED_GROUPS):
        # every transport-level connection, joined or not
        self.connections: Dict[str, Connection] = {}
        self.directory = MembershipDirectory()
        self.groups = GroupRegistry(seed_groups)
        self.content = ContentStore(self.groups)
        self.lock = asyncio.Lock()

    # -------------- connection lifecycle --------------
    async def attach(self, conn: Connection):
        async with self.lock:
            self.connections[conn.client_id] = conn

    async def disconnect(self, connection_id: str) -> Optional[Participant]:
        '''
        Remove a connection. Safe to call more than once: a connection that is
        already gone is a no-op.
        '''
        deliveries: List[Delivery] = []
        async with self.lock:
            conn = self.connections.pop(connection_id, None)
            try:
                participant = self.directory.unregister(connection_id)
            except NotFound:
                participant = None
            else:
                self.groups.leave_all(connection_id, participant.groups)
                remaining = self._everyone()
                deliveries.append((remaining, make_participant_left(connection_id, participant.display_name)))
                deliveries.append((remaining, make_roster(self.directory.snapshot())))
        self._fan_out(deliveries)
        if conn is not None:
            await conn.stop()
            logger.info("connection %s closed", connection_id)
        return participant

    # -------------- inbound events --------------
    async def join(self, connection_id: str, display_name: str, request_id: Optional[str] = None) -> Optional[Participant]:
        deliveries: List[Delivery] = []
        participant = None
        async with self.lock:
            try:
                participant = self.directory.register(connection_id, display_name)
            except Conflict:
                deliveries.append(self._reply(connection_id, make_error(request_id, "CONFLICT", "already joined")))
            except ValidationError as e:
                deliveries.append(self._reply(connection_id, make_error(request_id, "BAD_REQUEST", str(e))))
            else:
                everyone = self._everyone()
                backlog = [item.to_dict() for item in self.content.feed_for(Scope.everyone())]
                deliveries.append(self._reply(connection_id, make_backlog(backlog)))
                deliveries.append(self._reply(connection_id, make_group_names(self.groups.list_names())))
                deliveries.append((everyone, make_roster(self.directory.snapshot())))
                deliveries.append((
                    [c for c in everyone if c.client_id != connection_id],
                    make_participant_joined(connection_id, participant.display_name),
                ))
        self._fan_out(deliveries)
        if participant is not None:
            logger.info("%s joined as %r", connection_id, participant.display_name)
        return participant

    async def create_group(self, connection_id: str, name: str, request_id: Optional[str] = None) -> Optional[Group]:
        deliveries: List[Delivery] = []
        group = None
        async with self.lock:
            try:
                creator = self._participant(connection_id)
                group = self.groups.create(name, connection_id)
            except ValidationError as e:
                deliveries.append(self._reply(connection_id, make_error(request_id, "BAD_REQUEST", str(e))))
            except Conflict:
                # requester only, never broadcast
                deliveries.append(self._reply(connection_id, make_error(request_id, "CONFLICT", "Group already exists")))
            else:
                self.directory.subscribe(connection_id, group.name)
                everyone = self._everyone()
                deliveries.append((everyone, make_group_created(group.name, creator.display_name)))
                deliveries.append((everyone, make_group_names(self.groups.list_names())))
        self._fan_out(deliveries)
        return group

    async def join_group(self, connection_id: str, name: str, request_id: Optional[str] = None) -> Optional[Group]:
        deliveries: List[Delivery] = []
        group = None
        async with self.lock:
            try:
                joiner = self._participant(connection_id)
                existing = self.groups.members(name)
                group = self.groups.join(name, connection_id)
            except ValidationError as e:
                deliveries.append(self._reply(connection_id, make_error(request_id, "BAD_REQUEST", str(e))))
            except NotFound:
                # unknown group: no reply to the client
                logger.info("join_group: %s asked for unknown group %r", connection_id, name)
            else:
                self.directory.subscribe(connection_id, name)
                feed = [item.to_dict() for item in group.feed]
                deliveries.append(self._reply(connection_id, make_group_feed(name, feed)))
                deliveries.append((
                    self._lookup(cid for cid in existing if cid != connection_id),
                    make_group_joiner(name, joiner.display_name),
                ))
        self._fan_out(deliveries)
        return group

    async def publish_content(self, author_name: str, scope: Scope, caption: Optional[str] = "", asset_ref: Optional[str] = None) -> ContentItem:
        '''
        Store a finished content record and send it to its audience.

        Global items go to every connection, group items only to the group's
        current members. A group scope naming no known group is still stored
        but reaches nobody.
        '''
        async with self.lock:
            item, deliveries = self._publish_locked(author_name, scope, caption, asset_ref)
        self._fan_out(deliveries)
        return item

    async def publish_from(self, connection_id: str, scope: Scope, caption: Optional[str] = "", asset_ref: Optional[str] = None,
                           request_id: Optional[str] = None) -> Optional[ContentItem]:
        ''' Publish on behalf of a joined connection, authored by its display name.'''
        item = None
        async with self.lock:
            try:
                author = self._participant(connection_id)
            except ValidationError as e:
                deliveries = [self._reply(connection_id, make_error(request_id, "BAD_REQUEST", str(e)))]
            else:
                item, deliveries = self._publish_locked(author.display_name, scope, caption, asset_ref)
        self._fan_out(deliveries)
        return item

    async def add_comment(self, connection_id: str, content_id: int, text: str, request_id: Optional[str] = None):
        deliveries: List[Delivery] = []
        comment = None
        async with self.lock:
            try:
                author = self._participant(connection_id)
                comment = self.content.add_comment(content_id, author.display_name, text)
            except ValidationError as e:
                deliveries.append(self._reply(connection_id, make_error(request_id, "BAD_REQUEST", str(e))))
            except NotFound:
                logger.info("add_comment: content %s not found", content_id)
            else:
                # comments are visible to everyone, whatever the item's scope
                deliveries.append((self._everyone(), make_new_comment(content_id, comment.to_dict())))
        self._fan_out(deliveries)
        return comment

    # -------------- read side --------------
    async def stats(self) -> dict:
        async with self.lock:
            return {
                "connections": len(self.connections),
                "participants": len(self.directory),
                "groups": len(self.groups),
                "items": len(self.content),
                "dropped": sum(c.dropped for c in self.connections.values()),
            }

    async def group_summaries(self) -> List[dict]:
        async with self.lock:
            return [
                {"name": name, "members": len(self.groups.members(name)), "items": len(self.groups.feed(name))}
                for name in self.groups.list_names()
            ]

    async def roster(self) -> List[dict]:
        async with self.lock:
            return [{"id": cid, "display_name": name} for cid, name in self.directory.snapshot()]

    # -------------- helpers (call with lock held) --------------
    def _publish_locked(self, author_name: str, scope: Scope, caption, asset_ref) -> Tuple[ContentItem, List[Delivery]]:
        item = self.content.publish(author_name, scope, caption, asset_ref)
        if scope.is_global:
            targets = self._everyone()
        elif scope.group_name in self.groups:
            targets = self._lookup(self.groups.members(scope.group_name))
        else:
            logger.info("item %s published to unknown group %r", item.id, scope.group_name)
            targets = []
        return item, [(targets, make_new_content(item.to_dict()))]

    def _participant(self, connection_id: str) -> Participant:
        try:
            return self.directory.get(connection_id)
        except NotFound:
            raise ValidationError("join first") from None

    def _everyone(self) -> List[Connection]:
        return list(self.connections.values())

    def _lookup(self, ids: Iterable[str]) -> List[Connection]:
        return [self.connections[cid] for cid in ids if cid in self.connections]

    def _reply(self, connection_id: str, event: dict) -> Delivery:
        return self._lookup([connection_id]), event

    # -------------- fan-out (lock released) --------------
    @staticmethod
    def _fan_out(deliveries: List[Delivery]):
        for targets, event in deliveries:
            for conn in targets:
                conn.offer(event)
