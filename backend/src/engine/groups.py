from typing import Dict, Iterable, List, Set

from models import ContentItem, Group
from utilities import GLOBAL_SCOPE
from .errors import Conflict, NotFound, ValidationError


class GroupRegistry:
    '''
    Flat namespace of named groups, each with a member set and a feed.

    GLOBAL_SCOPE is reserved: it means "every connection", not a group, so it
    can never be created here.
    '''

    def __init__(self, seed: Iterable[str] = ()):
        self._groups: Dict[str, Group] = {}
        for name in seed:
            self._groups[name] = Group(name)

    def create(self, name: str, creator_id: str) -> Group:
        name = (name or "").strip()
        if not name:
            raise ValidationError("group name required")
        if name == GLOBAL_SCOPE:
            raise ValidationError(f"group name {GLOBAL_SCOPE!r} is reserved")
        if name in self._groups:
            raise Conflict(name)
        group = Group(name)
        group.members[creator_id] = None
        self._groups[name] = group
        return group

    def join(self, name: str, connection_id: str) -> Group:
        group = self._get(name)
        group.members[connection_id] = None
        return group

    def leave_all(self, connection_id: str, group_names: Iterable[str]):
        for name in group_names:
            group = self._groups.get(name)
            if group is not None:
                group.members.pop(connection_id, None)

    def members(self, name: str) -> Set[str]:
        return set(self._get(name).members)

    def feed(self, name: str) -> List[ContentItem]:
        return list(self._get(name).feed)

    def index(self, item: ContentItem):
        ''' Attach a group-scoped item to its group's feed; unknown groups are ignored.'''
        if item.scope.is_global:
            return
        group = self._groups.get(item.scope.group_name)
        if group is not None:
            group.feed.append(item)

    def list_names(self) -> List[str]:
        return list(self._groups)

    def __contains__(self, name) -> bool:
        return name in self._groups

    def __len__(self) -> int:
        return len(self._groups)

    def _get(self, name: str) -> Group:
        group = self._groups.get(name)
        if group is None:
            raise NotFound(name)
        return group
