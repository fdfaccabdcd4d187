import time
from typing import Dict, List, Optional

from models import Comment, ContentItem, Scope
from utilities import now_ts
from .errors import NotFound, ValidationError
from .groups import GroupRegistry


class ContentStore:
    ''' Append-only record of published items and their comment threads.'''

    def __init__(self, groups: GroupRegistry):
        self.groups = groups
        self._items: Dict[int, ContentItem] = {}
        self._last_id = 0

    def _next_id(self) -> int:
        # millisecond clock, bumped so ids stay unique and increasing
        self._last_id = max(int(time.time() * 1000), self._last_id + 1)
        return self._last_id

    def publish(self, author_name: str, scope: Scope, caption: Optional[str] = "", asset_ref: Optional[str] = None) -> ContentItem:
        item = ContentItem(self._next_id(), author_name, scope, caption or "", asset_ref, now_ts())
        self._items[item.id] = item
        self.groups.index(item)
        return item

    def add_comment(self, content_id: int, author_name: str, text: str) -> Comment:
        if not text or not text.strip():
            raise ValidationError("comment text required")
        item = self.get(content_id)
        comment = Comment(author_name, text, now_ts())
        item.comments.append(comment)
        return comment

    def get(self, content_id: int) -> ContentItem:
        item = self._items.get(content_id)
        if item is None:
            raise NotFound(content_id)
        return item

    def feed_for(self, scope: Scope) -> List[ContentItem]:
        if scope.is_global:
            return [item for item in self._items.values() if item.scope.is_global]
        return self.groups.feed(scope.group_name)

    def __len__(self) -> int:
        return len(self._items)
