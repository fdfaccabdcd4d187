from typing import Dict, List, Tuple

from models import Participant
from .errors import DuplicateConnection, NotFound, ValidationError


class MembershipDirectory:
    ''' Live connections that have joined, with their group subscriptions.'''

    def __init__(self):
        self._participants: Dict[str, Participant] = {}

    def register(self, connection_id: str, display_name: str) -> Participant:
        if connection_id in self._participants:
            raise DuplicateConnection(connection_id)
        if not display_name or not display_name.strip():
            raise ValidationError("display_name required")
        participant = Participant(connection_id, display_name.strip())
        self._participants[connection_id] = participant
        return participant

    def unregister(self, connection_id: str) -> Participant:
        participant = self._participants.pop(connection_id, None)
        if participant is None:
            raise NotFound(connection_id)
        return participant

    def get(self, connection_id: str) -> Participant:
        try:
            return self._participants[connection_id]
        except KeyError:
            raise NotFound(connection_id) from None

    def subscribe(self, connection_id: str, group_name: str):
        # idempotent: dict keys keep a single, ordered entry
        self.get(connection_id).groups[group_name] = None

    def snapshot(self) -> List[Tuple[str, str]]:
        return [(cid, p.display_name) for cid, p in self._participants.items()]

    def __contains__(self, connection_id) -> bool:
        return connection_id in self._participants

    def __len__(self) -> int:
        return len(self._participants)
