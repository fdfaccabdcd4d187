from .schemas import (  # noqa: F401
    INBOUND_EVENTS,
    AddCommentEvent,
    CreateGroupEvent,
    Inbound,
    JoinEvent,
    JoinGroupEvent,
    PublishContentEvent,
)
