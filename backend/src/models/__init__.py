from .models import Comment, Connection, ContentItem, Group, Participant, Scope  # noqa: F401
