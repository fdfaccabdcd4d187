"""Engine error taxonomy.

Stores raise these; the distribution engine decides per call site whether a
failure is reported to the requesting connection or dropped with a log line.
"""


class ValidationError(ValueError):
    """Malformed or missing field, or an event not allowed in the current state."""


class NotFound(KeyError):
    """Referenced participant, group or content id does not exist."""


class Conflict(KeyError):
    """Name already taken."""


class DuplicateConnection(Conflict):
    """Connection is already registered as a participant."""
