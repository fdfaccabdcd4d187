from .content import ContentStore  # noqa: F401
from .directory import MembershipDirectory  # noqa: F401
from .distribution import DistributionEngine  # noqa: F401
from .errors import Conflict, DuplicateConnection, NotFound, ValidationError  # noqa: F401
from .groups import GroupRegistry  # noqa: F401
