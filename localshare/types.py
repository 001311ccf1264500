"""Client-side data types."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A transient message; expires_at is on the event loop clock."""

    kind: NotificationKind
    message: str
    expires_at: float


@dataclass(frozen=True)
class PendingUpload:
    """A local file selected for upload but not yet sent."""

    path: Path
    name: str
    size: int
