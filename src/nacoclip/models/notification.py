from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True)
class Notification:
    """Transient user-facing message. Rendering is up to the UI."""
    title: str
    description: Optional[str] = None
    duration: int = 1500
    variant: str = "default"


Notifier = Callable[[Notification], None]
