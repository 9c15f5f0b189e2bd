from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..core.enums import NotificationType


@dataclass(frozen=True)
class NotificationEvent:
    type: NotificationType
    user_id: int
    payload: dict[str, Any] = field(default_factory=dict)
