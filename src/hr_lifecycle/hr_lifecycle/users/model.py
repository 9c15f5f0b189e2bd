from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Owned by the identity subsystem; read-only to this engine.
    """

    user_id: int
    full_name: str
    role: Role
    shift_start_hour: int
    shift_end_hour: int
    is_active: bool = True
