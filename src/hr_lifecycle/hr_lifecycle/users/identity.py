from __future__ import annotations

from dataclasses import dataclass
from functools import wraps

from flask import g, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, UnauthorizedError
from .repository import UserRepository


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated caller as seen by the engine."""

    user_id: int
    role: Role
    shift_start_hour: int
    shift_end_hour: int

    @property
    def is_hr_admin(self) -> bool:
        return self.role == Role.HR_ADMIN


class SessionIdentity:
    """Resolves the caller from the Flask session.

    Session issuance (login) belongs to the surrounding app; this only reads
    the `user_id` it stored.
    """

    def __init__(self, users: UserRepository):
        self._users = users

    def current_user(self) -> CurrentUser:
        raw_id = session.get("user_id")
        if raw_id is None:
            raise UnauthorizedError("Not authenticated")

        user = self._users.get_by_id(int(raw_id))
        if not user or not user.is_active:
            raise UnauthorizedError("Not authenticated")

        return CurrentUser(
            user_id=user.user_id,
            role=user.role,
            shift_start_hour=user.shift_start_hour,
            shift_end_hour=user.shift_end_hour,
        )


def login_required(identity: SessionIdentity):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.current_user = identity.current_user()
            return view(*args, **kwargs)

        return wrapper

    return decorator


def hr_admin_required(identity: SessionIdentity):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = identity.current_user()
            if not user.is_hr_admin:
                raise AuthorizationError("HR admin role required")
            g.current_user = user
            return view(*args, **kwargs)

        return wrapper

    return decorator
