from __future__ import annotations

from functools import wraps
from typing import Iterable

from flask import g

from ..common.http import bearer_token
from ..core.enums import Role
from ..users.service import RoleService
from .service import AuthService


def login_required(auth: AuthService):
    """Verify the bearer token before the view touches the request body."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.auth_user = auth.authenticate(bearer_token())
            return view(*args, **kwargs)

        return wrapper

    return decorator


def roles_required(auth: AuthService, roles: RoleService, allowed: Iterable[Role]):
    allowed = frozenset(allowed)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = auth.authenticate(bearer_token())
            g.auth_user = user
            g.role = roles.require_role(user.user_id, allowed)
            return view(*args, **kwargs)

        return wrapper

    return decorator
