"""Caller identity for API requests.

Authentication happens upstream; requests arrive with the authenticated user
id and role in headers.
"""

from dataclasses import dataclass

from fastapi import Depends, Header

from storefront.errors import Forbidden

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class Caller:
    user_id: str
    role: str = "customer"

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def current_caller(
    x_user_id: str = Header(...),
    x_user_role: str = Header(default="customer"),
) -> Caller:
    return Caller(user_id=x_user_id, role=x_user_role.lower())


def admin_caller(caller: Caller = Depends(current_caller)) -> Caller:
    if not caller.is_admin:
        raise Forbidden("Admin access required")
    return caller
