"""Caller identity from the authentication gateway.

Credentials are checked upstream; the gateway forwards the verified identity
in request headers and this module only turns them into a ``Caller``.
"""

from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication
from rest_framework.permissions import BasePermission
from rest_framework.request import Request

from ticketing.domain import Caller, Role, UserId

USER_ID_HEADER = "HTTP_X_USER_ID"
ROLE_HEADER = "HTTP_X_USER_ROLE"
DEPARTMENT_HEADER = "HTTP_X_USER_DEPARTMENT"


class GatewayUser:
    """Authenticated principal as seen by DRF."""

    is_authenticated = True

    def __init__(self, caller: Caller) -> None:
        self.caller = caller

    def __str__(self) -> str:
        return str(self.caller.user_id)


class GatewayHeaderAuthentication(BaseAuthentication):
    def authenticate(self, request: Request):
        raw_id = request.META.get(USER_ID_HEADER)
        if not raw_id:
            return None
        try:
            user_id = UserId.from_string(raw_id)
            role = Role(request.META.get(ROLE_HEADER, "").lower())
        except ValueError:
            raise exceptions.AuthenticationFailed("Invalid identity headers") from None
        department = request.META.get(DEPARTMENT_HEADER, "").strip()
        return GatewayUser(Caller(user_id=user_id, role=role, department=department)), None

    def authenticate_header(self, request: Request) -> str:
        return "Gateway"


class IsOrganizer(BasePermission):
    message = "Organizer role required"

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.caller.is_organizer)


class IsStudent(BasePermission):
    message = "Student role required"

    def has_permission(self, request, view) -> bool:
        user = request.user
        return bool(user and user.is_authenticated and user.caller.is_student)
