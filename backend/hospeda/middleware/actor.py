"""
Hospeda Backend — Actor Middleware
===================================

What:  Resolves the acting identity for each request and stores it on
       `request.state.actor`.
How:   Authentication happens upstream (API gateway / auth provider), which
       forwards the verified identity as headers:

           X-Actor-Id           UUID of the user
           X-Actor-Role         one of RoleEnum (defaults to USER when an id is sent)
           X-Actor-Permissions  comma-separated PermissionEnum values

       No X-Actor-Id means the guest actor. Malformed identity headers are
       rejected with 401 UNAUTHORIZED rather than downgraded to guest.
       Unknown permission names are ignored and logged.
"""

import logging
import uuid
from typing import List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from hospeda.enums import PermissionEnum, RoleEnum
from hospeda.exceptions import ServiceError, ServiceErrorCode
from hospeda.permissions import GUEST_ACTOR, Actor
from hospeda.responses import error_response

logger = logging.getLogger(__name__)

ACTOR_ID_HEADER = "X-Actor-Id"
ACTOR_ROLE_HEADER = "X-Actor-Role"
ACTOR_PERMISSIONS_HEADER = "X-Actor-Permissions"


def parse_permissions(raw: str) -> List[PermissionEnum]:
    permissions = []
    for name in filter(None, (part.strip() for part in raw.split(","))):
        try:
            permissions.append(PermissionEnum(name))
        except ValueError:
            logger.warning("Ignoring unknown permission %r in %s", name, ACTOR_PERMISSIONS_HEADER)
    return permissions


def actor_from_headers(headers) -> Actor:
    """Builds the Actor for a request; raises ServiceError(UNAUTHORIZED) on bad headers."""
    raw_id = headers.get(ACTOR_ID_HEADER, "").strip()
    if not raw_id:
        return GUEST_ACTOR

    try:
        actor_id = uuid.UUID(raw_id)
    except ValueError:
        raise ServiceError(ServiceErrorCode.UNAUTHORIZED, f"Invalid {ACTOR_ID_HEADER} header.") from None

    raw_role = headers.get(ACTOR_ROLE_HEADER, "").strip().upper() or RoleEnum.USER.value
    try:
        role = RoleEnum(raw_role)
    except ValueError:
        raise ServiceError(ServiceErrorCode.UNAUTHORIZED, f"Invalid {ACTOR_ROLE_HEADER} header.") from None
    if role == RoleEnum.GUEST:
        raise ServiceError(ServiceErrorCode.UNAUTHORIZED, "An identified actor cannot have the GUEST role.")

    permissions = parse_permissions(headers.get(ACTOR_PERMISSIONS_HEADER, ""))
    return Actor.build(actor_id, role, permissions)


class ActorMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            request.state.actor = actor_from_headers(request.headers)
        except ServiceError as exc:
            logger.warning("Rejected actor headers on %s %s: %s", request.method, request.url.path, exc.message)
            return error_response(exc.code, exc.message, status_code=exc.code.http_status)
        return await call_next(request)
