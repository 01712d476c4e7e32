"""
Hospeda Backend — Route Dependencies
=====================================

What:  FastAPI dependencies shared by every router: the acting user, a
       guard for mutating endpoints, and per-request service construction.
"""

from typing import Callable, Type, TypeVar

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hospeda.database import get_db_session
from hospeda.exceptions import ServiceError, ServiceErrorCode
from hospeda.permissions import GUEST_ACTOR, Actor
from hospeda.services.base import BaseCrudService

ServiceT = TypeVar("ServiceT", bound=BaseCrudService)


def get_actor(request: Request) -> Actor:
    """Actor resolved by ActorMiddleware; the guest when the middleware did not run."""
    return getattr(request.state, "actor", GUEST_ACTOR)


def require_authenticated_actor(actor: Actor = Depends(get_actor)) -> Actor:
    if actor.is_guest:
        raise ServiceError(ServiceErrorCode.UNAUTHORIZED, "Authentication required.")
    return actor


def service_provider(service_cls: Type[ServiceT]) -> Callable[..., ServiceT]:
    """Dependency building `service_cls` around the request's session."""

    def provide(db: AsyncSession = Depends(get_db_session)) -> ServiceT:
        return service_cls(db)

    provide.__name__ = f"provide_{service_cls.__name__}"
    return provide
