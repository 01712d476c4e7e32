"""
Hospeda Backend — User Routes
==============================

What:  /api/v1/users CRUD plus lookup by email (`/api/v1/users/email/{email}`).
Who:   Admin dashboard; users reading or editing their own profile.
"""

from hospeda.routes.crud import build_crud_router
from hospeda.services.user_service import UserService

router = build_crud_router(
    prefix="/api/v1/users",
    tag="Users",
    service_cls=UserService,
    lookups={"email": "email"},
)
