"""
Hospeda Backend — BaseCrudService Unit Tests
=============================================

What:  Orchestration rules of the generic service, exercised through
       DestinationService with a mocked repository (no database).

What we test:
    ✅ A missing actor short-circuits with UNAUTHORIZED
    ✅ Validation and permission failures never reach persistence
    ✅ Unexpected failures become INTERNAL_ERROR and roll the session back
    ✅ Not found, bad ids, empty updates, idempotent delete / restore
"""

from types import SimpleNamespace
from uuid import uuid4

import pytest

from hospeda.enums import PermissionEnum as P
from hospeda.enums import RoleEnum
from hospeda.exceptions import DatabaseError, ServiceErrorCode
from hospeda.permissions import Actor
from hospeda.services.catalog_service import DestinationService


@pytest.fixture
def service(mock_db_session, mock_repository):
    return DestinationService(mock_db_session, repository=mock_repository)


@pytest.fixture
def stored_destination(sample_entity_fields):
    return SimpleNamespace(
        **sample_entity_fields,
        name="Colón",
        slug="colon",
        summary="Thermal springs on the Uruguay river.",
        description="Colón is a riverside town in Entre Ríos known for its beaches and hot springs.",
        city="Colón",
        state="Entre Ríos",
        country="Argentina",
        is_featured=False,
    )


class TestActorRequired:
    @pytest.mark.asyncio
    async def test_create_without_actor(self, service, mock_repository, destination_payload):
        output = await service.create(None, destination_payload())
        assert output.error.code == ServiceErrorCode.UNAUTHORIZED
        mock_repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_without_actor(self, service, mock_repository):
        output = await service.list(None)
        assert output.error.code == ServiceErrorCode.UNAUTHORIZED
        mock_repository.find_all.assert_not_awaited()


class TestCreate:
    @pytest.mark.asyncio
    async def test_invalid_input_never_persists(self, service, mock_repository, admin_actor):
        output = await service.create(admin_actor, {"name": "x"})
        assert output.error.code == ServiceErrorCode.VALIDATION_ERROR
        mock_repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_name_is_named_in_message(self, service, mock_repository, admin_actor, destination_payload):
        output = await service.create(admin_actor, destination_payload(name=""))
        assert output.error.code == ServiceErrorCode.VALIDATION_ERROR
        assert output.error.message.startswith("name: ")
        assert "summary" not in output.error.message
        mock_repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_forbidden_never_persists(self, service, mock_repository, user_actor, destination_payload):
        output = await service.create(user_actor, destination_payload())
        assert output.error.code == ServiceErrorCode.FORBIDDEN
        assert "cannot create destination records" in output.error.message
        mock_repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_editorial_field_restricted(self, service, mock_repository, editor_actor, destination_payload):
        output = await service.create(editor_actor, destination_payload(is_featured=True))
        assert output.error.code == ServiceErrorCode.FORBIDDEN
        assert "is_featured" in output.error.message
        mock_repository.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_slug_rejected(
        self, service, mock_repository, editor_actor, destination_payload, stored_destination
    ):
        mock_repository.find_one.return_value = stored_destination
        output = await service.create(editor_actor, destination_payload(slug="colon"))
        assert output.error.code == ServiceErrorCode.VALIDATION_ERROR
        assert output.error.message == "slug: 'colon' is already in use"

    @pytest.mark.asyncio
    async def test_repository_failure_is_internal_error(
        self, service, mock_db_session, mock_repository, editor_actor, destination_payload
    ):
        mock_repository.create.side_effect = DatabaseError()
        output = await service.create(editor_actor, destination_payload())
        assert output.error.code == ServiceErrorCode.INTERNAL_ERROR
        assert output.error.message == "An unexpected error occurred while trying to create the destination."
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_audit_fields_set_from_actor(
        self, service, mock_repository, editor_actor, destination_payload, stored_destination
    ):
        mock_repository.create.return_value = stored_destination
        output = await service.create(editor_actor, destination_payload(id=str(uuid4())))
        assert output.is_ok
        values = mock_repository.create.await_args.args[0]
        assert "id" not in values
        assert values["slug"] == "colon"
        assert values["created_by_id"] == editor_actor.id
        assert values["updated_by_id"] == editor_actor.id


class TestReadAndUpdate:
    @pytest.mark.asyncio
    async def test_bad_id_is_validation_error(self, service, mock_repository, admin_actor):
        output = await service.get_by_id(admin_actor, "not-a-uuid")
        assert output.error.code == ServiceErrorCode.VALIDATION_ERROR
        mock_repository.find_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_entity_is_not_found(self, service, admin_actor):
        missing = uuid4()
        output = await service.get_by_id(admin_actor, str(missing))
        assert output.error.code == ServiceErrorCode.NOT_FOUND
        assert output.error.message == f"Destination with ID '{missing}' was not found"

    @pytest.mark.asyncio
    async def test_unknown_visibility_is_internal_error(
        self, service, mock_repository, guest_actor, stored_destination
    ):
        stored_destination.visibility = "SECRET"
        mock_repository.find_by_id.return_value = stored_destination
        output = await service.get_by_id(guest_actor, str(stored_destination.id))
        assert output.error.code == ServiceErrorCode.INTERNAL_ERROR

    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, service, mock_repository, admin_actor, stored_destination):
        mock_repository.find_by_id.return_value = stored_destination
        output = await service.update(admin_actor, str(stored_destination.id), {"id": str(uuid4())})
        assert output.error.code == ServiceErrorCode.VALIDATION_ERROR
        assert output.error.message == "No valid fields provided for update."
        mock_repository.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_forbidden_without_permission(
        self, service, mock_repository, user_actor, stored_destination
    ):
        mock_repository.find_by_id.return_value = stored_destination
        output = await service.update(user_actor, str(stored_destination.id), {"city": "Concordia"})
        assert output.error.code == ServiceErrorCode.FORBIDDEN
        mock_repository.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_sets_updated_by(self, service, mock_repository, editor_actor, stored_destination):
        mock_repository.find_by_id.return_value = stored_destination
        mock_repository.update.return_value = stored_destination
        output = await service.update(editor_actor, str(stored_destination.id), {"city": "Concordia"})
        assert output.is_ok
        entity, values = mock_repository.update.await_args.args
        assert entity is stored_destination
        assert values == {"city": "Concordia", "updated_by_id": editor_actor.id}

    @pytest.mark.asyncio
    async def test_unsupported_lookup_field(self, service, admin_actor):
        output = await service.get_by_field(admin_actor, "city", "Colón")
        assert output.error.code == ServiceErrorCode.VALIDATION_ERROR

    @pytest.mark.asyncio
    async def test_lookup_miss(self, service, admin_actor):
        output = await service.get_by_slug(admin_actor, "nowhere")
        assert output.error.code == ServiceErrorCode.NOT_FOUND
        assert output.error.message == "Destination with slug 'nowhere' was not found"


class TestDeleteAndRestore:
    @pytest.mark.asyncio
    async def test_soft_delete_twice_is_noop(self, service, mock_repository, admin_actor, stored_destination):
        stored_destination.deleted_at = stored_destination.created_at
        mock_repository.find_by_id.return_value = stored_destination
        output = await service.soft_delete(admin_actor, str(stored_destination.id))
        assert output.data == {"count": 0}
        mock_repository.soft_delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_restore_live_entity_is_noop(self, service, mock_repository, admin_actor, stored_destination):
        mock_repository.find_by_id.return_value = stored_destination
        output = await service.restore(admin_actor, str(stored_destination.id))
        assert output.data == {"count": 0}
        mock_repository.restore.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_hard_delete_needs_permission(self, service, mock_repository, editor_actor, stored_destination):
        mock_repository.find_by_id.return_value = stored_destination
        output = await service.hard_delete(editor_actor, str(stored_destination.id))
        assert output.error.code == ServiceErrorCode.FORBIDDEN
        mock_repository.hard_delete.assert_not_awaited()

        purger = Actor.build(uuid4(), RoleEnum.EDITOR, [P.DESTINATION_HARD_DELETE])
        output = await service.hard_delete(purger, str(stored_destination.id))
        assert output.data == {"count": 1}


class TestListing:
    @pytest.mark.asyncio
    async def test_unknown_sort_field(self, service, mock_repository, admin_actor):
        output = await service.list(admin_actor, {"sortBy": "password"})
        assert output.error.code == ServiceErrorCode.VALIDATION_ERROR
        mock_repository.find_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_pagination_passed_to_repository(self, service, mock_repository, guest_actor):
        output = await service.list(guest_actor, {"city": "Colón"}, {"page": 3, "pageSize": 5})
        assert output.is_ok
        assert output.data.page == 3
        kwargs = mock_repository.find_all.await_args.kwargs
        assert kwargs["filters"] == {"city": "Colón"}
        assert kwargs["page"] == 3
        assert kwargs["page_size"] == 5
        assert kwargs["scope"] is not None

    @pytest.mark.asyncio
    async def test_count_returns_integer(self, service, mock_repository, admin_actor):
        mock_repository.count.return_value = 7
        output = await service.count(admin_actor, {})
        assert output.data == 7
        assert mock_repository.count.await_args.kwargs["scope"] is None

    @pytest.mark.asyncio
    async def test_visibility_update_rejects_unknown_value(
        self, service, mock_repository, admin_actor, stored_destination
    ):
        mock_repository.find_by_id.return_value = stored_destination
        output = await service.update_visibility(admin_actor, str(stored_destination.id), "HIDDEN")
        assert output.error.code == ServiceErrorCode.VALIDATION_ERROR
        mock_repository.update.assert_not_awaited()
