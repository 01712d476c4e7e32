"""
Hospeda Backend — Service Integration Tests
============================================

What:  Entity services running against a real (in-memory SQLite) database.
Why:   Soft delete, pagination totals, visibility filtering and tagging
       depend on the SQL the repositories actually emit.

What we test:
    ✅ Create → get round trip, generated and de-duplicated slugs
    ✅ Soft delete hides a row until it is restored
    ✅ Page totals count only rows the actor may see
    ✅ Ownership rules for accommodations
    ✅ Tag associations and popular tags
    ✅ Invoice totals and client references
    ✅ Users cannot promote themselves
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from hospeda.enums import PermissionEnum as P
from hospeda.enums import RoleEnum
from hospeda.exceptions import ServiceErrorCode
from hospeda.permissions import Actor
from hospeda.services.billing_service import ClientService, InvoiceService, SubscriptionService
from hospeda.services.catalog_service import AccommodationService, DestinationService, EventService
from hospeda.services.tag_service import TagService
from hospeda.services.user_service import UserService


def accommodation_payload(destination_id, **overrides):
    payload = {
        "name": "Cabañas del Palmar",
        "summary": "Wooden cabins next to the national park.",
        "description": "Four cabins with grill, pool and direct access to the Palmar trails.",
        "type": "CABIN",
        "destination_id": str(destination_id),
        "price": "45000.00",
        "max_guests": 4,
    }
    payload.update(overrides)
    return payload


async def create_published_destination(session, actor, destination_payload, **overrides):
    overrides.setdefault("moderation_state", "APPROVED")
    output = await DestinationService(session).create(actor, destination_payload(**overrides))
    assert output.is_ok, output.error
    return output.data


class TestDestinationLifecycle:
    @pytest.mark.asyncio
    async def test_create_and_get(self, db_session, editor_actor, destination_payload):
        service = DestinationService(db_session)
        created = await service.create(editor_actor, destination_payload())
        assert created.is_ok, created.error
        assert created.data.slug == "colon"
        assert created.data.moderation_state == "PENDING"
        assert created.data.created_by_id == editor_actor.id

        fetched = await service.get_by_id(editor_actor, str(created.data.id))
        assert fetched.data.name == "Colón"

    @pytest.mark.asyncio
    async def test_submitted_fields_round_trip(self, db_session, admin_actor, destination_payload):
        submitted = destination_payload(
            slug="colon-termal",
            visibility="PUBLIC",
            lifecycle_state="DRAFT",
            moderation_state="APPROVED",
            is_featured=True,
        )
        client_id, client_author = uuid4(), uuid4()
        service = DestinationService(db_session)
        created = await service.create(
            admin_actor,
            {
                **submitted,
                "id": str(client_id),
                "created_at": "2001-01-01T00:00:00Z",
                "created_by_id": str(client_author),
            },
        )
        assert created.is_ok, created.error

        db_session.expire_all()
        fetched = await service.get_by_id(admin_actor, str(created.data.id))
        stored = fetched.data.model_dump()
        for field, value in submitted.items():
            assert stored[field] == value, field
        assert fetched.data.id != client_id
        assert fetched.data.created_at.year != 2001
        assert fetched.data.created_by_id == admin_actor.id

    @pytest.mark.asyncio
    async def test_generated_slugs_are_unique(self, db_session, editor_actor, destination_payload):
        service = DestinationService(db_session)
        first = await service.create(editor_actor, destination_payload())
        second = await service.create(editor_actor, destination_payload())
        assert first.data.slug == "colon"
        assert second.data.slug == "colon-2"

    @pytest.mark.asyncio
    async def test_soft_delete_then_restore(self, db_session, editor_actor, destination_payload):
        service = DestinationService(db_session)
        created = await service.create(editor_actor, destination_payload())
        entity_id = str(created.data.id)
        db_session.expire_all()
        original = (await service.get_by_id(editor_actor, entity_id)).data.model_dump()

        deleted = await service.soft_delete(editor_actor, entity_id)
        assert deleted.data == {"count": 1}
        assert (await service.get_by_id(editor_actor, entity_id)).error.code == ServiceErrorCode.NOT_FOUND
        assert (await service.soft_delete(editor_actor, entity_id)).data == {"count": 0}

        restored = await service.restore(editor_actor, entity_id)
        assert restored.data == {"count": 1}
        db_session.expire_all()
        fetched = await service.get_by_id(editor_actor, entity_id)
        assert fetched.is_ok
        restored_record = fetched.data.model_dump()
        assert restored_record.pop("deleted_at") is None
        assert restored_record.pop("deleted_by_id") is None
        original.pop("deleted_at")
        original.pop("deleted_by_id")
        assert restored_record == original

    @pytest.mark.asyncio
    async def test_hard_delete_removes_row(self, db_session, admin_actor, destination_payload):
        service = DestinationService(db_session)
        created = await service.create(admin_actor, destination_payload())
        entity_id = str(created.data.id)
        assert (await service.hard_delete(admin_actor, entity_id)).data == {"count": 1}
        assert (await service.restore(admin_actor, entity_id)).error.code == ServiceErrorCode.NOT_FOUND


class TestListing:
    @pytest.mark.asyncio
    async def test_pagination_totals(self, db_session, super_admin_actor, destination_payload):
        for index in range(25):
            await create_published_destination(
                db_session, super_admin_actor, destination_payload, name=f"Pueblo {index:02d}"
            )
        service = DestinationService(db_session)
        output = await service.list(super_admin_actor, {}, {"page": 1, "pageSize": 10})
        assert len(output.data.items) == 10
        assert output.data.total == 25
        assert output.data.total_pages == 3

        last = await service.list(super_admin_actor, {}, {"page": 3, "pageSize": 10})
        assert len(last.data.items) == 5

    @pytest.mark.asyncio
    async def test_guest_sees_only_public_published(self, db_session, admin_actor, guest_actor, destination_payload):
        public = await create_published_destination(db_session, admin_actor, destination_payload, name="Gualeguaychú")
        private = await create_published_destination(
            db_session, admin_actor, destination_payload, name="Villa Elisa", visibility="PRIVATE"
        )
        await create_published_destination(
            db_session, admin_actor, destination_payload, name="Federación", moderation_state="PENDING"
        )

        service = DestinationService(db_session)
        listing = await service.list(guest_actor)
        assert [item.id for item in listing.data.items] == [public.id]
        assert listing.data.total == 1
        assert (await service.count(guest_actor)).data == 1
        assert (await service.count(admin_actor)).data == 3

        denied = await service.get_by_id(guest_actor, str(private.id))
        assert denied.error.code == ServiceErrorCode.FORBIDDEN

    @pytest.mark.asyncio
    async def test_free_text_and_filters(self, db_session, admin_actor, destination_payload):
        await create_published_destination(db_session, admin_actor, destination_payload, name="Concordia", city="Concordia")
        await create_published_destination(db_session, admin_actor, destination_payload, name="Paraná", city="Paraná")
        service = DestinationService(db_session)

        by_q = await service.list(admin_actor, {"q": "concor"})
        assert [item.name for item in by_q.data.items] == ["Concordia"]

        by_city = await service.list(admin_actor, {"city": "Paraná"})
        assert by_city.data.total == 1

    @pytest.mark.asyncio
    async def test_visibility_update(self, db_session, admin_actor, guest_actor, destination_payload):
        created = await create_published_destination(db_session, admin_actor, destination_payload)
        service = DestinationService(db_session)
        output = await service.update_visibility(admin_actor, str(created.id), "PRIVATE")
        assert output.data.visibility == "PRIVATE"
        assert (await service.count(guest_actor)).data == 0


class TestAccommodationOwnership:
    @pytest.mark.asyncio
    async def test_owner_defaults_to_creator(self, db_session, admin_actor, host_actor, destination_payload):
        destination = await create_published_destination(db_session, admin_actor, destination_payload)
        output = await AccommodationService(db_session).create(host_actor, accommodation_payload(destination.id))
        assert output.is_ok, output.error
        assert output.data.owner_id == host_actor.id
        assert output.data.price == Decimal("45000.00")

    @pytest.mark.asyncio
    async def test_unknown_destination(self, db_session, host_actor):
        output = await AccommodationService(db_session).create(host_actor, accommodation_payload(uuid4()))
        assert output.error.code == ServiceErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_assigning_another_owner_is_forbidden(
        self, db_session, admin_actor, host_actor, destination_payload
    ):
        destination = await create_published_destination(db_session, admin_actor, destination_payload)
        payload = accommodation_payload(destination.id, owner_id=str(uuid4()))
        output = await AccommodationService(db_session).create(host_actor, payload)
        assert output.error.code == ServiceErrorCode.FORBIDDEN

    @pytest.mark.asyncio
    async def test_other_host_cannot_update(self, db_session, admin_actor, host_actor, destination_payload):
        destination = await create_published_destination(db_session, admin_actor, destination_payload)
        service = AccommodationService(db_session)
        created = await service.create(host_actor, accommodation_payload(destination.id))

        rival = Actor.build(uuid4(), RoleEnum.HOST, host_actor.permissions)
        denied = await service.update(rival, str(created.data.id), {"max_guests": 6})
        assert denied.error.code == ServiceErrorCode.FORBIDDEN

        allowed = await service.update(host_actor, str(created.data.id), {"max_guests": 6})
        assert allowed.data.max_guests == 6

    @pytest.mark.asyncio
    async def test_search_by_price_and_guest_ranges(self, db_session, admin_actor, destination_payload):
        destination = await create_published_destination(db_session, admin_actor, destination_payload)
        service = AccommodationService(db_session)
        for name, price, guests in (("Cabaña Sauce", "30000.00", 2), ("Cabaña Ceibo", "45000.00", 4), ("Cabaña Tala", "60000.00", 6)):
            output = await service.create(
                admin_actor, accommodation_payload(destination.id, name=name, price=price, max_guests=guests)
            )
            assert output.is_ok, output.error

        output = await service.list(admin_actor, {"minPrice": "40000", "minGuests": "3", "maxGuests": "6"})
        assert output.data.total == 2
        assert sorted(item.name for item in output.data.items) == ["Cabaña Ceibo", "Cabaña Tala"]

        output = await service.list(admin_actor, {"maxPrice": "45000.00"})
        assert output.data.total == 2

        counted = await service.count(admin_actor, {"minPrice": "45000", "maxPrice": "45000"})
        assert counted.data == 1

        rejected = await service.list(admin_actor, {"minGuests": "5", "maxGuests": "2"})
        assert rejected.error.code == ServiceErrorCode.VALIDATION_ERROR

    @pytest.mark.asyncio
    async def test_update_cannot_change_visibility_without_permission(
        self, db_session, admin_actor, host_actor, destination_payload
    ):
        destination = await create_published_destination(db_session, admin_actor, destination_payload)
        service = AccommodationService(db_session)
        created = await service.create(host_actor, accommodation_payload(destination.id))
        entity_id = str(created.data.id)

        via_endpoint = await service.update_visibility(host_actor, entity_id, "PRIVATE")
        assert via_endpoint.error.code == ServiceErrorCode.FORBIDDEN

        via_update = await service.update(host_actor, entity_id, {"visibility": "PRIVATE", "max_guests": 6})
        assert via_update.error.code == ServiceErrorCode.FORBIDDEN
        stored = await service.get_by_id(admin_actor, entity_id)
        assert stored.data.visibility == "PUBLIC"
        assert stored.data.max_guests == 4

        granted = Actor.build(
            host_actor.id, RoleEnum.HOST, [*host_actor.permissions, P.ACCOMMODATION_VISIBILITY_CHANGE]
        )
        allowed = await service.update(granted, entity_id, {"visibility": "PRIVATE"})
        assert allowed.data.visibility == "PRIVATE"


class TestEvents:
    @pytest.mark.asyncio
    async def test_partial_update_checks_stored_range(self, db_session, admin_actor):
        service = EventService(db_session)
        created = await service.create(
            admin_actor,
            {
                "name": "Fiesta Nacional de la Citricultura",
                "summary": "Parade and concerts in Chajarí.",
                "category": "FESTIVAL",
                "start_date": "2026-11-20",
                "end_date": "2026-11-22",
            },
        )
        assert created.data.author_id == admin_actor.id

        output = await service.update(admin_actor, str(created.data.id), {"end_date": "2026-11-01"})
        assert output.error.code == ServiceErrorCode.VALIDATION_ERROR
        assert output.error.message == "end_date: must be on or after start_date"


class TestTags:
    @pytest.mark.asyncio
    async def test_attach_list_and_detach(self, db_session, editor_actor, guest_actor, destination_payload):
        destination = await DestinationService(db_session).create(editor_actor, destination_payload())
        tags = TagService(db_session)
        tag = await tags.create(editor_actor, {"name": "Termas", "color": "ORANGE"})
        assert tag.data.slug == "termas"

        args = (str(tag.data.id), "DESTINATION", str(destination.data.id))
        assert (await tags.add_tag_to_entity(editor_actor, *args)).data == {"count": 1}
        assert (await tags.add_tag_to_entity(editor_actor, *args)).data == {"count": 0}

        attached = await tags.get_tags_for_entity(guest_actor, "DESTINATION", str(destination.data.id))
        assert [t.slug for t in attached.data] == ["termas"]

        ids = await tags.get_entity_ids_for_tag(guest_actor, str(tag.data.id), "DESTINATION")
        assert ids.data == [destination.data.id]

        popular = await tags.get_popular_tags(guest_actor, 5)
        assert popular.data[0].usage_count == 1

        assert (await tags.remove_tag_from_entity(editor_actor, *args)).data == {"count": 1}
        assert (await tags.get_tags_for_entity(guest_actor, "DESTINATION", str(destination.data.id))).data == []

    @pytest.mark.asyncio
    async def test_attach_requires_tag_update(self, db_session, editor_actor, user_actor, destination_payload):
        destination = await DestinationService(db_session).create(editor_actor, destination_payload())
        tag = await TagService(db_session).create(editor_actor, {"name": "Playas"})
        output = await TagService(db_session).add_tag_to_entity(
            user_actor, str(tag.data.id), "DESTINATION", str(destination.data.id)
        )
        assert output.error.code == ServiceErrorCode.FORBIDDEN

    @pytest.mark.asyncio
    async def test_attach_to_missing_entity(self, db_session, editor_actor):
        tag = await TagService(db_session).create(editor_actor, {"name": "Pesca"})
        output = await TagService(db_session).add_tag_to_entity(
            editor_actor, str(tag.data.id), "EVENT", str(uuid4())
        )
        assert output.error.code == ServiceErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_unknown_entity_type(self, db_session, editor_actor):
        tag = await TagService(db_session).create(editor_actor, {"name": "Carnaval"})
        output = await TagService(db_session).add_tag_to_entity(
            editor_actor, str(tag.data.id), "INVOICE", str(uuid4())
        )
        assert output.error.code == ServiceErrorCode.VALIDATION_ERROR


class TestBilling:
    async def _client(self, session, actor):
        output = await ClientService(session).create(
            actor, {"name": "Hotel Quirinale", "billing_email": "billing@quirinale.com.ar"}
        )
        assert output.is_ok, output.error
        return output.data

    @pytest.mark.asyncio
    async def test_invoice_totals(self, db_session, admin_actor):
        client = await self._client(db_session, admin_actor)
        service = InvoiceService(db_session)
        created = await service.create(
            admin_actor,
            {
                "client_id": str(client.id),
                "invoice_number": "A-0001",
                "subtotal": "100.00",
                "tax": "21.00",
                "issued_at": "2026-03-01",
                "due_date": "2026-03-31",
            },
        )
        assert created.data.total == Decimal("121.00")

        updated = await service.update(admin_actor, str(created.data.id), {"subtotal": "200.00"})
        assert updated.data.total == Decimal("221.00")

        mismatch = await service.update(admin_actor, str(created.data.id), {"total": "1.00"})
        assert mismatch.error.code == ServiceErrorCode.VALIDATION_ERROR

        by_number = await service.get_by_number(admin_actor, "A-0001")
        assert by_number.data.id == created.data.id

    @pytest.mark.asyncio
    async def test_duplicate_invoice_number(self, db_session, admin_actor):
        client = await self._client(db_session, admin_actor)
        service = InvoiceService(db_session)
        payload = {
            "client_id": str(client.id),
            "invoice_number": "B-0001",
            "subtotal": "10.00",
            "issued_at": "2026-03-01",
            "due_date": "2026-03-31",
        }
        assert (await service.create(admin_actor, payload)).is_ok
        duplicate = await service.create(admin_actor, payload)
        assert duplicate.error.message == "invoice_number: 'B-0001' is already in use"

    @pytest.mark.asyncio
    async def test_subscription_needs_live_client(self, db_session, admin_actor):
        output = await SubscriptionService(db_session).create(
            admin_actor,
            {"client_id": str(uuid4()), "plan_name": "Premium", "start_date": date(2026, 1, 1).isoformat()},
        )
        assert output.error.code == ServiceErrorCode.NOT_FOUND
        assert output.error.message.startswith("Client with ID")

    @pytest.mark.asyncio
    async def test_billing_hidden_from_plain_users(self, db_session, admin_actor, user_actor):
        await self._client(db_session, admin_actor)
        listing = await InvoiceService(db_session).list(user_actor)
        assert listing.error.code == ServiceErrorCode.FORBIDDEN
        clients = await ClientService(db_session).list(user_actor)
        assert clients.data.total == 0


class TestUsers:
    @pytest.mark.asyncio
    async def test_duplicate_email(self, db_session, admin_actor):
        service = UserService(db_session)
        payload = {"email": "ana@example.com", "display_name": "Ana"}
        assert (await service.create(admin_actor, payload)).is_ok
        duplicate = await service.create(admin_actor, {**payload, "email": "ANA@example.com"})
        assert duplicate.error.message == "email: 'ana@example.com' is already registered"

    @pytest.mark.asyncio
    async def test_self_service_profile_but_not_role(self, db_session, admin_actor):
        service = UserService(db_session)
        created = await service.create(admin_actor, {"email": "leo@example.com", "display_name": "Leo"})
        me = Actor.build(created.data.id, RoleEnum.USER, [P.USER_UPDATE_PROFILE])

        renamed = await service.update(me, str(created.data.id), {"display_name": "Leandro"})
        assert renamed.data.display_name == "Leandro"

        promoted = await service.update(me, str(created.data.id), {"role": "ADMIN"})
        assert promoted.error.code == ServiceErrorCode.FORBIDDEN

        by_email = await service.get_by_field(me, "email", " LEO@example.com ")
        assert by_email.data.id == created.data.id
