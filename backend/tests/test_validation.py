"""
Hospeda Backend — Validation and Result Type Tests
===================================================

What we test:
    ✅ validate_input joins every violation into one VALIDATION_ERROR message
    ✅ Unknown and server-managed keys are dropped, not rejected
    ✅ Cross-field rules (date ranges, invoice totals)
    ✅ ServiceOutput / Page invariants
    ✅ slugify and parse_id helpers
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from hospeda.exceptions import ServiceError, ServiceErrorCode
from hospeda.schemas.billing import InvoiceCreate, InvoiceUpdate
from hospeda.schemas.accommodation import AccommodationSearch
from hospeda.schemas.common import SearchParams
from hospeda.schemas.destination import DestinationCreate
from hospeda.schemas.event import EventCreate, EventSearch
from hospeda.schemas.tag import TagCreate, TagUpdate
from hospeda.schemas.user import UserCreate
from hospeda.schemas.validation import validate_input
from hospeda.services.base import parse_id, slugify
from hospeda.services.result import Page, ServiceOutput


class TestValidateInput:
    def test_missing_fields_reported_together(self):
        with pytest.raises(ServiceError) as exc_info:
            validate_input(DestinationCreate, {"name": "Colón"})
        error = exc_info.value
        assert error.code == ServiceErrorCode.VALIDATION_ERROR
        assert "summary: Field required" in error.message
        assert "city: Field required" in error.message
        assert len(error.context["violations"]) == 5

    def test_none_is_treated_as_empty_input(self):
        with pytest.raises(ServiceError) as exc_info:
            validate_input(DestinationCreate, None)
        assert "name: Field required" in exc_info.value.message

    def test_server_managed_keys_are_ignored(self, destination_payload):
        payload = destination_payload(id=str(uuid4()), created_at="2020-01-01", deleted_at="2020-01-01")
        result = validate_input(DestinationCreate, payload)
        assert "id" not in result.model_dump()
        assert "deleted_at" not in result.model_dump()

    def test_length_constraint_message(self, destination_payload):
        with pytest.raises(ServiceError) as exc_info:
            validate_input(DestinationCreate, destination_payload(name="ab"))
        assert exc_info.value.message.startswith("name: String should have at least 3 characters")

    def test_enums_are_stored_as_values(self, destination_payload):
        result = validate_input(DestinationCreate, destination_payload(visibility="PRIVATE"))
        assert result.visibility == "PRIVATE"

    def test_email_is_lower_cased(self):
        result = validate_input(UserCreate, {"email": "Ana@Example.COM", "display_name": "Ana"})
        assert result.email == "ana@example.com"

    def test_guest_role_rejected_for_users(self):
        with pytest.raises(ServiceError):
            validate_input(UserCreate, {"email": "ana@example.com", "display_name": "Ana", "role": "GUEST"})

    def test_tag_slug_fits_its_column(self):
        assert validate_input(TagCreate, {"name": "Termas", "slug": "t" * 60}).slug == "t" * 60
        for schema, data in ((TagCreate, {"name": "Termas", "slug": "t" * 61}), (TagUpdate, {"slug": "t" * 90})):
            with pytest.raises(ServiceError) as exc_info:
                validate_input(schema, data)
            assert exc_info.value.code == ServiceErrorCode.VALIDATION_ERROR
            assert exc_info.value.message.startswith("slug: String should have at most 60 characters")


class TestCrossFieldRules:
    def test_event_end_before_start(self):
        with pytest.raises(ServiceError) as exc_info:
            validate_input(
                EventCreate,
                {
                    "name": "Fiesta del Río",
                    "summary": "Music by the river all weekend.",
                    "category": "FESTIVAL",
                    "start_date": "2026-02-10",
                    "end_date": "2026-02-09",
                },
            )
        assert "end_date" in exc_info.value.message
        assert "on or after start_date" in exc_info.value.message

    def test_invoice_total_computed(self):
        invoice = validate_input(
            InvoiceCreate,
            {
                "client_id": str(uuid4()),
                "invoice_number": "A-0001",
                "subtotal": "100.00",
                "tax": "21.00",
                "issued_at": "2026-03-01",
                "due_date": "2026-03-31",
            },
        )
        assert invoice.total == Decimal("121.00")
        assert invoice.issued_at == date(2026, 3, 1)

    def test_invoice_total_mismatch_rejected(self):
        with pytest.raises(ServiceError) as exc_info:
            validate_input(
                InvoiceCreate,
                {
                    "client_id": str(uuid4()),
                    "invoice_number": "A-0002",
                    "subtotal": "100.00",
                    "tax": "10.00",
                    "total": "999.00",
                    "issued_at": "2026-03-01",
                    "due_date": "2026-03-31",
                },
            )
        assert "total must equal subtotal + tax (110.00)" in exc_info.value.message

    def test_partial_invoice_update_skips_total_check(self):
        update = validate_input(InvoiceUpdate, {"subtotal": "50.00"})
        assert update.total is None

    def test_page_size_is_capped(self):
        with pytest.raises(ServiceError) as exc_info:
            validate_input(SearchParams, {"pageSize": 1000})
        assert "pageSize" in exc_info.value.message

    def test_page_size_alias(self):
        params = validate_input(SearchParams, {"page": "2", "pageSize": "10"})
        assert params.page == 2
        assert params.page_size == 10

    def test_search_ranges_accept_wire_names(self):
        params = validate_input(AccommodationSearch, {"minPrice": "100", "maxPrice": "100", "minGuests": "2"})
        assert params.min_price == Decimal("100")
        assert params.max_price == Decimal("100")
        assert params.min_guests == 2

    @pytest.mark.parametrize(
        "schema, data, upper, lower",
        [
            (AccommodationSearch, {"minPrice": "200", "maxPrice": "100"}, "maxPrice", "minPrice"),
            (AccommodationSearch, {"minBedrooms": 3, "maxBedrooms": 1}, "maxBedrooms", "minBedrooms"),
            (EventSearch, {"startDateAfter": "2026-05-01", "startDateBefore": "2026-04-01"}, "startDateBefore", "startDateAfter"),
            (SearchParams, {"createdAfter": "2026-05-01T00:00:00", "createdBefore": "2026-04-01T00:00:00"}, "createdBefore", "createdAfter"),
        ],
    )
    def test_search_range_min_must_not_exceed_max(self, schema, data, upper, lower):
        with pytest.raises(ServiceError) as exc_info:
            validate_input(schema, data)
        assert exc_info.value.code == ServiceErrorCode.VALIDATION_ERROR
        assert exc_info.value.message.startswith(f"{upper}: ")
        assert exc_info.value.message.endswith(f"must be on or after {lower}")


class TestServiceOutput:
    def test_exactly_one_side_set(self):
        with pytest.raises(ValueError):
            ServiceOutput()
        assert ServiceOutput.ok({"count": 0}).is_ok

    def test_fail_carries_code(self):
        output = ServiceOutput.fail(ServiceErrorCode.NOT_FOUND, "gone")
        assert not output.is_ok
        exc = output.error.to_exception()
        assert isinstance(exc, ServiceError)
        assert exc.code == ServiceErrorCode.NOT_FOUND

    @pytest.mark.parametrize("total, page_size, pages", [(0, 20, 0), (25, 10, 3), (20, 20, 1), (21, 20, 2)])
    def test_total_pages(self, total, page_size, pages):
        assert Page(items=[], total=total, page=1, page_size=page_size).total_pages == pages


class TestHelpers:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("Colón", "colon"),
            ("Río de la Plata", "rio-de-la-plata"),
            ("  Hotel & Spa  ", "hotel-spa"),
            ("¡¿?!", "item"),
        ],
    )
    def test_slugify(self, value, expected):
        assert slugify(value) == expected

    def test_parse_id_rejects_garbage(self):
        with pytest.raises(ServiceError) as exc_info:
            parse_id("not-a-uuid")
        assert exc_info.value.code == ServiceErrorCode.VALIDATION_ERROR
        assert exc_info.value.message == "id: Input should be a valid UUID"

    def test_parse_id_accepts_strings(self):
        value = uuid4()
        assert parse_id(str(value)) == value
