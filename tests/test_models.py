"""Tests for the bill/user models and the shared helpers they rely on."""

import re
from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from billtracker.models import Bill, BillCreate, BillUpdate, MonthSummary, ServiceResult
from billtracker.models.bill import STORAGE_CONTEXT
from billtracker.utils import (
    convert_to_json_safe,
    denormalize_keys,
    generate_id,
    normalize_keys,
    safe_filename,
)


def test_bill_create_accepts_wire_names(make_bill):
    bill = make_bill(barcode="23790.12345")
    assert bill.owner_id == "user-1"
    assert bill.due_date == date(2025, 5, 10)
    assert bill.amount == Decimal("120.50")
    assert bill.paid is False
    assert bill.attachment is None


def test_bill_create_accepts_field_names():
    bill = BillCreate(name="Water", amount=Decimal("40"), due_date=date(2025, 1, 1), owner_id="u")
    assert bill.name == "Water"


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": ""},
        {"name": "   "},
        {"amount": "-1"},
        {"dueDate": "not-a-date"},
        {"ownerId": ""},
    ],
)
def test_bill_create_rejects_invalid_fields(make_bill, overrides):
    with pytest.raises(ValidationError):
        make_bill(**overrides)


def test_bill_wire_form_is_camel_case_with_numeric_amount(make_bill):
    bill = Bill.from_create(make_bill(), bill_id="b1")
    record = bill.model_dump(mode="json", by_alias=True)
    assert set(record) == {
        "id",
        "name",
        "amount",
        "dueDate",
        "paid",
        "attachment",
        "barcode",
        "createdAt",
        "ownerId",
    }
    assert record["amount"] == 120.5
    assert record["dueDate"] == "2025-05-10"


def test_update_changes_only_include_explicit_fields():
    patch = BillUpdate.model_validate({"paid": True, "dueDate": "2025-06-01"})
    assert patch.changes() == {"paid": True, "due_date": date(2025, 6, 1)}


def test_update_ignores_immutable_fields():
    patch = BillUpdate.model_validate({"id": "other", "ownerId": "x", "createdAt": "2020-01-01"})
    assert patch.is_empty


def test_update_null_clears_optional_fields_only():
    patch = BillUpdate.model_validate({"attachment": None, "name": None})
    assert patch.changes() == {"attachment": None}


def test_update_json_mode_serializes_amount_as_number():
    patch = BillUpdate(amount=Decimal("9.75"))
    assert patch.changes(mode="json") == {"amount": 9.75}


def test_storage_context_keeps_amount_exact(make_bill):
    bill = Bill.from_create(make_bill(amount="12345678901234567.89"), bill_id="b1")

    record = bill.model_dump(mode="json", by_alias=True, context=STORAGE_CONTEXT)
    patch = BillUpdate(amount=Decimal("0.10")).changes(mode="json", context=STORAGE_CONTEXT)

    assert record["amount"] == "12345678901234567.89"
    assert Bill.model_validate(record).amount == Decimal("12345678901234567.89")
    assert patch == {"amount": "0.10"}


def test_merged_applies_patch_and_keeps_identity(make_bill):
    bill = Bill.from_create(make_bill(attachment="scan.pdf"), bill_id="b1")
    updated = bill.merged(BillUpdate.model_validate({"paid": True, "attachment": None}))

    assert updated.paid is True
    assert updated.attachment is None
    assert updated.id == "b1"
    assert updated.owner_id == bill.owner_id
    assert updated.created_at == bill.created_at
    assert bill.paid is False


def test_generate_id_format_and_uniqueness():
    ids = {generate_id() for _ in range(200)}
    assert len(ids) == 200
    for value in ids:
        assert re.fullmatch(r"\d{13}[0-9a-z]{9}", value)


def test_service_result_helpers():
    assert ServiceResult.ok("x").success
    missing = ServiceResult.not_found("Bill")
    assert (missing.success, missing.error, missing.status_code) == (False, "Bill not found", 404)
    assert ServiceResult.fail("nope").status_code == 400


def test_key_conversion_between_wire_and_columns():
    wire = {"dueDate": "2025-01-01", "ownerId": "u", "createdAt": "t", "id": "1"}
    columns = normalize_keys(wire)
    assert columns == {"due_date": "2025-01-01", "owner_id": "u", "created_at": "t", "id": "1"}
    assert denormalize_keys(columns) == wire


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("boleto.pdf", "boleto.pdf"),
        ("my scan.png", "my_scan.png"),
        ("../../etc/passwd", "passwd"),
        ("C:\\Users\\me\\conta.pdf", "conta.pdf"),
        ("...", "file"),
    ],
)
def test_safe_filename(raw, expected):
    assert safe_filename(raw) == expected


def test_json_safe_conversion_uses_wire_names(make_bill):
    bill = Bill.from_create(make_bill(), bill_id="b1")
    payload = convert_to_json_safe({"bills": [bill], "total": Decimal("1.5")})
    assert payload["bills"][0]["ownerId"] == "user-1"
    assert payload["bills"][0]["amount"] == 120.5
    assert payload["total"] == 1.5


def test_month_summary_serializes_amounts_as_numbers():
    summary = MonthSummary(year=2025, month=5, count=1, total_amount=Decimal("10.5"))
    payload = convert_to_json_safe(summary)
    assert payload["totalAmount"] == 10.5
    assert payload["paidAmount"] == 0.0
