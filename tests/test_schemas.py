from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from supplier_portal.schemas import (
    ContractFilter,
    ContractInput,
    ContractUpdateInput,
    DocumentInput,
    PaymentInput,
    PaymentStatus,
    PaymentUpdateInput,
    RejectionInput,
    SupplierCategoryInput,
    SupplierRatingInput,
    UserFilter,
    days_remaining,
    decimal_places,
    minor_units,
    overall_rating,
)


def _contract(**overrides) -> dict:
    data = {
        "title": "Office supplies 2025",
        "supplierId": "s1",
        "contractNumber": "C-2025-001",
        "startDate": "2025-01-01",
        "endDate": "2025-12-31",
        "value": "12500.50",
    }
    data.update(overrides)
    return data


def test_contract_end_date_before_start_date_is_rejected() -> None:
    with pytest.raises(ValidationError) as excinfo:
        ContractInput.model_validate(_contract(startDate="2025-06-01", endDate="2025-05-01"))

    errors = excinfo.value.errors()
    assert len(errors) == 1
    assert errors[0]["loc"][-1] in {"end_date", "endDate"}
    assert "end date must be after start date" in errors[0]["msg"]


def test_contract_end_date_equal_to_start_date_is_rejected() -> None:
    with pytest.raises(ValidationError):
        ContractInput.model_validate(_contract(startDate="2025-06-01", endDate="2025-06-01"))


def test_contract_update_checks_dates_only_when_both_given() -> None:
    assert ContractUpdateInput(end_date=date(2020, 1, 1)).end_date == date(2020, 1, 1)
    with pytest.raises(ValidationError):
        ContractUpdateInput(start_date=date(2025, 6, 1), end_date=date(2025, 5, 1))


def test_contract_value_is_exact_decimal_and_serialized_as_string() -> None:
    contract = ContractInput.model_validate(_contract(value="0.1", currency="eur"))
    assert contract.value == Decimal("0.1")
    assert contract.currency == "EUR"

    wire = contract.to_variables()
    assert wire["value"] == "0.1"
    assert wire["startDate"] == "2025-01-01"
    assert wire["supplierId"] == "s1"
    assert "description" not in wire


def test_three_decimal_currency_keeps_fils_exactly() -> None:
    contract = ContractInput.model_validate(_contract(value="100.005", currency="KWD"))
    assert contract.value == Decimal("100.005")
    assert contract.to_variables()["value"] == "100.005"


def test_value_finer_than_the_currency_unit_is_rejected_not_rounded() -> None:
    for value, currency in [("100.0005", "KWD"), ("100.005", "USD"), ("10.5", "JPY")]:
        with pytest.raises(ValidationError) as excinfo:
            ContractInput.model_validate(_contract(value=value, currency=currency))
        assert "decimal places" in str(excinfo.value)


def test_trailing_zeros_do_not_count_as_precision() -> None:
    assert decimal_places(Decimal("12.500")) == 1
    assert decimal_places(Decimal("1E+3")) == 0
    assert ContractInput.model_validate(_contract(value="5000.00", currency="JPY")).value == Decimal("5000")
    assert minor_units("bhd") == 3
    assert minor_units("EUR") == 2


def test_payment_amount_precision_follows_currency() -> None:
    assert PaymentInput(supplier_id="s1", amount=Decimal("7.125"), currency="BHD").amount == Decimal("7.125")
    with pytest.raises(ValidationError):
        PaymentInput(supplier_id="s1", amount=Decimal("7.125"))
    with pytest.raises(ValidationError):
        PaymentUpdateInput(amount=Decimal("7.125"), currency="EUR")


def test_update_without_currency_allows_the_finest_unit() -> None:
    assert ContractUpdateInput(value=Decimal("1.005")).value == Decimal("1.005")
    with pytest.raises(ValidationError):
        ContractUpdateInput(value=Decimal("1.0005"))
    with pytest.raises(ValidationError):
        ContractUpdateInput(value=Decimal("1.5"), currency="JPY")


def test_contract_rejects_bad_currency_code() -> None:
    with pytest.raises(ValidationError):
        ContractInput.model_validate(_contract(currency="EURO"))


def test_payment_amount_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        PaymentInput(supplier_id="s1", amount=Decimal("0"))


def test_payment_matches_contract_supplier() -> None:
    payment = PaymentInput(supplier_id="s1", contract_id="c1", amount=Decimal("10"))
    assert payment.matches_contract({"id": "c1", "supplier": {"id": "s1", "name": "Acme"}}) is True
    assert payment.matches_contract({"id": "c1", "supplier": {"id": "s2"}}) is False
    assert payment.matches_contract({"id": "c1", "supplierId": "s1"}) is True


def test_payment_date_only_with_paid_status() -> None:
    with pytest.raises(ValidationError):
        PaymentUpdateInput(payment_date=date(2025, 3, 1))
    with pytest.raises(ValidationError):
        PaymentUpdateInput(payment_date=date(2025, 3, 1), status=PaymentStatus.APPROVED)

    paid = PaymentUpdateInput(payment_date=date(2025, 3, 1), status=PaymentStatus.PAID)
    assert paid.to_variables() == {"paymentDate": "2025-03-01", "status": "PAID"}


def test_document_needs_exactly_one_owner() -> None:
    base = {"name": "W-9", "fileName": "w9.pdf", "fileType": "application/pdf", "fileSize": 1024, "filePath": "/d/w9.pdf"}
    assert DocumentInput.model_validate({**base, "supplierId": "s1"}).supplier_id == "s1"
    with pytest.raises(ValidationError):
        DocumentInput.model_validate(base)
    with pytest.raises(ValidationError):
        DocumentInput.model_validate({**base, "supplierId": "s1", "contractId": "c1"})


def test_rating_derives_overall_from_sub_ratings() -> None:
    rating = SupplierRatingInput(supplier_id="s1", quality_rating=4, delivery_rating=5)
    assert rating.overall_rating == 5  # 4.5 rounds half up
    assert SupplierRatingInput(supplier_id="s1", quality_rating=3, overall_rating=1).overall_rating == 1


def test_rating_out_of_range_is_rejected() -> None:
    with pytest.raises(ValidationError):
        SupplierRatingInput(supplier_id="s1", quality_rating=6)


def test_overall_rating_ignores_missing_values() -> None:
    assert overall_rating(None, None) is None
    assert overall_rating(2, None, 3) == 3
    assert overall_rating(1, 2, 2, 2) == 2


def test_days_remaining_is_none_unless_in_force() -> None:
    today = date(2025, 1, 1)
    assert days_remaining(date(2025, 1, 31), "ACTIVE", today) == 30
    assert days_remaining(date(2025, 1, 31), "APPROVED", today) == 30
    assert days_remaining(date(2024, 12, 1), "ACTIVE", today) == 0
    assert days_remaining(date(2025, 1, 31), "EXPIRED", today) is None
    assert days_remaining(date(2025, 1, 31), "TERMINATED", today) is None


def test_filter_to_variables_omits_unset_keys() -> None:
    flt = ContractFilter(status="ACTIVE", min_value=Decimal("100.5"))
    assert flt.to_variables() == {"status": "ACTIVE", "minValue": "100.5"}
    assert ContractFilter().to_variables() == {}


def test_user_filter_is_a_bare_search_argument() -> None:
    assert UserFilter(search="ann").to_variables() == {"search": "ann"}
    assert UserFilter().to_variables() == {}


def test_rejection_reason_must_be_non_empty_text() -> None:
    assert RejectionInput.model_validate({"reason": "  Late delivery "}).reason == "Late delivery"
    for reason in [None, "", "   ", 5, ["late"]]:
        with pytest.raises(ValidationError):
            RejectionInput.model_validate({"reason": reason})


def test_supplier_category_input() -> None:
    category = SupplierCategoryInput.model_validate({"name": " Logistics ", "description": "Freight"})
    assert category.to_variables() == {"name": "Logistics", "description": "Freight"}
    with pytest.raises(ValidationError):
        SupplierCategoryInput.model_validate({"name": ""})
