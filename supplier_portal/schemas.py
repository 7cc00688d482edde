"""
supplier_portal/schemas.py

Closed input and filter records for the supplier-management API.

Every record:
- uses snake_case attributes and the API's camelCase names on the wire
- serializes with to_variables(): unset/None keys omitted, Decimal -> str,
  dates -> ISO strings, enums -> their values

IMPORTANT:
- Money is Decimal end to end. Never float.
- Validation here is the client-side gate; the server re-validates.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Annotated, Any, Mapping, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------
# Enumerations (wire values)
# ---------------------------------------------------------------------
class UserRole(str, Enum):
    ADMIN = "ADMIN"
    PROCUREMENT_MANAGER = "PROCUREMENT_MANAGER"
    PROCUREMENT_SPECIALIST = "PROCUREMENT_SPECIALIST"


class SupplierStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    INACTIVE = "INACTIVE"


class ContractStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    TERMINATED = "TERMINATED"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    PAID = "PAID"
    REJECTED = "REJECTED"


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------
# ISO 4217 minor units that differ from the usual two.
CURRENCY_MINOR_UNITS = {
    "BHD": 3,
    "CLP": 0,
    "IQD": 3,
    "ISK": 0,
    "JOD": 3,
    "JPY": 0,
    "KRW": 0,
    "KWD": 3,
    "LYD": 3,
    "OMR": 3,
    "TND": 3,
    "UGX": 0,
    "VND": 0,
}
DEFAULT_MINOR_UNITS = 2


def minor_units(currency: str) -> int:
    return CURRENCY_MINOR_UNITS.get(currency.upper(), DEFAULT_MINOR_UNITS)


def decimal_places(amount: Decimal) -> int:
    """Significant decimal places; trailing zeros do not count."""
    exponent = amount.normalize().as_tuple().exponent
    return max(0, -exponent) if isinstance(exponent, int) else 0


def check_money(amount: Optional[Decimal], currency: Optional[str], field: str) -> None:
    """
    Reject amounts finer than the currency's minor unit. Never rounds.
    Without a currency (partial updates) the finest known unit applies.
    """
    if amount is None:
        return
    units = minor_units(currency) if currency else max(CURRENCY_MINOR_UNITS.values())
    if decimal_places(amount) > units:
        label = currency.upper() if currency else "any currency"
        raise ValueError(f"{field} has more decimal places than {label} allows ({units})")


def overall_rating(*ratings: Optional[int]) -> Optional[int]:
    """Rounded mean of the sub-ratings that are set (None when none are)."""
    values = [r for r in ratings if r is not None]
    if not values:
        return None
    mean = Decimal(sum(values)) / Decimal(len(values))
    return int(mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def days_remaining(end_date: date, status: ContractStatus | str, today: Optional[date] = None) -> Optional[int]:
    """
    Days left on a contract.

    None once the contract is expired/terminated (or was never put in force);
    otherwise the whole days until end_date, clamped at zero.
    """
    status = ContractStatus(status)
    if status not in (ContractStatus.ACTIVE, ContractStatus.APPROVED):
        return None
    today = today or date.today()
    return max((end_date - today).days, 0)


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    def to_variables(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------
# Auth / users
# ---------------------------------------------------------------------
class LoginInput(_Record):
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)
    remember: bool = False


class UserInput(_Record):
    email: str = Field(min_length=3)
    password: str = Field(min_length=8)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    role: UserRole
    department: Optional[str] = None


class UserUpdateInput(_Record):
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[UserRole] = None
    department: Optional[str] = None
    is_active: Optional[bool] = None


# ---------------------------------------------------------------------
# Suppliers
# ---------------------------------------------------------------------
class SupplierInput(_Record):
    name: str = Field(min_length=1)
    legal_name: str = Field(min_length=1)
    tax_id: str = Field(min_length=1)
    registration_number: str = Field(min_length=1)
    address: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: Optional[str] = None
    country: str = Field(min_length=1)
    postal_code: str = Field(min_length=1)
    phone_number: str = Field(min_length=1)
    email: str = Field(min_length=3)
    website: Optional[str] = None
    notes: Optional[str] = None
    contact_person_name: Optional[str] = None
    contact_person_email: Optional[str] = None
    contact_person_phone: Optional[str] = None
    category_ids: list[str] = Field(default_factory=list)
    bank_account_info: Optional[dict[str, Any]] = None


class SupplierUpdateInput(_Record):
    name: Optional[str] = None
    legal_name: Optional[str] = None
    tax_id: Optional[str] = None
    registration_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[SupplierStatus] = None
    contact_person_name: Optional[str] = None
    contact_person_email: Optional[str] = None
    contact_person_phone: Optional[str] = None
    category_ids: Optional[list[str]] = None
    bank_account_info: Optional[dict[str, Any]] = None


class SupplierRatingInput(_Record):
    supplier_id: str = Field(min_length=1)
    financial_stability: Optional[int] = Field(default=None, ge=1, le=5)
    quality_rating: Optional[int] = Field(default=None, ge=1, le=5)
    delivery_rating: Optional[int] = Field(default=None, ge=1, le=5)
    communication_rating: Optional[int] = Field(default=None, ge=1, le=5)
    overall_rating: Optional[int] = Field(default=None, ge=1, le=5)

    @model_validator(mode="after")
    def derive_overall(self) -> "SupplierRatingInput":
        if self.overall_rating is None:
            self.overall_rating = overall_rating(
                self.financial_stability,
                self.quality_rating,
                self.delivery_rating,
                self.communication_rating,
            )
        return self


class SupplierCategoryInput(_Record):
    name: str = Field(min_length=1)
    description: Optional[str] = None


class RejectionInput(_Record):
    """Reason given when rejecting a supplier, contract or payment."""

    reason: str = Field(min_length=1)


# ---------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------
def _check_currency(value: str) -> str:
    value = value.upper()
    if len(value) != 3 or not value.isalpha():
        raise ValueError("currency must be a 3-letter ISO code")
    return value


def _check_end_after_start(end_date: Optional[date], info: ValidationInfo) -> Optional[date]:
    start_date = info.data.get("start_date")
    if end_date is not None and start_date is not None and end_date <= start_date:
        raise ValueError("end date must be after start date")
    return end_date


CurrencyCode = Annotated[str, AfterValidator(_check_currency)]


class ContractInput(_Record):
    title: str = Field(min_length=1)
    supplier_id: str = Field(min_length=1)
    contract_number: str = Field(min_length=1)
    description: Optional[str] = None
    start_date: date
    end_date: date
    value: Decimal = Field(ge=0)
    currency: CurrencyCode = "USD"
    terms: Optional[str] = None
    payment_terms: Optional[str] = None
    delivery_terms: Optional[str] = None

    @field_validator("end_date")
    @classmethod
    def end_after_start(cls, end_date: Optional[date], info: ValidationInfo) -> Optional[date]:
        return _check_end_after_start(end_date, info)

    @model_validator(mode="after")
    def exact_money(self) -> "ContractInput":
        check_money(self.value, self.currency, "value")
        return self


class ContractUpdateInput(_Record):
    title: Optional[str] = None
    contract_number: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    value: Optional[Decimal] = Field(default=None, ge=0)
    currency: Optional[CurrencyCode] = None
    status: Optional[ContractStatus] = None
    terms: Optional[str] = None
    payment_terms: Optional[str] = None
    delivery_terms: Optional[str] = None

    @field_validator("end_date")
    @classmethod
    def end_after_start(cls, end_date: Optional[date], info: ValidationInfo) -> Optional[date]:
        return _check_end_after_start(end_date, info)

    @model_validator(mode="after")
    def exact_money(self) -> "ContractUpdateInput":
        check_money(self.value, self.currency, "value")
        return self


# ---------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------
class PaymentInput(_Record):
    supplier_id: str = Field(min_length=1)
    contract_id: Optional[str] = None
    amount: Decimal = Field(gt=0)
    currency: CurrencyCode = "USD"
    description: Optional[str] = None
    invoice_number: Optional[str] = None
    invoice_date: Optional[date] = None
    due_date: Optional[date] = None

    @model_validator(mode="after")
    def exact_money(self) -> "PaymentInput":
        check_money(self.amount, self.currency, "amount")
        return self

    def matches_contract(self, contract: Mapping[str, Any]) -> bool:
        """A payment tied to a contract must pay that contract's supplier."""
        supplier = contract.get("supplier") or {}
        supplier_id = supplier.get("id") if isinstance(supplier, Mapping) else None
        supplier_id = supplier_id or contract.get("supplierId")
        return str(supplier_id) == str(self.supplier_id)


class PaymentUpdateInput(_Record):
    amount: Optional[Decimal] = Field(default=None, gt=0)
    currency: Optional[CurrencyCode] = None
    description: Optional[str] = None
    invoice_number: Optional[str] = None
    invoice_date: Optional[date] = None
    due_date: Optional[date] = None
    payment_date: Optional[date] = None
    status: Optional[PaymentStatus] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def payment_date_only_when_paid(self) -> "PaymentUpdateInput":
        if self.payment_date is not None and self.status is not PaymentStatus.PAID:
            raise ValueError("payment date can only be set together with status PAID")
        check_money(self.amount, self.currency, "amount")
        return self


# ---------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------
class DocumentInput(_Record):
    name: str = Field(min_length=1)
    file_name: str = Field(min_length=1)
    file_type: str = Field(min_length=1)
    file_size: int = Field(ge=0)
    file_path: str = Field(min_length=1)
    description: Optional[str] = None
    supplier_id: Optional[str] = None
    contract_id: Optional[str] = None
    payment_id: Optional[str] = None

    @model_validator(mode="after")
    def exactly_one_owner(self) -> "DocumentInput":
        owners = [o for o in (self.supplier_id, self.contract_id, self.payment_id) if o]
        if len(owners) != 1:
            raise ValueError("a document belongs to exactly one supplier, contract or payment")
        return self


# ---------------------------------------------------------------------
# Filters (normalized; built by supplier_portal.filters)
# ---------------------------------------------------------------------
class SupplierFilter(_Record):
    search: Optional[str] = None
    status: Optional[SupplierStatus] = None
    category_ids: Optional[list[str]] = None
    country: Optional[str] = None


class ContractFilter(_Record):
    search: Optional[str] = None
    status: Optional[ContractStatus] = None
    supplier_id: Optional[str] = None
    start_date_from: Optional[date] = None
    start_date_to: Optional[date] = None
    end_date_from: Optional[date] = None
    end_date_to: Optional[date] = None
    min_value: Optional[Decimal] = None
    max_value: Optional[Decimal] = None


class PaymentFilter(_Record):
    search: Optional[str] = None
    status: Optional[PaymentStatus] = None
    supplier_id: Optional[str] = None
    contract_id: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None


class AuditLogFilter(_Record):
    user_id: Optional[str] = None
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    action: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None


class UserFilter(_Record):
    search: Optional[str] = None

    def to_variables(self) -> dict[str, Any]:
        # users(search:) takes a bare string instead of a filter object
        return {"search": self.search} if self.search else {}


class SupplierCategoryFilter(UserFilter):
    """supplierCategories(search:) takes the same bare search string."""


class DocumentFilter(_Record):
    supplier_id: Optional[str] = None
    contract_id: Optional[str] = None
    payment_id: Optional[str] = None
