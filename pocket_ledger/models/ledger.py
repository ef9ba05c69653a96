"""
Core Data Models for Pocket Ledger

These models define the schemas for every collection kept in the
key-value store. They are designed to:
1. Enforce amount and transfer invariants at construction time
2. Round-trip through JSON with the camelCase keys used on disk
3. Keep monetary values exact (Decimal, never float)

DESIGN DECISION: The running balance of an account lives in
current_balance. opening_balance is the fixed zero point and is only
read by a full recalculation.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from pocket_ledger.utils.ids import generate_id


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class AccountType(str, Enum):
    """
    Supported account types.

    DEBT accounts are reported as liabilities in net worth.
    """
    CASH = "cash"
    BANK = "bank"
    SAVINGS = "savings"
    INVESTMENT = "investment"
    DEBT = "debt"
    OTHER = "other"


class TransactionType(str, Enum):
    """Direction of a transaction. Amounts are always positive."""
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class CategoryType(str, Enum):
    """Categories belong to either income or expense, never both."""
    INCOME = "income"
    EXPENSE = "expense"


class BudgetPeriod(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


# =============================================================================
# BASE
# =============================================================================

class LedgerModel(BaseModel):
    """
    Base for every stored entity.

    Python attributes are snake_case; the JSON written to storage uses
    camelCase aliases (accountId, isArchived, ...).
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=False,
    )

    def to_storage(self) -> dict[str, Any]:
        """Serialise to JSON-friendly natives with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# ENTITIES
# =============================================================================

def _calendar_date(value: Any) -> Any:
    """
    Reduce a stored datetime to its calendar date.

    Budget and goal dates were written as full ISO timestamps
    (e.g. 2025-05-07T22:23:00.000Z); the date part is kept as written.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return value


class Account(LedgerModel):
    """
    A place money is kept.

    current_balance is mutated by the balance engine on every
    transaction add, update and delete. Archived accounts keep
    receiving balance updates.
    """

    id: str = Field(default_factory=generate_id)
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name"
    )
    type: AccountType = Field(
        default=AccountType.CASH,
        description="Account type"
    )
    subtype: Optional[str] = Field(
        default=None,
        max_length=50,
        description="Free-form subtype (e.g. Wallet)"
    )
    opening_balance: Decimal = Field(
        default=Decimal("0"),
        description="Balance before any recorded transaction"
    )
    current_balance: Decimal = Field(
        default=Decimal("0"),
        description="Running balance"
    )
    currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
    )
    icon: Optional[str] = None
    color: Optional[str] = None
    include_in_net_worth: bool = True
    is_archived: bool = False

    @model_validator(mode='before')
    @classmethod
    def fill_balances(cls, data: Any) -> Any:
        """
        Default current_balance to opening_balance, and read legacy
        records that only carry initialBalance.
        """
        if not isinstance(data, dict):
            return data

        data = dict(data)
        keys = set(data)

        if "initialBalance" in data and not keys & {"openingBalance", "opening_balance"}:
            legacy = data.pop("initialBalance")
            data["openingBalance"] = legacy
            if not keys & {"currentBalance", "current_balance"}:
                data["currentBalance"] = legacy
            return data

        if not keys & {"currentBalance", "current_balance"}:
            opening = data.get("openingBalance", data.get("opening_balance"))
            if opening is not None:
                data["currentBalance"] = opening

        return data


class Transaction(LedgerModel):
    """
    A single money movement.

    income/expense touch account_id; transfers touch from_account_id
    and to_account_id.
    """

    id: str = Field(default_factory=generate_id)
    type: TransactionType
    date: datetime = Field(
        ...,
        description="When the transaction happened (ISO-8601)"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Always positive; direction comes from type"
    )
    account_id: Optional[str] = Field(
        default=None,
        description="Primary account"
    )
    from_account_id: Optional[str] = None
    to_account_id: Optional[str] = None
    category_id: Optional[str] = None
    category: Optional[str] = Field(
        default=None,
        description="Category name snapshot"
    )
    description: str = Field(
        default="",
        max_length=200,
    )
    note: Optional[str] = Field(
        default=None,
        max_length=1000,
    )
    picture_uri: Optional[str] = None
    is_recurring: bool = False
    recurrence_rule: Optional[str] = None
    tags: list[str] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_accounts(self) -> 'Transaction':
        """Check the account fields required by each transaction type."""
        if self.type == TransactionType.TRANSFER:
            if not self.from_account_id or not self.to_account_id:
                raise ValueError("Transfer requires both from and to accounts")
            if self.from_account_id == self.to_account_id:
                raise ValueError("Transfer accounts must be different")
            if not self.account_id:
                self.account_id = self.from_account_id
        elif not self.account_id:
            raise ValueError(f"{self.type.value.capitalize()} requires an account")

        return self

    def touches(self, account_id: str) -> bool:
        """True if this transaction affects the given account's balance."""
        if self.type == TransactionType.TRANSFER:
            return account_id in (self.from_account_id, self.to_account_id)
        return self.account_id == account_id


class Category(LedgerModel):
    """Income or expense category, optionally nested one level deep."""

    id: str = Field(default_factory=generate_id)
    name: str = Field(
        ...,
        min_length=1,
        max_length=50,
    )
    type: CategoryType
    parent_id: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    is_archived: bool = False

    @model_validator(mode='after')
    def validate_parent(self) -> 'Category':
        if self.parent_id and self.parent_id == self.id:
            raise ValueError("Category cannot be its own parent")
        return self


class Budget(LedgerModel):
    """
    Spending ceiling for one category over a period.

    Spent, remaining and progress are derived on read, never stored.
    """

    id: str = Field(default_factory=generate_id)
    category_id: str
    period_type: BudgetPeriod = BudgetPeriod.MONTHLY
    start_date: date
    end_date: Optional[date] = Field(
        default=None,
        description="Required for custom periods"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Ceiling for the period"
    )
    alert_threshold: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=1.0,
        description="Fraction of amount that triggers an alert (e.g. 0.8)"
    )

    @field_validator('start_date', 'end_date', mode='before')
    @classmethod
    def parse_dates(cls, v: Any) -> Any:
        return _calendar_date(v)

    @model_validator(mode='after')
    def validate_period(self) -> 'Budget':
        if self.period_type == BudgetPeriod.CUSTOM and self.end_date is None:
            raise ValueError("Custom budgets require an end date")
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("Budget end date cannot be before start date")
        return self


class Goal(LedgerModel):
    """Savings goal. Stored only; no derived logic."""

    id: str = Field(default_factory=generate_id)
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    target_amount: Decimal = Field(..., ge=0)
    current_amount: Decimal = Field(default=Decimal("0"), ge=0)
    start_date: date
    target_date: Optional[date] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    is_completed: bool = False
    is_archived: bool = False
    linked_account_id: Optional[str] = None

    @field_validator('start_date', 'target_date', mode='before')
    @classmethod
    def parse_dates(cls, v: Any) -> Any:
        return _calendar_date(v)


class UserSettings(LedgerModel):
    """User preferences stored under the settings key."""

    currency: str = Field(default="USD", min_length=3, max_length=3)
    start_day_of_month: int = Field(
        default=1,
        ge=1,
        le=31,
        description="First day of the monthly budgeting cycle"
    )
    theme: Theme = Theme.SYSTEM
    passcode_enabled: bool = False
    biometric_enabled: bool = False
    default_account: Optional[str] = None
    hide_net_worth: bool = False
    notifications_enabled: bool = True
    backup_remind_days: int = Field(default=30, ge=0)


class AppData(LedgerModel):
    """
    Aggregate of every stored collection.

    Carries a schema version for future migrations; nothing reads it yet.
    """

    settings: UserSettings
    accounts: list[Account] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)
    goals: list[Goal] = Field(default_factory=list)
    version: str = "1"
    last_backup_date: Optional[datetime] = None
