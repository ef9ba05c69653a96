"""
Seed data written on first run.

Ids are generated when the seed is built, so every install gets its own.
"""

from decimal import Decimal

from pocket_ledger.models.ledger import (
    Account,
    AccountType,
    Category,
    CategoryType,
    UserSettings,
)


# (name, type, icon, color)
DEFAULT_ACCOUNT_SPECS = [
    ("Cash", AccountType.CASH, "cash", "#4CAF50"),
    ("Bank Account", AccountType.BANK, "bank", "#2196F3"),
]

DEFAULT_CATEGORY_SPECS = [
    # Income categories
    ("Salary", CategoryType.INCOME, "cash", "#4CAF50"),
    ("Gifts", CategoryType.INCOME, "gift", "#9C27B0"),
    ("Interest", CategoryType.INCOME, "percent", "#3F51B5"),
    # Expense categories
    ("Food & Dining", CategoryType.EXPENSE, "food", "#FF5722"),
    ("Transportation", CategoryType.EXPENSE, "car", "#607D8B"),
    ("Housing", CategoryType.EXPENSE, "home", "#795548"),
    ("Utilities", CategoryType.EXPENSE, "flash", "#FFC107"),
    ("Shopping", CategoryType.EXPENSE, "cart", "#E91E63"),
    ("Entertainment", CategoryType.EXPENSE, "movie", "#9E9E9E"),
]


def default_settings(currency: str = "USD") -> UserSettings:
    return UserSettings(currency=currency)


def default_accounts(currency: str = "USD") -> list[Account]:
    return [
        Account(
            name=name,
            type=account_type,
            opening_balance=Decimal("0"),
            currency=currency,
            icon=icon,
            color=color,
        )
        for name, account_type, icon, color in DEFAULT_ACCOUNT_SPECS
    ]


def default_categories() -> list[Category]:
    return [
        Category(name=name, type=category_type, icon=icon, color=color)
        for name, category_type, icon, color in DEFAULT_CATEGORY_SPECS
    ]
