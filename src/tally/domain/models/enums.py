"""Enumerations for domain models."""

from enum import Enum


class AccountCategory(str, Enum):
    """Whether an account adds to or subtracts from net worth."""

    ASSET = "asset"
    LIABILITY = "liability"


class AccountType(str, Enum):
    """Kinds of account a user can track."""

    PROPERTY = "property"
    PENSION = "pension"
    INVESTMENT = "investment"
    SAVINGS = "savings"
    MORTGAGE = "mortgage"
    LOAN = "loan"
    CREDIT_CARD = "credit_card"

    @property
    def category(self) -> AccountCategory:
        return category_for(self)

    @property
    def label(self) -> str:
        """Human-readable name for display."""
        return ACCOUNT_TYPE_LABELS[self]


class Granularity(str, Enum):
    """Sampling step for net worth series."""

    SNAPSHOT = "snapshot"  # one point per distinct balance date
    DAILY = "daily"
    MONTHLY = "monthly"  # month-ends, plus the range end


_CATEGORY_BY_TYPE: dict[AccountType, AccountCategory] = {
    AccountType.PROPERTY: AccountCategory.ASSET,
    AccountType.PENSION: AccountCategory.ASSET,
    AccountType.INVESTMENT: AccountCategory.ASSET,
    AccountType.SAVINGS: AccountCategory.ASSET,
    AccountType.MORTGAGE: AccountCategory.LIABILITY,
    AccountType.LOAN: AccountCategory.LIABILITY,
    AccountType.CREDIT_CARD: AccountCategory.LIABILITY,
}

ACCOUNT_TYPE_LABELS: dict[AccountType, str] = {
    AccountType.PROPERTY: "Property",
    AccountType.PENSION: "Pension",
    AccountType.INVESTMENT: "Investment",
    AccountType.SAVINGS: "Savings",
    AccountType.MORTGAGE: "Mortgage",
    AccountType.LOAN: "Loan",
    AccountType.CREDIT_CARD: "Credit Card",
}


def category_for(account_type: AccountType) -> AccountCategory:
    """Return the category an account type belongs to."""
    return _CATEGORY_BY_TYPE[AccountType(account_type)]


def types_in(category: AccountCategory) -> list[AccountType]:
    """Return every account type belonging to a category."""
    return [t for t, c in _CATEGORY_BY_TYPE.items() if c == category]
