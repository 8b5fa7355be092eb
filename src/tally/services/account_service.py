"""Account service: create, edit and remove tracked accounts."""

import logging
import re
import uuid
from dataclasses import dataclass, fields
from typing import Optional, Union

from tally.core.dates import utc_now
from tally.core.exceptions import ValidationError, NotFoundError
from tally.domain.models import Account, AccountCategory, AccountType
from tally.repositories.protocols import AccountRepository

logger = logging.getLogger(__name__)

CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")


@dataclass
class AccountCreate:
    """Input data for creating an account. The category is derived, never given."""

    name: str
    account_type: Union[AccountType, str]
    institution: Optional[str] = None
    description: Optional[str] = None
    currency: Optional[str] = None


@dataclass
class AccountUpdate:
    """
    Partial update data for editing an account.

    None leaves a field unchanged; an empty string clears institution or
    description. The account type cannot be changed.
    """

    name: Optional[str] = None
    institution: Optional[str] = None
    description: Optional[str] = None
    currency: Optional[str] = None
    is_active: Optional[bool] = None


def _optional_text(value: Optional[str], field_name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text, got {value!r}")
    stripped = value.strip()
    return stripped or None


class AccountService:
    """Service for managing tracked accounts."""

    def __init__(self, account_repo: AccountRepository, base_currency: str = "GBP"):
        self._account_repo = account_repo
        self._base_currency = base_currency

    def create(self, data: AccountCreate) -> Account:
        """
        Create a new account.

        Raises:
            ValidationError: empty name, unknown account type or bad currency.
        """
        name = self._validate_name(data.name)
        account_type = self._validate_account_type(data.account_type)
        currency = self._validate_currency(data.currency or self._base_currency)

        timestamp = utc_now()
        account = Account(
            account_id=str(uuid.uuid4()),
            name=name,
            account_type=account_type,
            currency=currency,
            institution=_optional_text(data.institution, "institution"),
            description=_optional_text(data.description, "description"),
            is_active=True,
            created_at=timestamp,
            updated_at=timestamp,
        )
        created = self._account_repo.create(account)
        logger.info(
            "Created %s account %s (%s)",
            created.category.value,
            created.account_id,
            created.account_type.value,
        )
        return created

    def get(self, account_id: str) -> Account:
        """Get account by ID."""
        account = self._account_repo.get_by_id(account_id)
        if not account:
            raise NotFoundError("Account", account_id)
        return account

    def list_accounts(
        self,
        is_active: Optional[bool] = None,
        category: Optional[Union[AccountCategory, str]] = None,
    ) -> list[Account]:
        """List accounts, optionally only active/inactive ones or one category."""
        if category is not None:
            try:
                category = AccountCategory(category)
            except ValueError as exc:
                raise ValidationError(f"Unknown account category: {category!r}") from exc
        return self._account_repo.list_all(is_active=is_active, category=category)

    def update(self, account_id: str, patch: AccountUpdate) -> Account:
        """
        Apply a partial update and refresh updated_at.

        A patch with no fields set returns the stored account untouched.
        """
        account = self.get(account_id)
        if all(getattr(patch, f.name) is None for f in fields(patch)):
            return account

        if patch.name is not None:
            account.name = self._validate_name(patch.name)
        if patch.institution is not None:
            account.institution = _optional_text(patch.institution, "institution")
        if patch.description is not None:
            account.description = _optional_text(patch.description, "description")
        if patch.currency is not None:
            account.currency = self._validate_currency(patch.currency)
        if patch.is_active is not None:
            account.is_active = bool(patch.is_active)

        account.updated_at = utc_now()
        return self._account_repo.update(account)

    def delete(self, account_id: str) -> None:
        """Delete an account together with its balance history."""
        if not self._account_repo.delete(account_id):
            raise NotFoundError("Account", account_id)
        logger.info("Deleted account %s", account_id)

    @staticmethod
    def _validate_name(name: Optional[str]) -> str:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Account name is required")
        return name.strip()

    @staticmethod
    def _validate_account_type(value: Union[AccountType, str]) -> AccountType:
        try:
            return AccountType(value)
        except ValueError as exc:
            raise ValidationError(f"Unknown account type: {value!r}") from exc

    @staticmethod
    def _validate_currency(value: str) -> str:
        if not isinstance(value, str):
            raise ValidationError(f"Currency must be a 3-letter code, got {value!r}")
        currency = value.strip().upper()
        if not CURRENCY_PATTERN.match(currency):
            raise ValidationError(f"Currency must be a 3-letter code, got {value!r}")
        return currency
