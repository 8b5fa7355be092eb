"""SQLAlchemy implementation of AccountRepository."""

from typing import Optional

from sqlalchemy.orm import Session

from tally.domain.models import Account, AccountCategory
from tally.repositories.sqlalchemy.database import read_transaction, write_transaction
from tally.repositories.sqlalchemy.orm_models import AccountORM


class SqlAlchemyAccountRepository:
    """SQLAlchemy-backed account repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, account: Account) -> Account:
        """Persist a new account."""
        orm_account = AccountORM(
            id=account.account_id,
            name=account.name,
            account_type=account.account_type,
            category=account.category,
            institution=account.institution,
            description=account.description,
            currency=account.currency,
            is_active=account.is_active,
            created_at=account.created_at,
            updated_at=account.updated_at,
        )
        with write_transaction(self._db, f"create account {account.account_id}"):
            self._db.add(orm_account)
        with read_transaction(self._db):
            self._db.refresh(orm_account)
            return self._to_domain(orm_account)

    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Retrieve account by ID."""
        with read_transaction(self._db):
            orm_account = self._db.query(AccountORM).filter(
                AccountORM.id == account_id
            ).first()
            return self._to_domain(orm_account) if orm_account else None

    def list_all(
        self,
        is_active: Optional[bool] = None,
        category: Optional[AccountCategory] = None,
    ) -> list[Account]:
        """List accounts ordered by category, type and name."""
        query = self._db.query(AccountORM)
        if is_active is not None:
            query = query.filter(AccountORM.is_active == is_active)
        if category is not None:
            query = query.filter(AccountORM.category == AccountCategory(category))
        query = query.order_by(AccountORM.category, AccountORM.account_type, AccountORM.name)
        with read_transaction(self._db):
            return [self._to_domain(a) for a in query.all()]

    def update(self, account: Account) -> Account:
        """Update the mutable fields of an existing account."""
        with write_transaction(self._db, f"update account {account.account_id}"):
            orm_account = self._db.query(AccountORM).filter(
                AccountORM.id == account.account_id
            ).first()
            if not orm_account:
                raise ValueError(f"Account not found: {account.account_id}")
            orm_account.name = account.name
            orm_account.institution = account.institution
            orm_account.description = account.description
            orm_account.currency = account.currency
            orm_account.is_active = account.is_active
            orm_account.updated_at = account.updated_at
        with read_transaction(self._db):
            self._db.refresh(orm_account)
            return self._to_domain(orm_account)

    def delete(self, account_id: str) -> bool:
        """
        Delete an account.

        Balance entries go with it and milestones are unlinked; both are
        done by the foreign key actions inside the same statement.
        """
        with write_transaction(self._db, f"delete account {account_id}"):
            deleted = self._db.query(AccountORM).filter(
                AccountORM.id == account_id
            ).delete(synchronize_session=False)
        return deleted > 0

    @staticmethod
    def _to_domain(orm: AccountORM) -> Account:
        """Convert ORM model to domain model."""
        return Account(
            account_id=orm.id,
            name=orm.name,
            account_type=orm.account_type,
            currency=orm.currency,
            institution=orm.institution,
            description=orm.description,
            is_active=bool(orm.is_active),
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )
