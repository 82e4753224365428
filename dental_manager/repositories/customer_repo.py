"""Customer repository implementation following SOLID principles.

Backs the customer CRUD endpoints, the lookups the appointment service
needs (existence and active flag) and the identity linking used by
auth-service events.
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, or_

from dental_manager.db.base import Customer as DbCustomer
from dental_manager.db.base import as_utc
from dental_manager.domain.entities import Customer as DomainCustomer
from dental_manager.domain.interfaces import ICustomerRepository


class CustomerRepository(ICustomerRepository):
    """Repository for Customer persistence operations."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    def get_by_id(self, customer_id: int) -> Optional[DomainCustomer]:
        db_customer = self.db.query(DbCustomer).filter_by(id=customer_id).first()
        return self._to_domain(db_customer) if db_customer else None

    def get_by_email(self, email: str) -> Optional[DomainCustomer]:
        if not email:
            return None
        db_customer = (
            self.db.query(DbCustomer)
            .filter(func.lower(DbCustomer.email) == email.strip().lower())
            .first()
        )
        return self._to_domain(db_customer) if db_customer else None

    def get_all(
        self, page: int = 1, page_size: int = 10, search: Optional[str] = None
    ) -> List[DomainCustomer]:
        page = max(page, 1)
        db_customers = (
            self._search(search)
            .order_by(DbCustomer.name, DbCustomer.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return [self._to_domain(c) for c in db_customers]

    def count(self, search: Optional[str] = None) -> int:
        return self._search(search).count()

    def create(self, customer: DomainCustomer) -> DomainCustomer:
        now = datetime.now(timezone.utc)
        db_customer = DbCustomer(
            name=customer.name,
            email=customer.email,
            phone=customer.phone or None,
            address=customer.address or None,
            date_of_birth=customer.date_of_birth,
            is_active=customer.is_active,
            user_id=customer.user_id,
            created_at=now,
            updated_at=now,
        )
        self.db.add(db_customer)
        self.db.commit()
        self.db.refresh(db_customer)
        return self._to_domain(db_customer)

    def update(self, customer: DomainCustomer) -> Optional[DomainCustomer]:
        db_customer = self.db.query(DbCustomer).filter_by(id=customer.id).first()
        if not db_customer:
            return None

        db_customer.name = customer.name
        db_customer.email = customer.email
        db_customer.phone = customer.phone or None
        db_customer.address = customer.address or None
        db_customer.date_of_birth = customer.date_of_birth
        db_customer.is_active = customer.is_active
        db_customer.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(db_customer)
        return self._to_domain(db_customer)

    def delete(self, customer_id: int) -> bool:
        db_customer = self.db.query(DbCustomer).filter_by(id=customer_id).first()
        if not db_customer:
            return False
        self.db.delete(db_customer)
        self.db.commit()
        return True

    def update_user_id(self, customer_id: int, user_id: int) -> bool:
        db_customer = self.db.query(DbCustomer).filter_by(id=customer_id).first()
        if not db_customer:
            return False
        db_customer.user_id = user_id
        self.db.commit()
        return True

    def _search(self, search: Optional[str]):
        query = self.db.query(DbCustomer)
        term = (search or "").strip()
        if term:
            pattern = f"%{term}%"
            query = query.filter(
                or_(
                    DbCustomer.name.ilike(pattern),
                    DbCustomer.email.ilike(pattern),
                    DbCustomer.phone.ilike(pattern),
                )
            )
        return query

    def _to_domain(self, db_customer: DbCustomer) -> DomainCustomer:
        """Convert DB model to domain entity."""
        return DomainCustomer(
            id=db_customer.id,
            name=db_customer.name,
            email=db_customer.email,
            phone=db_customer.phone or "",
            address=db_customer.address or "",
            date_of_birth=db_customer.date_of_birth,
            is_active=bool(db_customer.is_active),
            user_id=db_customer.user_id,
            created_at=as_utc(db_customer.created_at),
            updated_at=as_utc(db_customer.updated_at),
        )
