"""Dentist repository implementation following SOLID principles."""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, or_

from dental_manager.db.base import Dentist as DbDentist
from dental_manager.db.base import as_utc
from dental_manager.domain.entities import Dentist as DomainDentist
from dental_manager.domain.interfaces import IDentistRepository


class DentistRepository(IDentistRepository):
    """Repository for Dentist persistence operations."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    def get_by_id(self, dentist_id: int) -> Optional[DomainDentist]:
        db_dentist = self.db.query(DbDentist).filter_by(id=dentist_id).first()
        return self._to_domain(db_dentist) if db_dentist else None

    def get_by_email(self, email: str) -> Optional[DomainDentist]:
        if not email:
            return None
        db_dentist = (
            self.db.query(DbDentist)
            .filter(func.lower(DbDentist.email) == email.strip().lower())
            .first()
        )
        return self._to_domain(db_dentist) if db_dentist else None

    def get_all(
        self, page: int = 1, page_size: int = 10, search: Optional[str] = None
    ) -> List[DomainDentist]:
        page = max(page, 1)
        db_dentists = (
            self._search(search)
            .order_by(DbDentist.name, DbDentist.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return [self._to_domain(d) for d in db_dentists]

    def count(self, search: Optional[str] = None) -> int:
        return self._search(search).count()

    def get_active(self) -> List[DomainDentist]:
        db_dentists = (
            self.db.query(DbDentist)
            .filter(DbDentist.is_active.is_(True))
            .order_by(DbDentist.id)
            .all()
        )
        return [self._to_domain(d) for d in db_dentists]

    def create(self, dentist: DomainDentist) -> DomainDentist:
        now = datetime.now(timezone.utc)
        db_dentist = DbDentist(
            name=dentist.name,
            email=dentist.email,
            phone=dentist.phone or None,
            license_number=dentist.license_number or None,
            specialization=dentist.specialization or None,
            is_active=dentist.is_active,
            user_id=dentist.user_id,
            created_at=now,
            updated_at=now,
        )
        self.db.add(db_dentist)
        self.db.commit()
        self.db.refresh(db_dentist)
        return self._to_domain(db_dentist)

    def update(self, dentist: DomainDentist) -> Optional[DomainDentist]:
        db_dentist = self.db.query(DbDentist).filter_by(id=dentist.id).first()
        if not db_dentist:
            return None

        db_dentist.name = dentist.name
        db_dentist.email = dentist.email
        db_dentist.phone = dentist.phone or None
        db_dentist.license_number = dentist.license_number or None
        db_dentist.specialization = dentist.specialization or None
        db_dentist.is_active = dentist.is_active
        db_dentist.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(db_dentist)
        return self._to_domain(db_dentist)

    def delete(self, dentist_id: int) -> bool:
        db_dentist = self.db.query(DbDentist).filter_by(id=dentist_id).first()
        if not db_dentist:
            return False
        self.db.delete(db_dentist)
        self.db.commit()
        return True

    def update_user_id(self, dentist_id: int, user_id: int) -> bool:
        db_dentist = self.db.query(DbDentist).filter_by(id=dentist_id).first()
        if not db_dentist:
            return False
        db_dentist.user_id = user_id
        self.db.commit()
        return True

    def _search(self, search: Optional[str]):
        query = self.db.query(DbDentist)
        term = (search or "").strip()
        if term:
            pattern = f"%{term}%"
            query = query.filter(
                or_(
                    DbDentist.name.ilike(pattern),
                    DbDentist.email.ilike(pattern),
                    DbDentist.specialization.ilike(pattern),
                )
            )
        return query

    def _to_domain(self, db_dentist: DbDentist) -> DomainDentist:
        return DomainDentist(
            id=db_dentist.id,
            name=db_dentist.name,
            email=db_dentist.email,
            phone=db_dentist.phone or "",
            license_number=db_dentist.license_number or "",
            specialization=db_dentist.specialization or "",
            is_active=bool(db_dentist.is_active),
            user_id=db_dentist.user_id,
            created_at=as_utc(db_dentist.created_at),
            updated_at=as_utc(db_dentist.updated_at),
        )
