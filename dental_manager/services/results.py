"""
Result objects returned by the application services.

A failed result carries the user-facing reason; results are truthy only
on success so callers can write ``if not result: ...``.
"""

import math
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

from dental_manager.domain.entities import Appointment, Customer, Dentist

T = TypeVar("T")


@dataclass
class OperationResult:
    success: bool
    message: str

    def __bool__(self) -> bool:
        return self.success


@dataclass
class AppointmentResult(OperationResult):
    appointment: Optional[Appointment] = None


@dataclass
class CustomerResult(OperationResult):
    customer: Optional[Customer] = None


@dataclass
class DentistResult(OperationResult):
    dentist: Optional[Dentist] = None


@dataclass
class PagedResult(Generic[T]):
    """One page of a listing plus the total across all pages."""

    items: List[T] = field(default_factory=list)
    page: int = 1
    page_size: int = 10
    total_count: int = 0

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages
