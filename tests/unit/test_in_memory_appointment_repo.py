"""Unit tests for the in-process appointment store."""

import threading
from datetime import timedelta

import pytest

from dental_manager.core.exceptions import AppointmentNotFoundError, SlotConflictError
from dental_manager.domain.entities import AppointmentStatus
from dental_manager.repositories.in_memory_appointment_repo import (
    InMemoryAppointmentRepository,
)
from tests.factories.repository_factories import make_appointment


@pytest.fixture
def repo() -> InMemoryAppointmentRepository:
    return InMemoryAppointmentRepository()


@pytest.mark.unit
@pytest.mark.repositories
class TestInMemoryAppointmentRepository:
    def test_create_assigns_ids_and_timestamps(self, repo, next_tuesday_10am):
        first = repo.create(make_appointment(id=None, appointment_datetime=next_tuesday_10am))
        second = repo.create(
            make_appointment(
                id=None,
                customer_id=2,
                dentist_id=2,
                appointment_datetime=next_tuesday_10am,
            )
        )

        assert (first.id, second.id) == (1, 2)
        assert first.created_at is not None
        assert first.created_at == first.updated_at

    def test_ids_are_per_instance(self, next_tuesday_10am):
        a = InMemoryAppointmentRepository().create(
            make_appointment(id=None, appointment_datetime=next_tuesday_10am)
        )
        b = InMemoryAppointmentRepository().create(
            make_appointment(id=None, appointment_datetime=next_tuesday_10am)
        )
        assert a.id == b.id == 1

    def test_returned_entities_are_copies(self, repo, next_tuesday_10am):
        created = repo.create(make_appointment(id=None, appointment_datetime=next_tuesday_10am))
        created.status = AppointmentStatus.CANCELLED

        fetched = repo.get_by_id(created.id)
        fetched.procedure_type = "changed"

        stored = repo.get_by_id(created.id)
        assert stored.status is AppointmentStatus.SCHEDULED
        assert stored.procedure_type == "Cleaning"

    def test_create_rejects_double_booking(self, repo, next_tuesday_10am):
        repo.create(make_appointment(id=None, appointment_datetime=next_tuesday_10am))

        with pytest.raises(SlotConflictError) as customer_clash:
            repo.create(
                make_appointment(id=None, dentist_id=2, appointment_datetime=next_tuesday_10am)
            )
        with pytest.raises(SlotConflictError) as dentist_clash:
            repo.create(
                make_appointment(id=None, customer_id=2, appointment_datetime=next_tuesday_10am)
            )

        assert customer_clash.value.kind == "customer"
        assert dentist_clash.value.kind == "dentist"

    def test_cancelled_appointments_free_the_slot(self, repo, next_tuesday_10am):
        first = repo.create(make_appointment(id=None, appointment_datetime=next_tuesday_10am))
        first.status = AppointmentStatus.CANCELLED
        repo.update(first)

        again = repo.create(make_appointment(id=None, appointment_datetime=next_tuesday_10am))

        assert again.id == 2
        assert not repo.has_customer_conflict(1, next_tuesday_10am, again.id)
        assert repo.has_customer_conflict(1, next_tuesday_10am)

    def test_conflict_queries_honour_exclusion(self, repo, next_tuesday_10am):
        created = repo.create(make_appointment(id=None, appointment_datetime=next_tuesday_10am))

        assert repo.has_dentist_conflict(1, next_tuesday_10am)
        assert not repo.has_dentist_conflict(1, next_tuesday_10am, created.id)
        assert not repo.has_dentist_conflict(1, next_tuesday_10am + timedelta(minutes=30))

    def test_update_missing_raises(self, repo):
        with pytest.raises(AppointmentNotFoundError):
            repo.update(make_appointment(id=404))

    def test_update_refreshes_updated_at_and_keeps_created_at(self, repo, next_tuesday_10am):
        created = repo.create(make_appointment(id=None, appointment_datetime=next_tuesday_10am))
        created.notes = "x-ray"

        updated = repo.update(created)

        assert updated.notes == "x-ray"
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at

    def test_delete(self, repo, next_tuesday_10am):
        created = repo.create(make_appointment(id=None, appointment_datetime=next_tuesday_10am))
        assert repo.delete(created.id) is True
        assert repo.delete(created.id) is False
        assert repo.get_by_id(created.id) is None

    def test_queries_are_ordered_and_filtered(self, repo, next_tuesday_10am):
        later = next_tuesday_10am + timedelta(days=1)
        repo.create(make_appointment(id=None, appointment_datetime=later))
        repo.create(make_appointment(id=None, customer_id=2, appointment_datetime=next_tuesday_10am))
        repo.create(
            make_appointment(
                id=None,
                customer_id=3,
                dentist_id=2,
                appointment_datetime=next_tuesday_10am,
                status=AppointmentStatus.COMPLETED,
            )
        )

        by_dentist = repo.get_by_dentist_id(1)
        assert [a.appointment_datetime for a in by_dentist] == [next_tuesday_10am, later]
        assert len(repo.get_by_date_range(next_tuesday_10am, next_tuesday_10am)) == 2
        assert [a.customer_id for a in repo.get_all(status="Completed")] == [3]
        assert [a.customer_id for a in repo.get_all(page=0, page_size=2)] == [2, 3]
        assert [a.customer_id for a in repo.get_all(page=2, page_size=2)] == [1]
        assert repo.get_all(start_date=later) == repo.get_by_customer_id(1)

    def test_concurrent_creates_book_a_slot_once(self, repo, next_tuesday_10am):
        outcomes = []

        def book(customer_id):
            try:
                repo.create(
                    make_appointment(
                        id=None, customer_id=customer_id, appointment_datetime=next_tuesday_10am
                    )
                )
                outcomes.append("ok")
            except SlotConflictError:
                outcomes.append("conflict")

        threads = [threading.Thread(target=book, args=(i,)) for i in range(1, 9)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("ok") == 1
        assert outcomes.count("conflict") == 7
