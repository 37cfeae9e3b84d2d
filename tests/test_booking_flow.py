from decimal import Decimal
import uuid

import pytest
from sqlalchemy import text

from app.core.exceptions import InvalidSeat, NotFound, SeatConflict, SeatsTaken, StoreFailure
from app.models.booking import Booking
from app.services.booking_flow import BookingFlow


@pytest.fixture
def alice(make_user):
    return make_user("alice@example.com")


@pytest.fixture
def bob(make_user):
    return make_user("bob@example.com")


@pytest.fixture
def show(make_show):
    return make_show(total_seats=25, price="10.00")


def book(store, user, show, seats):
    return store.insert_booking(user.id, show.id, sorted(seats), Decimal(show.price) * len(seats))


def test_load_reads_show_and_booked_seats(store, alice, bob, show):
    book(store, bob, show, [1, 2])
    flow = BookingFlow(store, alice.id).load(show.id)
    assert flow.show.id == show.id
    assert flow.booked == {1, 2}
    assert flow.selection == set()


def test_load_unknown_show(store, alice):
    with pytest.raises(NotFound):
        BookingFlow(store, alice.id).load(uuid.uuid4())


def test_load_ignores_cancelled_bookings(store, alice, bob, show):
    booking = book(store, bob, show, [1, 2])
    store.update_booking_status(booking, "cancelled")
    assert BookingFlow(store, alice.id).load(show.id).booked == set()


def test_load_treats_unreadable_booked_set_as_empty(store, alice, show, monkeypatch):
    def broken(show_id, statuses=None):
        raise StoreFailure("down")

    monkeypatch.setattr(store, "list_booked_seats", broken)
    flow = BookingFlow(store, alice.id).load(show.id)
    assert flow.booked == set()


def test_toggle_twice_restores_selection(store, alice, show):
    flow = BookingFlow(store, alice.id).load(show.id)
    flow.toggle_seat(4)
    before = set(flow.selection)
    for seat in (7, 25, 4):
        flow.toggle_seat(seat)
        flow.toggle_seat(seat)
        assert flow.selection == before


def test_toggle_booked_seat_is_noop(store, alice, bob, show):
    book(store, bob, show, [3])
    flow = BookingFlow(store, alice.id).load(show.id)
    flow.toggle_seat(3)
    assert flow.selection == set()
    flow.toggle_seat(5)
    flow.toggle_seat(3)
    assert flow.selection == {5}


@pytest.mark.parametrize("seat", [0, 26, -1])
def test_toggle_out_of_range(store, alice, show, seat):
    flow = BookingFlow(store, alice.id).load(show.id)
    with pytest.raises(InvalidSeat):
        flow.toggle_seat(seat)


def test_summary_uses_seat_labels(store, alice, show):
    flow = BookingFlow(store, alice.id).load(show.id)
    for seat in (12, 1):
        flow.toggle_seat(seat)
    summary = flow.summary()
    assert summary["seats"] == ["A1", "B2"]
    assert summary["total"] == Decimal("20")


def test_submit_requires_selection(store, alice, show):
    flow = BookingFlow(store, alice.id).load(show.id)
    with pytest.raises(InvalidSeat):
        flow.submit()


def test_submit_disjoint_selection_creates_pending_booking(store, db, alice, bob, show):
    book(store, bob, show, [1, 2])
    flow = BookingFlow(store, alice.id).load(show.id)
    flow.toggle_seat(6)
    flow.toggle_seat(5)

    booking = flow.submit()

    assert booking.seat_numbers == [5, 6]
    assert booking.total_amount == Decimal("20")
    assert booking.status == "pending"
    assert booking.user_id == alice.id
    assert db.query(Booking).filter(Booking.user_id == alice.id).count() == 1
    assert flow.selection == set()
    assert flow.booked == {1, 2, 5, 6}


def test_submit_overlap_reports_conflict_and_trims_selection(store, db, alice, bob, show):
    flow = BookingFlow(store, alice.id).load(show.id)
    flow.toggle_seat(2)
    flow.toggle_seat(3)
    # bob books after alice loaded the seat map
    book(store, bob, show, [1, 2])

    with pytest.raises(SeatConflict) as excinfo:
        flow.submit()

    assert excinfo.value.conflicting == [2]
    assert excinfo.value.remaining == [3]
    assert flow.selection == {3}
    assert flow.booked == {1, 2}
    assert db.query(Booking).filter(Booking.user_id == alice.id).count() == 0


def test_submit_reports_seats_booked_before_load(store, alice, bob, show):
    book(store, bob, show, [1, 2])
    flow = BookingFlow(store, alice.id).load(show.id)
    flow.select_seats([2, 3])

    with pytest.raises(SeatConflict):
        flow.submit()
    assert flow.selection == {3}


def test_seat_claim_rejects_insert_that_raced_past_the_recheck(store, db, alice, bob, show, monkeypatch):
    flow = BookingFlow(store, alice.id).load(show.id)
    flow.select_seats([5, 6])
    book(store, bob, show, [6])

    real_read = store.list_booked_seats
    reads = []

    def stale_first_read(show_id, statuses=None):
        reads.append(show_id)
        return set() if len(reads) == 1 else real_read(show_id)

    monkeypatch.setattr(store, "list_booked_seats", stale_first_read)

    with pytest.raises(SeatConflict) as excinfo:
        flow.submit()

    assert excinfo.value.conflicting == [6]
    assert flow.selection == {5}
    assert db.query(Booking).filter(Booking.user_id == alice.id).count() == 0


def test_store_failure_keeps_selection(store, alice, show, monkeypatch):
    flow = BookingFlow(store, alice.id).load(show.id)
    flow.select_seats([7, 8])

    def failing_insert(*args, **kwargs):
        raise StoreFailure("Booking failed. Please try again.")

    monkeypatch.setattr(store, "insert_booking", failing_insert)
    with pytest.raises(StoreFailure):
        flow.submit()
    assert flow.selection == {7, 8}


def test_select_seats_validates_range(store, alice, show):
    flow = BookingFlow(store, alice.id).load(show.id)
    with pytest.raises(InvalidSeat):
        flow.select_seats([1, 26])
    with pytest.raises(InvalidSeat):
        flow.select_seats([])


# Scenarios on a 25-seat show priced at 10 with seats 1 and 2 already booked

def test_scenario_overlapping_selection(store, alice, bob, show):
    book(store, bob, show, [1, 2])
    flow = BookingFlow(store, alice.id).load(show.id)
    flow.select_seats([2, 3])

    with pytest.raises(SeatConflict):
        flow.submit()
    assert flow.selection == {3}
    assert flow.booked == {1, 2}


def test_scenario_disjoint_selection(store, alice, bob, show):
    book(store, bob, show, [1, 2])
    flow = BookingFlow(store, alice.id).load(show.id)
    flow.select_seats([5, 6])

    booking = flow.submit()
    assert booking.seat_numbers == [5, 6]
    assert booking.total_amount == Decimal("20")
    assert booking.status == "pending"


@pytest.fixture
def enforce_foreign_keys(db):
    # SQLite only checks foreign keys when asked, and only outside a transaction
    db.commit()
    db.execute(text("PRAGMA foreign_keys=ON"))
    yield
    db.rollback()
    db.execute(text("PRAGMA foreign_keys=OFF"))
    db.commit()


def test_show_deleted_before_submit_is_not_a_seat_conflict(store, db, alice, show, enforce_foreign_keys):
    flow = BookingFlow(store, alice.id).load(show.id)
    flow.select_seats([5])
    store.delete_show(show.id)

    with pytest.raises(NotFound):
        flow.submit()
    assert flow.selection == {5}
    assert db.query(Booking).count() == 0


def test_rejected_insert_without_overlap_is_a_store_failure(store, alice, show, monkeypatch):
    flow = BookingFlow(store, alice.id).load(show.id)
    flow.select_seats([5])

    def rejected_insert(*args, **kwargs):
        raise SeatsTaken()

    monkeypatch.setattr(store, "insert_booking", rejected_insert)
    with pytest.raises(StoreFailure):
        flow.submit()
    assert flow.selection == {5}
