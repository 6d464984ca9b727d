import random
import pytest
from datetime import datetime, timedelta
from booking_portal.models import BookingStatus
from booking_portal.services.conflict_service import ConflictService, STANDARD_BLOCKING, OVERRIDE_BLOCKING
from booking_portal.utils.errors import ValidationError

BASE = datetime(2024, 1, 10, 8, 0)


def reference_overlap(a, b):
    """Brute force: do the half-open minute sets share any minute?"""
    minutes_a = set(range(a[0], a[1]))
    minutes_b = set(range(b[0], b[1]))
    return bool(minutes_a & minutes_b)


@pytest.mark.parametrize('seed', range(5))
def test_overlap_matches_reference(seed):
    rng = random.Random(seed)
    for _ in range(200):
        a_start = rng.randint(0, 600)
        a = (a_start, a_start + rng.randint(1, 180))
        b_start = rng.randint(0, 600)
        b = (b_start, b_start + rng.randint(1, 180))

        result = ConflictService.overlaps(
            BASE + timedelta(minutes=a[0]), BASE + timedelta(minutes=a[1]),
            BASE + timedelta(minutes=b[0]), BASE + timedelta(minutes=b[1]),
        )
        assert result == reference_overlap(a, b), (a, b)


def test_touching_intervals_do_not_overlap():
    ten, eleven, noon = BASE.replace(hour=10), BASE.replace(hour=11), BASE.replace(hour=12)
    assert not ConflictService.overlaps(ten, eleven, eleven, noon)
    assert not ConflictService.overlaps(eleven, noon, ten, eleven)
    assert ConflictService.overlaps(ten, noon, eleven, eleven + timedelta(minutes=1))


@pytest.mark.parametrize('start_hour,end_hour', [(10, 10), (12, 10)])
def test_validate_window_rejects_empty_or_inverted(start_hour, end_hour):
    with pytest.raises(ValidationError) as exc:
        ConflictService.validate_window(BASE.replace(hour=start_hour), BASE.replace(hour=end_hour))
    assert exc.value.details[0]['field'] == 'endDateTime'


def test_find_conflicts_uses_blocking_set(init_data, make_booking):
    hall = init_data.hall
    confirmed = make_booking(hall, BASE.replace(hour=9), BASE.replace(hour=10), BookingStatus.CONFIRMED)
    pending = make_booking(hall, BASE.replace(hour=9, minute=30), BASE.replace(hour=11), BookingStatus.PENDING)
    make_booking(hall, BASE.replace(hour=9), BASE.replace(hour=12), BookingStatus.CANCELLED)
    make_booking(hall, BASE.replace(hour=9), BASE.replace(hour=12), BookingStatus.OVERRIDDEN)
    make_booking(hall, BASE.replace(hour=9), BASE.replace(hour=12), BookingStatus.DENIED)

    start, end = BASE.replace(hour=9, minute=45), BASE.replace(hour=10, minute=30)

    standard = ConflictService.find_conflicts(hall.id, start, end, STANDARD_BLOCKING)
    assert [b.id for b in standard] == [confirmed.id]

    override = ConflictService.find_conflicts(hall.id, start, end, OVERRIDE_BLOCKING)
    assert [b.id for b in override] == [confirmed.id, pending.id]


def test_find_conflicts_scoped_to_resource_and_excludes_self(init_data, make_booking):
    booking = make_booking(init_data.hall, BASE.replace(hour=10), BASE.replace(hour=12))
    make_booking(init_data.lab, BASE.replace(hour=10), BASE.replace(hour=12))

    found = ConflictService.find_conflicts(init_data.hall.id, BASE.replace(hour=11), BASE.replace(hour=13))
    assert [b.id for b in found] == [booking.id]
    assert ConflictService.find_conflicts(init_data.hall.id, BASE.replace(hour=11), BASE.replace(hour=13),
                                          exclude_booking_id=booking.id) == []
    assert ConflictService.find_conflicts(init_data.hall.id, BASE.replace(hour=12), BASE.replace(hour=13)) == []
