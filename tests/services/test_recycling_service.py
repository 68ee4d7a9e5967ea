import uuid
from decimal import Decimal

import pytest

from bottle_rewards.core.errors import InvalidQuantity, NoActiveRate, ProfileNotFound
from bottle_rewards.services import recycling_service


def test_submit_credits_balance_and_records_entry(db_session, make_profile, make_rate):
    rate = make_rate(40, "5")
    student = make_profile(points=0)

    entry = recycling_service.submit_bottles(db_session, user_id=student.user_id, quantity=40)
    db_session.commit()

    db_session.refresh(student)
    assert student.points == 40
    assert entry.bottles == 40
    assert entry.money_received == Decimal("5")
    assert entry.rate_id == rate.id


@pytest.mark.parametrize("quantity", [0, -3])
def test_submit_rejects_non_positive_quantity(db_session, make_profile, make_rate, quantity):
    make_rate(40, "5")
    student = make_profile(points=10)

    with pytest.raises(InvalidQuantity):
        recycling_service.submit_bottles(db_session, user_id=student.user_id, quantity=quantity)
    db_session.rollback()

    db_session.refresh(student)
    assert student.points == 10
    assert recycling_service.list_history(db_session, user_id=student.user_id) == []


def test_submit_without_active_rate_fails(db_session, make_profile):
    student = make_profile(points=0)

    with pytest.raises(NoActiveRate):
        recycling_service.submit_bottles(db_session, user_id=student.user_id, quantity=40)
    db_session.rollback()

    db_session.refresh(student)
    assert student.points == 0


def test_submit_for_unknown_profile(db_session, make_rate):
    make_rate(40, "5")
    with pytest.raises(ProfileNotFound):
        recycling_service.submit_bottles(db_session, user_id=uuid.uuid4(), quantity=40)


def test_partial_units_credit_proportional_money(db_session, make_profile, make_rate):
    make_rate(40, "5")
    student = make_profile(points=0)

    first = recycling_service.submit_bottles(db_session, user_id=student.user_id, quantity=39)
    second = recycling_service.submit_bottles(db_session, user_id=student.user_id, quantity=1)
    db_session.commit()

    assert first.money_received == Decimal("4.875")
    assert second.money_received == Decimal("0.125")
    db_session.refresh(student)
    assert student.points == 40


def test_history_and_stats(db_session, make_profile, make_rate):
    make_rate(40, "5")
    alice = make_profile(points=0)
    bob = make_profile(points=0)

    for quantity in (39, 1):
        recycling_service.submit_bottles(db_session, user_id=alice.user_id, quantity=quantity)
    recycling_service.submit_bottles(db_session, user_id=bob.user_id, quantity=10)
    db_session.commit()

    history = recycling_service.list_history(db_session, user_id=alice.user_id)
    assert sorted(e.bottles for e in history) == [1, 39]

    stats = recycling_service.recycling_stats(db_session)
    assert [s.student_id for s in stats] == [alice.student_id, bob.student_id]
    alice_stats = stats[0]
    assert alice_stats.total_bottles == 40
    assert alice_stats.total_money == Decimal("5")
    assert alice_stats.transaction_count == 2
    assert alice_stats.last_transaction is not None
