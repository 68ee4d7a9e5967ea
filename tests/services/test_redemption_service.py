from decimal import Decimal

import pytest
from sqlalchemy import func, select, update

from bottle_rewards.core.errors import BelowMinimumUnit, InsufficientBalance, InvalidQuantity, NoActiveRate
from bottle_rewards.models import PointRedemption, Profile
from bottle_rewards.services import redemption_service


def _redemption_count(session) -> int:
    return session.execute(select(func.count(PointRedemption.id))).scalar_one()


def _balance(session, profile) -> int:
    session.refresh(profile)
    return profile.points


def test_redeem_one_unit(db_session, make_profile, make_rate):
    rate = make_rate(40, "5")
    student = make_profile(points=100)

    redemption, remaining = redemption_service.redeem(db_session, user_id=student.user_id, quantity=40)
    db_session.commit()

    assert remaining == 60
    assert _balance(db_session, student) == 60
    assert redemption.points_redeemed == 40
    assert redemption.money_amount == Decimal("5")
    assert redemption.rate_id == rate.id
    assert _redemption_count(db_session) == 1


def test_below_minimum_unit_is_rejected_without_mutation(db_session, make_profile, make_rate):
    make_rate(40, "5")
    student = make_profile(points=100)

    with pytest.raises(BelowMinimumUnit):
        redemption_service.redeem(db_session, user_id=student.user_id, quantity=30)
    db_session.rollback()

    assert _balance(db_session, student) == 100
    assert _redemption_count(db_session) == 0


def test_more_than_balance_is_rejected_without_mutation(db_session, make_profile, make_rate):
    make_rate(40, "5")
    student = make_profile(points=100)

    with pytest.raises(InsufficientBalance):
        redemption_service.redeem(db_session, user_id=student.user_id, quantity=120)
    db_session.rollback()

    assert _balance(db_session, student) == 100
    assert _redemption_count(db_session) == 0


def test_repeated_invalid_redemptions_never_mutate(db_session, make_profile, make_rate):
    make_rate(40, "5")
    student = make_profile(points=100)

    for quantity in (30, 30, 500, 500, 0, -40, 50):
        with pytest.raises((BelowMinimumUnit, InsufficientBalance, InvalidQuantity)):
            redemption_service.redeem(db_session, user_id=student.user_id, quantity=quantity)
        db_session.rollback()

    assert _balance(db_session, student) == 100
    assert _redemption_count(db_session) == 0


def test_unaligned_quantity_is_rejected(db_session, make_profile, make_rate):
    make_rate(40, "5")
    student = make_profile(points=100)

    with pytest.raises(InvalidQuantity):
        redemption_service.redeem(db_session, user_id=student.user_id, quantity=50)
    db_session.rollback()
    assert _balance(db_session, student) == 100


def test_redeem_without_active_rate_fails(db_session, make_profile):
    student = make_profile(points=100)

    with pytest.raises(NoActiveRate):
        redemption_service.redeem(db_session, user_id=student.user_id, quantity=40)
    db_session.rollback()
    assert _balance(db_session, student) == 100


def test_drained_balance_rejects_every_quantity(db_session, make_profile, make_rate):
    make_rate(40, "5")
    student = make_profile(points=40)

    _, remaining = redemption_service.redeem(db_session, user_id=student.user_id, quantity=40)
    db_session.commit()
    assert remaining == 0

    expected = {1: BelowMinimumUnit, 39: BelowMinimumUnit, 40: InsufficientBalance, 80: InsufficientBalance}
    for quantity, error in expected.items():
        with pytest.raises(error):
            redemption_service.redeem(db_session, user_id=student.user_id, quantity=quantity)
        db_session.rollback()

    assert _balance(db_session, student) == 0
    assert _redemption_count(db_session) == 1


def test_money_uses_rate_active_at_redemption_time(db_session, make_profile, make_rate):
    make_rate(40, "5")
    student = make_profile(points=200)
    redemption_service.redeem(db_session, user_id=student.user_id, quantity=40)
    db_session.commit()

    new_rate = make_rate(20, "3")
    redemption, remaining = redemption_service.redeem(db_session, user_id=student.user_id, quantity=40)
    db_session.commit()

    assert redemption.money_amount == Decimal("6")
    assert redemption.rate_id == new_rate.id
    assert remaining == 120


def test_list_redemptions_newest_first(db_session, make_profile, make_rate):
    make_rate(40, "5")
    alice = make_profile(points=200)
    bob = make_profile(points=200)

    redemption_service.redeem(db_session, user_id=alice.user_id, quantity=40)
    redemption_service.redeem(db_session, user_id=bob.user_id, quantity=80)
    db_session.commit()

    records = redemption_service.list_redemptions(db_session)
    assert len(records) == 2
    assert {r.profile.student_id for r in records} == {alice.student_id, bob.student_id}

    only_bob = redemption_service.list_redemptions(db_session, user_id=bob.user_id)
    assert [r.points_redeemed for r in only_bob] == [80]


def test_minimum_unit_is_checked_before_balance(db_session, make_profile, make_rate):
    make_rate(40, "5")
    student = make_profile(points=10)

    with pytest.raises(BelowMinimumUnit):
        redemption_service.redeem(db_session, user_id=student.user_id, quantity=30)
    db_session.rollback()
    assert _balance(db_session, student) == 10


def test_balance_lowered_after_lock_read_fails_guarded_update(db_session, make_profile, make_rate, monkeypatch):
    make_rate(40, "5")
    student = make_profile(points=100)
    real_get_profile = redemption_service.get_profile

    def _get_profile_then_spend(session, user_id, **kwargs):
        profile = real_get_profile(session, user_id, **kwargs)
        session.execute(
            update(Profile)
            .where(Profile.user_id == user_id)
            .values(points=0)
            .execution_options(synchronize_session=False)
        )
        return profile

    monkeypatch.setattr(redemption_service, "get_profile", _get_profile_then_spend)

    with pytest.raises(InsufficientBalance):
        redemption_service.redeem(db_session, user_id=student.user_id, quantity=40)
    db_session.rollback()

    assert _balance(db_session, student) == 100
    assert _redemption_count(db_session) == 0


def test_locked_read_sees_balance_changed_outside_identity_map(db_session, make_profile, make_rate):
    make_rate(40, "5")
    student = make_profile(points=100)
    db_session.execute(
        update(Profile)
        .where(Profile.user_id == student.user_id)
        .values(points=50)
        .execution_options(synchronize_session=False)
    )
    assert student.points == 100

    with pytest.raises(InsufficientBalance, match="only 50 are available"):
        redemption_service.redeem(db_session, user_id=student.user_id, quantity=80)
    db_session.rollback()
