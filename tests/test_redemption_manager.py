import threading

import pytest

from core.exceptions import (
    InsufficientPointsError,
    OutOfStockError,
    RewardNotFoundError,
    UserNotFoundError,
)
from utils.redemption_manager import RedemptionManager
from utils.reward_manager import RewardManager
from utils.user_manager import UserManager


def test_redeem_debits_points_and_stock(db, make_user, make_reward, points_of, quantity_of):
    user_id = make_user("alice", points=250)
    make_reward("T-Shirt", points=200, quantity=20)

    result = RedemptionManager(db).redeem(user_id, "T-Shirt")

    assert result.new_points == 50
    assert result.new_quantity == 19
    assert points_of("alice") == 50
    assert quantity_of("T-Shirt") == 19


def test_redeem_appends_history(db, make_user, make_reward):
    user_id = make_user("alice", points=100)
    make_reward("Sticker", points=50, quantity=5)

    RedemptionManager(db).redeem(user_id, "Sticker")

    history = UserManager(db).get_history(user_id)
    assert [entry.action for entry in history] == ["redeem:Sticker"]


def test_mug_scenario_second_redeem_is_insufficient(
    db, make_user, make_reward, points_of, quantity_of
):
    user_id = make_user("alice", points=100)
    make_reward("Mug", points=100, quantity=1)
    manager = RedemptionManager(db)

    result = manager.redeem(user_id, "Mug")
    assert (result.new_points, result.new_quantity) == (0, 0)

    # Stock is checked before the balance
    with pytest.raises(OutOfStockError):
        manager.redeem(user_id, "Mug")

    RewardManager(db).set_quantity("Mug", 1)
    with pytest.raises(InsufficientPointsError):
        manager.redeem(user_id, "Mug")
    assert points_of("alice") == 0
    assert quantity_of("Mug") == 1


def test_insufficient_points_mutates_nothing(
    db, make_user, make_reward, points_of, quantity_of
):
    user_id = make_user("alice", points=99)
    make_reward("Mug", points=100, quantity=3)

    with pytest.raises(InsufficientPointsError) as exc_info:
        RedemptionManager(db).redeem(user_id, "Mug")

    assert exc_info.value.required == 100
    assert exc_info.value.available == 99
    assert points_of("alice") == 99
    assert quantity_of("Mug") == 3
    assert UserManager(db).get_history(user_id) == []


def test_out_of_stock_mutates_nothing(db, make_user, make_reward, points_of, quantity_of):
    user_id = make_user("alice", points=500)
    make_reward("Mug", points=100, quantity=0)

    with pytest.raises(OutOfStockError):
        RedemptionManager(db).redeem(user_id, "Mug")

    assert points_of("alice") == 500
    assert quantity_of("Mug") == 0


def test_out_of_stock_reported_before_insufficient_points(db, make_user, make_reward):
    user_id = make_user("alice", points=0)
    make_reward("Mug", points=100, quantity=0)

    with pytest.raises(OutOfStockError):
        RedemptionManager(db).redeem(user_id, "Mug")


def test_unknown_reward(db, make_user):
    user_id = make_user("alice", points=500)

    with pytest.raises(RewardNotFoundError):
        RedemptionManager(db).redeem(user_id, "Nope")


def test_unknown_user_restores_stock(db, make_reward, quantity_of):
    make_reward("Mug", points=100, quantity=2)

    with pytest.raises(UserNotFoundError):
        RedemptionManager(db).redeem(9999, "Mug")

    assert quantity_of("Mug") == 2


def _redeem_concurrently(session_factory, attempts):
    """Run (user_id, reward) redemptions in parallel threads.

    Returns:
        List of results, each either a RedemptionResult or the raised exception.
    """
    barrier = threading.Barrier(len(attempts))
    results = [None] * len(attempts)

    def worker(index, user_id, reward_name):
        session = session_factory()
        try:
            barrier.wait()
            results[index] = RedemptionManager(session).redeem(user_id, reward_name)
        except Exception as exc:
            results[index] = exc
        finally:
            session.close()

    threads = [
        threading.Thread(target=worker, args=(i, user_id, reward_name))
        for i, (user_id, reward_name) in enumerate(attempts)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return results


def test_concurrent_redemptions_never_oversell(
    session_factory, make_user, make_reward, quantity_of
):
    make_reward("Mug", points=10, quantity=3)
    user_ids = [make_user(f"user{i}", points=100) for i in range(8)]

    results = _redeem_concurrently(session_factory, [(uid, "Mug") for uid in user_ids])

    successes = [r for r in results if not isinstance(r, Exception)]
    failures = [r for r in results if isinstance(r, Exception)]
    assert len(successes) == 3
    assert len(failures) == 5
    assert all(isinstance(f, OutOfStockError) for f in failures)
    assert quantity_of("Mug") == 0
    assert sorted(r.new_quantity for r in successes) == [0, 1, 2]


def test_concurrent_redemptions_never_overspend(
    session_factory, make_user, make_reward, points_of
):
    user_id = make_user("alice", points=100)
    make_reward("Mug", points=100, quantity=5)
    make_reward("Hat", points=100, quantity=5)

    results = _redeem_concurrently(session_factory, [(user_id, "Mug"), (user_id, "Hat")])

    successes = [r for r in results if not isinstance(r, Exception)]
    failures = [r for r in results if isinstance(r, Exception)]
    assert len(successes) == 1
    assert len(failures) == 1
    assert isinstance(failures[0], InsufficientPointsError)
    assert points_of("alice") == 0
