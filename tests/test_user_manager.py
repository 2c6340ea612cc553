import pytest

from core.exceptions import (
    InsufficientPointsError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from utils.user_manager import UserManager


def test_create_user_defaults(db):
    user = UserManager(db).create_user("alice", "secret123")

    assert user.id is not None
    assert user.points == 0
    assert user.role == "user"
    assert user.password_hash != "secret123"


def test_create_user_duplicate(db):
    manager = UserManager(db)
    manager.create_user("alice", "secret123")

    with pytest.raises(UserAlreadyExistsError):
        manager.create_user("alice", "other-password")


def test_authenticate(db):
    manager = UserManager(db)
    manager.create_user("alice", "secret123")

    assert manager.authenticate("alice", "secret123").username == "alice"
    assert manager.authenticate("alice", "wrong-password") is None
    assert manager.authenticate("nobody", "secret123") is None


def test_verify_password_with_malformed_hash(db):
    assert UserManager(db).verify_password("secret123", "not-a-bcrypt-hash") is False


def test_long_passwords_are_truncated_consistently(db):
    manager = UserManager(db)
    long_password = "x" * 100
    manager.create_user("alice", long_password)

    assert manager.authenticate("alice", long_password) is not None


def test_reset_password(db):
    manager = UserManager(db)
    manager.create_user("alice", "secret123")

    manager.reset_password("alice", "new-secret")

    assert manager.authenticate("alice", "secret123") is None
    assert manager.authenticate("alice", "new-secret") is not None


def test_reset_password_unknown_user(db):
    with pytest.raises(UserNotFoundError):
        UserManager(db).reset_password("nobody", "new-secret")


def test_grant_points(db, make_user, points_of):
    make_user("alice", points=10)

    new_points = UserManager(db).grant_points("alice", 50)

    assert new_points == 60
    assert points_of("alice") == 60


def test_grant_negative_points(db, make_user, points_of):
    user_id = make_user("alice", points=60)
    manager = UserManager(db)

    assert manager.grant_points("alice", -60) == 0
    assert [e.action for e in manager.get_history(user_id)] == ["admin:-60"]


def test_grant_points_refuses_negative_balance(db, make_user, points_of):
    user_id = make_user("alice", points=10)
    manager = UserManager(db)

    with pytest.raises(InsufficientPointsError):
        manager.grant_points("alice", -11)

    assert points_of("alice") == 10
    assert manager.get_history(user_id) == []


def test_grant_points_unknown_user(db):
    with pytest.raises(UserNotFoundError):
        UserManager(db).grant_points("nobody", 5)


def test_history_is_newest_first_and_limited(db, make_user):
    user_id = make_user("alice")
    manager = UserManager(db)
    for delta in range(1, 6):
        manager.grant_points("alice", delta)

    history = manager.get_history(user_id, limit=3)

    assert [e.action for e in history] == ["admin:+5", "admin:+4", "admin:+3"]


def test_list_users_and_set_role(db, make_user):
    make_user("bob", points=5)
    make_user("alice", points=7)
    manager = UserManager(db)

    manager.set_role("bob", "admin")
    users = manager.list_users()

    assert [(u.username, u.points, u.role) for u in users] == [
        ("alice", 7, "user"),
        ("bob", 5, "admin"),
    ]
