import threading

import pytest

from file_gateway.auth import AuthService
from file_gateway.errors import ConflictError
from file_gateway.repository import InMemoryUserRepository, User
from file_gateway.signing import TokenSigner


def test_add_is_insert_if_absent():
    users = InMemoryUserRepository()
    first = users.add(User(id="user_1", email="a@example.com", password_hash="h1", name="A"))
    with pytest.raises(ConflictError):
        users.add(User(id="user_2", email="a@example.com", password_hash="h2", name="B"))
    assert users.get("a@example.com") is first
    assert len(users) == 1


def test_concurrent_registrations_with_same_email_create_one_user():
    users = InMemoryUserRepository()
    auth = AuthService(users, TokenSigner("secret", 60))
    barrier = threading.Barrier(8)
    outcomes = []

    def attempt(n):
        barrier.wait()
        try:
            auth.register(email="race@example.com", password=f"password-{n}", name=str(n))
            outcomes.append("ok")
        except ConflictError:
            outcomes.append("conflict")

    threads = [threading.Thread(target=attempt, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("conflict") == 7
    assert len(users) == 1
