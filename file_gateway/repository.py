import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone

from file_gateway.errors import ConflictError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class User:
    id: str
    email: str
    password_hash: str
    name: str
    created_at: datetime = field(default_factory=utc_now)


class InMemoryUserRepository:
    """Process-lifetime user store keyed by email. Users are never updated or removed."""

    def __init__(self):
        self._users: dict[str, User] = {}
        self._lock = threading.Lock()

    def add(self, user: User) -> User:
        with self._lock:
            if user.email in self._users:
                raise ConflictError()
            self._users[user.email] = user
        return user

    def get(self, email: str) -> User | None:
        with self._lock:
            return self._users.get(email)

    def exists(self, email: str) -> bool:
        return self.get(email) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
