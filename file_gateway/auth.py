import logging
import secrets
import string
import time

from werkzeug.security import check_password_hash, generate_password_hash

from file_gateway.errors import AuthError, ConflictError
from file_gateway.keys import Identity
from file_gateway.repository import InMemoryUserRepository, User
from file_gateway.signing import TokenSigner

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits
BEARER_PREFIX = "Bearer "


def new_user_id() -> str:
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"user_{int(time.time() * 1000)}_{suffix}"


def bearer_token(authorization: str | None) -> str:
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthError("No token provided. Access denied.")
    return authorization[len(BEARER_PREFIX):].strip()


class AuthService:
    def __init__(self, users: InMemoryUserRepository, signer: TokenSigner):
        self.users = users
        self.signer = signer

    def register(self, *, email: str, password: str, name: str) -> tuple[User, str]:
        # add() re-checks under the lock.
        if self.users.exists(email):
            raise ConflictError()
        user = User(
            id=new_user_id(),
            email=email,
            password_hash=generate_password_hash(password),
            name=name,
        )
        self.users.add(user)
        logger.info("registered user id=%s", user.id)
        return user, self.signer.sign(user_id=user.id, email=user.email)

    def login(self, *, email: str, password: str) -> tuple[User, str]:
        user = self.users.get(email)
        if user is None or not check_password_hash(user.password_hash, password):
            logger.warning("failed login attempt")
            raise AuthError("Invalid email or password")
        return user, self.signer.sign(user_id=user.id, email=user.email)

    def authenticate(self, token: str) -> Identity:
        try:
            return self.signer.verify(token)
        except AuthError as exc:
            logger.warning("rejected bearer token: %s", exc.message)
            raise
