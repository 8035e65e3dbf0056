from datetime import datetime, timedelta, timezone

import jwt

from file_gateway.errors import AuthError, ExpiredTokenError, InvalidTokenError
from file_gateway.keys import Identity


class TokenSigner:
    algorithm = "HS256"

    def __init__(self, secret_key: str, expires_in_seconds: int):
        self.secret_key = secret_key
        self.expires_in_seconds = expires_in_seconds

    def sign(self, *, user_id: str, email: str, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "userId": user_id,
            "email": email,
            "iat": issued_at,
            "exp": issued_at + timedelta(seconds=self.expires_in_seconds),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Identity:
        try:
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredTokenError() from exc
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError, jwt.DecodeError) as exc:
            raise InvalidTokenError() from exc
        except jwt.PyJWTError as exc:
            raise AuthError() from exc

        user_id = claims.get("userId")
        email = claims.get("email")
        if not user_id or not email:
            raise AuthError()
        return Identity(id=str(user_id), email=str(email))
