class GatewayError(Exception):
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(GatewayError):
    status_code = 400
    default_message = "invalid request parameters"


class AuthError(GatewayError):
    status_code = 401
    default_message = "Authentication error."


class InvalidTokenError(AuthError):
    default_message = "Invalid token. Access denied."


class ExpiredTokenError(AuthError):
    default_message = "Token expired. Please login again."


class NotFoundError(GatewayError):
    status_code = 404
    default_message = "File not found"


class ConflictError(GatewayError):
    status_code = 409
    default_message = "User with this email already exists"


class ProviderError(GatewayError):
    status_code = 500
    default_message = "Storage provider error"
