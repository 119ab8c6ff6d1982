GENERIC_ERROR_MESSAGE = 'An unexpected error occurred'


class ApiError(Exception):
    """A request to the maintenance API did not succeed.

    Carries the HTTP status (None when no response was received) and a
    message fit for showing to the user.
    """

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def __repr__(self):
        return f'<ApiError {self.status_code}: {self.message}>'


class TransportError(ApiError):
    """No response was received (connection refused, timeout, ...)."""

    def __init__(self, message='Unable to reach the maintenance server'):
        super().__init__(message, status_code=None)


class AuthenticationRequired(ApiError):
    """The API answered 401; the backend session is missing or expired."""


class DecodingError(ApiError):
    """A response body did not match the expected record shape."""

    def __init__(self, model_name, errors):
        super().__init__(f'Malformed {model_name} received from the server')
        self.model_name = model_name
        self.errors = errors


def message_from_body(response):
    """Pull a human readable message out of an error response."""
    fallback = f'Request failed with status {response.status_code}'
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        message = body.get('message')
        if isinstance(message, str) and message.strip():
            return message
    return fallback
