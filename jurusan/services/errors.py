"""
Exceptions raised by the department service.

Every error carries the HTTP status the API answers with and a list of
human-readable messages.  They subclass ``ValueError`` so callers that
only care about "the request was rejected" can catch that.
"""


class DepartmentServiceError(ValueError):
    """Base class for rejected department operations."""

    status_code = 400

    def __init__(self, messages: str | list[str]):
        if isinstance(messages, str):
            messages = [messages]
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


class ValidationError(DepartmentServiceError):
    """Malformed or missing input fields."""

    status_code = 422


class ConflictError(DepartmentServiceError):
    """A live record already uses the requested name."""

    status_code = 409


class NotFoundError(DepartmentServiceError):
    """The target record does not exist in the required state."""

    status_code = 404


class BusinessRuleError(DepartmentServiceError):
    """An update would give a record a name another record already has."""

    status_code = 400
