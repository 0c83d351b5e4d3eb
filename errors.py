"""
Failures raised by the library services.

The HTTP layer maps them to status codes; the services themselves never
catch them.
"""


class LibraryError(Exception):
    """Base class for every failure the services report."""


class ValidationError(LibraryError):
    """A required field is missing or malformed."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class NotFound(LibraryError):
    """A referenced record does not exist."""

    def __init__(self, entity: str, record_id):
        super().__init__(f"{entity} {record_id} not found")
        self.entity = entity
        self.record_id = record_id


class IntegrityError(LibraryError):
    """Stored data is inconsistent in a way the services should have prevented."""
