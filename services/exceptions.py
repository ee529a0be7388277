"""
Error types raised by the material services.

Each error carries the HTTP status the API layer answers with.
"""


class MaterialError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"error": self.message}


class ValidationError(MaterialError):
    """Missing or empty field, missing document, or a rejected media type."""

    status_code = 400


class NotFoundError(MaterialError):
    status_code = 404


class ConflictError(MaterialError):
    """A material with the same fields and attachments already exists."""

    status_code = 409


class StorageError(MaterialError):
    status_code = 500


class RepositoryError(MaterialError):
    status_code = 500
