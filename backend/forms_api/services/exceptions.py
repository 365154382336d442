"""Form service exceptions.

Each carries the HTTP status it maps to; the app-level handler turns them
into ``{"error": ..., "message": ...}`` responses.
"""


class FormsError(Exception):
    """Base exception for form and definition operations."""

    status_code = 400
    error = "Bad Request"


class NotFoundError(FormsError):
    """Raised when an operation targets a form, page, component, list or section that does not exist."""

    status_code = 404
    error = "Not Found"


class ConflictError(FormsError):
    """Raised on a uniqueness violation (slug, page path, component name, list name)."""

    error = "Conflict"


class InvalidInputError(FormsError):
    """Raised for malformed input the request schema cannot catch (bad permutation, unknown option)."""

    error = "Invalid Input"


class StructuralInvalidError(FormsError):
    """Raised when a definition violates a document-level consistency rule."""

    error = "Structural Invalid"

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        if self.errors:
            message = f"{message}: {'; '.join(self.errors)}"
        super().__init__(message)
