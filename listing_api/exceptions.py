"""Error taxonomy shared by the services and the HTTP layer.

Services raise these instead of ``HTTPException`` so they stay usable outside
a request; the handlers registered in ``listing_api.main`` turn each one into
the ``{success: false, message}`` envelope with the matching status code.
"""

from typing import Any, Iterable, Optional

from starlette import status


class ServiceError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"

    def __init__(self, errors: Iterable[dict[str, str]], message: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(message)

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls([{"field": field, "message": message}])

    @classmethod
    def from_pydantic(cls, errors: Iterable[dict[str, Any]], skip_prefix: int = 0):
        """Collapse pydantic error dicts into one message per invalid field.

        ``skip_prefix`` drops leading ``loc`` parts such as ``"body"`` or
        ``"query"`` that FastAPI prepends to request validation errors.
        """
        issues: dict[str, str] = {}
        for error in errors:
            loc = [str(part) for part in error.get("loc", ())][skip_prefix:]
            field = ".".join(loc) or "__root__"
            issues.setdefault(field, error.get("msg", "Invalid value"))
        return cls(
            [{"field": field, "message": message} for field, message in issues.items()]
        )


class AuthenticationError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not authenticate user"


class AuthorizationError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not authorized to perform this action"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class DependencyError(ServiceError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "A backing service is unavailable. Please try again."
