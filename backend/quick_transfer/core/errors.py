"""Error taxonomy shared by the gateway, the orchestrator and the HTTP layer.

Every error carries the HTTP status it maps to, so routes and the global
exception handler never have to guess.
"""

from typing import Any


class QuickTransferError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


class ValidationError(QuickTransferError):
    """Malformed or missing request fields. Detected before any remote call."""

    status_code = 400

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "fields": self.fields}


class AuthError(QuickTransferError):
    status_code = 401


class NotFoundError(QuickTransferError):
    status_code = 404


class RemoteUserError(QuickTransferError):
    """The remote service accepted the call but reported business-rule violations."""

    status_code = 400

    def __init__(self, user_errors: list[dict[str, Any]]) -> None:
        super().__init__(", ".join(str(error.get("message", "")) for error in user_errors))
        self.user_errors = user_errors

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "errors": self.user_errors}


class GraphQLResponseError(RemoteUserError):
    """Top-level ``errors`` returned by the GraphQL endpoint."""

    @classmethod
    def from_payload(cls, errors: list[Any]) -> "GraphQLResponseError":
        return cls([{"field": None, "message": _graphql_message(error)} for error in errors])


class TransportError(QuickTransferError):
    status_code = 500


def _graphql_message(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("message", "Unknown GraphQL error"))
    return str(error)
