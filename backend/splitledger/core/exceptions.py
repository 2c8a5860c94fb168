"""
Domain exceptions raised by the service layer.

Routes let these propagate; `splitledger.main` maps them to HTTP responses.
"""
from typing import Any, Dict, Optional


class LedgerError(Exception):
    """Base exception for ledger operations."""
    status_code = 400

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(LedgerError):
    """Malformed input, rejected before any write."""
    status_code = 422

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details={"field": field} if field else None)
        self.field = field


class NotFoundError(LedgerError):
    """Referenced entity does not exist."""
    status_code = 404

    def __init__(self, entity: str, identifier: Any):
        super().__init__(f"{entity} not found", details={"entity": entity, "id": identifier})
        self.entity = entity
        self.identifier = identifier


class ConflictError(LedgerError):
    """Write conflicts with existing state."""
    status_code = 409


class DuplicatePublicNameError(ConflictError):
    """Public name is already taken by another profile."""

    def __init__(self, public_name: str):
        super().__init__("Public name already taken", details={"publicName": public_name})


class InviteExpiredError(ConflictError):
    """Invite is past its expiry time."""

    def __init__(self, invite_code: str):
        super().__init__("Invite has expired", details={"inviteCode": invite_code})


class InviteExhaustedError(ConflictError):
    """Invite has reached its maximum number of uses."""

    def __init__(self, invite_code: str):
        super().__init__("Invite has reached its maximum uses", details={"inviteCode": invite_code})


class PartialConsistencyWarning:
    """
    A secondary write failed after its primary write was committed.

    Not raised: collected into the `warnings` list of a successful response
    so the caller can retry the secondary operation.
    """

    def __init__(self, operation: str, message: str, entity_id: Any = None):
        self.operation = operation
        self.message = message
        self.entity_id = entity_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": self.operation,
            "message": self.message,
            "entityId": self.entity_id,
        }

    def __repr__(self) -> str:
        return f"PartialConsistencyWarning({self.operation!r}, {self.message!r})"
