"""Pydantic models for API I/O."""

from .assignment import AssignmentRequest, AssignmentResponse, ValidationResponse
from .roster import BulkPlayersRequest, PlayerCreateRequest
from .transfer import ShareRequest, ShareResponse

__all__ = [
    "AssignmentRequest",
    "AssignmentResponse",
    "BulkPlayersRequest",
    "PlayerCreateRequest",
    "ShareRequest",
    "ShareResponse",
    "ValidationResponse",
]
