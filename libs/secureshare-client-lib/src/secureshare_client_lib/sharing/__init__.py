"""Sharing workflow package."""

from secureshare_client_lib.sharing.workflow import (
    ShareFailure,
    ShareFailureReason,
    ShareState,
    ShareWorkflow,
)

__all__ = [
    "ShareFailure",
    "ShareFailureReason",
    "ShareState",
    "ShareWorkflow",
]
