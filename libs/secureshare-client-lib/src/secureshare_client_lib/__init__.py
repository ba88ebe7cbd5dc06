"""Client-side access control and document sharing for SecureShare."""

from secureshare_client_lib.credentials import decode_credential
from secureshare_client_lib.identity import Identity
from secureshare_client_lib.reconciler import DocumentReconciler
from secureshare_client_lib.session import SessionContext, UserProfile
from secureshare_client_lib.sharing.workflow import ShareWorkflow

__all__ = [
    "DocumentReconciler",
    "Identity",
    "SessionContext",
    "ShareWorkflow",
    "UserProfile",
    "decode_credential",
]
