"""Access control package."""

from secureshare_client_lib.access.admin_gate import (
    AuditLogGate,
    AuditLogStatus,
    AuditLogView,
    filter_audit_entries,
    is_privileged,
)
from secureshare_client_lib.access.classifier import can_perform, classify, permitted_actions
from secureshare_client_lib.access.models import AccessRelationship, DocumentAction
from secureshare_client_lib.access.partitioner import DocumentPartition, filter_by_name, partition

__all__ = [
    "AccessRelationship",
    "AuditLogGate",
    "AuditLogStatus",
    "AuditLogView",
    "DocumentAction",
    "DocumentPartition",
    "can_perform",
    "classify",
    "filter_audit_entries",
    "filter_by_name",
    "is_privileged",
    "partition",
    "permitted_actions",
]
