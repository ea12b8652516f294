"""Shared utility functions and models for the Knit Community Hub application."""

from knit_hub.utils.audit import AuditEvent, log_audit_event

__all__ = [
    "AuditEvent",
    "log_audit_event",
]
