"""Audit logging package."""

from wallet.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
