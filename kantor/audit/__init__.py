"""Audit logging package."""

from kantor.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
