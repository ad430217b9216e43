from .page import Page
from .page_version import PageVersion
from .audit_log import AuditLog

__all__ = ["Page", "PageVersion", "AuditLog"]
