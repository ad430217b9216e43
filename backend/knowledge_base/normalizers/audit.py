# knowledge_base/normalizers/audit.py
from __future__ import annotations

from typing import Any, Dict

from knowledge_base.models.audit_log import AuditLog


def normalize_audit_log(log: AuditLog) -> Dict[str, Any]:
    """
    Normalizes an AuditLog model into API-safe JSON.

    entity_id is always a string; "*" marks batch actions.
    """
    if not log:
        raise ValueError("AuditLog cannot be None")

    return {
        "id": log.id,
        "action": log.action,
        "entity_type": log.entity_type,
        "entity_id": str(log.entity_id),
        "payload": log.payload or {},
        "created_at": log.created_at.isoformat(),
    }
