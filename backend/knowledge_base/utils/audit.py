from typing import Optional
from knowledge_base.extensions import db
from knowledge_base.models.audit_log import AuditLog


def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    payload: dict | None = None
):
    """Stage an audit row in the current transaction."""
    log = AuditLog()

    log.action = action
    log.entity_type = entity_type
    log.entity_id = entity_id or "*"
    log.payload = payload or {}

    db.session.add(log)
    return log
