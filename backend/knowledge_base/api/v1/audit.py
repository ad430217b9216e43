from flask import request, jsonify
from knowledge_base.models.audit_log import AuditLog
from knowledge_base.normalizers.audit import normalize_audit_log
from knowledge_base.utils.pagination import paginate_cursor
from . import v1_bp


@v1_bp.route("/audit", methods=["GET"])
def list_audit_logs():
    # Cursor Pagination
    limit = min(request.args.get("limit", 20, type=int), 100)
    cursor = request.args.get("cursor")

    query = AuditLog.query

    # Optional filters
    if action := request.args.get("action"):
        query = query.filter(AuditLog.action == action)

    if entity_id := request.args.get("entity_id"):
        query = query.filter(AuditLog.entity_id == entity_id)

    logs, meta = paginate_cursor(query, model=AuditLog, limit=limit, cursor=cursor)

    return jsonify({
        "data": [normalize_audit_log(log) for log in logs],
        "meta": meta,
    }), 200
