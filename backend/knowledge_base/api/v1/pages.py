# knowledge_base/api/v1/pages.py
from flask import request, jsonify
from knowledge_base.exceptions import ValidationError
from knowledge_base.application.pages import (
    create_page,
    update_page,
    delete_page,
    reorder_pages,
    search_pages,
    list_pages,
    get_page,
    page_tree,
    page_breadcrumbs,
    list_versions,
    get_version,
    restore_version,
)
from knowledge_base.normalizers.page import normalize_page, normalize_breadcrumb
from knowledge_base.normalizers.page_version import normalize_version
from knowledge_base.normalizers.search import normalize_search_result
from knowledge_base.normalizers.tree import normalize_tree
from . import v1_bp


def _json_object():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


# ------------------------
# Pages
# ------------------------

@v1_bp.route("/pages", methods=["GET"])
def list_pages_route():
    return jsonify([normalize_page(p, include_content=False) for p in list_pages()])


@v1_bp.route("/pages/tree", methods=["GET"])
def page_tree_route():
    return jsonify(normalize_tree(page_tree(query=request.args.get("q"))))


@v1_bp.route("/pages/search", methods=["GET"])
def search_pages_route():
    results = search_pages(query=request.args.get("q"))
    return jsonify([normalize_search_result(r) for r in results])


@v1_bp.route("/pages/<page_id>", methods=["GET"])
def get_page_route(page_id):
    return jsonify(normalize_page(get_page(page_id=page_id)))


@v1_bp.route("/pages/<page_id>/breadcrumbs", methods=["GET"])
def page_breadcrumbs_route(page_id):
    return jsonify([normalize_breadcrumb(p) for p in page_breadcrumbs(page_id=page_id)])


@v1_bp.route("/pages", methods=["POST"])
def create_page_route():
    page = create_page(data=_json_object())
    return jsonify(normalize_page(page)), 201


@v1_bp.route("/pages/<page_id>", methods=["PUT"])
def update_page_route(page_id):
    page = update_page(page_id=page_id, data=_json_object())
    return jsonify(normalize_page(page)), 200


@v1_bp.route("/pages/<page_id>", methods=["DELETE"])
def delete_page_route(page_id):
    delete_page(page_id=page_id)
    return jsonify({"success": True}), 200


@v1_bp.route("/pages/reorder", methods=["POST"])
def reorder_pages_route():
    data = _json_object()  # {pages: [{id, parent_id, position}, ...]}
    count = reorder_pages(payload=data.get("pages"))
    return jsonify({"success": True, "count": count}), 200


# ------------------------
# Versions
# ------------------------

@v1_bp.route("/pages/<page_id>/versions", methods=["GET"])
def list_versions_route(page_id):
    limit = request.args.get("limit", type=int)
    if limit is not None and limit <= 0:
        raise ValidationError("limit must be a positive integer")

    versions = list_versions(page_id=page_id, limit=limit)
    return jsonify([normalize_version(v) for v in versions])


@v1_bp.route("/pages/<page_id>/versions/<int:version_id>", methods=["GET"])
def get_version_route(page_id, version_id):
    version = get_version(page_id=page_id, version_id=version_id)
    return jsonify(normalize_version(version, include_content=True))


@v1_bp.route("/pages/<page_id>/versions/<int:version_id>/restore", methods=["POST"])
def restore_version_route(page_id, version_id):
    page = restore_version(page_id=page_id, version_id=version_id)
    return jsonify(normalize_page(page)), 200
