from .page import _timestamp


def normalize_version(version, include_content=False):
    data = {
        "id": version.id,
        "page_id": version.page_id,
        "title": version.title,
        "created_at": _timestamp(version.created_at),
    }

    if include_content:
        data["content"] = version.content or ""

    return data
