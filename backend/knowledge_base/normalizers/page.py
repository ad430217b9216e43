def _timestamp(value):
    return value.isoformat() if value is not None else None


def normalize_page(page, include_content=True):
    data = {
        "id": page.id,
        "title": page.title,
        "parent_id": page.parent_id,
        "position": page.position,
        "icon": page.icon,
        "created_at": _timestamp(page.created_at),
        "updated_at": _timestamp(page.updated_at),
    }

    if include_content:
        data["content"] = page.content or ""

    return data


def normalize_breadcrumb(page):
    return {"id": page.id, "title": page.title}
