from typing import Any, Dict

from knowledge_base.exceptions import ValidationError

# Field → accepted Python types for create/update payloads
PAGE_FIELD_TYPES: Dict[str, tuple] = {
    "title": (str,),
    "content": (str,),
    "icon": (str,),
    "parent_id": (str, type(None)),
    "position": (int,),
}


def assert_page_fields(data: Dict[str, Any]) -> None:
    for field, value in data.items():
        expected = PAGE_FIELD_TYPES.get(field)
        if expected is None:
            continue

        # bool is an int subclass; a JSON true is never a position
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ValidationError(f"Invalid value for '{field}'")


def normalize_parent_id(value: Any) -> Any:
    """An empty string means "root"; anything else is left for the type check."""
    return None if value == "" else value
