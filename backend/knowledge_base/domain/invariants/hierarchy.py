from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from knowledge_base.exceptions import ValidationError
from .exceptions import InvariantViolation
from .page import normalize_parent_id


@dataclass(frozen=True)
class ReorderItem:
    id: str
    parent_id: Optional[str]
    position: int


def parse_reorder_items(payload: Any) -> List[ReorderItem]:
    """
    Validate a reorder batch shaped like ``[{id, parent_id, position}, ...]``.

    The whole batch is rejected on the first malformed entry.
    """
    if not isinstance(payload, list):
        raise ValidationError("pages must be an array")

    items: List[ReorderItem] = []
    seen = set()

    for index, raw in enumerate(payload):
        if not isinstance(raw, dict):
            raise ValidationError(f"pages[{index}] must be an object")

        page_id = raw.get("id")
        if not isinstance(page_id, str) or not page_id:
            raise ValidationError(f"pages[{index}].id is required")
        if page_id in seen:
            raise ValidationError(f"Page {page_id} appears more than once")
        seen.add(page_id)

        # "", null and a missing key all mean "root"
        parent_id = normalize_parent_id(raw.get("parent_id"))
        if parent_id is not None and not isinstance(parent_id, str):
            raise ValidationError(f"pages[{index}].parent_id must be a string or null")

        position = raw.get("position")
        if isinstance(position, bool) or not isinstance(position, int):
            raise ValidationError(f"pages[{index}].position must be an integer")

        items.append(ReorderItem(id=page_id, parent_id=parent_id, position=position))

    return items


def assert_acyclic(parents: Dict[str, Optional[str]], page_ids: Iterable[str]) -> None:
    """
    Guards the forest invariant for a proposed ``{page_id: parent_id}`` map.

    Only chains starting at ``page_ids`` (the rows being changed) are walked;
    untouched rows cannot have gained a cycle on their own.
    """
    for page_id in page_ids:
        if parents.get(page_id) == page_id:
            raise InvariantViolation(f"Page {page_id} cannot be its own parent")

        seen = {page_id}
        current = parents.get(page_id)
        while current is not None:
            if current in seen:
                raise InvariantViolation(
                    f"Moving page {page_id} would create a cycle in the page tree"
                )
            seen.add(current)
            current = parents.get(current)
