from typing import Any, Callable, Optional


def normalize_query(query: Optional[str]) -> str:
    return (query or "").strip()


def matches(query: str, text: Optional[str]) -> bool:
    """Case-insensitive substring containment."""
    return query.lower() in (text or "").lower()


def title_matcher(query: str) -> Callable[[Any], bool]:
    needle = normalize_query(query)

    def predicate(page: Any) -> bool:
        return matches(needle, page.title)

    return predicate


def excerpt(content: Optional[str], length: int) -> str:
    # Bounded prefix only, not a ranked snippet
    return (content or "")[:length]
