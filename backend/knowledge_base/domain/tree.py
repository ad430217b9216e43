"""
In-memory page hierarchy.

The forest is rebuilt from the flat page list on every call. Parent links are
resolved through an id-keyed index with an explicit presence check; nodes
never hold a reference back to their parent.

Anything exposing ``id`` and ``parent_id`` attributes can be used as a page:
ORM rows on the server, ``PageSummary`` objects on the client.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, List, Set

from .search import normalize_query, title_matcher

PagePredicate = Callable[[Any], bool]


@dataclass
class TreeNode:
    page: Any
    children: List["TreeNode"] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.page.id

    def walk(self) -> Iterator["TreeNode"]:
        """Depth-first, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


def index_pages(pages: Iterable[Any]) -> Dict[str, Any]:
    return {page.id: page for page in pages}


def ancestor_ids(page_id: str, index: Dict[str, Any]) -> List[str]:
    """
    Ids of the ancestors of ``page_id``, nearest first.

    The walk stops silently at a parent missing from ``index`` and never
    visits the same id twice, so a corrupted (cyclic) chain still terminates.
    """
    chain: List[str] = []
    seen: Set[str] = {page_id}
    current = index.get(page_id)

    while current is not None and current.parent_id and current.parent_id not in seen:
        current = index.get(current.parent_id)
        if current is None:
            break
        seen.add(current.id)
        chain.append(current.id)

    return chain


def _loops_back(page_id: str, index: Dict[str, Any]) -> bool:
    seen: Set[str] = set()
    current = index.get(page_id)

    while current is not None and current.parent_id:
        parent_id = current.parent_id
        if parent_id == page_id:
            return True
        if parent_id in seen:
            return False
        seen.add(parent_id)
        current = index.get(parent_id)

    return False


def build_tree(pages: Iterable[Any]) -> List[TreeNode]:
    """
    Build a forest from pages already sorted by ``(position, created_at)``.

    Sibling order follows input order. A page whose parent is absent from the
    input is a root, as is a page whose parent chain loops back to itself.
    """
    pages = list(pages)
    index = index_pages(pages)
    nodes = {page.id: TreeNode(page) for page in pages}
    roots: List[TreeNode] = []

    for page in pages:
        parent_id = page.parent_id
        if parent_id and parent_id in nodes and not _loops_back(page.id, index):
            nodes[parent_id].children.append(nodes[page.id])
        else:
            roots.append(nodes[page.id])

    return roots


def filter_tree(forest: List[TreeNode], predicate: PagePredicate) -> List[TreeNode]:
    """
    Keep nodes that match ``predicate`` plus every ancestor of a match.

    Returns new nodes; the input forest is left untouched.
    """
    index = {node.id: node.page for root in forest for node in root.walk()}

    keep: Set[str] = set()
    for page_id, page in index.items():
        if predicate(page):
            keep.add(page_id)
            keep.update(ancestor_ids(page_id, index))

    return _prune(forest, keep)


def _prune(nodes: List[TreeNode], keep: Set[str]) -> List[TreeNode]:
    return [
        TreeNode(node.page, _prune(node.children, keep))
        for node in nodes
        if node.id in keep
    ]


def sidebar_tree(pages: Iterable[Any], query: str | None = None) -> List[TreeNode]:
    """Sidebar forest: everything for a blank query, otherwise title matches and their ancestors."""
    forest = build_tree(pages)
    if not normalize_query(query):
        return forest
    return filter_tree(forest, title_matcher(query))


def breadcrumb_trail(pages: Iterable[Any], page_id: str) -> List[Any]:
    """Pages from the root down to ``page_id`` (inclusive); empty if it is unknown."""
    index = index_pages(pages)
    page = index.get(page_id)
    if page is None:
        return []

    ancestors = [index[ancestor_id] for ancestor_id in ancestor_ids(page_id, index)]
    return list(reversed(ancestors)) + [page]
