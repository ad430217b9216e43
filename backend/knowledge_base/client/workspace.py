import logging
from concurrent.futures import Executor
from typing import Any, Dict, List, Optional

from knowledge_base.domain.tree import TreeNode, breadcrumb_trail, sidebar_tree
from knowledge_base.exceptions import NotFound
from .api_client import KnowledgeBaseClient, PageSummary
from .autosave import DEFAULT_DEBOUNCE_SECONDS, AutosaveCoordinator, background_persist

logger = logging.getLogger(__name__)


class Workspace:
    """
    Client-side view state: the cached page list, the sidebar forest and the
    page currently open in the editor with its autosave session.

    Sessions left behind by navigation keep draining on ``poll()`` until
    their in-flight request has settled and every queued edit is sent.
    """

    def __init__(
        self,
        client: KnowledgeBaseClient,
        *,
        executor: Optional[Executor] = None,
        debounce: float = DEFAULT_DEBOUNCE_SECONDS,
        clock=None,
    ):
        self.client = client
        self.pages: List[PageSummary] = []
        self.active_page: Optional[Dict[str, Any]] = None
        self.session: Optional[AutosaveCoordinator] = None

        self._executor = executor
        self._debounce = debounce
        self._clock = clock
        self._draining: List[AutosaveCoordinator] = []

    @property
    def active_page_id(self) -> Optional[str]:
        return self.active_page["id"] if self.active_page else None

    @property
    def draining(self) -> List[AutosaveCoordinator]:
        """Closed sessions that still have a request in flight or edits to send."""
        return list(self._draining)

    def refresh(self) -> List[PageSummary]:
        self.pages = self.client.list_pages()
        return self.pages

    def sidebar(self, query: Optional[str] = None) -> List[TreeNode]:
        return sidebar_tree(self.pages, query)

    def breadcrumbs(self) -> List[PageSummary]:
        if self.active_page_id is None:
            return []
        return breadcrumb_trail(self.pages, self.active_page_id)

    def open(self, page_id: str) -> Optional[Dict[str, Any]]:
        """
        Open a page in the editor. Pending edits of the previous page are
        flushed first. A page that no longer exists clears the selection.
        """
        self._leave(flush=True)

        try:
            page = self.client.get_page(page_id)
        except NotFound:
            logger.info("Page %s is gone; clearing selection", page_id)
            self.pages = [p for p in self.pages if p.id != page_id]
            self.active_page = None
            return None

        self.active_page = page
        self.session = self._new_session(page)
        return page

    def create(self, parent_id: Optional[str] = None, title: str = "Untitled") -> Optional[Dict[str, Any]]:
        page = self.client.create_page(title=title, parent_id=parent_id)
        self.refresh()
        return self.open(page["id"])

    def delete(self, page_id: str) -> None:
        if page_id == self.active_page_id:
            # edits to a page being deleted have nowhere to go
            self._leave(flush=False)
            self.active_page = None

        for session in self._draining:
            if session.page_id == page_id:
                session.cancel()
        self._draining = [s for s in self._draining if s.page_id != page_id]

        self.client.delete_page(page_id)
        self.refresh()

    def poll(self) -> None:
        """Drive the autosave sessions; picks up title changes in the sidebar."""
        title_saved = self._drain()

        if self.session is not None:
            saved_before = self.session.last_result
            self.session.poll()

            result = self.session.last_result
            if result is not None and result is not saved_before:
                self.active_page = result
                title_saved = title_saved or "title" in self.session.last_saved_patch

        if title_saved:
            self.refresh()

    def retry(self) -> None:
        """Explicit retry of every failed save, open page included."""
        for session in self._draining:
            session.retry()
        if self.session is not None:
            self.session.retry()

    def _drain(self) -> bool:
        title_saved = False
        remaining: List[AutosaveCoordinator] = []

        for session in self._draining:
            saved_before = session.last_result
            session.poll()
            if session.last_result is not saved_before and "title" in session.last_saved_patch:
                title_saved = True
            if not session.idle:
                remaining.append(session)

        self._draining = remaining
        return title_saved

    def _new_session(self, page: Dict[str, Any]) -> AutosaveCoordinator:
        if self._executor is not None:
            persist = background_persist(self.client, self._executor)
        else:
            persist = self.client.update_page

        kwargs = {"initial": page, "delay": self._debounce}
        if self._clock is not None:
            kwargs["clock"] = self._clock
        return AutosaveCoordinator(page["id"], persist, **kwargs)

    def _leave(self, *, flush: bool) -> None:
        if self.session is None:
            return

        self.session.close(flush=flush)
        if flush and not self.session.idle:
            logger.debug("Session for %s still draining", self.session.page_id)
            self._draining.append(self.session)
        self.session = None
