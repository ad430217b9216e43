from .api_client import KnowledgeBaseClient, PageSummary
from .autosave import AutosaveCoordinator, background_persist
from .workspace import Workspace

__all__ = [
    "KnowledgeBaseClient",
    "PageSummary",
    "AutosaveCoordinator",
    "background_persist",
    "Workspace",
]
