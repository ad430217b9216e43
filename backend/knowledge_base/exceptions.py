"""
Error taxonomy shared by the server, the domain layer and the client.
"""


class KnowledgeBaseError(Exception):
    """Base class for every error the knowledge base raises on purpose."""

    kind = "error"


class NotFound(KnowledgeBaseError):
    """The operation targets a page or version id that does not exist."""

    kind = "not_found"


class ValidationError(KnowledgeBaseError, ValueError):
    """Malformed input, e.g. a reorder payload that is not a list."""

    kind = "validation_error"


class PersistenceFailure(KnowledgeBaseError):
    """The underlying store failed to complete an operation."""

    kind = "persistence_failure"


class NetworkFailure(KnowledgeBaseError):
    """The client could not reach the server (autosave only)."""

    kind = "network_failure"
