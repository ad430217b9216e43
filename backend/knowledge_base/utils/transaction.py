from contextlib import contextmanager
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from knowledge_base.extensions import db
from knowledge_base.exceptions import PersistenceFailure


@contextmanager
def transactional():
    """
    Context manager for database transactions.

    Commits on success, rolls back on any exception. Store errors surface as
    PersistenceFailure; everything else propagates unchanged.
    """
    try:
        yield
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("Transaction rolled back")
        raise PersistenceFailure("The page store could not complete the operation") from exc
    except Exception:
        db.session.rollback()
        raise
