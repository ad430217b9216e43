from enum import Enum
from typing import Set


class SaveStatus(str, Enum):
    IDLE = "idle"
    UNSAVED = "unsaved"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


# Explicit allowed state transitions
ALLOWED_SAVE_TRANSITIONS: dict[SaveStatus, Set[SaveStatus]] = {
    SaveStatus.IDLE: {SaveStatus.UNSAVED},
    SaveStatus.UNSAVED: {SaveStatus.SAVING},
    # unsaved again when newer edits arrived while the request was in flight
    SaveStatus.SAVING: {SaveStatus.SAVED, SaveStatus.ERROR, SaveStatus.UNSAVED},
    SaveStatus.SAVED: {SaveStatus.UNSAVED},
    SaveStatus.ERROR: {SaveStatus.UNSAVED},
}


def assert_save_transition(*, from_status: SaveStatus, to_status: SaveStatus) -> None:
    """
    Guards autosave status changes.
    Single source of truth for the editor's save indicator.
    """
    allowed = ALLOWED_SAVE_TRANSITIONS.get(from_status, set())

    if to_status not in allowed:
        raise ValueError(
            f"Illegal save transition: {from_status.value} → {to_status.value}"
        )
