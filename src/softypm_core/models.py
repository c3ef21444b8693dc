"""Story status model shared by the gateway and the tool handlers."""
from typing import Any, Optional
import enum


class StoryStatus(int, enum.Enum):
    """Workflow status of a story.

    The backend stores status as a small integer. Only these three values
    are ever written by this system:
    - 1: Backlog, not started
    - 3: In Progress, actively being worked on
    - 5: Done, completed
    """

    BACKLOG = 1
    IN_PROGRESS = 3
    DONE = 5

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS: dict[StoryStatus, str] = {
    StoryStatus.BACKLOG: "Backlog",
    StoryStatus.IN_PROGRESS: "In Progress",
    StoryStatus.DONE: "Done",
}


def parse_status(value: Any) -> StoryStatus:
    """Strictly coerce a tool argument to a StoryStatus.

    Accepts the integers 1, 3, 5 and their string forms ("1", "3", "5").
    Booleans, floats and any other value raise ValueError.
    """
    if isinstance(value, StoryStatus):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid status {value!r}: expected 1, 3 or 5")
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            raise ValueError(f"Invalid status {value!r}: expected 1, 3 or 5")
        value = int(value)
    if not isinstance(value, int):
        raise ValueError(f"Invalid status {value!r}: expected 1, 3 or 5")
    try:
        return StoryStatus(value)
    except ValueError:
        raise ValueError(f"Invalid status {value!r}: expected 1, 3 or 5") from None


def status_label(value: Optional[int]) -> str:
    """Human label for a raw status value, falling back to the raw value."""
    try:
        return StoryStatus(value).label
    except ValueError:
        return str(value)
