"""State machine validation for story status transitions.

Stories follow the workflow Backlog (1) → In Progress (3) → Done (5), with
controlled back-transitions:
- Backlog can only move forward to In Progress
- In Progress can finish (Done) or return to the Backlog
- Done stories can be reopened to either Backlog or In Progress

Same-status moves are not transitions and are rejected.
"""
import logging
from typing import Optional

from .models import StoryStatus, status_label

logger = logging.getLogger("softypm-core.state_machine")


class StateTransitionError(Exception):
    """Raised when an invalid story status transition is attempted."""

    def __init__(
        self,
        message: str,
        current_status: Optional[int],
        requested_status: StoryStatus,
        allowed_transitions: list[StoryStatus]
    ):
        super().__init__(message)
        self.current_status = current_status
        self.requested_status = requested_status
        self.allowed_transitions = allowed_transitions


# Maps current status → list of allowed next statuses
TRANSITION_MATRIX: dict[StoryStatus, list[StoryStatus]] = {
    StoryStatus.BACKLOG: [
        StoryStatus.IN_PROGRESS,  # Forward: work started
    ],
    StoryStatus.IN_PROGRESS: [
        StoryStatus.DONE,         # Forward: work finished
        StoryStatus.BACKLOG,      # Back: blocked or deprioritized
    ],
    StoryStatus.DONE: [
        StoryStatus.BACKLOG,      # Reopen for later
        StoryStatus.IN_PROGRESS,  # Reopen and resume immediately
    ],
}


def get_allowed_transitions(current_status: Optional[int]) -> list[StoryStatus]:
    """
    Get list of allowed next statuses from the current status.

    Statuses outside the workflow (unknown backend values) have no exits.
    """
    try:
        return list(TRANSITION_MATRIX.get(StoryStatus(current_status), []))
    except ValueError:
        return []


def is_transition_valid(current_status: Optional[int], new_status: StoryStatus) -> bool:
    """
    Check if a status transition is valid.

    Args:
        current_status: Current raw status value of the story
        new_status: Requested new status

    Returns:
        True if transition is allowed, False otherwise
    """
    return new_status in get_allowed_transitions(current_status)


def validate_transition(current_status: Optional[int], new_status: StoryStatus) -> None:
    """
    Validate a status transition and raise exception if invalid.

    Raises:
        StateTransitionError: If the transition is not allowed
    """
    if is_transition_valid(current_status, new_status):
        logger.debug(f"Valid story transition: {status_label(current_status)} → {new_status.label}")
        return

    allowed_transitions = get_allowed_transitions(current_status)
    allowed_names = [s.label for s in allowed_transitions]
    error_msg = (
        f"Invalid status transition: {status_label(current_status)} → {new_status.label}. "
        f"Allowed next statuses: {', '.join(allowed_names) or 'none'}."
    )

    logger.warning(f"Blocked story transition: {error_msg}")
    raise StateTransitionError(
        message=error_msg,
        current_status=current_status,
        requested_status=new_status,
        allowed_transitions=allowed_transitions
    )
