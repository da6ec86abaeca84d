"""State machine for page loading.

Deterministic state machine that defines which load status changes the
page controller may perform.
"""

from enum import Enum

from catalog_browser.domain.exceptions import InvalidStateTransitionError


class LoadStatus(str, Enum):
    """Page controller load states.

    State diagram:
        IDLE
          │ reload / go_to_page
          ▼
        LOADING ─────── failure ──────► FAILED
          │  ▲                            │  │
          │  └──── reload / go_to_page ───┘  │ load_more
          ▼                                  ▼
        READY ────── load_more ─────► LOADING_MORE
          ▲                                  │
          └───────────── success ────────────┘

    LOADING_MORE falls back to FAILED on error (items are kept), and
    any busy status may be superseded by a new LOADING.
    """

    IDLE = "idle"
    LOADING = "loading"
    LOADING_MORE = "loading_more"
    READY = "ready"
    FAILED = "failed"

    def can_transition_to(self, target: "LoadStatus") -> bool:
        """Check if transition to target status is valid.

        Args:
            target: Target status.

        Returns:
            True if transition is valid.
        """
        return target in _LOAD_TRANSITIONS.get(self, set())

    def allowed_transitions(self) -> list["LoadStatus"]:
        """Get list of valid target statuses.

        Returns:
            List of statuses that can be transitioned to.
        """
        return sorted(_LOAD_TRANSITIONS.get(self, set()), key=lambda s: s.value)

    def is_busy(self) -> bool:
        """Check if a fetch is in flight.

        Returns:
            True while loading or loading more.
        """
        return self in {LoadStatus.LOADING, LoadStatus.LOADING_MORE}


# A superseding reload may start from any busy status
_LOAD_TRANSITIONS: dict[LoadStatus, set[LoadStatus]] = {
    LoadStatus.IDLE: {LoadStatus.LOADING},
    LoadStatus.LOADING: {LoadStatus.LOADING, LoadStatus.READY, LoadStatus.FAILED},
    LoadStatus.LOADING_MORE: {LoadStatus.LOADING, LoadStatus.READY, LoadStatus.FAILED},
    LoadStatus.READY: {LoadStatus.LOADING, LoadStatus.LOADING_MORE},
    LoadStatus.FAILED: {LoadStatus.LOADING, LoadStatus.LOADING_MORE},
}


def validate_load_transition(current: LoadStatus, target: LoadStatus) -> None:
    """Validate a load status transition.

    Args:
        current: Current status.
        target: Target status.

    Raises:
        InvalidStateTransitionError: If transition is invalid.
    """
    if not current.can_transition_to(target):
        raise InvalidStateTransitionError(
            current_state=current.value,
            target_state=target.value,
            allowed_transitions=[s.value for s in current.allowed_transitions()],
        )
