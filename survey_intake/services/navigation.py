from __future__ import annotations

from dataclasses import dataclass, replace

from survey_intake.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class NavigationState:
    """Position of the respondent within the catalog.

    ``total_steps == 0`` means the catalog has not arrived yet.
    """

    current_step: int = 0
    total_steps: int = 0

    def __post_init__(self) -> None:
        if self.current_step < 0:
            raise ValueError("current_step cannot be negative")
        if self.total_steps < 0:
            raise ValueError("total_steps cannot be negative")

    @property
    def is_initialized(self) -> bool:
        return self.total_steps > 0

    @property
    def is_first_step(self) -> bool:
        """Return True when there is no previous step."""

        return self.current_step <= 0

    @property
    def is_last_step(self) -> bool:
        """Return True when the respondent is on the final question."""

        return self.is_initialized and self.current_step == self.total_steps - 1


def set_total_steps(state: NavigationState, total_steps: int) -> NavigationState:
    """Record the catalog length.

    ``current_step`` is left alone even when the new total is smaller; the
    catalog is expected to be set once per session.
    """

    if total_steps < 0:
        raise ValueError("total_steps cannot be negative")
    if state.current_step > max(total_steps - 1, 0):
        logger.warning(
            "Catalog shrank to %d steps while on step %d", total_steps, state.current_step
        )
    return replace(state, total_steps=total_steps)


def next_step(state: NavigationState) -> NavigationState:
    """Move to the next question if available."""

    if state.current_step < state.total_steps - 1:
        return replace(state, current_step=state.current_step + 1)
    return state


def previous_step(state: NavigationState) -> NavigationState:
    """Move to the previous question if available."""

    if state.current_step > 0:
        return replace(state, current_step=state.current_step - 1)
    return state
