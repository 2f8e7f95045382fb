"""
Scroll/follow state machine for the Logscope console.

The presentation layer reports whether its view sits within the bottom
threshold as a plain boolean; this controller decides when the view must be
moved to the latest entry.
"""

import logging
from enum import Enum
from typing import Callable, Optional

from .models import ScrollState

logger = logging.getLogger(__name__)


class FollowState(str, Enum):
    FOLLOWING = "following"
    PAUSED = "paused"


class ScrollFollowController:
    """
    Tracks whether the view follows new entries.

    In FOLLOWING every content change fires the ``scroll_to_bottom`` effect
    once. A "left bottom" signal pauses following; data arrival never does.
    """

    def __init__(self, scroll_to_bottom: Optional[Callable[[], None]] = None, auto_follow: bool = True):
        """
        Initialize the controller.

        Args:
            scroll_to_bottom: Effect that moves the view to the latest entry
            auto_follow: Start in FOLLOWING when True, PAUSED otherwise
        """
        self._scroll_to_bottom = scroll_to_bottom
        self._state = FollowState.FOLLOWING if auto_follow else FollowState.PAUSED
        self._effect_count = 0

    @property
    def state(self) -> FollowState:
        return self._state

    @property
    def auto_follow(self) -> bool:
        return self._state is FollowState.FOLLOWING

    @property
    def scroll_state(self) -> ScrollState:
        return ScrollState(auto_follow=self.auto_follow)

    @property
    def effect_count(self) -> int:
        """How many times the scroll-to-bottom effect has fired."""
        return self._effect_count

    def set_effect(self, scroll_to_bottom: Optional[Callable[[], None]]) -> None:
        self._scroll_to_bottom = scroll_to_bottom

    def _fire(self) -> None:
        self._effect_count += 1
        if self._scroll_to_bottom is None:
            return
        try:
            self._scroll_to_bottom()
        except Exception:
            logger.exception("Scroll-to-bottom effect failed")

    def _transition(self, state: FollowState) -> bool:
        if self._state is state:
            return False
        logger.debug(f"Scroll state {self._state.value} -> {state.value}")
        self._state = state
        return True

    def notify_content_changed(self) -> bool:
        """
        React to appended entries or a filter change.

        Returns:
            bool: True if the scroll-to-bottom effect fired
        """
        if self._state is FollowState.FOLLOWING:
            self._fire()
            return True
        return False

    def report_at_bottom(self, at_bottom: bool) -> bool:
        """
        Consume the presentation layer's bottom-threshold signal.

        Returns:
            bool: True if the state changed
        """
        return self._transition(FollowState.FOLLOWING if at_bottom else FollowState.PAUSED)

    def jump_to_latest(self, fire: bool = True) -> None:
        """
        Resume following and move the view to the latest entry.

        Args:
            fire: Fire the effect now; False leaves it to the caller
        """
        self._transition(FollowState.FOLLOWING)
        if fire:
            self._fire()

    def set_auto_follow(self, enabled: bool, fire: bool = True) -> bool:
        """
        Explicit pause/resume toggle.

        Resuming fires the scroll-to-bottom effect once.

        Returns:
            bool: True if the state changed
        """
        changed = self._transition(FollowState.FOLLOWING if enabled else FollowState.PAUSED)
        if changed and enabled and fire:
            self._fire()
        return changed
