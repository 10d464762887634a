"""
OS pointer and keyboard injection using PyAutoGUI.
"""
import logging

from gestures.state_machine import EventKind, GestureEvent, SwipeDirection

logger = logging.getLogger(__name__)

SWIPE_KEYS = {
    SwipeDirection.LEFT: "left",
    SwipeDirection.RIGHT: "right",
    SwipeDirection.UP: "up",
    SwipeDirection.DOWN: "down",
}


class PointerInjector:
    """Moves the system cursor and performs clicks and swipe shortcuts."""

    def __init__(self):
        import pyautogui

        # Pointer is driven continuously; corner fail-safe and pauses get in the way
        pyautogui.FAILSAFE = False
        pyautogui.PAUSE = 0
        self._automation = pyautogui
        self._paused = False

    @property
    def paused(self) -> bool:
        return self._paused

    def set_paused(self, paused: bool) -> None:
        self._paused = paused

    def move_to(self, x: float, y: float) -> None:
        if self._paused:
            return
        self._automation.moveTo(int(round(x)), int(round(y)))

    def handle_event(self, event: GestureEvent) -> None:
        """Perform the OS action for a gesture event. Dictation events are ignored."""
        if self._paused:
            return

        if event.kind == EventKind.LEFT_CLICK:
            self._automation.click(button="left")
        elif event.kind == EventKind.RIGHT_CLICK:
            self._automation.click(button="right")
        elif event.kind == EventKind.SWIPE and event.direction is not None:
            self._automation.hotkey("ctrl", SWIPE_KEYS[event.direction])
        else:
            return
        logger.debug("Injected %s", event)
