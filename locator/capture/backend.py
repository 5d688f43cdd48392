"""Screen capture and input capability interface."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class CaptureBackend(ABC):
    """Platform access needed to find things on screen and click them."""

    @abstractmethod
    def capture_region(self, x: int, y: int, width: int, height: int) -> np.ndarray:
        """Capture a screen region as a BGR image."""

    @abstractmethod
    def capture_window(self, window: Any) -> np.ndarray:
        """Capture the area covered by a window handle."""

    @abstractmethod
    def find_window_by_title(self, title: str) -> Optional[Any]:
        """Return a handle for the first window titled exactly title, or None."""

    @abstractmethod
    def click_at(self, x: int, y: int):
        """Left-click at screen coordinates."""

    @abstractmethod
    def screen_size(self) -> Tuple[int, int]:
        """(width, height) of the primary screen."""

    def capture_screen(self) -> np.ndarray:
        width, height = self.screen_size()
        return self.capture_region(0, 0, width, height)


class PyAutoGuiBackend(CaptureBackend):
    """CaptureBackend built on pyautogui."""

    def __init__(self, click_delay: float = 0.05, failsafe: bool = True):
        import pyautogui

        self.pyautogui = pyautogui
        self.pyautogui.FAILSAFE = failsafe
        self.click_delay = click_delay

    def capture_region(self, x: int, y: int, width: int, height: int) -> np.ndarray:
        screenshot = self.pyautogui.screenshot(region=(x, y, width, height))
        return cv2.cvtColor(np.array(screenshot), cv2.COLOR_RGB2BGR)

    def capture_window(self, window: Any) -> np.ndarray:
        return self.capture_region(window.left, window.top, window.width, window.height)

    def find_window_by_title(self, title: str) -> Optional[Any]:
        get_windows = getattr(self.pyautogui, "getWindowsWithTitle", None)
        if get_windows is None:
            raise NotImplementedError("Window lookup is not supported on this platform")
        for window in get_windows(title):
            if window.title == title:
                return window
        return None

    def click_at(self, x: int, y: int):
        self.pyautogui.moveTo(int(x), int(y))
        time.sleep(self.click_delay)
        self.pyautogui.click(button='left')

    def screen_size(self) -> Tuple[int, int]:
        width, height = self.pyautogui.size()
        return int(width), int(height)
