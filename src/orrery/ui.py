"""
UI Collaborator
===============
Signals the core emits for presentation code:

    show_info(title, description) / hide_info()
    set_loading_percent(n)        / loading_complete()

LoggingUI reports them through the logger (headless runs); RecordingUI
keeps them in a list for tests and for windowed hosts that poll.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


class UIInterface(ABC):
    """Presentation-side consumer of core signals."""

    @abstractmethod
    def show_info(self, title: str, description: str):
        pass

    @abstractmethod
    def hide_info(self):
        pass

    @abstractmethod
    def set_loading_percent(self, percent: int):
        pass

    @abstractmethod
    def loading_complete(self):
        pass


class LoggingUI(UIInterface):
    """Writes every signal to the log."""

    def show_info(self, title: str, description: str):
        logger.info("%s: %s", title, description)

    def hide_info(self):
        logger.info("Info panel hidden")

    def set_loading_percent(self, percent: int):
        logger.info("Loading Models: %d%%", percent)

    def loading_complete(self):
        logger.info("Loading complete")


class RecordingUI(UIInterface):
    """Records signals and tracks the resulting panel state."""

    def __init__(self):
        self.signals: List[Tuple] = []
        self.info: Optional[Tuple[str, str]] = None
        self.loading_percent = 0
        self.loaded = False

    def show_info(self, title: str, description: str):
        self.signals.append(('show_info', title, description))
        self.info = (title, description)

    def hide_info(self):
        self.signals.append(('hide_info',))
        self.info = None

    def set_loading_percent(self, percent: int):
        self.signals.append(('set_loading_percent', percent))
        self.loading_percent = percent

    def loading_complete(self):
        self.signals.append(('loading_complete',))
        self.loaded = True

    def count(self, name: str) -> int:
        return sum(1 for signal in self.signals if signal[0] == name)
