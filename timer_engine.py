"""Clock driver for slate application."""

from PyQt6.QtCore import QTimer, QObject, pyqtSignal

from config import TIMER_INTERVAL_MS, TIMER_INCREMENT_S


class TimerEngine(QObject):
    """Emits a tick at a fixed cadence; knows nothing about tasks."""

    # Seconds of task time represented by one tick
    tick = pyqtSignal(float)

    def __init__(self, interval_ms: int = TIMER_INTERVAL_MS,
                 increment_s: float = TIMER_INCREMENT_S):
        """
        Initialize timer engine.

        Args:
            interval_ms: Wall-clock milliseconds between ticks.
            increment_s: Seconds carried by each tick signal.
        """
        super().__init__()
        self.increment_s = increment_s
        self.timer = QTimer(self)
        self.timer.setInterval(interval_ms)
        self.timer.timeout.connect(self._on_timeout)

    @property
    def is_running(self) -> bool:
        return self.timer.isActive()

    def start(self) -> None:
        """Start the timer."""
        self.timer.start()

    def stop(self) -> None:
        """Stop the timer."""
        self.timer.stop()

    def _on_timeout(self) -> None:
        self.tick.emit(self.increment_s)
