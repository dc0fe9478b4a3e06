"""Background process handle for the slate dashboard."""

import logging
import os
import signal
import subprocess
import sys
from pathlib import Path
from typing import Optional

from config import DASHBOARD_PORT, DASHBOARD_PID_FILE

logger = logging.getLogger(__name__)

_PROJECT_ROOT = Path(__file__).resolve().parent.parent


class DashboardProcess:
    """
    Starts and stops ``python -m dashboard.server`` in its own session.

    The PID is kept in a file so a second app instance reuses a live server
    instead of starting another one on the same port.
    """

    def __init__(self, port: int = DASHBOARD_PORT, pid_file: Path = DASHBOARD_PID_FILE):
        self.port = port
        self.pid_file = Path(pid_file)

    @property
    def url(self) -> str:
        return f"http://localhost:{self.port}"

    def command(self) -> list:
        return [sys.executable, "-m", "dashboard.server", "--port", str(self.port)]

    def running_pid(self) -> Optional[int]:
        """PID of the live server, or None. Stale or garbled pid files are removed."""
        try:
            pid = int(self.pid_file.read_text().strip())
        except FileNotFoundError:
            return None
        except (ValueError, OSError):
            self.pid_file.unlink(missing_ok=True)
            return None

        try:
            os.kill(pid, 0)
        except OSError:
            self.pid_file.unlink(missing_ok=True)
            return None
        return pid

    def launch(self) -> Optional[int]:
        """
        Start the server unless one is already running.

        Returns:
            PID of the server that is now serving.
        """
        pid = self.running_pid()
        if pid is not None:
            logger.info("Dashboard already running (PID %d) on %s", pid, self.url)
            return pid

        try:
            proc = subprocess.Popen(
                self.command(),
                cwd=str(_PROJECT_ROOT),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            logger.warning("Failed to start dashboard: %s", e)
            return None

        self.pid_file.parent.mkdir(parents=True, exist_ok=True)
        self.pid_file.write_text(str(proc.pid))
        logger.info("Dashboard launched (PID %d) on %s", proc.pid, self.url)
        return proc.pid

    def stop(self) -> bool:
        """
        Terminate the server if it is running.

        Returns:
            True if a signal was delivered.
        """
        pid = self.running_pid()
        if pid is None:
            logger.debug("Dashboard not running")
            return False

        try:
            os.kill(pid, signal.SIGTERM)
        except OSError as e:
            logger.warning("Failed to stop dashboard (PID %d): %s", pid, e)
            return False
        finally:
            self.pid_file.unlink(missing_ok=True)

        logger.info("Dashboard stopped (PID %d)", pid)
        return True
