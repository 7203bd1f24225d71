"""
LifeFlow — Network Status
==========================
Tracks online/offline state and simulates syncing with a remote server.
"""

import asyncio
from typing import Callable, List

import requests

from lifeflow.config import CONNECTIVITY_CHECK_URL, CONNECTIVITY_TIMEOUT, SYNC_DELAY


class LifeFlowNetwork:
    """
    Connectivity flag plus the host event handlers that flip it.

    `check_connection` sends a HEAD request to a URL; `go_online` / `go_offline` are meant
    to be wired to whatever the host uses to announce connectivity changes.
    """

    def __init__(self,
                 check_url: str = CONNECTIVITY_CHECK_URL,
                 timeout: float = CONNECTIVITY_TIMEOUT,
                 sync_delay: float = SYNC_DELAY):
        self.check_url = check_url
        self.timeout = timeout
        self.sync_delay = sync_delay
        self.is_connected = False
        self._listeners: List[Callable[[bool], None]] = []

    def add_listener(self, callback: Callable[[bool], None]) -> None:
        """Register a callback receiving the connection flag on every update."""
        self._listeners.append(callback)

    def check_connection(self) -> bool:
        """HEAD the check URL; any request failure counts as offline."""
        try:
            requests.head(self.check_url, timeout=self.timeout)
            self.is_connected = True
        except requests.RequestException as e:
            print(f"  ✗ Connectivity check failed: {e}")
            self.is_connected = False

        self._update_connection_status()
        return self.is_connected

    def go_online(self) -> None:
        self.is_connected = True
        self._update_connection_status()
        self.show_notification("Connection restored", "success")

    def go_offline(self) -> None:
        self.is_connected = False
        self._update_connection_status()
        self.show_notification("Connection lost - working offline", "warning")

    def status_label(self) -> str:
        return "🟢 Online" if self.is_connected else "🔴 Offline"

    def show_notification(self, message: str, level: str) -> None:
        print(f"[{level.upper()}] {message}")

    def _update_connection_status(self) -> None:
        for callback in self._listeners:
            callback(self.is_connected)

    async def sync_data(self) -> bool:
        """
        Pretend to push local data to a server.

        Resolves False straight away when offline, otherwise True after a
        fixed delay. There is no retry.
        """
        if not self.is_connected:
            return False

        print("Syncing data with server...")
        await asyncio.sleep(self.sync_delay)
        print("Data synced successfully")
        return True
