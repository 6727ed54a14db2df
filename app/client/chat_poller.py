"""Timer-driven refresh of one open chat thread.

The poller re-fetches the thread every ``interval`` seconds for as long as the
view that owns it is open. A failed fetch is logged and dropped; the next tick
simply tries again. A 401 means the client has logged out, and the loop
ends there. There is no backoff and no push channel.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

import httpx

from app.core.config import settings
from .api_client import ApiError, ContestHubClient
from .chat_state import ChatReadState

logger = logging.getLogger(__name__)

MessageList = List[Dict[str, Any]]


class ChatPoller:
    def __init__(self, client: ContestHubClient, contest_id: int,
                 on_update: Optional[Callable[[MessageList], None]] = None,
                 read_state: Optional[ChatReadState] = None,
                 interval: Optional[float] = None):
        self.client = client
        self.contest_id = contest_id
        self.on_update = on_update
        self.read_state = read_state
        self.interval = settings.CHAT_POLL_INTERVAL_SECONDS if interval is None else interval
        self.messages: MessageList = []
        self.failures = 0
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll_once(self) -> Optional[MessageList]:
        """Fetch the thread once. Returns None when the fetch failed."""
        try:
            page = self.client.get_messages(self.contest_id)
        except ApiError as e:
            self.failures += 1
            if e.status_code == 401:
                # The client has logged out; no further requests are sent
                logger.info("Chat poll for contest %s stopped: session ended", self.contest_id)
                self._stopped.set()
            else:
                logger.debug("Chat poll for contest %s failed: %s", self.contest_id, e)
            return None
        except httpx.HTTPError as e:
            self.failures += 1
            logger.debug("Chat poll for contest %s failed: %s", self.contest_id, e)
            return None

        self.messages = page.get("messages", [])
        if self.read_state is not None:
            self.read_state.mark_messages_seen(self.contest_id, self.messages)
        if self.on_update is not None:
            self.on_update(self.messages)
        return self.messages

    def send(self, text: str) -> Dict[str, Any]:
        """Post a message, then refresh right away instead of waiting for the next tick."""
        message = self.client.send_message(self.contest_id, text.strip())
        self.poll_once()
        return message

    def _tick(self) -> None:
        try:
            self.poll_once()
        except Exception:
            self.failures += 1
            logger.exception("Chat poll for contest %s raised", self.contest_id)

    def _run(self) -> None:
        self._tick()
        while not self._stopped.wait(self.interval):
            self._tick()

    def start(self) -> "ChatPoller":
        if self.running:
            return self
        self._stopped.clear()
        self._thread = threading.Thread(
            target=self._run, name=f"chat-poller-{self.contest_id}", daemon=True
        )
        self._thread.start()
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        # An in-flight request is not cancelled; it finishes and no new one starts
        self._stopped.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        self._thread = None

    def __enter__(self) -> "ChatPoller":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
