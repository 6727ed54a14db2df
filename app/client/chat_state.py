"""Client-side chat read state.

The server keeps no notion of "read". Each user gets a small JSON file holding
the last message id they have seen per contest thread and the set of chat
groups they have dismissed from their list. The state object is created for
one user and handed to whatever needs it; nothing reads it globally.
"""

import logging
import os
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .json_store import read_json_file, write_json_file

logger = logging.getLogger(__name__)


class ChatReadState:
    def __init__(self, user_key: str, state_dir: str):
        self.user_key = str(user_key)
        self.file_path = os.path.join(state_dir, f"chat_state_{self.user_key}.json")
        data = read_json_file(self.file_path, default={})
        self._seen: Dict[int, int] = {int(k): int(v) for k, v in data.get("seen", {}).items()}
        self._dismissed = {int(c) for c in data.get("dismissed", [])}
        # The poller thread and the view both write; one writer at a time
        self._lock = threading.Lock()

    @classmethod
    def for_user(cls, user: Mapping[str, Any], state_dir: str) -> "ChatReadState":
        # Keyed by role too: ids are only unique inside one role's table
        role = user.get("role", "user")
        return cls(f"{role}_{user.get('id') or user.get('email')}", state_dir)

    def _save(self) -> None:
        # Caller holds self._lock
        write_json_file(
            self.file_path,
            {
                "seen": {str(k): v for k, v in sorted(self._seen.items())},
                "dismissed": sorted(self._dismissed),
            },
        )

    def last_seen(self, contest_id: int) -> Optional[int]:
        return self._seen.get(contest_id)

    def mark_seen(self, contest_id: int, last_message_id: int) -> None:
        """Remember the newest message id shown for a thread. Never moves backwards."""
        with self._lock:
            if last_message_id > self._seen.get(contest_id, 0):
                self._seen[contest_id] = last_message_id
                self._save()

    def mark_messages_seen(self, contest_id: int, messages: List[Mapping[str, Any]]) -> None:
        if messages:
            self.mark_seen(contest_id, max(m["id"] for m in messages))

    def unread_count(self, contest_id: int, messages: Iterable[Mapping[str, Any]], own_sender: Optional[Mapping[str, Any]] = None) -> int:
        """Messages newer than the last seen id, not counting the user's own."""
        seen = self._seen.get(contest_id, 0)
        count = 0
        for message in messages:
            if message["id"] <= seen:
                continue
            if own_sender and message.get("sender_role") == own_sender.get("role") \
                    and message.get("sender_id") == own_sender.get("id"):
                continue
            count += 1
        return count

    def has_unread(self, contest_id: int, latest_message_id: Optional[int]) -> bool:
        return latest_message_id is not None and latest_message_id > self._seen.get(contest_id, 0)

    def dismiss(self, contest_id: int) -> None:
        with self._lock:
            if contest_id in self._dismissed:
                return
            self._dismissed.add(contest_id)
            self._save()
        logger.debug("Chat group %s dismissed for %s", contest_id, self.user_key)

    def restore(self, contest_id: int) -> None:
        with self._lock:
            if contest_id in self._dismissed:
                self._dismissed.discard(contest_id)
                self._save()

    def is_dismissed(self, contest_id: int) -> bool:
        return contest_id in self._dismissed

    def visible_groups(self, groups: Iterable[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
        return [g for g in groups if g["contest_id"] not in self._dismissed]
