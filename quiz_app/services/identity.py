"""
Durable per-browser identity for quiz participants.

A browser keeps a visitor id and the list of rooms it already finished in
local storage. VisitorIdentity implements the same bookkeeping over any
mutable mapping; JsonFileStore persists such a mapping to disk so scripted
clients (see the simulate_rush command) behave like returning browsers.
"""
import json
import secrets
import string
import time
from collections.abc import MutableMapping
from pathlib import Path

VISITOR_KEY = 'visitor_id'
COMPLETED_ROOMS_KEY = 'completed_rooms'
_BASE36 = string.digits + string.ascii_lowercase


def _now_ms() -> int:
    return int(time.time() * 1000)


class JsonFileStore(MutableMapping):
    """A dict persisted to a JSON file on every write."""

    def __init__(self, path):
        self.path = Path(path)
        self._data = {}
        if self.path.exists():
            raw = self.path.read_text(encoding='utf-8').strip()
            self._data = json.loads(raw) if raw else {}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data), encoding='utf-8')

    def __getitem__(self, key):
        return self._data[key]

    def __setitem__(self, key, value):
        self._data[key] = value
        self._flush()

    def __delitem__(self, key):
        del self._data[key]
        self._flush()

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)


class VisitorIdentity:
    """Stable visitor id, per-room session ids and the locally completed rooms."""

    def __init__(self, store=None):
        self.store = store if store is not None else {}

    @property
    def visitor_id(self) -> str:
        visitor_id = self.store.get(VISITOR_KEY)
        if not visitor_id:
            suffix = ''.join(secrets.choice(_BASE36) for _ in range(9))
            visitor_id = f'v_{_now_ms()}_{suffix}'
            self.store[VISITOR_KEY] = visitor_id
        return visitor_id

    def new_session_id(self, room_code: str) -> str:
        """Session ids are unique per visitor, room and attempt."""
        return f'{room_code}_{self.visitor_id}_{_now_ms()}'

    def completed_rooms(self) -> list:
        return list(self.store.get(COMPLETED_ROOMS_KEY, []))

    def has_completed(self, room_code: str) -> bool:
        return room_code in self.completed_rooms()

    def mark_completed(self, room_code: str) -> None:
        rooms = self.completed_rooms()
        if room_code not in rooms:
            rooms.append(room_code)
            # reassign so file-backed stores persist the change
            self.store[COMPLETED_ROOMS_KEY] = rooms
