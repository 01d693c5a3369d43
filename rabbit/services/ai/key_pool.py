"""
API Key Pool

Rotates between several credentials for one vendor (e.g. two Groq keys on
the free tier). State is in-memory and per process; it is not shared
between workers.

Keys are never logged, only their 1-based position in the pool.
"""

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import structlog

logger = structlog.get_logger()

# Groq: "Please try again in 1m23.456s" / "try again in 7.5s"
_RESET_HINT = re.compile(r"try again in (?:(\d+)m)?(\d+(?:\.\d+)?)s", re.IGNORECASE)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_reset_time(message: str | None, now: datetime | None = None) -> datetime | None:
    """Extract the reset moment from a vendor rate-limit message, if it has one."""
    if not message:
        return None
    match = _RESET_HINT.search(message)
    if not match:
        return None
    minutes = int(match.group(1) or 0)
    seconds = float(match.group(2))
    return (now or _utcnow()) + timedelta(minutes=minutes, seconds=seconds)


@dataclass
class KeyState:
    key: str
    exhausted: bool = False
    reset_time: datetime | None = None


@dataclass(frozen=True)
class KeyPoolStatus:
    total: int
    active: int
    exhausted: int


class KeyPool:
    """Ordered credentials with a per-key exhaustion flag.

    Each mutation touches a single key's flag; concurrent requests may race
    on it and the last write wins, which is fine because the flag is only
    advisory.
    """

    def __init__(
        self,
        keys: Iterable[str],
        name: str = "provider",
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.name = name
        self._clock = clock
        self._states: list[KeyState] = []
        seen: set[str] = set()
        for key in keys:
            key = (key or "").strip()
            if key and key not in seen:
                seen.add(key)
                self._states.append(KeyState(key))
        self._index = 0
        self.log = logger.bind(component="KeyPool", pool=name)
        self.log.info("key_pool_initialized", keys=len(self._states))

    @classmethod
    def from_env(
        cls,
        names: Iterable[str],
        environ: Mapping[str, str],
        pool_name: str = "provider",
        clock: Callable[[], datetime] = _utcnow,
    ) -> "KeyPool":
        return cls((environ.get(n, "") for n in names), name=pool_name, clock=clock)

    def __len__(self) -> int:
        return len(self._states)

    def _state(self, key: str) -> KeyState | None:
        for state in self._states:
            if state.key == key:
                return state
        return None

    def _position(self, key: str) -> int:
        for i, state in enumerate(self._states):
            if state.key == key:
                return i + 1
        return 0

    def _refresh(self, state: KeyState) -> None:
        """Reactivate a key whose reported reset time has passed."""
        if state.exhausted and state.reset_time is not None and state.reset_time <= self._clock():
            state.exhausted = False
            state.reset_time = None
            self.log.info("key_reset_elapsed", key_number=self._position(state.key))

    def get_current_key(self) -> str | None:
        """Return the current usable key, advancing past exhausted ones.

        Returns None when every key is exhausted; callers treat that as
        "provider unavailable".
        """
        if not self._states:
            return None

        current = self._states[self._index]
        self._refresh(current)
        if not current.exhausted:
            return current.key

        for i, state in enumerate(self._states):
            self._refresh(state)
            if not state.exhausted:
                self._index = i
                self.log.info("key_switched", key_number=i + 1)
                return state.key

        self.log.warning("all_keys_exhausted", total=len(self._states))
        return None

    def mark_key_exhausted(self, key: str, reset_time: datetime | None = None) -> None:
        state = self._state(key)
        if state is None:
            return
        state.exhausted = True
        state.reset_time = reset_time
        self.log.warning(
            "key_exhausted",
            key_number=self._position(key),
            reset_time=reset_time.isoformat() if reset_time else None,
        )

    def mark_key_active(self, key: str) -> None:
        state = self._state(key)
        if state is None:
            return
        state.exhausted = False
        state.reset_time = None
        self.log.info("key_active", key_number=self._position(key))

    def status(self) -> KeyPoolStatus:
        for state in self._states:
            self._refresh(state)
        active = sum(1 for s in self._states if not s.exhausted)
        return KeyPoolStatus(total=len(self._states), active=active, exhausted=len(self._states) - active)
