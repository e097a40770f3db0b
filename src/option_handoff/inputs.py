from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from option_handoff.fields import FieldDescriptor

logger = logging.getLogger("option_handoff.inputs")

Inputs = Dict[str, Any]
Listener = Callable[[Inputs], None]


def merge_input(snapshot: Mapping[str, Any], key: Optional[str], value: Any) -> Inputs:
    """
    Copy of `snapshot` with exactly `key` set to `value`.

    Existing keys keep their position; a new key goes last. With no key the copy is
    returned unchanged.
    """
    out: Inputs = dict(snapshot)
    if key is None:
        return out
    out[key] = value
    return out


def clear_inputs(fields: Iterable[FieldDescriptor]) -> Inputs:
    return {f.key: "" for f in fields}


class InputStore:
    """
    Single source of truth for a form's live input map.

    Every write starts from the latest published map and publishes a whole new one, so a
    write to one key can never resurrect a stale value for another. Listeners (the UI
    state) receive each published map.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._lock = threading.Lock()
        # Held across a write and its publish so listeners see maps in write order.
        self._publish_lock = threading.RLock()
        self._current: Inputs = dict(initial or {})
        self._listeners: List[Listener] = []

    def get_current(self) -> Inputs:
        with self._lock:
            return dict(self._current)

    def apply(self, key: Optional[str], value: Any) -> Inputs:
        with self._publish_lock:
            with self._lock:
                snapshot = merge_input(self._current, key, value)
                self._current = snapshot
            self._publish(snapshot)
        return dict(snapshot)

    def replace(self, inputs: Mapping[str, Any]) -> Inputs:
        with self._publish_lock:
            with self._lock:
                snapshot = dict(inputs)
                self._current = snapshot
            self._publish(snapshot)
        return dict(snapshot)

    def clear(self, fields: Iterable[FieldDescriptor]) -> Inputs:
        return self.replace(clear_inputs(fields))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _publish(self, snapshot: Inputs) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(dict(snapshot))
        logger.debug("inputs published keys=%s", list(snapshot.keys()))


__all__ = ["InputStore", "Inputs", "clear_inputs", "merge_input"]
