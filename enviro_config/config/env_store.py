"""Injectable key/value store that the loader writes environment values into.

By default the store wraps ``os.environ`` so loaded values are visible to the
rest of the process and inherited by child processes. Tests can hand in a
plain dict instead and use ``snapshot``/``restore`` to keep runs isolated.
"""
from __future__ import annotations

import os
from collections.abc import MutableMapping
from typing import Dict, Iterator, Mapping, Optional


class EnvironmentStore(MutableMapping):
    """String-to-string mapping backed by ``os.environ`` or a caller-supplied mapping."""

    def __init__(self, mapping: Optional[MutableMapping] = None):
        self._data = os.environ if mapping is None else mapping

    # ------------------------------------------------------------------
    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        if not isinstance(key, str) or not isinstance(value, str):
            raise TypeError(f"Environment keys and values must be str, got {type(key).__name__}={type(value).__name__}")
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data))

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        backing = "os.environ" if self._data is os.environ else type(self._data).__name__
        return f"EnvironmentStore({backing}, {len(self)} keys)"

    # ------------------------------------------------------------------
    @property
    def is_process_environment(self) -> bool:
        return self._data is os.environ

    def is_set(self, key: str) -> bool:
        """True when ``key`` holds a non-empty value."""
        return bool(self._data.get(key))

    def snapshot(self) -> Dict[str, str]:
        """Return a detached copy of every key/value pair."""
        return dict(self._data.items())

    def restore(self, snapshot: Mapping[str, str]) -> None:
        """Make the store equal to ``snapshot``, dropping keys it does not contain."""
        for key in list(self._data):
            if key not in snapshot:
                del self._data[key]
        for key, value in snapshot.items():
            self[key] = value


__all__ = ["EnvironmentStore"]
