"""Credential and permission lookup for an app.

Secrets are flat or grouped values stored per handle::

    admin: hunter2                 # flat value
    api:                           # group -> values list
      key: abc
      region: eu
    subscribers:                   # list of sets -> filter or random pick
      - username: user1
        password: pw1
      - username: user2
        password: pw2

The store shares no state with page resolution.
"""

from __future__ import annotations

import logging
import random as _random
from typing import Any, Dict, List, Mapping, Optional

from devium.adapters.yaml_sources import load_document

logger = logging.getLogger(__name__)


class SecretNotFound(KeyError):
    """A handle, or a matching entry inside a handle, does not exist."""

    def __init__(self, handle: str, detail: str = "") -> None:
        self.handle = handle
        self.detail = detail
        super().__init__(handle)

    def __str__(self) -> str:
        suffix = f" ({self.detail})" if self.detail else ""
        return f"Secret '{self.handle}' not found{suffix}"


class SecretStore:
    """Key-value lookups by handle over a parsed secrets document."""

    def __init__(
        self,
        data: Optional[Mapping[str, Any]] = None,
        rng: Optional[_random.Random] = None,
    ) -> None:
        self._data: Dict[str, Any] = dict(data or {})
        self._rng = rng or _random.Random()

    @classmethod
    def from_file(cls, path: str) -> "SecretStore":
        """Load a store from a YAML file; a missing file gives an empty store."""
        document = load_document(path)
        if document is None:
            logger.debug("No secrets file at %s", path)
            return cls()
        if not isinstance(document, Mapping):
            raise ValueError(f"{path} must be a mapping of handles")
        return cls(document)

    def handles(self) -> List[str]:
        return list(self._data)

    def get(self, handle: str, random: bool = False, **match: Any) -> Any:
        """Look up the secret stored under ``handle``.

        Args:
            handle: Name of the secret set
            random: Pick one entry of a list-valued set at random
            **match: A single ``field=value`` filter; returns the last value
                of the first entry whose field equals the value

        Returns:
            A flat value, a values list for grouped sets, or the selected
            entry's value(s)

        Raises:
            SecretNotFound: If the handle or a matching entry does not exist
            ValueError: If more than one filter field is given

        Examples:
            >>> store.get("subscribers", username="user1")
            'pw1'
        """
        if handle not in self._data or self._data[handle] is None:
            raise SecretNotFound(handle)
        entries = self._data[handle]

        if match:
            if len(match) > 1:
                raise ValueError("Only one filter field may be given")
            return self._match(handle, entries, *next(iter(match.items())))

        if random:
            if not isinstance(entries, list) or not entries:
                raise SecretNotFound(handle, "no entries to choose from")
            choice = self._rng.choice(entries)
            return list(choice.values()) if isinstance(choice, Mapping) else choice

        return list(entries.values()) if isinstance(entries, Mapping) else entries

    @staticmethod
    def _match(handle: str, entries: Any, field: str, value: Any) -> Any:
        if isinstance(entries, list):
            for entry in entries:
                if isinstance(entry, Mapping) and entry.get(field) == value:
                    return list(entry.values())[-1]
        raise SecretNotFound(handle, f"no entry with {field}={value!r}")
