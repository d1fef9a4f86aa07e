"""GUID generation built on top of random.Random."""
from __future__ import annotations

import re
import uuid
from random import Random

_GUID_PATTERN = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")


class GuidFactory:
    """Creates version-4 GUID strings, deterministically when seeded."""

    def __init__(self, seed: int | None = None) -> None:
        self._random = Random(seed) if seed is not None else None

    def new_guid(self) -> str:
        """Return a new lowercase GUID string."""
        if self._random is None:
            return str(uuid.uuid4())
        return str(uuid.UUID(int=self._random.getrandbits(128), version=4))


def is_guid(text: str) -> bool:
    """Return True if the text is a 36-character hyphenated GUID."""
    if len(text) != 36:
        return False
    return _GUID_PATTERN.match(text) is not None
