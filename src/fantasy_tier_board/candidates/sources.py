from __future__ import annotations

from typing import Any, Protocol


class CandidateSource(Protocol):
    """Protocol for sources that provide raw candidate records keyed by candidate id."""

    async def fetch_all(self) -> dict[str, dict[str, Any]]: ...
