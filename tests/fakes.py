# tests/fakes.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone


class FakeClock:
    """
    Controllable clock for TokenService.

    Starts at the real current instant so tokens issued through the API look
    normal; tests move it forward with ``advance``.
    """

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime.now(tz=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)
