"""Test helpers shared across modules."""

from __future__ import annotations

import random
from collections.abc import Iterable

from httpx import AsyncClient


class FixedRandom(random.Random):
    """A Random whose randint returns scripted faces in order."""

    def __init__(self, faces: Iterable[int]) -> None:
        super().__init__(0)
        self.faces = list(faces)
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        if not self.faces:
            raise AssertionError("FixedRandom ran out of faces")
        return self.faces.pop(0)


async def login(client: AsyncClient, user_id: int) -> None:
    await client.post("/dev/login", data={"user_id": str(user_id)}, follow_redirects=False)
