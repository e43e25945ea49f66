"""In-memory registry of rolls that may still be pushed."""

from __future__ import annotations

import itertools
import logging
from collections import OrderedDict
from dataclasses import dataclass

from yzdice.config import settings
from yzdice.engine import RollEngine

logger = logging.getLogger(__name__)


@dataclass
class OpenRoll:
    roll_id: int
    owner_id: int
    engine: RollEngine
    roll_mode: str | None = None


class RollTable:
    """Open rolls keyed by id; the oldest are evicted past ``capacity``.

    A roll leaves the table as soon as it has been pushed since it can never be
    pushed again.
    """

    def __init__(self, capacity: int | None = None) -> None:
        self.capacity = capacity if capacity is not None else settings.max_open_rolls
        self._rolls: OrderedDict[int, OpenRoll] = OrderedDict()
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._rolls)

    def open(self, owner_id: int, engine: RollEngine, roll_mode: str | None = None) -> OpenRoll:
        entry = OpenRoll(
            roll_id=next(self._ids), owner_id=owner_id, engine=engine, roll_mode=roll_mode
        )
        self._rolls[entry.roll_id] = entry
        while len(self._rolls) > self.capacity:
            evicted_id, _ = self._rolls.popitem(last=False)
            logger.debug("Evicted open roll %d", evicted_id)
        return entry

    def get(self, roll_id: int, owner_id: int) -> OpenRoll | None:
        """Return the open roll if it exists and belongs to ``owner_id``."""
        entry = self._rolls.get(roll_id)
        if entry is None or entry.owner_id != owner_id:
            return None
        return entry

    def close(self, roll_id: int) -> None:
        self._rolls.pop(roll_id, None)

    def clear(self) -> None:
        self._rolls.clear()


open_rolls = RollTable()
