"""Upload progress indicator.

Firebase Storage's simple upload endpoint reports nothing until the write
finishes, so the bar is a cosmetic approximation: it creeps up by a random
amount per tick, stalls at ``CAP`` and only reaches 100 once the upload has
actually returned. It says nothing about bytes transferred.
"""

import random
from typing import Optional

CAP = 90.0
MAX_STEP = 10.0
TICK_SECONDS = 0.2


class SyntheticProgress:
    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()
        self.value = 0.0

    def tick(self) -> float:
        self.value = min(CAP, self.value + self._rng.random() * MAX_STEP)
        return self.value

    def complete(self) -> None:
        self.value = 100.0

    def reset(self) -> None:
        self.value = 0.0

    @property
    def percent(self) -> int:
        return round(self.value)
