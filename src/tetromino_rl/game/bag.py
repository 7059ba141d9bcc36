from __future__ import annotations

import random
from typing import Optional, Tuple

from .pieces import TetrominoType


Bag = Tuple[TetrominoType, ...]


def new_bag(rng: Optional[random.Random] = None) -> Bag:
    """Return all 7 kinds in a uniformly random order (Fisher-Yates)."""
    rng = rng or random.Random()
    bag = list(TetrominoType)
    for i in range(len(bag) - 1, 0, -1):
        j = rng.randrange(i + 1)
        bag[i], bag[j] = bag[j], bag[i]
    return tuple(bag)


def draw(bag: Bag, bag_index: int, rng: Optional[random.Random] = None) -> Tuple[TetrominoType, Bag, int]:
    """Take the next kind from `bag`, refilling it once exhausted.

    Returns the kind together with the bag and index to carry forward.
    """
    if bag_index >= len(bag):
        bag = new_bag(rng)
        bag_index = 0
    return bag[bag_index], bag, bag_index + 1
