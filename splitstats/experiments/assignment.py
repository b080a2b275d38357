import random
from typing import Optional, Sequence

from splitstats.core.exceptions import InvalidParameterError


def select_variant(weights: Sequence[Optional[float]], rng: Optional[random.Random] = None) -> int:
    """
    Weighted random choice of a variant index.

    Weights are traffic percentages (they normally sum to 100). A missing
    weight counts as 0. When the weights sum to less than the drawn value
    the control (index 0) is returned.

    This is the only place in splitstats that uses randomness; pass a seeded
    random.Random for reproducible assignment.
    """
    if any(w is not None and w < 0 for w in weights):
        raise InvalidParameterError(f"Variant weights must be non-negative, got {list(weights)}")

    draw = (rng or random).random() * 100
    cumulative = 0.0

    for index, weight in enumerate(weights):
        cumulative += weight or 0
        if draw <= cumulative:
            return index

    return 0
