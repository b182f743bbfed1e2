# engine/rng.py
import random
from functools import lru_cache

from django.conf import settings


@lru_cache(maxsize=None)
def _seeded(seed: str) -> random.Random:
    return random.Random(seed)


def get_rng():
    """
    Source of randomness for game outcomes.

    Production draws from the OS entropy pool. GAME_RNG_SEED pins one
    replayable sequence per process for local debugging; tests pass their
    own random.Random instead of calling this.
    """
    seed = getattr(settings, "GAME_RNG_SEED", None)
    if seed:
        return _seeded(seed)
    return random.SystemRandom()
