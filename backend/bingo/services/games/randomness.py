import random
from typing import Optional

BYTE_RANGE = 255


class RandomnessProvider:
    """Source of byte values in [0, 255) used for draws and board entropy."""

    def next(self) -> int:
        raise NotImplementedError


class SystemRandomness(RandomnessProvider):
    """OS-backed randomness. Not a commit-reveal scheme: the host process
    could predict draws if compromised."""

    def __init__(self):
        self._rng = random.SystemRandom()

    def next(self) -> int:
        return self._rng.randrange(BYTE_RANGE)


class SeededRandomness(RandomnessProvider):
    """Reproducible sequence for demos and replays. Predictable by design."""

    def __init__(self, seed):
        self._rng = random.Random(seed)

    def next(self) -> int:
        return self._rng.randrange(BYTE_RANGE)


def provider_from_config(seed: Optional[str]) -> RandomnessProvider:
    if seed is None or seed == '':
        return SystemRandomness()
    return SeededRandomness(seed)
