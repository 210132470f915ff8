"""
Seeded Shuffle
Reproducible answer ordering keyed by a seed string (sessionId-questionIndex)
Not cryptographically secure; only determinism matters here.
"""
from typing import Callable, List, Sequence, TypeVar

T = TypeVar("T")

UINT32_MASK = 0xFFFFFFFF
UINT32_RANGE = 4294967296


def seed_from_string(seed_str: str) -> int:
    """
    Fold the UTF-16 code units of seed_str into an unsigned 32-bit seed

    seed = (seed * 31 + code) mod 2^32
    """
    seed = 0
    data = seed_str.encode("utf-16-le")
    for i in range(0, len(data), 2):
        code = int.from_bytes(data[i:i + 2], "little")
        seed = (seed * 31 + code) & UINT32_MASK
    return seed


def xorshift_random(seed: int) -> Callable[[], float]:
    """Return a generator of floats in [0, 1) driven by a 32-bit xorshift state"""
    state = seed & UINT32_MASK

    def rand() -> float:
        nonlocal state
        state ^= (state << 13) & UINT32_MASK
        state ^= state >> 17
        state ^= (state << 5) & UINT32_MASK
        return state / UINT32_RANGE

    return rand


def seeded_shuffle(items: Sequence[T], seed_str: str) -> List[T]:
    """
    Return a Fisher-Yates permutation of items determined by seed_str

    The input is never modified; the same seed always yields the same order.

    Example:
        seeded_shuffle(["a", "b", "c", "d"], "session-0")
    """
    result = list(items)
    rand = xorshift_random(seed_from_string(seed_str))
    for i in range(len(result) - 1, 0, -1):
        j = int(rand() * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result
