import math

def is_present(value) -> bool:
    """A field counts as provided unless it is None or a blank string. Zero is provided."""
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True

def format_number(value) -> str:
    """
    Stable textual form for prompt values:
    - integral floats drop the trailing .0 (1000000.0 -> 1000000)
    - other floats use Python's shortest round-trip repr (1.05 -> 1.05)
    """
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

def as_finite_float(value) -> float | None:
    """Coerce to a finite float, or None when that is not possible."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number

def fnv1a_32(s: str) -> int:
    """Deterministic, fast hash for seed generation."""
    h = 0x811c9dc5
    for c in s.encode("utf-8"):
        h ^= c
        h = (h * 0x01000193) & 0xFFFFFFFF
    return h

def seeded_rand(seed: int, n: int = 1) -> list[float]:
    """
    Stateless pseudo-random generator (Mulberry32-like) so
    same seed → same outputs without storing PRNG state.
    """
    out = []
    t = (seed + 0x6D2B79F5) & 0xFFFFFFFF
    for _ in range(n):
        t = (t ^ (t >> 15)) * (t | 1) & 0xFFFFFFFF
        t ^= t + ((t ^ (t >> 7)) * (t | 61) & 0xFFFFFFFF)
        r = ((t ^ (t >> 14)) & 0xFFFFFFFF) / 4294967296.0
        out.append(r)
    return out

def valuation_band(average: float, seed: int) -> tuple[int, int]:
    """Low/high valuation around an average, spread 15–30% using seed for variety."""
    spread = 0.15 + seeded_rand(seed+1, 1)[0] * 0.15
    low = int(round(average * (1 - spread)))
    high = int(round(average * (1 + spread)))
    return low, high
