"""
Process-wide random source.

Components accept an explicit ``AleaPRNG``; when none is given they fall
back to the shared instance managed here.
"""

_prng = None


def set_random_seed(seed) -> "AleaPRNG":
    """
    Reseed the shared Alea PRNG.

    Args:
        seed: Seed string or number

    Returns:
        The new shared AleaPRNG instance
    """
    from ..core.alea_prng import AleaPRNG

    global _prng
    _prng = AleaPRNG(seed)
    return _prng


def get_prng() -> "AleaPRNG":
    """
    Get the shared Alea PRNG, creating a default-seeded one on first use.

    Returns:
        AleaPRNG instance
    """
    global _prng
    if _prng is None:
        set_random_seed("default")
    return _prng
