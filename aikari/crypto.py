"""Random hex string generators."""

from __future__ import annotations

import random
import secrets
import time


def gen_random_hex_secure(length: int) -> str:
    """Return ``length`` lowercase hex characters from a secure source.

    ``length`` must be a positive even number.
    """
    if length <= 0 or length % 2 != 0:
        raise ValueError(f"Invalid arg for gen_random_hex_secure: length={length}")
    return secrets.token_hex(length // 2)


def gen_random_hex_insecure(length: int) -> str:
    """Return ``length`` hex characters from a generator seeded with the time.

    Calls made within the same second produce the same string.
    """
    rng = random.Random(int(time.time()))
    return "".join(format(rng.randrange(16), "x") for _ in range(length))