"""
Identifier generation for stored entities.

Ids only need to be unique on a single device with human-paced input,
so a millisecond timestamp plus a random suffix is enough.
"""

import random
import time


def generate_id() -> str:
    """
    Return a new id of the form "<epoch-ms>-<6 digits>".

    Not cryptographically unique: two calls in the same millisecond
    collide only if they draw the same random suffix.
    """
    timestamp = int(time.time() * 1000)
    random_part = random.randrange(1_000_000)
    return f"{timestamp}-{random_part:06d}"
