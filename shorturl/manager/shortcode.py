"""
Shortcode generation for the Short URL service.

ShortcodeGenerator draws codes uniformly from the 62-character alphanumeric
alphabet and redraws until the code is absent from the given key set.

Notes:
- Retries are unbounded. With 62^6 possible codes a collision is rare, but a
  crowded key set only slows generation down; it never fails.
- The random source is injected so tests can pin the sequence with a seeded
  ``random.Random``. Production uses ``random.SystemRandom``.
"""

import random
from typing import Container, Optional

ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
DEFAULT_LENGTH = 6


class ShortcodeGenerator:
    def __init__(self, length: int = DEFAULT_LENGTH, rng: Optional[random.Random] = None):
        if length <= 0:
            raise ValueError("length must be positive")
        self.length = length
        self.rng = rng or random.SystemRandom()

    def sample(self, length: Optional[int] = None) -> str:
        """Draw one code without checking for collisions."""
        n = self.length if length is None else length
        return "".join(self.rng.choice(ALPHABET) for _ in range(n))

    def generate(self, existing: Container[str], length: Optional[int] = None) -> str:
        """
        Return a code that is not ``in existing``.

        Args:
            existing: Any container of taken codes (a set, or the store itself).
            length: Override the generator's default length for this call.
        """
        while True:
            code = self.sample(length)
            if code not in existing:
                return code
