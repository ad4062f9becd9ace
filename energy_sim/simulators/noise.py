"""Bounded uniform jitter for simulated readings"""

import random


class NoiseGenerator:
    """
    Adds a uniform random offset to a nominal value.

    Each call draws independently from the wrapped random source. Pass a
    seeded random.Random (or a seed) to make a run reproducible.
    """

    def __init__(self, rng=None, seed=None):
        self.rng = rng if rng is not None else random.Random(seed)

    def absolute(self, value, bound):
        """value +/- bound/2"""
        return value + (self.rng.random() - 0.5) * bound

    def relative(self, value, fraction):
        """value +/- value*fraction/2"""
        return value + (self.rng.random() - 0.5) * value * fraction
