"""Shared setup for the synthetic data generators."""

from __future__ import annotations

import random

from faker import Faker


class BaseGenerator:
    """Hold a Faker instance and a random stream for one generator.

    Each generator owns its own ``random.Random`` so that seeding one of
    them does not disturb the global random state or its siblings.

    Parameters
    ----------
    seed : int | None
        Seed for both Faker and the random stream; None for fresh output
        every run.
    locale : str
        Faker locale (default ``en_IN``).
    """

    def __init__(self, seed: int | None = None, locale: str = "en_IN") -> None:
        self.seed = seed
        self.rng = random.Random(seed)
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)

    def weighted_choice(self, options: list, weights: list[float]):
        """Pick one option with the given relative weights."""
        return self.rng.choices(options, weights=weights, k=1)[0]
