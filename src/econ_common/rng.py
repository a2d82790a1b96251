"""Random source for the simulation (prices, events, fund drift).

Services take a ``random.Random`` so tests can pass a seeded or stubbed one.
SIMULATION_SEED makes a whole deployment reproducible.
"""

import random

from config.settings import settings


def simulation_rng() -> random.Random:
    return random.Random(settings.SIMULATION_SEED)
