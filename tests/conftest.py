"""
Shared pytest fixtures for the engine and server tests.
"""

import os
import random
import sys

import pytest

# Ensure the package is importable without an install
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from qubic3d.backend.config import GameSettings, OpponentMode  # noqa: E402
from qubic3d.backend.engine import GameEngine  # noqa: E402


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def engine(rng):
    return GameEngine(GameSettings(size=4), rng=rng)


@pytest.fixture
def ai_first_engine(rng):
    settings = GameSettings(size=4, opponent_mode=OpponentMode.AI_FIRST_VS_HUMAN)
    return GameEngine(settings, rng=rng)
