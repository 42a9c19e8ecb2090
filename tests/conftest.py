"""
Shared fixtures
===============
Engines for the bundled varieties and random-source doubles.
"""

import sys
from pathlib import Path

import pytest

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from phonogen.phonology import Engine


class FirstChoiceRandom:
    """Always picks the first candidate and loses every coin flip."""

    def random(self):
        return 0.99

    def randrange(self, stop):
        return 0

    def randint(self, a, b):
        return a

    def choice(self, seq):
        return seq[0]


class ScriptedRandom(FirstChoiceRandom):
    """Returns scripted ``random()`` values in order; otherwise first-choice."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.values.pop(0)


@pytest.fixture
def first_choice():
    return FirstChoiceRandom()


@pytest.fixture(scope="module")
def english():
    return Engine('american_english', seed=1234)


@pytest.fixture(scope="module")
def french():
    return Engine('metropolitan_french', seed=1234)
