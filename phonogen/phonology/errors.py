#!/usr/bin/env python3
"""
Phonology Errors
================
Every failure the engine can raise is a defect in a variety definition, and
is surfaced while the engine is being built rather than while words are
being generated.
"""


class ConstructionError(ValueError):
    """A variety definition is inconsistent or incomplete."""


class UnknownSymbolError(ConstructionError, LookupError):
    """A sound symbol is not registered in the chart or in a variety's inventory."""

    def __init__(self, symbol: str, where: str = "phone chart"):
        self.symbol = symbol
        self.where = where
        super().__init__(f"Unknown sound symbol /{symbol}/ in {where}")


class SpellingError(ConstructionError):
    """No spelling rule of a phoneme accepts the context it was asked to spell."""
