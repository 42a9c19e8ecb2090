#!/usr/bin/env python3
"""
Phoneme Inventory
=================
The arena that owns a variety's phonemes.

Constraint tables refer to phonemes by their index in the inventory, so a
table is plain data (tuples of ints) that can be copied, compared or rebuilt
without caring which engine it came from.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Sequence, Tuple

from .errors import ConstructionError, UnknownSymbolError
from .features import Phone, get_phone
from .spelling import SpellingRule, parse_rules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Phoneme:
    """A sound of the variety: its phone and its ordered spelling rules."""
    index: int
    phone: Phone
    rules: Tuple[SpellingRule, ...]

    @property
    def symbol(self) -> str:
        return self.phone.symbol

    @property
    def is_vowel(self) -> bool:
        return self.phone.is_vowel

    def __repr__(self) -> str:
        return f"Phoneme(/{self.symbol}/, {len(self.rules)} spellings)"


class Inventory:
    """
    Ordered, immutable collection of phonemes with symbol lookup.

    Usage:
        inventory = Inventory.from_spellings({'a': ['a'], 't': ['t', 'tt']})
        inventory.phoneme('t').rules
        inventory.index_of('a')   # 0
    """

    def __init__(self, phonemes: Sequence[Phoneme], name: str = "inventory"):
        self.name = name
        self._phonemes = tuple(phonemes)
        self._index: Dict[str, int] = {}
        for i, p in enumerate(self._phonemes):
            if p.index != i:
                raise ConstructionError(f"{name}: phoneme /{p.symbol}/ stored at {i} claims index {p.index}")
            if p.symbol in self._index:
                raise ConstructionError(f"{name}: duplicate phoneme /{p.symbol}/")
            self._index[p.symbol] = i

    @classmethod
    def from_spellings(cls, spellings: Mapping[str, List], name: str = "inventory") -> 'Inventory':
        """
        Build an inventory from ``symbol -> spelling rules`` (YAML form).

        Symbols must exist in the universal phone chart.
        """
        if not spellings:
            raise ConstructionError(f"{name}: no phonemes declared")
        symbols = list(spellings)
        phonemes = []
        for i, symbol in enumerate(symbols):
            phone = get_phone(symbol)
            rules = parse_rules(spellings[symbol], symbols, f"{name}.phonemes.{symbol}")
            phonemes.append(Phoneme(i, phone, rules))
        logger.debug(f"{name}: {len(phonemes)} phonemes "
                     f"({sum(1 for p in phonemes if p.is_vowel)} vowels)")
        return cls(phonemes, name)

    def __len__(self) -> int:
        return len(self._phonemes)

    def __iter__(self) -> Iterator[Phoneme]:
        return iter(self._phonemes)

    def __getitem__(self, index: int) -> Phoneme:
        return self._phonemes[index]

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._index

    @property
    def symbols(self) -> Tuple[str, ...]:
        return tuple(p.symbol for p in self._phonemes)

    def index_of(self, symbol: str) -> int:
        try:
            return self._index[symbol]
        except KeyError:
            raise UnknownSymbolError(symbol, self.name) from None

    def phoneme(self, symbol: str) -> Phoneme:
        return self._phonemes[self.index_of(symbol)]

    def phone(self, symbol: str) -> Phone:
        """The phone of a symbol registered in this variety."""
        return self.phoneme(symbol).phone

    def vowels(self) -> List[Phoneme]:
        return [p for p in self._phonemes if p.is_vowel]

    def consonants(self) -> List[Phoneme]:
        return [p for p in self._phonemes if not p.is_vowel]
