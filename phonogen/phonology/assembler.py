#!/usr/bin/env python3
"""
Syllable Assembler
==================
Samples one legal syllable from a variety's constraint tables.

Draws are uniform at every level: a class among the selectable classes, then
a cluster within the class. Two cross-constraints narrow the choice:
- the last onset phoneme may map to the only nucleus class legal after it;
- the nucleus may map to the only coda class legal after it, and a nucleus
  in the must-have-coda set always gets a coda.
"""

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from .constraints import ConstraintTable
from .errors import ConstructionError
from .inventory import Inventory, Phoneme

DEFAULT_CODA_PROBABILITY = 0.5


@dataclass(frozen=True)
class Syllable:
    """Onset phonemes, one nucleus, coda phonemes."""
    onset: Tuple[Phoneme, ...]
    nucleus: Phoneme
    coda: Tuple[Phoneme, ...] = ()

    @property
    def phonemes(self) -> Tuple[Phoneme, ...]:
        return self.onset + (self.nucleus,) + self.coda

    @property
    def pattern(self) -> str:
        """CV shape, e.g. 'CCVC'."""
        return 'C' * len(self.onset) + 'V' + 'C' * len(self.coda)

    @property
    def transcription(self) -> str:
        return ''.join(p.symbol for p in self.phonemes)


class SyllableAssembler:
    """
    Samples syllables from onset, nucleus and coda tables.

    Usage:
        assembler = SyllableAssembler(inventory, onsets, nuclei, codas, rng=random.Random(7))
        syllable = assembler.assemble(require_onset=True, require_coda=None)
    """

    def __init__(self, inventory: Inventory, onsets: ConstraintTable, nuclei: ConstraintTable,
                 codas: ConstraintTable, rng, must_have_coda: FrozenSet[int] = frozenset(),
                 coda_probability: float = DEFAULT_CODA_PROBABILITY):
        self.inventory = inventory
        self.onsets = onsets
        self.nuclei = nuclei
        self.codas = codas
        self.must_have_coda = frozenset(must_have_coda)
        self.coda_probability = coda_probability
        self._rng = rng
        # Nuclei are drawn from one flat tier rather than class-then-member.
        self._free_nuclei = tuple(c[0] for c in nuclei.free_clusters())
        if not self._free_nuclei:
            raise ConstructionError(f"{inventory.name}: no selectable nucleus")

    # -------------------------------------------------------------------------
    # Constituents
    # -------------------------------------------------------------------------

    def _pick_cluster(self, table: ConstraintTable, class_index: Optional[int] = None) -> Tuple[Phoneme, ...]:
        if class_index is None:
            if not table.selectable:
                raise ConstructionError(f"{self.inventory.name}.{table.name}: no selectable class")
            class_index = self._rng.choice(table.selectable)
        cluster = self._rng.choice(table[class_index].clusters)
        return tuple(self.inventory[i] for i in cluster)

    def sample_onset(self) -> Tuple[Phoneme, ...]:
        return self._pick_cluster(self.onsets)

    def sample_nucleus(self, onset: Tuple[Phoneme, ...] = ()) -> Phoneme:
        last = onset[-1].index if onset else None
        mapped = self.nuclei.conditioned_class(last)
        if mapped is not None:
            return self._pick_cluster(self.nuclei, mapped)[0]
        return self.inventory[self._rng.choice(self._free_nuclei)]

    def sample_coda(self, nucleus: Phoneme) -> Tuple[Phoneme, ...]:
        return self._pick_cluster(self.codas, self.codas.conditioned_class(nucleus.index))

    def requires_coda(self, nucleus: Phoneme) -> bool:
        return nucleus.index in self.must_have_coda

    # -------------------------------------------------------------------------
    # Syllables
    # -------------------------------------------------------------------------

    def assemble(self, require_onset: bool = True, require_coda: Optional[bool] = None) -> Syllable:
        """
        Sample one syllable.

        Parameters
        ----------
        require_onset : bool
            Whether the syllable has an onset.
        require_coda : bool or None
            True for a coda, False for none, None to let ``coda_probability``
            decide. A must-have-coda nucleus gets a coda regardless.
        """
        onset = self.sample_onset() if require_onset else ()
        nucleus = self.sample_nucleus(onset)

        if self.requires_coda(nucleus):
            with_coda = True
        elif require_coda is None:
            with_coda = self._rng.random() < self.coda_probability
        else:
            with_coda = require_coda

        coda = self.sample_coda(nucleus) if with_coda else ()
        return Syllable(onset, nucleus, coda)
