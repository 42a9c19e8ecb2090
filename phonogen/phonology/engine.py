#!/usr/bin/env python3
"""
Word Generator
==============
The engine: one variety's inventory, constraint tables and random source,
and the loop that turns syllables into a spelled word.

Construction runs in four stages (inventory, onsets, nuclei, codas) and then
validates the result, so a broken variety definition fails here and never
half-way through generating a word.

Usage:
    from phonogen.phonology import Engine, generate_word

    engine = Engine('american_english', seed=42)
    engine.generate_word(3)                   # e.g. 'blensit'
    generate_word(engine, 2)
    engine.generate(2).transcription          # e.g. 'blɛn.sɪt'
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Sequence, Tuple, Union

from ..settings import get_setting
from .assembler import Syllable, SyllableAssembler
from .constraints import ConstraintTable, build_table
from .entropy import TrueRandom, make_rng
from .features import Phone
from .inventory import Inventory, Phoneme
from .spelling import Position, spell
from .validation import ValidationReport, validate_tables
from .varieties import VarietyDefinition, load_variety

logger = logging.getLogger(__name__)


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class GenerationPolicy:
    """
    Probabilities of the word generator.

    ``onset_probability`` applies to the first syllable only; later onsets
    follow from the previous syllable's coda. ``coda_probability`` applies
    wherever a coda is not suppressed. ``silent_letter_probability`` is the
    coin flip for a silent final letter in varieties that have them.
    """
    onset_probability: float = 0.5
    coda_probability: float = 0.5
    silent_letter_probability: float = 0.5

    def __post_init__(self):
        for name in ('onset_probability', 'coda_probability', 'silent_letter_probability'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")

    @classmethod
    def from_settings(cls) -> 'GenerationPolicy':
        """Read the probabilities from the ``generation`` section of app.yaml."""
        values = {}
        for name in ('onset_probability', 'coda_probability', 'silent_letter_probability'):
            value = get_setting(f"generation.{name}")
            if value is None:
                raise ValueError(f"generation.{name} must be set in app.yaml")
            values[name] = float(value)
        return cls(**values)


@dataclass(frozen=True)
class GeneratedWord:
    """A generated word with the syllables it was spelled from."""
    text: str
    syllables: Tuple[Syllable, ...]
    variety: str
    silent_letter: str = ''

    @property
    def transcription(self) -> str:
        """IPA, syllables separated by dots."""
        return '.'.join(s.transcription for s in self.syllables)

    @property
    def nuclei(self) -> int:
        return len(self.syllables)

    def __str__(self) -> str:
        return self.text


# =============================================================================
# Engine
# =============================================================================

class Engine:
    """
    Generates words for one language variety.

    Args:
        variety: Variety name or alias ('en', 'french', ...) or a
            ``VarietyDefinition``.
        rng: Random source with ``random()``, ``randrange(n)``,
            ``randint(a, b)`` and ``choice(seq)``.
        seed: Seed for a private ``random.Random``. Ignored when ``rng`` is
            given; with neither, a ``TrueRandom`` is used.
        policy: Generation probabilities; defaults to ``GenerationPolicy()``.
        validate: Run the validation pass after building the tables.

    Raises:
        ConstructionError: if the variety definition is inconsistent.

    The tables are immutable once built and may be shared, but the random
    source is not: calling one engine from several threads at once is
    unsupported. Give each thread its own engine.
    """

    def __init__(self, variety: Union[str, VarietyDefinition], rng=None,
                 seed: Optional[int] = None, policy: Optional[GenerationPolicy] = None,
                 validate: bool = True):
        self.definition = variety if isinstance(variety, VarietyDefinition) else load_variety(variety)
        self.policy = policy or GenerationPolicy()
        self.seed = seed if rng is None else None
        self.rng = rng if rng is not None else make_rng(seed)

        d = self.definition
        self.inventory = Inventory.from_spellings(d.phonemes, d.name)
        self.onsets: ConstraintTable = build_table('onsets', d.onsets, self.inventory)
        self.nuclei: ConstraintTable = build_table('nuclei', d.nuclei, self.inventory,
                                                   d.nucleus_conditioning)
        self.codas: ConstraintTable = build_table('codas', d.codas, self.inventory,
                                                  d.coda_conditioning)
        self.must_have_coda: FrozenSet[int] = frozenset(
            self.inventory.index_of(s) for s in d.must_have_coda)
        self.silent_final_letters: Tuple[str, ...] = tuple(d.silent_final_letters)

        self.report: Optional[ValidationReport] = None
        if validate:
            self.report = validate_tables(self.inventory, self.onsets, self.nuclei, self.codas,
                                          self.must_have_coda, d.alphabet, self.silent_final_letters)
            self.report.raise_for_issues()

        self.assembler = SyllableAssembler(self.inventory, self.onsets, self.nuclei, self.codas,
                                           self.rng, self.must_have_coda,
                                           self.policy.coda_probability)

        source = f"seed {self.seed}" if self.seed is not None else (
            f"entropy {self.rng.entropy_id}" if isinstance(self.rng, TrueRandom) else "custom rng")
        logger.info(f"{self.name}: engine ready ({len(self.inventory)} phonemes, "
                    f"{len(self.onsets.free_clusters())} onsets, "
                    f"{len(self.codas.free_clusters())} codas, {source})")

    @property
    def name(self) -> str:
        return self.definition.name

    def __repr__(self) -> str:
        return f"Engine({self.name!r})"

    def phoneme(self, symbol: str) -> Phoneme:
        """The variety's phoneme for a symbol; UnknownSymbolError if absent."""
        return self.inventory.phoneme(symbol)

    def phone(self, symbol: str) -> Phone:
        return self.inventory.phone(symbol)

    # -------------------------------------------------------------------------
    # Syllables
    # -------------------------------------------------------------------------

    def decide_constituents(self, index: int, previous_had_coda: bool = False) -> Tuple[bool, bool]:
        """
        Whether syllable ``index`` gets an onset, and whether it asks for a coda.

        The first syllable draws both independently. After that, an onset
        appears exactly when the previous syllable ended without a coda, and a
        syllable with an onset asks for no coda. The assembler still forces a
        coda after a must-have-coda nucleus.
        """
        if index == 0:
            onset = self.rng.random() < self.policy.onset_probability
        else:
            onset = not previous_had_coda

        if not onset or index == 0:
            want_coda = self.rng.random() < self.policy.coda_probability
        else:
            want_coda = False
        return onset, want_coda

    def assemble(self, require_onset: bool = True, require_coda: Optional[bool] = None) -> Syllable:
        return self.assembler.assemble(require_onset, require_coda)

    def syllables(self, count: int) -> List[Syllable]:
        """Assemble ``count`` syllables under the onset/coda policy."""
        result: List[Syllable] = []
        had_coda = False
        for i in range(count):
            onset, want_coda = self.decide_constituents(i, had_coda)
            syllable = self.assembler.assemble(onset, want_coda)
            result.append(syllable)
            had_coda = bool(syllable.coda)
        return result

    # -------------------------------------------------------------------------
    # Spelling
    # -------------------------------------------------------------------------

    def spell_syllables(self, syllables: Sequence[Syllable]) -> str:
        """
        Spell a word left to right.

        Each phoneme sees the phone right after it in the word, across
        syllable boundaries, and the phone right before it. An onset starts
        afresh: its first phoneme has no preceding phone, even mid-word. The
        last phoneme is spelled word-final.
        """
        sequence: List[Tuple[Phoneme, Position]] = []
        for s in syllables:
            sequence.extend((p, Position.ONSET) for p in s.onset)
            sequence.append((s.nucleus, Position.NUCLEUS))
            sequence.extend((p, Position.CODA) for p in s.coda)
        onset_starts = set()
        k = 0
        for s in syllables:
            if s.onset:
                onset_starts.add(k)
            k += len(s.phonemes)

        last = len(sequence) - 1
        parts = []
        for k, (phoneme, position) in enumerate(sequence):
            prev = sequence[k - 1][0].phone if k > 0 and k not in onset_starts else None
            nxt = sequence[k + 1][0].phone if k < last else None
            parts.append(spell(phoneme, position, prev, nxt, k == last, self.rng))
        return ''.join(parts)

    def _silent_letter(self, final: Syllable) -> str:
        if not self.silent_final_letters or final.coda:
            return ''
        if self.rng.random() < self.policy.silent_letter_probability:
            return self.rng.choice(self.silent_final_letters)
        return ''

    # -------------------------------------------------------------------------
    # Words
    # -------------------------------------------------------------------------

    def generate(self, max_syllables: int) -> GeneratedWord:
        """
        Generate one word of 1 to ``max_syllables`` syllables.

        Raises:
            ValueError: if ``max_syllables`` is below 1.
        """
        if max_syllables < 1:
            raise ValueError(f"max_syllables must be at least 1, got {max_syllables}")

        count = self.rng.randint(1, max_syllables)
        syllables = self.syllables(count)
        text = self.spell_syllables(syllables)
        silent = self._silent_letter(syllables[-1])
        return GeneratedWord(text + silent, tuple(syllables), self.name, silent)

    def generate_word(self, max_syllables: int) -> str:
        return self.generate(max_syllables).text

    def generate_words(self, count: int, max_syllables: int) -> List[str]:
        if count < 0:
            raise ValueError(f"count must not be negative, got {count}")
        return [self.generate(max_syllables).text for _ in range(count)]


# =============================================================================
# Module-Level Entry Points
# =============================================================================

def construct(variety: Union[str, VarietyDefinition], **kwargs) -> Engine:
    """Build and validate an engine; keyword arguments go to ``Engine``."""
    return Engine(variety, **kwargs)


def generate_word(engine: Engine, max_syllables: int) -> str:
    """Generate one lowercase word with at most ``max_syllables`` nuclei."""
    return engine.generate_word(max_syllables)
