#!/usr/bin/env python3
"""
Spelling Rules and Resolver
===========================
Turns a phoneme into letters, given the sounds around it.

Each phoneme carries an ordered list of ``SpellingRule`` objects. A rule pairs
a literal spelling with a predicate over a ``Context``: the position of the
sound in its syllable, the phone before it, the phone after it, and whether
it is the last sound of the word.

Rules are authored in the variety YAML files. An entry is either a bare string
(always applicable) or a mapping with a ``when`` condition:

    t:
      - {text: t, when: not_word_final}
      - {text: tt, when: between_vowels}
      - {text: te, when: word_final}
      - {text: tte, when: [word_final, after_vowel]}

Conditions are compiled once into closures. Resolution starts at a random rule
and probes the list circularly until one accepts, which makes every eligible
rule equally likely.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import ConstructionError, SpellingError
from .features import Height, Phone, Roundedness, Backness


class Position(Enum):
    """Where a sound sits in its syllable."""
    ONSET = "onset"
    NUCLEUS = "nucleus"
    CODA = "coda"


@dataclass(frozen=True)
class Context:
    """What a spelling rule gets to see."""
    position: Position
    prev: Optional[Phone] = None
    next: Optional[Phone] = None
    word_final: bool = False


Predicate = Callable[[Context], bool]


@dataclass(frozen=True)
class SpellingRule:
    """A literal spelling and the condition under which it may be used."""
    text: str
    predicate: Predicate = field(compare=False, repr=False)
    condition: Any = 'anywhere'

    def accepts(self, context: Context) -> bool:
        return self.predicate(context)


# =============================================================================
# Condition Atoms
# =============================================================================

_FRONT_VOWEL_HEIGHTS = {Height.CLOSE, Height.CLOSE_MID, Height.MID, Height.OPEN_MID}


def _is_vowel(phone: Optional[Phone]) -> bool:
    return phone is not None and phone.is_vowel


def _is_consonant(phone: Optional[Phone]) -> bool:
    return phone is not None and not phone.is_vowel


def _is_i_or_e(phone: Optional[Phone]) -> bool:
    return (_is_vowel(phone)
            and phone.roundedness is Roundedness.UNROUNDED
            and phone.height in _FRONT_VOWEL_HEIGHTS)


ATOMS: Dict[str, Predicate] = {
    'anywhere': lambda ctx: True,
    'onset': lambda ctx: ctx.position is Position.ONSET,
    'nucleus': lambda ctx: ctx.position is Position.NUCLEUS,
    'coda': lambda ctx: ctx.position is Position.CODA,
    'word_final': lambda ctx: ctx.word_final,
    'not_word_final': lambda ctx: not ctx.word_final,
    'initial': lambda ctx: ctx.prev is None,
    'final': lambda ctx: ctx.next is None,
    'mid_word': lambda ctx: ctx.prev is not None and ctx.next is not None,
    'after_vowel': lambda ctx: _is_vowel(ctx.prev),
    'before_vowel': lambda ctx: _is_vowel(ctx.next),
    'after_consonant': lambda ctx: _is_consonant(ctx.prev),
    'before_consonant': lambda ctx: _is_consonant(ctx.next),
    'between_vowels': lambda ctx: _is_vowel(ctx.prev) and _is_vowel(ctx.next),
    'in_cluster': lambda ctx: _is_consonant(ctx.prev) or _is_consonant(ctx.next),
    'before_front_vowel': lambda ctx: _is_i_or_e(ctx.next),
    'after_front_vowel': lambda ctx: (_is_vowel(ctx.prev)
                                      and ctx.prev.backness is Backness.FRONT),
}


# =============================================================================
# Condition Compiler
# =============================================================================

def _symbol_set(value: Any, symbols: Optional[Iterable[str]], where: str) -> frozenset:
    items = [value] if isinstance(value, str) else list(value or [])
    if not items:
        raise ConstructionError(f"{where}: expected at least one symbol")
    if symbols is not None:
        known = set(symbols)
        unknown = [s for s in items if s not in known]
        if unknown:
            raise ConstructionError(
                f"{where}: symbols not in inventory: {', '.join(unknown)}")
    return frozenset(items)


def compile_condition(expr: Any, symbols: Optional[Iterable[str]] = None,
                      where: str = "condition") -> Predicate:
    """
    Compile a condition expression into a predicate over ``Context``.

    Parameters
    ----------
    expr : str, list or dict
        An atom name (optionally prefixed with ``not ``), a list of
        expressions (all must hold), or a single-key mapping: ``not``,
        ``all``, ``any``, ``after`` or ``before``.
    symbols : iterable of str, optional
        The inventory; symbols named by ``after``/``before`` must be in it.
    where : str
        Location used in error messages.

    Raises
    ------
    ConstructionError
        On unknown atoms, malformed expressions or unknown symbols.
    """
    symbols = None if symbols is None else tuple(symbols)

    if expr is None:
        return ATOMS['anywhere']

    if isinstance(expr, str):
        name = expr.strip()
        if name.startswith('not '):
            inner = compile_condition(name[4:], symbols, where)
            return lambda ctx: not inner(ctx)
        if name not in ATOMS:
            raise ConstructionError(f"{where}: unknown condition '{name}'")
        return ATOMS[name]

    if isinstance(expr, (list, tuple)):
        parts = [compile_condition(e, symbols, where) for e in expr]
        return lambda ctx: all(p(ctx) for p in parts)

    if isinstance(expr, dict):
        if len(expr) != 1:
            raise ConstructionError(
                f"{where}: condition mappings take exactly one key, got {sorted(expr)}")
        (key, value), = expr.items()
        if key == 'not':
            inner = compile_condition(value, symbols, where)
            return lambda ctx: not inner(ctx)
        if key == 'all':
            parts = [compile_condition(e, symbols, where) for e in value]
            return lambda ctx: all(p(ctx) for p in parts)
        if key == 'any':
            parts = [compile_condition(e, symbols, where) for e in value]
            return lambda ctx: any(p(ctx) for p in parts)
        if key == 'after':
            wanted = _symbol_set(value, symbols, where)
            return lambda ctx: ctx.prev is not None and ctx.prev.symbol in wanted
        if key == 'before':
            wanted = _symbol_set(value, symbols, where)
            return lambda ctx: ctx.next is not None and ctx.next.symbol in wanted
        raise ConstructionError(f"{where}: unknown condition operator '{key}'")

    raise ConstructionError(f"{where}: cannot interpret condition {expr!r}")


def parse_rules(entries: Sequence[Any], symbols: Optional[Iterable[str]] = None,
                where: str = "rules") -> Tuple[SpellingRule, ...]:
    """Build spelling rules from their YAML form."""
    if not entries:
        raise ConstructionError(f"{where}: a phoneme needs at least one spelling")
    symbols = None if symbols is None else tuple(symbols)

    rules = []
    for i, entry in enumerate(entries):
        if isinstance(entry, str):
            rules.append(SpellingRule(entry, ATOMS['anywhere']))
            continue
        if not isinstance(entry, dict) or 'text' not in entry:
            raise ConstructionError(f"{where}[{i}]: expected a string or a mapping with 'text'")
        text = entry['text']
        if text is None:
            text = ''
        condition = entry.get('when', 'anywhere')
        predicate = compile_condition(condition, symbols, f"{where}[{i}]")
        rules.append(SpellingRule(str(text), predicate, condition))
    return tuple(rules)


# =============================================================================
# Resolver
# =============================================================================

def accepting_rules(rules: Sequence[SpellingRule], context: Context) -> List[SpellingRule]:
    """All rules eligible in a context, in declaration order."""
    return [r for r in rules if r.accepts(context)]


def resolve(rules: Sequence[SpellingRule], context: Context, rng, symbol: str = '?') -> str:
    """
    Pick a spelling: probe the rules circularly from a random start and
    return the first that accepts the context.
    """
    count = len(rules)
    if not count:
        raise SpellingError(f"/{symbol}/ has no spelling rules")
    start = rng.randrange(count)
    for offset in range(count):
        rule = rules[(start + offset) % count]
        if rule.accepts(context):
            return rule.text
    raise SpellingError(
        f"No spelling of /{symbol}/ accepts {context.position.value} context "
        f"(prev={_show(context.prev)}, next={_show(context.next)}, "
        f"word_final={context.word_final})")


def spell(phoneme, position: Position, preceding: Optional[Phone] = None,
          following: Optional[Phone] = None, word_final: bool = False, rng=None) -> str:
    """
    Spell one phoneme in context.

    ``preceding``/``following`` are the neighbouring phones (None at the word
    edges; ``preceding`` is also None at the start of an onset). ``rng`` must
    provide ``randrange``.
    """
    if rng is None:
        raise ValueError("spell() needs a random source")
    context = Context(position, preceding, following, word_final)
    return resolve(phoneme.rules, context, rng, phoneme.symbol)


def _show(phone: Optional[Phone]) -> str:
    return '-' if phone is None else f"/{phone.symbol}/"
