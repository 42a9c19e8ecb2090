#!/usr/bin/env python3
"""
Variety Validation
==================
Checks a freshly built set of tables before any word is generated.

- every cluster refers to a phoneme of the inventory;
- every table has something to draw, and every conditioned class is non-empty;
- every phoneme has an accepting spelling rule in every context the tables
  can actually produce;
- every spelling only uses letters of the variety's alphabet.

The coverage check enumerates reachable contexts from the tables, following the
word generator's boundary policy: between two nuclei there is exactly one
consonant cluster, either the coda of the first syllable or the onset of the
second. An onset is spelled as if it began the word.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Sequence, Set

from .constraints import ConstraintTable, describe_cluster
from .errors import ConstructionError
from .inventory import Inventory
from .spelling import Context, Position, accepting_rules

logger = logging.getLogger(__name__)

MAX_EXAMPLES_PER_PHONEME = 3


@dataclass
class ValidationIssue:
    """One problem found in a variety definition."""
    kind: str      # 'table', 'conditioning', 'coverage', 'spelling'
    subject: str
    detail: str

    def __str__(self) -> str:
        return f"[{self.kind}] {self.subject}: {self.detail}"


@dataclass
class ValidationReport:
    """Everything the validation pass found."""
    variety: str
    issues: List[ValidationIssue] = field(default_factory=list)
    contexts_checked: int = 0

    @property
    def ok(self) -> bool:
        return not self.issues

    def add(self, kind: str, subject: str, detail: str):
        self.issues.append(ValidationIssue(kind, subject, detail))

    def raise_for_issues(self):
        if self.ok:
            return
        lines = '\n'.join(f"  - {issue}" for issue in self.issues)
        raise ConstructionError(
            f"{self.variety}: {len(self.issues)} validation issue(s):\n{lines}")


# =============================================================================
# Reachable Contexts
# =============================================================================

def _nuclei_after(nuclei: ConstraintTable, free: FrozenSet[int], last: Optional[int]) -> Set[int]:
    mapped = nuclei.conditioned_class(last)
    if mapped is None:
        return set(free)
    return {c[0] for c in nuclei[mapped].clusters}


def _codas_after(codas: ConstraintTable, nucleus: int):
    mapped = codas.conditioned_class(nucleus)
    if mapped is None:
        return codas.free_clusters()
    return codas[mapped].clusters


def reachable_contexts(inventory: Inventory, onsets: ConstraintTable, nuclei: ConstraintTable,
                       codas: ConstraintTable, must_have_coda: FrozenSet[int] = frozenset()
                       ) -> Dict[int, Set[Context]]:
    """
    Every spelling context each phoneme can be asked to spell in.

    Returns ``{phoneme index: {Context, ...}}``. The result is a superset of
    what generation produces with any probability settings.
    """
    def phone(i):
        return None if i is None else inventory[i].phone

    contexts: Dict[int, Set[Context]] = defaultdict(set)

    def add(index, position, prev, nxt):
        contexts[index].add(Context(position, phone(prev), phone(nxt), nxt is None))

    onset_clusters = onsets.free_clusters()
    free = frozenset(c[0] for c in nuclei.free_clusters())

    reachable = set(free)
    for c in onset_clusters:
        reachable |= _nuclei_after(nuclei, free, c[-1])

    onset_firsts = {c[0] for c in onset_clusters}
    onset_lasts = {c[-1] for c in onset_clusters}
    coda_lasts = {c[-1] for n in reachable for c in _codas_after(codas, n)}

    # Onsets: the first phoneme never sees a preceding phone
    for c in onset_clusters:
        following = _nuclei_after(nuclei, free, c[-1])
        for k, index in enumerate(c):
            prevs = {c[k - 1]} if k else {None}
            nexts = {c[k + 1]} if k + 1 < len(c) else following
            for p in prevs:
                for n in nexts:
                    add(index, Position.ONSET, p, n)

    # Nuclei
    for n in reachable:
        prevs = {l for l in onset_lasts if n in _nuclei_after(nuclei, free, l)}
        if n in free:
            prevs |= {None} | coda_lasts
        nexts = {c[0] for c in _codas_after(codas, n)}
        if n not in must_have_coda:
            nexts |= {None} | onset_firsts
        for p in prevs:
            for x in nexts:
                add(n, Position.NUCLEUS, p, x)

    # Codas: word-final, or before the onsetless nucleus of the next syllable
    for n in reachable:
        for c in _codas_after(codas, n):
            for k, index in enumerate(c):
                prev = c[k - 1] if k else n
                nexts = {c[k + 1]} if k + 1 < len(c) else ({None} | free)
                for x in nexts:
                    add(index, Position.CODA, prev, x)

    return dict(contexts)


# =============================================================================
# Checks
# =============================================================================

def _check_table(report: ValidationReport, table: ConstraintTable, inventory: Inventory,
                 single: bool = False):
    size = len(inventory)
    for c in table.classes:
        for cluster in c.clusters:
            if not cluster or any(not (0 <= i < size) for i in cluster):
                report.add('table', f"{table.name} '{c.name}'",
                           f"cluster {cluster!r} refers outside the inventory")
            elif single and len(cluster) != 1:
                report.add('table', f"{table.name} '{c.name}'",
                           f"{describe_cluster(cluster, inventory)} is not a single nucleus")
    if not table.selectable:
        report.add('table', table.name, "no non-empty unrestricted class to draw from")

    for phoneme_index, class_index in sorted(table.conditioning.items()):
        subject = f"{table.name} after /{inventory[phoneme_index].symbol}/"
        if not (0 <= class_index < len(table)):
            report.add('conditioning', subject, f"class index {class_index} out of range")
        elif table[class_index].is_empty:
            report.add('conditioning', subject, f"mapped class '{table[class_index].name}' is empty")


def _check_coverage(report: ValidationReport, inventory: Inventory,
                    contexts: Dict[int, Set[Context]]):
    for index in sorted(contexts):
        phoneme = inventory[index]
        failing = [ctx for ctx in contexts[index] if not accepting_rules(phoneme.rules, ctx)]
        report.contexts_checked += len(contexts[index])
        if not failing:
            continue
        failing.sort(key=lambda c: (c.position.value,
                                    c.prev.symbol if c.prev else '',
                                    c.next.symbol if c.next else ''))
        examples = ', '.join(
            f"{c.position.value}(prev={c.prev.symbol if c.prev else '-'}, "
            f"next={c.next.symbol if c.next else '-'}, word_final={c.word_final})"
            for c in failing[:MAX_EXAMPLES_PER_PHONEME])
        report.add('coverage', f"/{phoneme.symbol}/",
                   f"no spelling for {len(failing)} reachable context(s), e.g. {examples}")


def _check_alphabet(report: ValidationReport, inventory: Inventory, alphabet: str,
                    silent_letters: Sequence[str]):
    letters = set(alphabet)
    for phoneme in inventory:
        for rule in phoneme.rules:
            stray = sorted(set(rule.text) - letters)
            if stray or rule.text != rule.text.lower():
                report.add('spelling', f"/{phoneme.symbol}/",
                           f"'{rule.text}' uses letters outside the alphabet: {''.join(stray) or 'uppercase'}")
    for letter in silent_letters:
        if len(letter) != 1 or letter not in letters:
            report.add('spelling', 'silent_final_letters', f"'{letter}' is not a single alphabet letter")


def validate_tables(inventory: Inventory, onsets: ConstraintTable, nuclei: ConstraintTable,
                    codas: ConstraintTable, must_have_coda: FrozenSet[int] = frozenset(),
                    alphabet: Optional[str] = None, silent_letters: Sequence[str] = ()
                    ) -> ValidationReport:
    """
    Run every check and return the report; never raises.

    Call ``report.raise_for_issues()`` to fail fast. Spelling texts are only
    checked against ``alphabet`` when one is given.
    """
    report = ValidationReport(inventory.name)

    _check_table(report, onsets, inventory)
    _check_table(report, nuclei, inventory, single=True)
    _check_table(report, codas, inventory)
    if alphabet is not None:
        _check_alphabet(report, inventory, alphabet, silent_letters)

    for i in sorted(must_have_coda):
        if not (0 <= i < len(inventory)):
            report.add('table', 'must_have_coda', f"index {i} outside the inventory")

    if report.ok:
        contexts = reachable_contexts(inventory, onsets, nuclei, codas, must_have_coda)
        _check_coverage(report, inventory, contexts)
        unused = [p.symbol for p in inventory if p.index not in contexts]
        if unused:
            logger.debug(f"{inventory.name}: phonemes never reached: {' '.join(unused)}")

    if report.ok:
        logger.info(f"{inventory.name}: validated {report.contexts_checked} spelling contexts")
    else:
        logger.error(f"{inventory.name}: {len(report.issues)} validation issue(s)")
    return report
