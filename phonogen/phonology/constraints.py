#!/usr/bin/env python3
"""
Phonotactic Constraint Tables
=============================
Builds the onset, nucleus and coda tables of a variety from declarative
class specs.

A class spec filters the inventory once per cluster slot, takes the cartesian
product of the slot candidates and drops the clusters its ``reject`` rules
match (or its ``require`` rules miss):

    - name: voiceless fricative plus approximant
      slots:
        - {manner: fricative, voicing: voiceless, except: [h]}
        - {manner: approximant, except: [j]}
      reject:
        - same_place: [0, 1]
        - sequence: [s, ɹ]

A class can also be ``derive``d from clusters of earlier classes, and marked
``restricted`` so that it is only ever reached through a conditioning map
(e.g. "after a nasal vowel, only these codas").

Tables store phoneme indices into the inventory, never phoneme objects.
"""

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .errors import ConstructionError
from .features import FEATURES, homorganic, is_sibilant, same_place
from .inventory import Inventory, Phoneme

logger = logging.getLogger(__name__)

Cluster = Tuple[int, ...]
PhonemeFilter = Callable[[Phoneme], bool]

MAX_CLUSTER_LENGTH = 3


@dataclass(frozen=True)
class ConstraintClass:
    """One phonotactic rule: a named group of legal clusters."""
    name: str
    clusters: Tuple[Cluster, ...]
    restricted: bool = False

    def __len__(self) -> int:
        return len(self.clusters)

    @property
    def is_empty(self) -> bool:
        return not self.clusters


@dataclass(frozen=True)
class ConstraintTable:
    """
    The ordered classes for one syllable constituent.

    ``conditioning`` maps a phoneme index to the one class legal right after
    that phoneme. ``selectable`` lists the classes a free draw may pick: the
    non-empty, unrestricted ones.
    """
    name: str
    classes: Tuple[ConstraintClass, ...]
    conditioning: Mapping[int, int] = field(default_factory=dict)
    selectable: Tuple[int, ...] = field(init=False)

    def __post_init__(self):
        selectable = tuple(i for i, c in enumerate(self.classes)
                           if c.clusters and not c.restricted)
        object.__setattr__(self, 'selectable', selectable)

    def __len__(self) -> int:
        return len(self.classes)

    def __getitem__(self, index: int) -> ConstraintClass:
        return self.classes[index]

    def class_index(self, name: str) -> int:
        for i, c in enumerate(self.classes):
            if c.name == name:
                return i
        raise ConstructionError(f"{self.name}: no class named '{name}'")

    def conditioned_class(self, phoneme_index: Optional[int]) -> Optional[int]:
        """The class mapped to a preceding phoneme, if any."""
        if phoneme_index is None:
            return None
        return self.conditioning.get(phoneme_index)

    def free_clusters(self) -> Tuple[Cluster, ...]:
        """Every cluster of every selectable class, in declaration order."""
        return tuple(c for i in self.selectable for c in self.classes[i].clusters)

    def members(self) -> set:
        """Indices of every phoneme that appears anywhere in the table."""
        return {i for c in self.classes for cluster in c.clusters for i in cluster}


# =============================================================================
# Phoneme Filters
# =============================================================================

def _values(raw: Any) -> List[Any]:
    return list(raw) if isinstance(raw, (list, tuple)) else [raw]


def _check_symbols(raw: Any, inventory: Inventory, where: str) -> frozenset:
    wanted = _values(raw)
    unknown = [s for s in wanted if s not in inventory]
    if unknown:
        raise ConstructionError(f"{where}: symbols not in inventory: {', '.join(unknown)}")
    return frozenset(wanted)


def compile_filter(spec: Optional[Mapping[str, Any]], inventory: Inventory,
                   where: str = "filter") -> PhonemeFilter:
    """
    Compile a YAML phoneme filter into a predicate.

    Keys (all must hold): ``kind`` (vowel/consonant), any feature name
    (``manner``, ``place``, ``voicing``, ``height``, ``backness``,
    ``roundedness``, ``nasality``) with a value or list of values,
    ``sibilant`` (bool), ``symbols`` (only these), ``except`` (not these),
    ``not`` (negated sub-filter) and ``any`` (list of sub-filters, one must
    hold). An empty filter accepts every phoneme.
    """
    if spec is None:
        return lambda p: True
    if not isinstance(spec, Mapping):
        raise ConstructionError(f"{where}: a filter must be a mapping, got {spec!r}")

    tests: List[PhonemeFilter] = []
    for key, raw in spec.items():
        if key == 'kind':
            kinds = set(_values(raw))
            bad = kinds - {'vowel', 'consonant'}
            if bad:
                raise ConstructionError(f"{where}: unknown kind {sorted(bad)}")
            tests.append(lambda p, kinds=kinds: p.phone.kind in kinds)
        elif key in FEATURES:
            enum = FEATURES[key]
            try:
                allowed = frozenset(enum(v) for v in _values(raw))
            except ValueError as e:
                raise ConstructionError(f"{where}: {e}") from None
            tests.append(lambda p, key=key, allowed=allowed: getattr(p.phone, key, None) in allowed)
        elif key == 'sibilant':
            flag = bool(raw)
            tests.append(lambda p, flag=flag: is_sibilant(p.phone) == flag)
        elif key == 'symbols':
            only = _check_symbols(raw, inventory, where)
            tests.append(lambda p, only=only: p.symbol in only)
        elif key == 'except':
            excluded = _check_symbols(raw, inventory, where)
            tests.append(lambda p, excluded=excluded: p.symbol not in excluded)
        elif key == 'not':
            inner = compile_filter(raw, inventory, f"{where}.not")
            tests.append(lambda p, inner=inner: not inner(p))
        elif key == 'any':
            options = [compile_filter(s, inventory, f"{where}.any[{i}]")
                       for i, s in enumerate(_values(raw))]
            tests.append(lambda p, options=options: any(o(p) for o in options))
        else:
            raise ConstructionError(f"{where}: unknown filter key '{key}'")

    return lambda p: all(t(p) for t in tests)


def select(inventory: Inventory, spec: Optional[Mapping[str, Any]], where: str = "filter") -> List[Phoneme]:
    """The phonemes of the inventory that pass a filter, in inventory order."""
    test = compile_filter(spec, inventory, where)
    return [p for p in inventory if test(p)]


# =============================================================================
# Cluster Conditions
# =============================================================================

ClusterTest = Callable[[Tuple[Phoneme, ...]], bool]


def _positions(raw: Any, where: str) -> Tuple[int, int]:
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise ConstructionError(f"{where}: expected two slot positions, got {raw!r}")
    i, j = int(raw[0]), int(raw[1])
    if not (0 <= i < MAX_CLUSTER_LENGTH and 0 <= j < MAX_CLUSTER_LENGTH):
        raise ConstructionError(f"{where}: slot positions out of range: {raw!r}")
    return i, j


def _pairwise(relation, i: int, j: int) -> ClusterTest:
    def test(cluster):
        if i >= len(cluster) or j >= len(cluster):
            return False
        return relation(cluster[i], cluster[j])
    return test


def compile_cluster_condition(spec: Mapping[str, Any], inventory: Inventory,
                              where: str = "condition") -> ClusterTest:
    """
    Compile one ``reject``/``require`` entry.

    ``same_place: [i, j]``, ``homorganic: [i, j]``, ``same_symbol: [i, j]``
    compare two slots; ``sequence: [a, b, ...]`` matches when those symbols
    occur contiguously in the cluster.
    """
    if not isinstance(spec, Mapping) or len(spec) != 1:
        raise ConstructionError(f"{where}: expected a single-key mapping, got {spec!r}")
    (key, raw), = spec.items()

    if key == 'same_place':
        i, j = _positions(raw, where)
        return _pairwise(lambda a, b: same_place(a.phone, b.phone), i, j)
    if key == 'homorganic':
        i, j = _positions(raw, where)
        return _pairwise(lambda a, b: homorganic(a.phone, b.phone), i, j)
    if key == 'same_symbol':
        i, j = _positions(raw, where)
        return _pairwise(lambda a, b: a.index == b.index, i, j)
    if key == 'sequence':
        seq = tuple(_values(raw))
        _check_symbols(seq, inventory, where)

        def contains(cluster):
            symbols = tuple(p.symbol for p in cluster)
            n = len(seq)
            return any(symbols[k:k + n] == seq for k in range(len(symbols) - n + 1))
        return contains

    raise ConstructionError(f"{where}: unknown cluster condition '{key}'")


# =============================================================================
# Class and Table Builders
# =============================================================================

def _build_from_slots(spec: Mapping[str, Any], inventory: Inventory, where: str) -> List[Cluster]:
    slots = spec.get('slots')
    if not slots or not isinstance(slots, (list, tuple)):
        raise ConstructionError(f"{where}: 'slots' must be a non-empty list")
    if len(slots) > MAX_CLUSTER_LENGTH:
        raise ConstructionError(f"{where}: clusters are at most {MAX_CLUSTER_LENGTH} long")

    candidates = [select(inventory, s, f"{where}.slots[{i}]") for i, s in enumerate(slots)]
    rejects = [compile_cluster_condition(r, inventory, f"{where}.reject[{i}]")
               for i, r in enumerate(spec.get('reject') or [])]
    requires = [compile_cluster_condition(r, inventory, f"{where}.require[{i}]")
                for i, r in enumerate(spec.get('require') or [])]

    clusters = []
    for combo in itertools.product(*candidates):
        if any(reject(combo) for reject in rejects):
            continue
        if not all(require(combo) for require in requires):
            continue
        clusters.append(tuple(p.index for p in combo))
    return clusters


def _build_derived(spec: Mapping[str, Any], inventory: Inventory,
                   built: Sequence[ConstraintClass], where: str) -> List[Cluster]:
    derive = spec['derive']
    if not isinstance(derive, Mapping):
        raise ConstructionError(f"{where}: 'derive' must be a mapping")

    source = derive.get('from', 'all')
    if source == 'all':
        sources = list(built)
    else:
        by_name = {c.name: c for c in built}
        missing = [n for n in _values(source) if n not in by_name]
        if missing:
            raise ConstructionError(f"{where}: derives from undeclared classes: {', '.join(missing)}")
        sources = [by_name[n] for n in _values(source)]

    first = compile_filter(derive.get('first'), inventory, f"{where}.derive.first")
    last = compile_filter(derive.get('last'), inventory, f"{where}.derive.last")

    clusters = []
    seen = set()
    for c in sources:
        for cluster in c.clusters:
            if cluster in seen:
                continue
            if first(inventory[cluster[0]]) and last(inventory[cluster[-1]]):
                seen.add(cluster)
                clusters.append(cluster)
    return clusters


def build_class(spec: Mapping[str, Any], inventory: Inventory,
                built: Sequence[ConstraintClass] = (), where: str = "class") -> ConstraintClass:
    """Build one constraint class from its spec."""
    if not isinstance(spec, Mapping) or not spec.get('name'):
        raise ConstructionError(f"{where}: every class needs a 'name'")
    name = str(spec['name'])
    where = f"{where} '{name}'"

    if 'derive' in spec:
        clusters = _build_derived(spec, inventory, built, where)
    else:
        clusters = _build_from_slots(spec, inventory, where)

    # Duplicates inside a class would silently weight the draw.
    clusters = list(dict.fromkeys(clusters))
    if not clusters:
        logger.debug(f"{where} is empty")
    return ConstraintClass(name, tuple(clusters), bool(spec.get('restricted', False)))


def build_table(name: str, class_specs: Sequence[Mapping[str, Any]], inventory: Inventory,
                conditioning: Optional[Sequence[Mapping[str, Any]]] = None) -> ConstraintTable:
    """
    Build a full table and its conditioning map.

    Parameters
    ----------
    name : str
        'onsets', 'nuclei' or 'codas'; used in messages.
    class_specs : list
        Ordered class specs.
    inventory : Inventory
        The phonemes the filters run over.
    conditioning : list, optional
        ``{after: <filter>, class: <class name>}`` entries. Every phoneme that
        passes ``after`` is mapped to the named class.
    """
    if not class_specs:
        raise ConstructionError(f"{inventory.name}.{name}: no classes declared")

    classes: List[ConstraintClass] = []
    for i, spec in enumerate(class_specs):
        c = build_class(spec, inventory, classes, f"{inventory.name}.{name}[{i}]")
        if any(existing.name == c.name for existing in classes):
            raise ConstructionError(f"{inventory.name}.{name}: duplicate class name '{c.name}'")
        classes.append(c)

    mapping: Dict[int, int] = {}
    names = {c.name: i for i, c in enumerate(classes)}
    for i, entry in enumerate(conditioning or []):
        where = f"{inventory.name}.{name} conditioning[{i}]"
        if not isinstance(entry, Mapping) or 'class' not in entry or 'after' not in entry:
            raise ConstructionError(f"{where}: expected 'after' and 'class'")
        target = entry['class']
        if target not in names:
            raise ConstructionError(f"{where}: no class named '{target}'")
        matched = select(inventory, entry['after'], f"{where}.after")
        if not matched:
            logger.debug(f"{where}: 'after' filter matches no phoneme")
        for p in matched:
            mapping[p.index] = names[target]

    table = ConstraintTable(name, tuple(classes), mapping)
    logger.debug(f"{inventory.name}.{name}: {len(classes)} classes, "
                 f"{len(table.selectable)} selectable, {len(table.free_clusters())} free clusters")
    return table


def describe_cluster(cluster: Iterable[int], inventory: Inventory) -> str:
    return '/' + ''.join(inventory[i].symbol for i in cluster) + '/'
