#!/usr/bin/env python3
"""
Language Variety Loader
=======================
Loads language variety definitions from the YAML files in this directory.

A variety is data, not code: its phoneme inventory with spelling rules, the
class specs of its onset, nucleus and coda tables, and the conditioning maps
between them. One generic engine runs every variety.

Usage:
    from phonogen.phonology.varieties import load_variety, list_varieties

    english = load_variety('en')
    french = load_variety('metropolitan_french')
    list_varieties()   # ['american_english', 'metropolitan_french']
"""

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml

from ..errors import ConstructionError


# =============================================================================
# Configuration Path
# =============================================================================

VARIETIES_DIR = Path(__file__).parent

REQUIRED_KEYS = ('name', 'alphabet', 'phonemes', 'onsets', 'nuclei', 'codas')


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class VarietyDefinition:
    """Everything the engine needs to know about one variety."""
    name: str
    display_name: str
    alphabet: str
    phonemes: Dict[str, List[Any]]
    onsets: List[Dict[str, Any]]
    nuclei: List[Dict[str, Any]]
    codas: List[Dict[str, Any]]
    nucleus_conditioning: List[Dict[str, Any]] = field(default_factory=list)
    coda_conditioning: List[Dict[str, Any]] = field(default_factory=list)
    must_have_coda: List[str] = field(default_factory=list)
    silent_final_letters: List[str] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def symbols(self) -> List[str]:
        return list(self.phonemes)


def variety_from_mapping(raw: Mapping[str, Any], source: str = "<mapping>") -> VarietyDefinition:
    """
    Build a definition from its YAML form.

    Raises:
        ConstructionError: if a required key is missing or has the wrong shape.
    """
    if not isinstance(raw, Mapping):
        raise ConstructionError(f"{source}: a variety definition must be a mapping")
    missing = [key for key in REQUIRED_KEYS if not raw.get(key)]
    if missing:
        raise ConstructionError(f"{source}: missing required key(s): {', '.join(missing)}")
    if not isinstance(raw['phonemes'], Mapping):
        raise ConstructionError(f"{source}: 'phonemes' must map symbols to spellings")
    for key in ('onsets', 'nuclei', 'codas'):
        if not isinstance(raw[key], list):
            raise ConstructionError(f"{source}: '{key}' must be a list of classes")

    silent = raw.get('silent_final_letters') or []
    if isinstance(silent, str):
        silent = list(silent)

    return VarietyDefinition(
        name=str(raw['name']),
        display_name=str(raw.get('display_name', raw['name'])),
        alphabet=str(raw['alphabet']),
        phonemes=dict(raw['phonemes']),
        onsets=list(raw['onsets']),
        nuclei=list(raw['nuclei']),
        codas=list(raw['codas']),
        nucleus_conditioning=list(raw.get('nucleus_conditioning') or []),
        coda_conditioning=list(raw.get('coda_conditioning') or []),
        must_have_coda=[str(s) for s in raw.get('must_have_coda') or []],
        silent_final_letters=[str(s) for s in silent],
        aliases=[str(a).lower() for a in raw.get('aliases') or []],
        raw=dict(raw),
    )


# =============================================================================
# Loader Functions
# =============================================================================

def _load_yaml(filename: str) -> Dict[str, Any]:
    """Load a YAML file from the varieties directory."""
    filepath = VARIETIES_DIR / filename
    if not filepath.exists():
        raise FileNotFoundError(f"Variety definition not found: {filepath}")

    with open(filepath, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def list_varieties() -> List[str]:
    """Names of the bundled varieties."""
    return sorted(p.stem for p in VARIETIES_DIR.glob('*.yaml'))


@lru_cache(maxsize=None)
def _aliases() -> Dict[str, str]:
    table = {}
    for name in list_varieties():
        table[name] = name
        for alias in _load_yaml(f"{name}.yaml").get('aliases') or []:
            table[str(alias).lower()] = name
    return table


def resolve_name(name: str) -> str:
    """
    Canonical variety name for a name or alias ('en', 'fr-FR', ...).

    Raises:
        ValueError: if nothing matches; the message lists what is available.
    """
    key = str(name).strip().lower().replace('-', '_')
    table = _aliases()
    for candidate in (key, key.replace('_', '-')):
        if candidate in table:
            return table[candidate]
    raise ValueError(f"Unknown variety '{name}'. Available: {', '.join(list_varieties())}")


@lru_cache(maxsize=None)
def _load_canonical(name: str) -> VarietyDefinition:
    return variety_from_mapping(_load_yaml(f"{name}.yaml"), f"{name}.yaml")


def load_variety(name: str) -> VarietyDefinition:
    """Load a bundled variety by name or alias."""
    return _load_canonical(resolve_name(name))


def reload_varieties():
    """Clear cached definitions and reload from disk."""
    _aliases.cache_clear()
    _load_canonical.cache_clear()


__all__ = [
    'VarietyDefinition',
    'VARIETIES_DIR',
    'variety_from_mapping',
    'list_varieties',
    'resolve_name',
    'load_variety',
    'reload_varieties',
]
