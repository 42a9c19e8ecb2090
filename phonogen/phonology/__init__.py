#!/usr/bin/env python3
"""
Phonology Engine
================
Feature model, phonotactic tables, syllable assembler, spelling resolver and
the word generator that ties them together.

Usage:
    from phonogen.phonology import construct, generate_word

    engine = construct('metropolitan_french', seed=3)
    generate_word(engine, 2)
"""

from .assembler import Syllable, SyllableAssembler
from .constraints import ConstraintClass, ConstraintTable, build_class, build_table
from .engine import Engine, GeneratedWord, GenerationPolicy, construct, generate_word
from .entropy import TrueRandom, make_rng
from .errors import ConstructionError, SpellingError, UnknownSymbolError
from .features import PHONES, Consonant, Phone, Vowel, get_phone, homorganic, is_sibilant
from .inventory import Inventory, Phoneme
from .spelling import Context, Position, SpellingRule, resolve, spell
from .validation import ValidationReport, reachable_contexts, validate_tables
from .varieties import VarietyDefinition, list_varieties, load_variety, variety_from_mapping

__all__ = [
    # Engine
    'Engine',
    'GeneratedWord',
    'GenerationPolicy',
    'construct',
    'generate_word',
    # Building blocks
    'Syllable',
    'SyllableAssembler',
    'ConstraintClass',
    'ConstraintTable',
    'build_class',
    'build_table',
    'Inventory',
    'Phoneme',
    'Context',
    'Position',
    'SpellingRule',
    'resolve',
    'spell',
    # Phones
    'PHONES',
    'Phone',
    'Vowel',
    'Consonant',
    'get_phone',
    'homorganic',
    'is_sibilant',
    # Random sources
    'TrueRandom',
    'make_rng',
    # Varieties
    'VarietyDefinition',
    'list_varieties',
    'load_variety',
    'variety_from_mapping',
    # Validation and errors
    'ValidationReport',
    'reachable_contexts',
    'validate_tables',
    'ConstructionError',
    'SpellingError',
    'UnknownSymbolError',
]
