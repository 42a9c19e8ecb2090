#!/usr/bin/env python3
"""
phonogen - Pronounceable Invented Words
=======================================

Generates words that sound and look like they could belong to a language
variety, from a hand-written model of its sounds, its legal sound sequences
and its spelling conventions.

Quick Start
-----------
    from phonogen import Engine, generate_word

    engine = Engine('american_english', seed=7)
    generate_word(engine, 3)

    french = Engine('fr')
    french.generate_words(10, max_syllables=2)

Modules
-------
    phonogen.phonology            - Feature model, tables, assembler, spelling, engine
    phonogen.phonology.varieties  - YAML variety definitions and their loader
    phonogen.settings             - app.yaml settings
    phonogen.profiler             - Throughput benchmark

CLI Usage
---------
    python -m phonogen generate 20 3 -l fr
    python -m phonogen varieties
    python -m phonogen bench -l en
"""

__version__ = "0.1.0"

from .phonology import (
    ConstructionError,
    Engine,
    GeneratedWord,
    GenerationPolicy,
    SpellingError,
    UnknownSymbolError,
    construct,
    generate_word,
    list_varieties,
    load_variety,
)

__all__ = [
    '__version__',
    'Engine',
    'GeneratedWord',
    'GenerationPolicy',
    'construct',
    'generate_word',
    'list_varieties',
    'load_variety',
    'ConstructionError',
    'SpellingError',
    'UnknownSymbolError',
]
