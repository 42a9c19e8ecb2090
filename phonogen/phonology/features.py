#!/usr/bin/env python3
"""
Phonetic Feature Model
======================
Articulatory descriptions of every sound a variety may use.

A phone is either a ``Vowel`` (roundedness, height, backness, nasality) or a
``Consonant`` (voicing, manner, place). The two variants carry disjoint
feature sets, so asking a vowel for its place of articulation is not a
question the type can answer: ``feature()`` returns ``None`` instead.

Usage:
    from phonogen.phonology.features import get_phone, homorganic

    t = get_phone('t')
    sh = get_phone('ʃ')
    homorganic(t, sh)   # True: alveolar and post-alveolar count as one place
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Optional, Union

from .errors import UnknownSymbolError


# =============================================================================
# Feature Enums
# =============================================================================

class Roundedness(Enum):
    UNROUNDED = "unrounded"
    ROUNDED = "rounded"


class Height(Enum):
    CLOSE = "close"
    NEAR_CLOSE = "near_close"
    CLOSE_MID = "close_mid"
    MID = "mid"
    OPEN_MID = "open_mid"
    NEAR_OPEN = "near_open"
    OPEN = "open"


class Backness(Enum):
    FRONT = "front"
    CENTRAL = "central"
    BACK = "back"


class Nasality(Enum):
    ORAL = "oral"
    NASAL = "nasal"


class Voicing(Enum):
    VOICED = "voiced"
    VOICELESS = "voiceless"


class Manner(Enum):
    NASAL = "nasal"
    PLOSIVE = "plosive"
    FRICATIVE = "fricative"
    AFFRICATE = "affricate"
    APPROXIMANT = "approximant"


class Place(Enum):
    LABIAL = "labial"
    DENTAL = "dental"
    ALVEOLAR = "alveolar"
    POST_ALVEOLAR = "post_alveolar"
    PALATAL = "palatal"
    VELAR = "velar"
    UVULAR = "uvular"
    GLOTTAL = "glottal"


# Feature name -> enum, as used by the YAML filter grammar
FEATURES: Dict[str, type] = {
    'roundedness': Roundedness,
    'height': Height,
    'backness': Backness,
    'nasality': Nasality,
    'voicing': Voicing,
    'manner': Manner,
    'place': Place,
}


# =============================================================================
# Phones
# =============================================================================

@dataclass(frozen=True)
class Vowel:
    """A vowel and its quality."""
    symbol: str
    roundedness: Roundedness
    height: Height
    backness: Backness
    nasality: Nasality = Nasality.ORAL

    kind: ClassVar[str] = 'vowel'
    is_vowel: ClassVar[bool] = True

    @property
    def is_nasal(self) -> bool:
        return self.nasality is Nasality.NASAL


@dataclass(frozen=True)
class Consonant:
    """A consonant and its voicing, manner and place of articulation."""
    symbol: str
    voicing: Voicing
    manner: Manner
    place: Place

    kind: ClassVar[str] = 'consonant'
    is_vowel: ClassVar[bool] = False

    @property
    def is_voiced(self) -> bool:
        return self.voicing is Voicing.VOICED


Phone = Union[Vowel, Consonant]


def _v(symbol, roundedness, height, backness, nasality=Nasality.ORAL) -> Vowel:
    return Vowel(symbol, roundedness, height, backness, nasality)


def _c(symbol, voicing, manner, place) -> Consonant:
    return Consonant(symbol, voicing, manner, place)


_U, _R = Roundedness.UNROUNDED, Roundedness.ROUNDED
_VD, _VL = Voicing.VOICED, Voicing.VOICELESS

# Diphthongs are described by their starting quality.
PHONES: Dict[str, Phone] = {p.symbol: p for p in (
    _v('a',  _U, Height.OPEN,       Backness.FRONT),
    _v('aɪ', _U, Height.OPEN,       Backness.FRONT),
    _v('aʊ', _U, Height.OPEN,       Backness.FRONT),
    _v('æ',  _U, Height.NEAR_OPEN,  Backness.FRONT),
    _v('ɛ',  _U, Height.OPEN_MID,   Backness.FRONT),
    _v('ɛ̃',  _U, Height.OPEN_MID,   Backness.FRONT, Nasality.NASAL),
    _v('œ',  _R, Height.OPEN_MID,   Backness.FRONT),
    _v('e',  _U, Height.CLOSE_MID,  Backness.FRONT),
    _v('eɪ', _U, Height.CLOSE_MID,  Backness.FRONT),
    _v('ø',  _R, Height.CLOSE_MID,  Backness.FRONT),
    _v('ɪ',  _U, Height.NEAR_CLOSE, Backness.FRONT),
    _v('i',  _U, Height.CLOSE,      Backness.FRONT),
    _v('y',  _R, Height.CLOSE,      Backness.FRONT),
    _v('ɑ',  _U, Height.OPEN,       Backness.BACK),
    _v('ɑ̃',  _U, Height.OPEN,       Backness.BACK, Nasality.NASAL),
    _v('ɔ',  _R, Height.OPEN_MID,   Backness.BACK),
    _v('ɔ̃',  _R, Height.OPEN_MID,   Backness.BACK, Nasality.NASAL),
    _v('ɔɪ', _R, Height.OPEN_MID,   Backness.BACK),
    _v('o',  _R, Height.CLOSE_MID,  Backness.BACK),
    _v('oʊ', _R, Height.CLOSE_MID,  Backness.BACK),
    _v('ʊ',  _R, Height.NEAR_CLOSE, Backness.BACK),
    _v('ə',  _U, Height.MID,        Backness.CENTRAL),
    _v('u',  _R, Height.CLOSE,      Backness.BACK),
    _c('m',  _VD, Manner.NASAL,       Place.LABIAL),
    _c('n',  _VD, Manner.NASAL,       Place.ALVEOLAR),
    _c('ɲ',  _VD, Manner.NASAL,       Place.PALATAL),
    _c('ŋ',  _VD, Manner.NASAL,       Place.VELAR),
    _c('p',  _VL, Manner.PLOSIVE,     Place.LABIAL),
    _c('t',  _VL, Manner.PLOSIVE,     Place.ALVEOLAR),
    _c('tʃ', _VL, Manner.AFFRICATE,   Place.POST_ALVEOLAR),
    _c('k',  _VL, Manner.PLOSIVE,     Place.VELAR),
    _c('b',  _VD, Manner.PLOSIVE,     Place.LABIAL),
    _c('d',  _VD, Manner.PLOSIVE,     Place.ALVEOLAR),
    _c('dʒ', _VD, Manner.AFFRICATE,   Place.POST_ALVEOLAR),
    _c('g',  _VD, Manner.PLOSIVE,     Place.VELAR),
    _c('f',  _VL, Manner.FRICATIVE,   Place.LABIAL),
    _c('θ',  _VL, Manner.FRICATIVE,   Place.DENTAL),
    _c('s',  _VL, Manner.FRICATIVE,   Place.ALVEOLAR),
    _c('ʃ',  _VL, Manner.FRICATIVE,   Place.POST_ALVEOLAR),
    _c('h',  _VL, Manner.FRICATIVE,   Place.GLOTTAL),
    _c('v',  _VD, Manner.FRICATIVE,   Place.LABIAL),
    _c('ð',  _VD, Manner.FRICATIVE,   Place.DENTAL),
    _c('z',  _VD, Manner.FRICATIVE,   Place.ALVEOLAR),
    _c('ʒ',  _VD, Manner.FRICATIVE,   Place.POST_ALVEOLAR),
    _c('w',  _VD, Manner.APPROXIMANT, Place.LABIAL),
    _c('l',  _VD, Manner.APPROXIMANT, Place.ALVEOLAR),
    _c('ɹ',  _VD, Manner.APPROXIMANT, Place.POST_ALVEOLAR),
    _c('ɥ',  _VD, Manner.APPROXIMANT, Place.PALATAL),
    _c('ʁ',  _VD, Manner.APPROXIMANT, Place.UVULAR),
    _c('j',  _VD, Manner.APPROXIMANT, Place.PALATAL),
)}


# =============================================================================
# Lookups and Relations
# =============================================================================

def get_phone(symbol: str) -> Phone:
    """Return the phone for an IPA symbol from the universal chart."""
    try:
        return PHONES[symbol]
    except KeyError:
        raise UnknownSymbolError(symbol) from None


def feature(phone: Phone, name: str) -> Optional[Enum]:
    """The value of a named feature, or None if the phone's variant lacks it."""
    return getattr(phone, name, None) if name in FEATURES else None


def is_sibilant(phone: Phone) -> bool:
    return (not phone.is_vowel
            and phone.manner is Manner.FRICATIVE
            and phone.place in (Place.ALVEOLAR, Place.POST_ALVEOLAR))


def homorganic(lhs: Phone, rhs: Phone) -> bool:
    """
    Whether two consonants share a place of articulation.

    Alveolar and post-alveolar are treated as the same place. Vowels are never
    homorganic with anything.
    """
    if lhs.is_vowel or rhs.is_vowel:
        return False
    if lhs.place is rhs.place:
        return True
    coronal = {Place.ALVEOLAR, Place.POST_ALVEOLAR}
    return lhs.place in coronal and rhs.place in coronal


def same_place(lhs: Phone, rhs: Phone) -> bool:
    """Strict place identity; unlike homorganic(), alveolar != post-alveolar."""
    if lhs.is_vowel or rhs.is_vowel:
        return False
    return lhs.place is rhs.place
