# utilities.py
from __future__ import annotations

from typing import Dict, Tuple

from rotor_and_reflector import ALPHABET, SIZE, Reflector, RotorWiring

# ────────────────────────────────────────────────────────────────────────
#  0. Wheel database
# ────────────────────────────────────────────────────────────────────────

# Army / Luftwaffe rotors -----------------------------------------------
I   = RotorWiring.from_mapping("I",   "EKMFLGDQVZNTOWYHXUSPAIBRCJ", turnover="Q")
II  = RotorWiring.from_mapping("II",  "AJDKSIRUXBLHWTMCQGZNPYFVOE", turnover="E")
III = RotorWiring.from_mapping("III", "BDFHJLCPRTXVZNYEIWGAKMUSQO", turnover="V")
IV  = RotorWiring.from_mapping("IV",  "ESOVPZJAYQUIRHXLNFTGKDCMWB", turnover="J")
V   = RotorWiring.from_mapping("V",   "VZBRGITYUPSDNHLXAWMJQOFECK", turnover="Z")

# Wide reflectors ------------------------------------------------------
A = Reflector.from_mapping("A", "EJMZALYXVBWFCRQUONTSPIKHGD")
B = Reflector.from_mapping("B", "YRUHQSLDPXNGOKMIEBFZCWVJAT")
C = Reflector.from_mapping("C", "FVPJIAOYEDRZXWGCTKUQSBNMHL")

base_rotors: Dict[str, RotorWiring] = {"I": I, "II": II, "III": III, "IV": IV, "V": V}
base_reflectors: Dict[str, Reflector] = {"A": A, "B": B, "C": C}

ROTOR_NAMES: Tuple[str, ...] = tuple(base_rotors)
REFLECTOR_NAMES: Tuple[str, ...] = tuple(base_reflectors)

rotor_dict: Dict[str, RotorWiring] = {}
for name, obj in base_rotors.items():
    rotor_dict[name] = rotor_dict[name.lower()] = obj  # uppercase + alias

reflector_dict: Dict[str, Reflector] = {}
for name, obj in base_reflectors.items():
    reflector_dict[name] = reflector_dict[name.lower()] = obj


def get_rotor(name: str) -> RotorWiring:
    try:
        return rotor_dict[name]
    except KeyError:
        raise ValueError(f"Unknown rotor {name!r}. Expected one of {list(ROTOR_NAMES)}") from None


def get_reflector(name: str) -> Reflector:
    try:
        return reflector_dict[name]
    except KeyError:
        raise ValueError(f"Unknown reflector {name!r}. Expected one of {list(REFLECTOR_NAMES)}") from None


# ────────────────────────────────────────────────────────────────────────
#  1. Boundary validators (argparse `type=` callables)
# ────────────────────────────────────────────────────────────────────────


def parse_ring(raw: str | int) -> int:
    """Ring setting 1‥26 as printed on the wheel."""
    try:
        ring = int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"ring setting {raw!r} is not a number") from None
    if not 1 <= ring <= SIZE:
        raise ValueError(f"ring setting {ring} out of range 1–{SIZE}")
    return ring


def parse_key_letter(raw: str) -> int:
    """One window letter → 0‥25."""
    letter = raw.strip().upper()
    if len(letter) != 1 or letter not in ALPHABET:
        raise ValueError(f"key {raw!r} must be a single letter A–Z")
    return ALPHABET.index(letter)


def parse_plug_pair(raw: str) -> str:
    pair = raw.strip().upper()
    if len(pair) != 2 or not set(pair) <= set(ALPHABET):
        raise ValueError(f"plug {raw!r} must be a pair of 2 letters A–Z")
    if pair[0] == pair[1]:
        raise ValueError(f"plug {raw!r} cannot map a letter to itself")
    return pair


# ────────────────────────────────────────────────────────────────────────
#  2. Text preprocessing
# ────────────────────────────────────────────────────────────────────────

NON_ALPHA_MODES = ("keep", "strip")


def preprocess_message(msg: str, non_alpha: str = "keep") -> str:
    """Upper‑case, drop line breaks, and drop non‑alphabet chars when stripping."""
    if non_alpha not in NON_ALPHA_MODES:
        raise ValueError(f"non_alpha must be one of {NON_ALPHA_MODES}, got {non_alpha!r}")

    text = msg.upper().replace("\r", "").replace("\n", "")
    if non_alpha == "strip":
        text = "".join(ch for ch in text if ch in ALPHABET)
    return text


def clean_crib(text: str) -> str:
    return preprocess_message(text, "strip")


def group_blocks(text: str, block: int) -> str:
    """Display helper: `ABCDEFG`, 5 → `ABCDE FG`."""
    if block <= 0:
        return text
    return " ".join(text[i : i + block] for i in range(0, len(text), block))


__all__ = [
    "ROTOR_NAMES",
    "REFLECTOR_NAMES",
    "rotor_dict",
    "reflector_dict",
    "get_rotor",
    "get_reflector",
    "parse_ring",
    "parse_key_letter",
    "parse_plug_pair",
    "preprocess_message",
    "clean_crib",
    "group_blocks",
]
