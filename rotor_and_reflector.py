# rotor_and_reflector.py
from __future__ import annotations

import string
from dataclasses import dataclass

ALPHABET = string.ascii_uppercase
SIZE = len(ALPHABET)


def _index_table(mapping: str, alphabet: str) -> tuple[int, ...]:
    """`"CBA"` → `(2, 1, 0)`: output pin for every input pin."""
    if len(mapping) != len(alphabet) or sorted(mapping) != sorted(alphabet):
        raise ValueError(f"wiring {mapping!r} must be a permutation of the alphabet")
    return tuple(alphabet.index(c) for c in mapping)


@dataclass(frozen=True, slots=True)
class RotorWiring:
    """Immutable wiring of one rotor kind, shared by every Rotor of that kind.

    `forward` is used on the way in (towards the reflector), `inverse` on the
    way back; keeping both avoids a search on the return path.
    """

    name: str
    forward: tuple[int, ...]
    inverse: tuple[int, ...]
    turnover: int

    @classmethod
    def from_mapping(cls, name: str, mapping: str, turnover: str,
                     alphabet: str = ALPHABET) -> "RotorWiring":
        forward = _index_table(mapping, alphabet)
        inverse = [0] * len(alphabet)
        for input_pin, output_pin in enumerate(forward):
            inverse[output_pin] = input_pin

        if len(turnover) != 1 or turnover not in alphabet:
            raise ValueError(f"turnover {turnover!r} must be a single alphabet letter")

        return cls(name, forward, tuple(inverse), alphabet.index(turnover))

    def __repr__(self) -> str:
        return f"<RotorWiring {self.name} turnover={ALPHABET[self.turnover]}>"


class Rotor:
    __slots__ = ("wiring", "position", "ring_setting")

    def __init__(self, wiring: RotorWiring, ring_setting: int = 0, position: int = 0) -> None:
        self.wiring = wiring            # shared reference, never copied
        self.ring_setting = ring_setting % SIZE
        self.position = position % SIZE

    @property
    def name(self) -> str:
        return self.wiring.name

    # ── ring helpers ──────────────────────────────────────────────
    def set_ring(self, ring: int) -> "Rotor":
        """Ringstellung as printed on the wheel, 1-based."""
        if not 1 <= ring <= SIZE:
            raise ValueError(f"ring setting {ring} out of range 1–{SIZE}")
        self.ring_setting = ring - 1
        return self

    # ── stepping --------------------------------------------------
    def step(self) -> None:
        self.position = (self.position + 1) % SIZE

    def should_turnover(self) -> bool:
        return self.position == self.wiring.turnover

    # ── signal paths ---------------------------------------------
    def output_for(self, pin: int) -> int:
        """Right-to-left, towards the reflector."""
        offset = (self.position - self.ring_setting) % SIZE
        mapped = self.wiring.forward[(pin + offset) % SIZE]
        return (mapped - offset) % SIZE

    def input_for(self, pin: int) -> int:
        """Left-to-right, on the way back from the reflector."""
        offset = (self.position - self.ring_setting) % SIZE
        mapped = self.wiring.inverse[(pin + offset) % SIZE]
        return (mapped - offset) % SIZE

    # ── niceties --------------------------------------------------
    def __repr__(self) -> str:
        return f"<Rotor {self.wiring.name} pos={self.position} ring={self.ring_setting}>"


@dataclass(frozen=True, slots=True)
class Reflector:
    name: str
    mapping: tuple[int, ...]

    @classmethod
    def from_mapping(cls, name: str, wiring: str, alphabet: str = ALPHABET) -> "Reflector":
        table = _index_table(wiring, alphabet)

        # ensure involution property (w[i] = j ⇒ w[j] = i) and no self-maps
        for i, j in enumerate(table):
            if table[j] != i or i == j:
                raise ValueError("Reflector wiring must be an involution with no fixed points")

        return cls(name, table)

    def reflect(self, pin: int) -> int:
        return self.mapping[pin]

    def __repr__(self) -> str:
        return f"<Reflector {self.name}>"
