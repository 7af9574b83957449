# keyboard_and_plugboard.py
from __future__ import annotations

from collections.abc import Sequence

from debug import Debug
from rotor_and_reflector import ALPHABET

debug = Debug()
debug.disable("plugboard")


# ── Keyboard ──────────────────────────────────────────────────────
class Keyboard:
    def __init__(self, alphabet: str = ALPHABET) -> None:
        self.alphabet: str = alphabet
        self.alpha_to_index: dict[str, int] = {
            ch: i for i, ch in enumerate(alphabet)
        }

    # letter → integer signal
    def forward(self, letter: str) -> int:
        try:
            return self.alpha_to_index[letter]
        except KeyError:
            raise ValueError(
                f"Invalid character {letter!r} for current alphabet."
            ) from None

    # integer signal → letter
    def backward(self, signal: int) -> str:
        if not (0 <= signal < len(self.alphabet)):
            hi = len(self.alphabet) - 1
            raise ValueError(f"Signal {signal} out of range 0–{hi}")
        return self.alphabet[signal]

    def __contains__(self, letter: str) -> bool:
        return letter in self.alpha_to_index


# ── Plugboard ─────────────────────────────────────────────────────
class Plugboard:
    """Steckerbrett: up to 13 disjoint letter swaps, identity elsewhere."""

    def __init__(
        self,
        pairs: Sequence[str | tuple[str, str]] = (),
        alphabet: str = ALPHABET,
    ) -> None:
        self.alphabet: str = alphabet
        self.wiring: list[int] = list(range(len(alphabet)))
        used: set[str] = set()

        if len(pairs) > len(alphabet) // 2:
            raise ValueError(f"At most {len(alphabet) // 2} plug pairs, got {len(pairs)}")

        for raw in pairs:
            # normalise to (a, b)
            if isinstance(raw, str):
                if len(raw) != 2:
                    raise ValueError(f"Pair {raw!r} must be exactly 2 symbols")
                a, b = raw.upper()
            else:
                a, b = raw

            if a == b:
                raise ValueError(f"Plugboard cannot map a symbol to itself: {a}")
            if a not in alphabet or b not in alphabet:
                bad = a if a not in alphabet else b
                raise ValueError(f"Symbol {bad!r} not in alphabet")
            if a in used or b in used:
                dup = a if a in used else b
                raise ValueError(f"Character {dup!r} already used in plugboard")

            # passed validation → commit swap
            ia, ib = alphabet.index(a), alphabet.index(b)
            self.wiring[ia], self.wiring[ib] = ib, ia
            used.update((a, b))

    # the same lookup serves both directions
    def output_for(self, signal: int) -> int:
        mapped = self.wiring[signal]
        debug.log("plugboard", "%s->%s", self.alphabet[signal], self.alphabet[mapped])
        return mapped

    forward = output_for        # alias: signal in
    backward = output_for       # alias: signal out

    def pairs(self) -> list[str]:
        """Configured swaps as `["AB", "CD", …]`, sorted."""
        return [
            self.alphabet[a] + self.alphabet[b]
            for a, b in enumerate(self.wiring)
            if a < b
        ]

    # nicety for debugging
    def __repr__(self) -> str:
        return f"<Plugboard {' '.join(self.pairs())}>"
