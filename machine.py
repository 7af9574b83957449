# machine.py  ─────────────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Sequence

from debug import Debug
from keyboard_and_plugboard import Keyboard, Plugboard
from rotor_and_reflector import Reflector, Rotor
from utilities import get_reflector, get_rotor

debug = Debug()
debug.disable("stepping", "encipher")


class Machine:
    """Three-rotor machine: plugboard → R → M → L → reflector → L → M → R → plugboard.

    Rotor positions advance on every keypress, so one instance models one
    session; build a fresh machine (or `reset` it) to start over.
    """

    def __init__(
        self,
        left: Rotor,
        middle: Rotor,
        right: Rotor,
        reflector: Reflector,
        plugboard: Plugboard | None = None,
        keyboard: Keyboard | None = None,
    ) -> None:
        self.left       = left
        self.middle     = middle
        self.right      = right
        self.reflector  = reflector
        self.plugboard  = plugboard if plugboard is not None else Plugboard()
        self.kb         = keyboard if keyboard is not None else Keyboard()

    @classmethod
    def from_settings(
        cls,
        rotor_names: Sequence[str],
        reflector: str,
        ring_settings: Sequence[int] = (1, 1, 1),
        positions: Sequence[int] = (0, 0, 0),
        plugs: Sequence[str] = (),
    ) -> "Machine":
        """Build from wheel names, 1-based rings and 0-based window positions."""
        if len(rotor_names) != 3:
            raise ValueError(f"need exactly 3 rotors, got {len(rotor_names)}")
        if len(ring_settings) != 3:
            raise ValueError("ring_settings length mismatch")
        if len(positions) != 3:
            raise ValueError("positions length mismatch")

        wirings = [get_rotor(name) for name in rotor_names]
        if len({w.name for w in wirings}) != 3:
            raise ValueError(f"rotors must be distinct, got {list(rotor_names)}")

        rotors = [Rotor(w, position=pos) for w, pos in zip(wirings, positions)]
        for rotor, ring in zip(rotors, ring_settings):
            rotor.set_ring(ring)

        return cls(*rotors, get_reflector(reflector), Plugboard(plugs))

    # ── key & ring helpers ──────────────────────────────────────

    @property
    def rotors(self) -> tuple[Rotor, Rotor, Rotor]:
        return self.left, self.middle, self.right

    def reset(self, left_pos: int, middle_pos: int, right_pos: int,
              middle_ring: int, right_ring: int, left_ring: int = 0) -> None:
        """Overwrite every mutable rotor field in place (0-based values)."""
        self.left.position, self.left.ring_setting = left_pos, left_ring
        self.middle.position, self.middle.ring_setting = middle_pos, middle_ring
        self.right.position, self.right.ring_setting = right_pos, right_ring

    # ── stepping logic  ─────────────────────────────────────────

    def _step_rotors(self) -> None:
        """Advance rotors for one key-press, including the middle double-step."""
        left, middle, right = self.left, self.middle, self.right

        # decide which rotors step before moving any of them
        step_L = middle.should_turnover()
        step_M = step_L or right.should_turnover()

        if step_L:
            left.step()
        if step_M:
            middle.step()
        right.step()

    # ── encipher one symbol  ────────────────────────────────────

    def press(self, pin: int) -> int:
        """One keypress on an already-indexed pin."""
        self._step_rotors()

        signal = self.plugboard.forward(pin)
        signal = self.right.output_for(signal)
        signal = self.middle.output_for(signal)
        signal = self.left.output_for(signal)

        signal = self.reflector.reflect(signal)

        signal = self.left.input_for(signal)
        signal = self.middle.input_for(signal)
        signal = self.right.input_for(signal)
        return self.plugboard.backward(signal)

    def output_for(self, letter: str) -> str:
        out_ch = self.kb.backward(self.press(self.kb.forward(letter)))
        debug.log("stepping", f"Rotor pos {[r.position for r in self.rotors]}")
        debug.log("encipher", f"{letter} -> {out_ch}")
        return out_ch

    def run(self, text: str) -> str:
        """Encipher every A–Z character; anything else passes through and does not step."""
        return "".join(
            self.output_for(ch) if ch in self.kb else ch
            for ch in text
        )

    def __repr__(self) -> str:
        return (
            f"<Machine {self.reflector.name} "
            f"{' '.join(f'{r.name}({r.position}, {r.ring_setting})' for r in self.rotors)} "
            f"{self.plugboard!r}>"
        )
