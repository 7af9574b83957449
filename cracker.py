# cracker.py
"""Known-plaintext search over rotor order, window positions and ring settings.

Every ordered choice of three rotors is an independent unit of work. Inside a
unit the five remaining dimensions are walked with nested loops over a single
Machine whose rotor fields are overwritten per candidate. The left ring is
pinned to 0: nothing steps past the left rotor, so its ring offset folds into
its start position.
"""
from __future__ import annotations

import itertools
import os
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from multiprocessing.context import BaseContext

from debug import Debug
from keyboard_and_plugboard import Plugboard
from machine import Machine
from rotor_and_reflector import ALPHABET, SIZE, Rotor
from utilities import ROTOR_NAMES, clean_crib, get_reflector, get_rotor

debug = Debug()
debug.disable("cracker")

ALL_SETTINGS: tuple[int, ...] = tuple(range(SIZE))


# ────────────────────────────────────────────────────────────────────────
#  1. Inputs & results
# ────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Crib:
    plaintext: str
    ciphertext: str

    @classmethod
    def from_text(cls, plaintext: str, ciphertext: str) -> "Crib":
        """Filter both sides to A–Z and insist they line up letter for letter."""
        plain, cipher = clean_crib(plaintext), clean_crib(ciphertext)
        if not plain:
            raise ValueError("crib is empty after removing non-alphabet characters")
        if len(plain) != len(cipher):
            raise ValueError(
                f"crib length mismatch: plaintext has {len(plain)} letters, "
                f"ciphertext has {len(cipher)}"
            )
        return cls(plain, cipher)

    def pins(self) -> tuple[tuple[int, ...], tuple[int, ...]]:
        return (
            tuple(ALPHABET.index(c) for c in self.plaintext),
            tuple(ALPHABET.index(c) for c in self.ciphertext),
        )


@dataclass(frozen=True)
class SearchSpace:
    """Which values each dimension may take. Defaults span the whole space."""

    rotor_names: tuple[str, ...] = ROTOR_NAMES
    reflector: str = "B"
    left_positions: tuple[int, ...] = ALL_SETTINGS
    middle_positions: tuple[int, ...] = ALL_SETTINGS
    right_positions: tuple[int, ...] = ALL_SETTINGS
    middle_rings: tuple[int, ...] = ALL_SETTINGS
    right_rings: tuple[int, ...] = ALL_SETTINGS

    def __post_init__(self) -> None:
        names = tuple(get_rotor(n).name for n in self.rotor_names)
        if len(set(names)) != len(names) or len(names) < 3:
            raise ValueError(f"need at least 3 distinct rotors, got {list(self.rotor_names)}")
        object.__setattr__(self, "rotor_names", names)
        object.__setattr__(self, "reflector", get_reflector(self.reflector).name)

        for dim in ("left_positions", "middle_positions", "right_positions",
                    "middle_rings", "right_rings"):
            values = tuple(getattr(self, dim))
            if not values or not all(0 <= v < SIZE for v in values):
                raise ValueError(f"{dim} must be non-empty values in 0–{SIZE - 1}")
            object.__setattr__(self, dim, values)

    def rotor_orders(self) -> list[tuple[str, str, str]]:
        """Left/middle/right assignments; order matters."""
        return list(itertools.permutations(self.rotor_names, 3))

    def per_order(self) -> int:
        return (
            len(self.left_positions) * len(self.middle_positions) * len(self.right_positions)
            * len(self.middle_rings) * len(self.right_rings)
        )

    def size(self) -> int:
        return len(self.rotor_orders()) * self.per_order()


@dataclass(frozen=True)
class Match:
    rotors: tuple[str, str, str]
    positions: tuple[int, int, int]
    rings: tuple[int, int, int]          # 0-based, left always 0
    reflector: str = "B"
    plugs: tuple[str, ...] = ()

    def describe(self) -> str:
        """`I(5, 0) III(12, 3) IV(9, 7)` – rotor(position, ring) left to right."""
        return " ".join(
            f"{name}({pos}, {ring})"
            for name, pos, ring in zip(self.rotors, self.positions, self.rings)
        )

    def settings(self) -> dict:
        """The match as a 1-based machine config, ready for `encode --config`."""
        return {
            "rotors": list(self.rotors),
            "reflector": self.reflector,
            "ring_set": [r + 1 for r in self.rings],
            "plugs": list(self.plugs),
            "key": "".join(ALPHABET[p] for p in self.positions),
        }

    def machine(self) -> Machine:
        return Machine.from_settings(
            self.rotors, self.reflector,
            [r + 1 for r in self.rings], self.positions, self.plugs,
        )


@dataclass
class CrackReport:
    matches: set[Match] = field(default_factory=set)
    candidates: int = 0
    orders: int = 0
    elapsed: float = 0.0

    def summary(self) -> str:
        rate = self.candidates / self.elapsed if self.elapsed > 0 else 0
        return (f"{len(self.matches)} match(es) in {self.candidates:,} candidates "
                f"over {self.orders} rotor orders ({self.elapsed:.1f}s, {rate:,.0f}/s)")


# ────────────────────────────────────────────────────────────────────────
#  2. One unit of work
# ────────────────────────────────────────────────────────────────────────


def search_rotor_order(
    order: tuple[str, str, str],
    crib: Crib,
    space: SearchSpace,
    plugs: Sequence[str] = (),
) -> tuple[list[Match], int]:
    """Walk every candidate for one rotor order; return `(matches, evaluated)`.

    Module level so it pickles into worker processes.
    """
    plain, cipher = crib.pins()
    pairs = list(zip(plain, cipher))

    machine = Machine(
        *(Rotor(get_rotor(name)) for name in order),
        get_reflector(space.reflector),
        Plugboard(plugs),
    )
    reset, press = machine.reset, machine.press

    matches: list[Match] = []
    evaluated = 0
    for left_pos in space.left_positions:
        for middle_pos in space.middle_positions:
            for right_pos in space.right_positions:
                for middle_ring in space.middle_rings:
                    for right_ring in space.right_rings:
                        reset(left_pos, middle_pos, right_pos, middle_ring, right_ring)
                        evaluated += 1
                        for p, c in pairs:
                            if press(p) != c:
                                break
                        else:
                            matches.append(Match(
                                order,
                                (left_pos, middle_pos, right_pos),
                                (0, middle_ring, right_ring),
                                space.reflector,
                                tuple(plugs),
                            ))

    return matches, evaluated


# ────────────────────────────────────────────────────────────────────────
#  3. Driver
# ────────────────────────────────────────────────────────────────────────


class Cracker:
    """Fan rotor orders out over a process pool and gather every match.

    Matches arrive in whatever order the workers finish; treat
    `CrackReport.matches` as an unordered set. Logging happens here in the
    parent, so it follows the caller's switches whatever the start method.
    """

    def __init__(
        self,
        crib: Crib,
        plugs: Sequence[str] = (),
        space: SearchSpace | None = None,
        workers: int | None = None,
        mp_context: BaseContext | None = None,
    ) -> None:
        self.crib = crib
        self.plugs: tuple[str, ...] = tuple(Plugboard(plugs).pairs())
        self.space = space if space is not None else SearchSpace()
        self.workers = workers if workers is not None else (os.cpu_count() or 1)
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        self.mp_context = mp_context

    def run(self, on_match: Callable[[Match], None] | None = None) -> CrackReport:
        orders = self.space.rotor_orders()
        report = CrackReport(orders=len(orders))
        debug.info("cracker", f"searching {self.space.size():,} candidates "
                              f"with {min(self.workers, len(orders))} worker(s)")
        start = time.perf_counter()

        def collect(order: tuple[str, str, str], found: list[Match], evaluated: int) -> None:
            debug.log("cracker", f"{' '.join(order)}: {evaluated:,} candidates, "
                                 f"{len(found)} match(es)")
            report.candidates += evaluated
            for match in found:
                report.matches.add(match)
                if on_match is not None:
                    on_match(match)

        if self.workers == 1:
            for order in orders:
                collect(order, *search_rotor_order(order, self.crib, self.space, self.plugs))
        else:
            with ProcessPoolExecutor(
                max_workers=min(self.workers, len(orders)),
                mp_context=self.mp_context,
            ) as executor:
                futures = {
                    executor.submit(search_rotor_order, order, self.crib, self.space, self.plugs): order
                    for order in orders
                }
                for future in as_completed(futures):
                    collect(futures[future], *future.result())

        report.elapsed = time.perf_counter() - start
        debug.info("cracker", report.summary())
        return report
