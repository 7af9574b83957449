# main.py
from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, List, Sequence

from cracker import Cracker, CrackReport, Crib, Match, SearchSpace
from debug import COMPONENTS, Debug
from keyboard_and_plugboard import Plugboard
from machine import Machine
from rotor_and_reflector import ALPHABET
from utilities import (
    NON_ALPHA_MODES,
    REFLECTOR_NAMES,
    ROTOR_NAMES,
    get_reflector,
    get_rotor,
    group_blocks,
    parse_key_letter,
    parse_plug_pair,
    parse_ring,
    preprocess_message,
)

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration & logging
# ────────────────────────────────────────────────────────────────────────


debug = Debug()


@dataclass(slots=True)
class Config:
    """Runtime switches that influence text handling, not the cipher."""

    non_alpha: str = "keep"         # "keep": pass through unstepped, "strip": drop
    block: int = 0                  # display block size, 0 = one unbroken line


@dataclass(slots=True)
class MachineSettings:
    """One machine setup as an operator writes it down (1-based rings)."""

    rotors: List[str] = field(default_factory=lambda: ["I", "II", "III"])
    reflector: str = "B"
    ring_set: List[int] = field(default_factory=lambda: [1, 1, 1])
    plugs: List[str] = field(default_factory=list)
    key: str = "AAA"

    def positions(self) -> List[int]:
        return [ALPHABET.index(c) for c in self.key]

    def build(self) -> Machine:
        return Machine.from_settings(
            self.rotors, self.reflector, self.ring_set, self.positions(), self.plugs
        )


# ────────────────────────────────────────────────────────────────────────
#  1. JSON loading helpers
# ────────────────────────────────────────────────────────────────────────

REQUIRED_KEYS = {"rotors", "reflector", "ring_set", "plugs", "key"}


def load_config(path: str | Path) -> dict:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    missing = REQUIRED_KEYS - data.keys()
    if missing:
        raise ValueError(f"Missing keys in config: {', '.join(sorted(missing))}")
    return data


def settings_from_config(cfg: dict) -> MachineSettings:
    """Validate a config dict the same way the command line is validated."""
    rotors = [get_rotor(name).name for name in cfg["rotors"]]
    key = "".join(ALPHABET[parse_key_letter(c)] for c in cfg["key"])
    if len(rotors) != 3 or len(key) != 3 or len(cfg["ring_set"]) != 3:
        raise ValueError("config needs exactly 3 rotors, 3 ring settings and a 3-letter key")
    if len(set(rotors)) != 3:
        raise ValueError(f"rotors must be distinct, got {rotors}")

    plugs = [parse_plug_pair(p) for p in cfg["plugs"]]
    Plugboard(plugs)                        # pair count and reuse

    return MachineSettings(
        rotors=rotors,
        reflector=get_reflector(str(cfg["reflector"]).upper()).name,
        ring_set=[parse_ring(r) for r in cfg["ring_set"]],
        plugs=plugs,
        key=key,
    )


# ────────────────────────────────────────────────────────────────────────
#  2. Operations
# ────────────────────────────────────────────────────────────────────────


def encode(settings: MachineSettings, text: str, cfg: Config | None = None) -> str:
    """Encipher (or decipher – the machine is its own inverse) *text*."""
    cfg = cfg or Config()
    machine = settings.build()
    return group_blocks(machine.run(preprocess_message(text, cfg.non_alpha)), cfg.block)


def crack(
    plaintext: str,
    ciphertext: str,
    plugs: Sequence[str] = (),
    space: SearchSpace | None = None,
    workers: int | None = None,
    on_match: Callable[[Match], None] | None = None,
) -> CrackReport:
    crib = Crib.from_text(plaintext, ciphertext)
    return Cracker(crib, plugs, space, workers).run(on_match)


# ────────────────────────────────────────────────────────────────────────
#  3. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def _arg(fn: Callable):
    """Turn a validator's ValueError into an argparse usage error."""
    def wrapper(raw: str):
        try:
            return fn(raw)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from None
    wrapper.__name__ = fn.__name__
    return wrapper


def _rotor_name(raw: str) -> str:
    return get_rotor(raw).name


def _key_letter(raw: str) -> str:
    return ALPHABET[parse_key_letter(raw)]


def _ring_index(raw: str) -> int:
    """1-based ring on the command line, 0-based in the search."""
    return parse_ring(raw) - 1


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="enigma-crib",
        description="Three-rotor cipher machine and known-plaintext cracker",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Trace every keypress and worker.")
    p.add_argument("--log-file", metavar="FILE", help="Also write log lines to FILE.")
    sub = p.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="Encipher or decipher text under one configuration.")
    enc.add_argument("--config", metavar="FILE", help="Load machine settings from JSON; flags below override it.")
    enc.add_argument("--reflector", type=str.upper, choices=REFLECTOR_NAMES)
    enc.add_argument("--rotors", nargs=3, metavar="ROTOR", type=_arg(_rotor_name),
                     help=f"Left, middle, right rotor [{', '.join(ROTOR_NAMES)}]")
    enc.add_argument("--rings", nargs=3, metavar="NUM", type=_arg(parse_ring),
                     help="Ring settings [1 to 26]")
    enc.add_argument("--plugs", nargs="*", metavar="PAIR", type=_arg(parse_plug_pair),
                     help="Up to 13 plug pairs, e.g. AB CD")
    enc.add_argument("--key", nargs=3, metavar="CHAR", type=_arg(_key_letter),
                     help="Start positions as window letters, e.g. A A A")
    enc.add_argument("--input", required=True, help="Text to process.")
    enc.add_argument("--non-alpha", choices=NON_ALPHA_MODES, default="keep",
                     help="Pass non-letters through (keep) or drop them (strip). Default: keep")
    enc.add_argument("--block", type=int, default=0, help="Group output in blocks of N letters.")

    crk = sub.add_parser("crack", help="Recover configurations from a plaintext/ciphertext crib.")
    crk.add_argument("--plaintext", required=True)
    crk.add_argument("--ciphertext", required=True)
    crk.add_argument("--plugs", nargs="*", metavar="PAIR", type=_arg(parse_plug_pair), default=[])
    crk.add_argument("--reflector", type=str.upper, choices=REFLECTOR_NAMES, default="B")
    crk.add_argument("--rotors", nargs="+", metavar="ROTOR", type=_arg(_rotor_name),
                     default=list(ROTOR_NAMES), help="Rotor kinds to search (default: all)")
    for wheel in ("left", "middle", "right"):
        crk.add_argument(f"--{wheel}-positions", nargs="+", metavar="CHAR", type=_arg(parse_key_letter),
                         help=f"Only try these {wheel} window letters (default: A to Z)")
    for wheel in ("middle", "right"):
        crk.add_argument(f"--{wheel}-rings", nargs="+", metavar="NUM", type=_arg(_ring_index),
                         help=f"Only try these {wheel} ring settings [1 to 26] (default: all)")
    crk.add_argument("--workers", type=int, help="Worker processes (default: CPU count)")
    return p


def _encode_settings(args: argparse.Namespace, parser: argparse.ArgumentParser) -> MachineSettings:
    if args.config:
        try:
            settings = settings_from_config(load_config(args.config))
        except (OSError, ValueError) as exc:
            raise SystemExit(f"error: cannot load {args.config}: {exc}")
    else:
        missing = [f"--{name}" for name in ("reflector", "rotors", "rings", "key")
                   if getattr(args, name) is None]
        if missing:
            parser.error(f"the following arguments are required without --config: {', '.join(missing)}")
        settings = MachineSettings()

    overrides = {
        "reflector": args.reflector,
        "rotors": args.rotors,
        "ring_set": args.rings,
        "plugs": args.plugs,
        "key": "".join(args.key) if args.key else None,
    }
    return replace(settings, **{k: v for k, v in overrides.items() if v is not None})


# ────────────────────────────────────────────────────────────────────────
#  4. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        debug.enable(*COMPONENTS)
        debug.set_level(logging.DEBUG)
    if args.log_file:
        debug.add_file(args.log_file)

    if args.command == "encode":
        settings = _encode_settings(args, parser)
        cfg = Config(non_alpha=args.non_alpha, block=args.block)
        try:
            print(encode(settings, args.input, cfg))
        except ValueError as exc:
            parser.error(str(exc))
        return

    # crack mode ---------------------------------------------------------
    def report(match: Match) -> None:
        print(match.describe(), flush=True)

    try:
        narrowed = {
            dim: tuple(getattr(args, dim))
            for dim in ("left_positions", "middle_positions", "right_positions",
                        "middle_rings", "right_rings")
            if getattr(args, dim) is not None
        }
        space = SearchSpace(rotor_names=tuple(args.rotors), reflector=args.reflector, **narrowed)
        crack(args.plaintext, args.ciphertext, args.plugs, space, args.workers, on_match=report)
    except ValueError as exc:
        raise SystemExit(f"error: {exc}")


if __name__ == "__main__":
    main()
