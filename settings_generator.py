# settings_generator.py
from __future__ import annotations

import argparse
import json
from pathlib import Path
from random import Random, SystemRandom
from typing import Dict, List, Sequence

from rotor_and_reflector import ALPHABET
from utilities import REFLECTOR_NAMES, ROTOR_NAMES

MAX_PAIRS = len(ALPHABET) // 2
DEFAULT_PAIRS = 10          # what operators actually plugged

# ── helpers ───────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Deterministic RNG when *seed* given; CSPRNG otherwise."""
    return Random(seed) if seed is not None else SystemRandom()


def choose_pairs(k: int, rng: Random | SystemRandom, alpha: str = ALPHABET) -> List[str]:
    """Return *k* disjoint plug pairs."""
    k = min(k, len(alpha) // 2)
    pool = list(alpha)
    rng.shuffle(pool)
    return [a + b for a, b in zip(pool[::2], pool[1::2])][:k]


def random_settings(rng: Random | SystemRandom, pairs: int = DEFAULT_PAIRS) -> Dict:
    """One complete machine config in the JSON layout `main.py` reads."""
    return {
        "rotors": rng.sample(ROTOR_NAMES, 3),
        "reflector": rng.choice(REFLECTOR_NAMES),
        "ring_set": [rng.randint(1, len(ALPHABET)) for _ in range(3)],
        "plugs": choose_pairs(pairs, rng),
        "key": "".join(rng.choices(ALPHABET, k=3)),
    }


def parse_cli(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a random machine configuration")
    p.add_argument("--seed", type=int, help="Deterministic seed (omit for random)")
    p.add_argument(
        "--outfile",
        type=Path,
        default=Path("enigma_config.json"),
        help="Destination JSON file (default: enigma_config.json)",
    )
    p.add_argument(
        "--plugs",
        type=int,
        default=DEFAULT_PAIRS,
        choices=range(0, MAX_PAIRS + 1),
        metavar=f"0-{MAX_PAIRS}",
        help=f"Number of plug pairs (default: {DEFAULT_PAIRS})",
    )
    return p.parse_args(argv)


# ── main ─────────────────────────────────────────────────────────


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_cli(argv)
    cfg = random_settings(build_rng(args.seed), args.plugs)

    args.outfile.write_text(json.dumps(cfg, indent=2), encoding="utf-8")
    print(f"✅  Wrote {args.outfile}\n"
        f"   rotors      : {cfg['rotors']}\n"
        f"   reflector   : {cfg['reflector']}\n"
        f"   rings       : {cfg['ring_set']}\n"
        f"   key         : {cfg['key']}\n"
        f"   plug pairs  : {len(cfg['plugs'])}")


if __name__ == "__main__":
    main()
