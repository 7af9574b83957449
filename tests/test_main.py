import json

import pytest

from cracker import SearchSpace
from main import (
    Config,
    MachineSettings,
    crack,
    encode,
    load_config,
    main,
    settings_from_config,
)

BASE = ["encode", "--reflector", "B", "--rotors", "I", "II", "III",
        "--rings", "1", "1", "1", "--key", "A", "A", "A"]


def run_cli(capsys, *argv):
    main(list(argv))
    return capsys.readouterr().out.strip()


def test_encode_cli(capsys):
    assert run_cli(capsys, *BASE, "--input", "ABC") == "BJE"


def test_encode_cli_lower_case_and_passthrough(capsys):
    assert run_cli(capsys, *BASE, "--input", "a b\nc") == "B JE"


def test_encode_cli_strip_and_blocks(capsys):
    out = run_cli(capsys, *BASE, "--input", "Hello, World", "--non-alpha", "strip", "--block", "5")
    assert len(out.split(" ")) == 2
    assert out.replace(" ", "").isalpha()


def test_encode_decode_round_trip(capsys):
    argv = ["encode", "--reflector", "C", "--rotors", "v", "iv", "ii",
            "--rings", "4", "26", "13", "--plugs", "AZ", "by", "--key", "q", "E", "v"]
    cipher = run_cli(capsys, *argv, "--input", "ATTACK AT DAWN")
    assert run_cli(capsys, *argv, "--input", cipher) == "ATTACK AT DAWN"


@pytest.mark.parametrize(
    "bad",
    [
        ["--rings", "0", "1", "1"],
        ["--rings", "1", "27", "1"],
        ["--key", "A", "AB", "A"],
        ["--key", "A", "1", "A"],
        ["--plugs", "AA"],
        ["--plugs", "AB", "BC"],
        ["--rotors", "I", "I", "II"],
        ["--rotors", "I", "II", "VI"],
        ["--reflector", "D"],
    ],
)
def test_encode_cli_rejects_bad_values(bad, capsys):
    with pytest.raises(SystemExit) as exc:
        main(BASE + bad + ["--input", "ABC"])
    assert exc.value.code == 2


def test_encode_cli_requires_settings_without_config():
    with pytest.raises(SystemExit) as exc:
        main(["encode", "--input", "ABC"])
    assert exc.value.code == 2


def test_encode_cli_from_config_with_override(tmp_path, capsys):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({
        "rotors": ["I", "II", "III"], "reflector": "B", "ring_set": [1, 1, 1],
        "plugs": [], "key": "ZZZ",
    }), encoding="utf-8")

    assert run_cli(capsys, "encode", "--config", str(path), "--key", "A", "A", "A",
                   "--input", "ABC") == "BJE"


def test_encode_cli_bad_config(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"rotors": ["I", "II", "III"]}), encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["encode", "--config", str(path), "--input", "ABC"])
    assert "Missing keys" in str(exc.value.code)


def test_load_config_reports_missing_keys(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError, match="key, plugs, reflector, ring_set, rotors"):
        load_config(path)


def test_settings_from_config_normalises():
    settings = settings_from_config({
        "rotors": ["iv", "I", "v"], "reflector": "c", "ring_set": [2, 3, 4],
        "plugs": ["ab"], "key": "xyz",
    })
    assert settings == MachineSettings(["IV", "I", "V"], "C", [2, 3, 4], ["AB"], "XYZ")
    assert settings.positions() == [23, 24, 25]


def test_encode_function_modes():
    settings = MachineSettings()
    assert encode(settings, "A-B-C") == "B-J-E"
    assert encode(settings, "A-B-C", Config(non_alpha="strip")) == "BJE"


def test_crack_function_finds_known_setting():
    space = SearchSpace(
        rotor_names=("I", "II", "III"),
        left_positions=(0,),
        middle_positions=(0,),
        middle_rings=(0,),
        right_rings=(0,),
    )
    report = crack("ABC", "BJE", space=space, workers=1)
    assert "I(0, 0) II(0, 0) III(0, 0)" in {m.describe() for m in report.matches}


def test_crack_cli_rejects_length_mismatch():
    with pytest.raises(SystemExit) as exc:
        main(["crack", "--plaintext", "ABC", "--ciphertext", "ABCD", "--workers", "1"])
    assert "length mismatch" in str(exc.value.code)


def test_crack_cli_rejects_too_few_rotors():
    with pytest.raises(SystemExit) as exc:
        main(["crack", "--plaintext", "ABC", "--ciphertext", "XYZ", "--rotors", "I", "II"])
    assert "3 distinct rotors" in str(exc.value.code)


@pytest.mark.parametrize("change, message", [
    ({"reflector": "Q"}, "Unknown reflector"),
    ({"rotors": ["I", "I", "III"]}, "rotors must be distinct"),
    ({"plugs": ["AB", "BC"]}, "already used"),
])
def test_encode_cli_rejects_invalid_config_values(tmp_path, change, message):
    cfg = {"rotors": ["I", "II", "III"], "reflector": "B", "ring_set": [1, 1, 1],
           "plugs": [], "key": "AAA", **change}
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps(cfg), encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["encode", "--config", str(path), "--input", "ABC"])
    # a string code exits with status 1, unlike argparse usage errors (2)
    assert isinstance(exc.value.code, str)
    assert message in exc.value.code


def test_crack_cli_prints_matches(capsys):
    out = run_cli(capsys, "crack", "--plaintext", "ABC", "--ciphertext", "BJE",
                  "--rotors", "I", "II", "III",
                  "--left-positions", "A", "--middle-positions", "a",
                  "--middle-rings", "1", "--right-rings", "1", "--workers", "1")
    assert "I(0, 0) II(0, 0) III(0, 0)" in out.splitlines()


def test_crack_cli_narrowing_reaches_the_search(capsys):
    out = run_cli(capsys, "crack", "--plaintext", "ABC", "--ciphertext", "BJE",
                  "--rotors", "I", "II", "III",
                  "--left-positions", "B", "--middle-positions", "A",
                  "--right-positions", "A", "--middle-rings", "1",
                  "--right-rings", "1", "--workers", "1")
    assert "I(0, 0) II(0, 0) III(0, 0)" not in out.splitlines()


@pytest.mark.parametrize("flag, value", [
    ("--left-positions", "AB"),
    ("--middle-rings", "0"),
    ("--right-rings", "27"),
])
def test_crack_cli_rejects_bad_narrowing(flag, value, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["crack", "--plaintext", "ABC", "--ciphertext", "BJE", flag, value])
    assert exc.value.code == 2
