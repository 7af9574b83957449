import pytest

import utilities
from utilities import (
    clean_crib,
    get_reflector,
    get_rotor,
    group_blocks,
    parse_key_letter,
    parse_plug_pair,
    parse_ring,
    preprocess_message,
)


def test_wheel_database_names():
    assert utilities.ROTOR_NAMES == ("I", "II", "III", "IV", "V")
    assert utilities.REFLECTOR_NAMES == ("A", "B", "C")


def test_lookups_accept_lower_case():
    assert get_rotor("iii") is get_rotor("III")
    assert get_reflector("b") is utilities.B


def test_unknown_names_raise():
    with pytest.raises(ValueError, match="Unknown rotor"):
        get_rotor("VIII")
    with pytest.raises(ValueError, match="Unknown reflector"):
        get_reflector("Z")


@pytest.mark.parametrize("raw, expected", [("1", 1), ("26", 26), (13, 13)])
def test_parse_ring(raw, expected):
    assert parse_ring(raw) == expected


@pytest.mark.parametrize("raw", ["0", "27", "x", "-3"])
def test_parse_ring_rejects(raw):
    with pytest.raises(ValueError):
        parse_ring(raw)


def test_parse_key_letter():
    assert parse_key_letter("a") == 0
    assert parse_key_letter("Z") == 25
    for bad in ("", "AB", "1", "é"):
        with pytest.raises(ValueError):
            parse_key_letter(bad)


def test_parse_plug_pair():
    assert parse_plug_pair("ab") == "AB"
    for bad in ("A", "ABC", "AA", "A1"):
        with pytest.raises(ValueError):
            parse_plug_pair(bad)


def test_preprocess_keep_mode():
    assert preprocess_message("Hello, World!\n") == "HELLO, WORLD!"


def test_preprocess_strip_mode():
    assert preprocess_message("Hello, World!\r\n", "strip") == "HELLOWORLD"
    assert clean_crib("wetter 42 bericht") == "WETTERBERICHT"


def test_preprocess_rejects_unknown_mode():
    with pytest.raises(ValueError):
        preprocess_message("abc", "squash")


def test_group_blocks():
    assert group_blocks("ABCDEFGHIJKL", 5) == "ABCDE FGHIJ KL"
    assert group_blocks("ABC", 0) == "ABC"
