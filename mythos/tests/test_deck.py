"""
Tests for deck construction rules and deck list parsing.
"""

import pytest

from ..cards.catalog import STARTER_DECKS, build_starter_deck, get_card
from ..cards.deck import base_version, load_deck_file, parse_deck_lines, validate_deck
from .conftest import card


def _deck(*card_ids, copies=2):
    return [card(c) for c in card_ids for _ in range(copies)]


LEGAL_IDS = ("001", "005", "009", "011", "013", "015", "017", "019",
             "021", "023", "025", "027", "038", "039", "086")
MISSIONS = ["MSS 01", "MSS 02", "MSS 03"]


class TestValidateDeck:
    """Tests for validate_deck."""

    def test_legal_deck(self):
        result = validate_deck(_deck(*LEGAL_IDS), [card(m) for m in MISSIONS])
        assert result.valid
        assert result.errors == []

    def test_too_few_characters(self):
        result = validate_deck(_deck(*LEGAL_IDS[:14]), [card(m) for m in MISSIONS])
        assert not result.valid
        assert "at least 30" in result.errors[0]

    def test_wrong_mission_count(self):
        result = validate_deck(_deck(*LEGAL_IDS), [card("MSS 01"), card("MSS 02")])
        assert not result.valid

    def test_too_many_copies(self):
        characters = _deck(*LEGAL_IDS) + [card("009")]
        result = validate_deck(characters, [card(m) for m in MISSIONS])
        assert not result.valid
        assert any("009/130" in e for e in result.errors)

    def test_mission_in_character_deck(self):
        characters = _deck(*LEGAL_IDS) + [card("MSS 04")]
        result = validate_deck(characters, [card(m) for m in MISSIONS])
        assert not result.valid

    def test_character_among_missions(self):
        result = validate_deck(_deck(*LEGAL_IDS), [card("MSS 01"), card("MSS 02"), card("009")])
        assert not result.valid

    def test_errors_accumulate(self):
        result = validate_deck([card("009")] * 3, [])
        assert len(result.errors) == 3


class TestBaseVersion:
    @pytest.mark.parametrize("card_id,expected", [
        ("108/130 A", "108/130"),
        ("108/130", "108/130"),
        ("MSS 01", "MSS 01"),
    ])
    def test_rare_art_suffix(self, card_id, expected):
        assert base_version(card_id) == expected


class TestParsing:
    """Tests for deck list files."""

    def test_comments_and_blank_lines(self):
        characters, missions = parse_deck_lines([
            "# my deck",
            "009/130",
            "",
            "086/130  # Zabuza",
            "MSS 02",
        ])
        assert [c.card_id for c in characters] == ["009/130", "086/130"]
        assert [m.card_id for m in missions] == ["MSS 02"]

    def test_unknown_id_raises(self):
        with pytest.raises(KeyError):
            parse_deck_lines(["999/130"])

    def test_load_deck_file(self, tmp_path):
        path = tmp_path / "deck.txt"
        lines = [f"{c}/130" for c in LEGAL_IDS for _ in range(2)] + MISSIONS
        path.write_text("\n".join(lines), encoding="utf-8")

        characters, missions = load_deck_file(path)
        assert len(characters) == 30
        assert validate_deck(characters, missions).valid


class TestStarterDecks:
    @pytest.mark.parametrize("name", sorted(STARTER_DECKS))
    def test_starter_decks_are_legal(self, name):
        characters, missions = build_starter_deck(name)
        assert validate_deck(characters, missions).valid

    def test_unknown_starter_deck(self):
        with pytest.raises(KeyError):
            build_starter_deck("mist")

    def test_get_card_unknown(self):
        with pytest.raises(KeyError):
            get_card("nope")
