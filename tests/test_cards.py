import random

import pytest

from holdem.cards import Card, create_deck, deal, parse_cards, parse_label


def test_create_deck_has_52_unique_cards():
    deck = create_deck(random.Random(1))
    assert len(deck) == 52
    assert len(set(deck)) == 52


def test_create_deck_is_reproducible_with_seeded_rng():
    assert create_deck(random.Random(99)) == create_deck(random.Random(99))
    assert create_deck(random.Random(1)) != create_deck(random.Random(2))


def test_deal_removes_cards_from_the_end():
    deck = create_deck(random.Random(5))
    last_two = deck[-2:]
    dealt = deal(deck, 2)
    assert dealt == [last_two[1], last_two[0]]
    assert len(deck) == 50


def test_deal_raises_when_deck_exhausted():
    deck = [Card("A", "hearts"), Card("K", "diamonds")]
    deal(deck, 2)
    with pytest.raises(ValueError, match="Not enough cards"):
        deal(deck, 1)


def test_card_validation_rejects_invalid_values():
    with pytest.raises(ValueError, match="Invalid rank"):
        Card("1", "hearts")
    with pytest.raises(ValueError, match="Invalid suit"):
        Card("A", "stars")


def test_cards_compare_by_value():
    assert Card("10", "spades") == Card("10", "spades")
    assert Card("10", "spades") != Card("10", "hearts")


def test_parse_label_accepts_ten_spellings():
    assert parse_label("Th") == Card("10", "hearts")
    assert parse_label("10h") == Card("10", "hearts")
    assert parse_label("as") == Card("A", "spades")
    assert Card("10", "clubs").label == "Tc"
    assert [card.label for card in parse_cards(["Kd", "2c"])] == ["Kd", "2c"]


def test_parse_label_rejects_garbage():
    with pytest.raises(ValueError):
        parse_label("Zz")
    with pytest.raises(ValueError):
        parse_label("A")
