# tests/test_cards.py
import random

import pytest

from arena358.cards import HIDDEN_CARD_ID, Card, Rank, Suit, card_from_id, hidden_card
from arena358.deck import create_deck, deal, seeded_rng, shuffle, sort_for_display
from arena358.errors import InvalidDeckSizeError


def test_card_ids_and_validation():
    assert Card(Suit.SPADES, Rank.ACE).id == "S-A"
    assert Card(Suit.HEARTS, Rank.TEN).id == "H-10"
    assert str(Card(Suit.DIAMONDS, Rank.QUEEN)) == "QD"
    assert Card(Suit.CLUBS, Rank.TWO).value == 2
    assert Card(Suit.CLUBS, Rank.ACE).value == 14

    with pytest.raises(ValueError):
        Card("S", Rank.ACE)
    with pytest.raises(ValueError):
        Card(Suit.SPADES, Rank.ACE, "H-A")


def test_card_from_id_round_trip_and_errors():
    for card in create_deck():
        assert card_from_id(card.id) == card

    for bad in ("", "S", "X-A", "S-1", "SA"):
        with pytest.raises(ValueError):
            card_from_id(bad)


def test_hidden_card_is_marked():
    placeholder = hidden_card()
    assert placeholder.id == HIDDEN_CARD_ID
    assert placeholder.is_hidden
    assert not Card(Suit.SPADES, Rank.TWO).is_hidden


def test_create_deck_has_52_unique_cards():
    deck = create_deck()
    assert len(deck) == 52
    assert len({c.id for c in deck}) == 52
    assert deck[0].id == "S-2"
    assert deck[-1].id == "C-A"


def test_shuffle_is_deterministic_for_a_seed_and_does_not_mutate():
    deck = create_deck()
    original = list(deck)

    first = shuffle(deck, seeded_rng(42))
    second = shuffle(deck, seeded_rng(42))
    other = shuffle(deck, seeded_rng(43))

    assert deck == original
    assert first == second
    assert first != other
    assert sorted(c.id for c in first) == sorted(c.id for c in deck)


def test_shuffle_accepts_plain_random_and_default_source():
    deck = create_deck()
    assert shuffle(deck, random.Random(1)) == shuffle(deck, random.Random(1))
    assert len(shuffle(deck)) == 52


def test_deal_round_robin_and_kitty():
    deck = create_deck()
    hands, kitty = deal(deck)

    assert [len(h) for h in hands] == [16, 16, 16]
    assert kitty == deck[48:52]
    for i in range(48):
        assert deck[i] in hands[i % 3]
    assert hands[0][:3] == [deck[0], deck[3], deck[6]]


def test_deal_rejects_wrong_size():
    with pytest.raises(InvalidDeckSizeError):
        deal(create_deck()[:51])
    with pytest.raises(InvalidDeckSizeError):
        deal(create_deck() + [Card(Suit.SPADES, Rank.TWO)])


def test_sort_for_display_puts_trump_first_and_ranks_descending():
    hand = [card_from_id(i) for i in ("C-2", "H-K", "S-3", "H-4", "S-A", "D-9")]

    assert [c.id for c in sort_for_display(hand)] == [
        "S-A", "S-3", "H-K", "H-4", "D-9", "C-2",
    ]
    assert [c.id for c in sort_for_display(hand, Suit.DIAMONDS)] == [
        "D-9", "S-A", "S-3", "H-K", "H-4", "C-2",
    ]
