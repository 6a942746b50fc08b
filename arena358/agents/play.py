# arena358/agents/play.py
"""
Trick-play card selection for the heuristic AI.

choose_card builds an Intel snapshot and dispatches to a leading or a
following strategy. Leading strategies depend on the seat's target for the
hand (8 plays aggressively, 5 balances, 3 plays safe); following strategies
depend on position in the trick and whether the seat still needs tricks.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..cards import RANK_VALUE, SUITS, Card, Rank, Suit
from ..rules import cards_of_suit, legal_cards
from ..state import GameState
from .intel import (
    Intel,
    build_intel,
    current_winner,
    higher_unseen,
    is_master,
    unseen_in_suit,
)

_ACE = RANK_VALUE[Rank.ACE]
_KING = RANK_VALUE[Rank.KING]
_QUEEN = RANK_VALUE[Rank.QUEEN]
_JACK = RANK_VALUE[Rank.JACK]

_ENDGAME_TRICKS = 6


def _asc(cards: Sequence[Card]) -> List[Card]:
    return sorted(cards, key=lambda c: c.value)


def _desc(cards: Sequence[Card]) -> List[Card]:
    return sorted(cards, key=lambda c: -c.value)


def choose_card(hand: Sequence[Card], state: GameState, seat: int) -> str:
    """Id of the card `seat` plays to the current trick. Always legal."""
    lead_suit = state.current_trick.lead_suit if state.current_trick is not None else None
    legal = legal_cards(hand, lead_suit)
    if not legal:
        raise ValueError(f"Seat {seat} has no card to play")
    if len(legal) == 1:
        return legal[0].id

    intel = build_intel(hand, state, seat)
    if lead_suit is None:
        return _lead(legal, hand, intel)
    return _follow(legal, lead_suit, hand, intel)


# ---------------------------------------------------------------------------
# Leading
# ---------------------------------------------------------------------------


def _lead(legal: List[Card], hand: Sequence[Card], intel: Intel) -> str:
    trump = intel.trump_suit
    side = [c for c in legal if c.suit != trump]
    trumps = _desc([c for c in legal if c.suit == trump])

    if intel.over_target:
        return _lead_to_lose(legal, intel)
    if intel.tricks_left <= _ENDGAME_TRICKS and intel.tricks_needed > 0:
        return _endgame_lead(legal, hand, intel)
    if intel.target == 8:
        return _captain_lead(legal, intel, side, trumps)
    if intel.target == 5:
        return _balancer_lead(legal, intel, side, trumps)
    return _sergeant_lead(legal, hand, intel, side, trumps)


def _captain_lead(
    legal: List[Card], intel: Intel, side: List[Card], trumps: List[Card]
) -> str:
    masters = [c for c in side if is_master(c, intel)]
    if masters:
        return _best_master(masters)

    if trumps:
        trump_masters = [c for c in trumps if is_master(c, intel)]
        if trump_masters:
            return trump_masters[0].id
        if len(trumps) >= 4:
            # Pull the opponents' trumps while we still have length.
            return trumps[0].id

    probe = _probe_lead(side, intel)
    if probe:
        return probe
    drawn = _lead_into_void(side, intel)
    if drawn:
        return drawn
    return _lowest_from_longest(side) or _asc(legal)[0].id


def _balancer_lead(
    legal: List[Card], intel: Intel, side: List[Card], trumps: List[Card]
) -> str:
    masters = [c for c in side if is_master(c, intel)]
    if masters:
        return _best_master(masters)

    captain = intel.opponent_with_target(8)
    if captain is not None and captain.tricks >= 5 and captain.needed <= 3:
        disrupt = _lead_into_seat_void(side, intel, captain.seat)
        if disrupt:
            return disrupt

    probe = _probe_lead(side, intel)
    if probe:
        return probe

    trump_masters = [c for c in trumps if is_master(c, intel)]
    if trump_masters:
        return trump_masters[0].id
    return _lowest_from_longest(side) or _asc(legal)[0].id


def _sergeant_lead(
    legal: List[Card],
    hand: Sequence[Card],
    intel: Intel,
    side: List[Card],
    trumps: List[Card],
) -> str:
    if intel.tricks_needed > 0:
        masters = [c for c in side if is_master(c, intel)]
        if masters:
            return _best_master(masters)
        trump_masters = [c for c in trumps if is_master(c, intel)]
        if trump_masters:
            return trump_masters[0].id

    # Shed exposed honours before they are forced to win unwanted tricks.
    dangerous = _dangerous_high_cards(side, hand, intel)
    if dangerous:
        return dangerous[0].id
    return _lowest_from_shortest(side) or _asc(legal)[0].id


def _endgame_lead(legal: List[Card], hand: Sequence[Card], intel: Intel) -> str:
    trump = intel.trump_suit
    side = [c for c in legal if c.suit != trump]
    trumps = _desc([c for c in legal if c.suit == trump])

    masters = [c for suit in SUITS for c in cards_of_suit(hand, suit) if is_master(c, intel)]
    if masters and len(masters) >= intel.tricks_needed:
        return _best_master(masters)

    # One outstanding card above our best: lead low to flush it out.
    for suit in SUITS:
        if suit == trump:
            continue
        mine = _desc(cards_of_suit(side, suit))
        if len(mine) >= 2 and higher_unseen(mine[0], intel) == 1:
            return mine[-1].id

    if trumps and trump is not None:
        outstanding = len(unseen_in_suit(trump, intel))
        if 0 < outstanding <= len(trumps):
            return trumps[0].id

    if masters:
        return masters[0].id
    return _asc(side or legal)[0].id


def _lead_to_lose(legal: List[Card], intel: Intel) -> str:
    side = [c for c in legal if c.suit != intel.trump_suit]
    best: Optional[Card] = None
    best_score = None
    for card in side:
        # Many outstanding higher cards and a low rank make the safest loser.
        score = higher_unseen(card, intel) * 40 - card.value * 15
        if best_score is None or score > best_score:
            best_score = score
            best = card
    if best is not None:
        return best.id
    return _asc(legal)[0].id


def _best_master(masters: List[Card]) -> str:
    """Highest master of the suit holding the most masters."""
    by_suit: Dict[Suit, List[Card]] = {}
    for card in masters:
        by_suit.setdefault(card.suit, []).append(card)
    best = masters[0]
    best_count = 0
    for cards in by_suit.values():
        if len(cards) > best_count:
            best_count = len(cards)
            best = _desc(cards)[0]
    return best.id


def _probe_lead(side: List[Card], intel: Intel) -> Optional[str]:
    """Low lead from a long suit whose top card is, or is about to be, master."""
    best: Optional[Card] = None
    best_score = None
    for suit in SUITS:
        if suit == intel.trump_suit:
            continue
        mine = _desc(cards_of_suit(side, suit))
        if len(mine) < 2:
            continue
        unseen = unseen_in_suit(suit, intel)
        higher = higher_unseen(mine[0], intel)

        score = len(mine) * 50
        if higher == 1 and mine[0].value >= _QUEEN:
            score += 300
        if higher == 0:
            score += 400
        score += (13 - len(unseen)) * 20
        if not intel.any_opponent_void(suit):
            score += 100

        if best_score is None or score > best_score:
            best_score = score
            best = mine[-1]
    if best is not None and best_score is not None and best_score > 200:
        return best.id
    return None


def _lead_into_void(side: List[Card], intel: Intel) -> Optional[str]:
    """Make an opponent who still needs tricks spend a trump."""
    for opp in intel.opponents:
        for suit in SUITS:
            if suit == intel.trump_suit or not intel.is_void(opp.seat, suit):
                continue
            mine = _asc(cards_of_suit(side, suit))
            if mine and opp.needed > 0:
                return mine[0].id
    return None


def _lead_into_seat_void(side: List[Card], intel: Intel, seat: int) -> Optional[str]:
    for suit in SUITS:
        if suit == intel.trump_suit or not intel.is_void(seat, suit):
            continue
        mine = _asc(cards_of_suit(side, suit))
        if mine:
            return mine[0].id
    return None


def _suit_lengths(cards: Sequence[Card]) -> Dict[Suit, int]:
    lengths: Dict[Suit, int] = {}
    for card in cards:
        lengths[card.suit] = lengths.get(card.suit, 0) + 1
    return lengths


def _lowest_from_longest(cards: List[Card]) -> Optional[str]:
    if not cards:
        return None
    lengths = _suit_lengths(cards)
    longest = max(lengths.values())
    return _asc([c for c in cards if lengths[c.suit] == longest])[0].id


def _lowest_from_shortest(cards: List[Card]) -> Optional[str]:
    if not cards:
        return None
    lengths = _suit_lengths(cards)
    shortest = min(lengths.values())
    return _asc([c for c in cards if lengths[c.suit] == shortest])[0].id


def _dangerous_high_cards(
    side: List[Card], hand: Sequence[Card], intel: Intel
) -> List[Card]:
    """Non-master J+ cards in suits of at most two cards, most exposed first."""
    scored = []
    for card in side:
        if card.value < _JACK:
            continue
        suit_len = len(cards_of_suit(hand, card.suit))
        if suit_len > 2:
            continue
        if higher_unseen(card, intel) > 0:
            scored.append((card.value * 10 - suit_len * 50, card))
    scored.sort(key=lambda entry: -entry[0])
    return [card for _danger, card in scored]


# ---------------------------------------------------------------------------
# Following
# ---------------------------------------------------------------------------


def _follow(legal: List[Card], lead_suit: Suit, hand: Sequence[Card], intel: Intel) -> str:
    _seat, strength = current_winner(intel.trick_cards, lead_suit, intel.trump_suit)
    if any(c.suit == lead_suit for c in legal):
        return _follow_suit(legal, lead_suit, intel, strength)
    return _cannot_follow(legal, lead_suit, hand, intel)


def _follow_suit(legal: List[Card], lead_suit: Suit, intel: Intel, strength: int) -> str:
    trump = intel.trump_suit
    mine = _desc([c for c in legal if c.suit == lead_suit])
    lowest = mine[-1].id

    if (
        trump is not None
        and lead_suit != trump
        and any(p.card.suit == trump for p in intel.trick_cards)
    ):
        return lowest
    if intel.over_target:
        return lowest

    beaters = [c for c in mine if c.value > strength]
    if not beaters or intel.tricks_needed == 0:
        return lowest
    cheapest = beaters[-1]

    if intel.is_last:
        return cheapest.id

    if intel.is_second:
        if is_master(cheapest, intel):
            return cheapest.id
        if beaters[0].value == _ACE:
            return beaters[0].id
        third = intel.seat_yet_to_play()
        if third is not None and intel.is_void(third, lead_suit):
            return cheapest.id
    return lowest


def _cannot_follow(
    legal: List[Card], lead_suit: Suit, hand: Sequence[Card], intel: Intel
) -> str:
    trump = intel.trump_suit
    if intel.over_target or trump is None:
        return _strategic_dump(legal, hand, intel)
    my_trumps = _asc([c for c in legal if c.suit == trump])
    if not my_trumps or intel.tricks_needed == 0:
        return _strategic_dump(legal, hand, intel)

    played_trumps = [p.card for p in intel.trick_cards if p.card.suit == trump]
    if played_trumps:
        top = max(c.value for c in played_trumps)
        overtrumps = [c for c in my_trumps if c.value > top]
        if not overtrumps:
            return _strategic_dump(legal, hand, intel)
        if intel.is_last or higher_unseen(overtrumps[0], intel) == 0:
            return overtrumps[0].id
        if intel.target == 8 and intel.tricks_needed >= 3:
            return overtrumps[0].id
        return _strategic_dump(legal, hand, intel)

    if intel.is_last:
        return my_trumps[0].id

    third = intel.seat_yet_to_play()
    if third is not None and intel.is_void(third, lead_suit):
        # The last seat may overtrump.
        if higher_unseen(my_trumps[0], intel) == 0:
            return my_trumps[0].id
        if intel.target == 8:
            return my_trumps[0].id
        if intel.target == 5 and len(my_trumps) >= 3:
            return my_trumps[0].id
        return _strategic_dump(legal, hand, intel)
    return my_trumps[0].id


def _strategic_dump(legal: List[Card], hand: Sequence[Card], intel: Intel) -> str:
    """Shortest side suit first, lowest rank first, guarding A/K with company."""
    trump = intel.trump_suit
    candidates = [c for c in legal if c.suit != trump] or list(legal)
    lengths = _suit_lengths([c for c in hand if c.suit != trump])

    def score(card: Card) -> int:
        length = lengths.get(card.suit, 0)
        value = length * 100 + card.value
        if length == 1:
            value -= 500
        if card.value >= _KING and length >= 2:
            value += 800
        return value

    return min(candidates, key=score).id
