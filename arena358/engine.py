# arena358/engine.py
from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from .actions import (
    Action,
    DealerDiscard4,
    ExchangeGiveCard,
    ExchangeReturnCard,
    NextHand,
    PickCutter,
    PlayCard,
    ReshuffleAccept,
    ReshuffleDecline,
    ShuffleDeal,
)
from .cards import Card, hidden_card
from .deck import create_deck, deal, seeded_rng, shuffle, sort_for_display
from .errors import (
    CardNotInHandError,
    IllegalActionError,
    RuleViolationError,
    WrongActorError,
    WrongPhaseError,
)
from .rules import (
    NUM_SEATS,
    TRICKS_PER_HAND,
    apply_tie_break,
    check_victory,
    compute_exchange_givings,
    find_card,
    first_trick_leader,
    hand_delta,
    is_legal_play,
    next_dealer,
    next_player_clockwise,
    required_return_card,
    targets_for_dealer,
    trick_winner,
)
from .state import (
    NO_PLAYER,
    CurrentTrick,
    ExchangeInfo,
    ExchangeTransfer,
    GameState,
    HandRecord,
    Phase,
    Player,
    ReshuffleSide,
    TrickPlay,
    TrickResult,
)

logger = logging.getLogger(__name__)

VALID_MODES = ("local", "online")
DISCARD_COUNT = 4

PlayerSpec = Union[Player, Tuple[str, str]]

# Everything that belongs to a single hand and is wiped between hands.
_PER_HAND_RESET: Dict[str, Any] = {
    "dealer_discarded": (),
    "dealer_received_kitty": (),
    "dealer_hidden_returns": (),
    "dealer_pending_received": (),
    "cutter_suit": None,
    "exchange_info": None,
    "current_trick": None,
    "trick_number": 0,
    "tricks_history": (),
    "tricks_taken_count": (0, 0, 0),
}


# -------------------------------------------------------------------------
# Public API
# -------------------------------------------------------------------------


def create_game(
    game_id: str,
    players: Sequence[PlayerSpec],
    mode: str = "local",
    victory_target: int = 10,
    dealer_index: Optional[int] = None,
    seed: Optional[object] = None,
) -> GameState:
    """
    Build the initial state of a game.

    `players` holds exactly three Player records or (id, name) pairs; seats
    follow their order. Without `dealer_index` the first dealer is drawn at
    random (reproducibly when a seed is given). With a seed, every shuffle of
    the game is reproducible too.
    """
    if len(players) != NUM_SEATS:
        raise ValueError(f"3-5-8 needs exactly {NUM_SEATS} players, got {len(players)}")
    if mode not in VALID_MODES:
        raise ValueError(f"mode must be one of {VALID_MODES}, got {mode!r}")
    if victory_target < 1:
        raise ValueError("victory_target must be at least 1")

    seats: List[Player] = []
    for seat, spec in enumerate(players):
        if isinstance(spec, Player):
            seats.append(replace(spec, seat_index=seat))
        else:
            player_id, name = spec
            seats.append(Player(id=str(player_id), name=str(name), seat_index=seat))
    if len({p.id for p in seats}) != NUM_SEATS:
        raise ValueError("player ids must be distinct")

    seed_text = None if seed is None else str(seed)
    if dealer_index is None:
        rng = seeded_rng(f"{seed_text}:dealer") if seed_text is not None else random.Random()
        dealer_index = rng.randrange(NUM_SEATS)
    elif not 0 <= dealer_index < NUM_SEATS:
        raise ValueError(f"dealer_index must be 0..{NUM_SEATS - 1}, got {dealer_index}")

    logger.debug("Created game %s with dealer seat %d", game_id, dealer_index)
    return GameState(
        game_id=game_id,
        mode=mode,
        victory_target=victory_target,
        players=(seats[0], seats[1], seats[2]),
        dealer_index=dealer_index,
        targets=targets_for_dealer(dealer_index),
        current_player_index=dealer_index,
        seed=seed_text,
    )


def apply_action(state: GameState, action: Action) -> GameState:
    """
    Validate `action` against `state` and return the next state.

    Raises an EngineError subclass on rejection; `state` itself is never
    modified either way.
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unknown action {action!r}")
    new_state = handler(state, action)
    logger.debug(
        "Game %s: %s accepted (%s -> %s)",
        state.game_id,
        action.type,
        state.phase.value,
        new_state.phase.value,
    )
    return new_state


def player_view(state: GameState, seat: int) -> GameState:
    """
    Copy of `state` redacted for `seat`.

    - Other seats' hands, the deck and the dealer's in-transit buffers become
      placeholders of the same length.
    - The kitty, the discard and the received kitty are visible to the dealer only.
    - Exchange transfers the seat took no part in show a placeholder card.
      Transfers bound for the dealer stay hidden from the dealer until the
      cutter suit is named.
    """
    if not 0 <= seat < NUM_SEATS:
        raise ValueError(f"seat must be 0..{NUM_SEATS - 1}, got {seat}")
    is_dealer = seat == state.dealer_index

    hands = tuple(
        hand if owner == seat else _mask(hand)
        for owner, hand in enumerate(state.player_hands)
    )
    info = state.exchange_info
    if info is not None:
        info = replace(
            info,
            given_cards=tuple(_redact_transfer(state, t, seat) for t in info.given_cards),
            returned_cards=tuple(_redact_transfer(state, t, seat) for t in info.returned_cards),
        )

    return replace(
        state,
        deck=_mask(state.deck),
        kitty=state.kitty if is_dealer else _mask(state.kitty),
        player_hands=hands,
        dealer_discarded=state.dealer_discarded if is_dealer else _mask(state.dealer_discarded),
        dealer_received_kitty=(
            state.dealer_received_kitty if is_dealer else _mask(state.dealer_received_kitty)
        ),
        dealer_hidden_returns=_mask(state.dealer_hidden_returns),
        dealer_pending_received=_mask(state.dealer_pending_received),
        exchange_info=info,
    )


def owed_return(state: GameState, seat: int) -> Optional[Tuple[int, Card]]:
    """
    Next exchange return `seat` still owes, as (giver_seat, received_card).

    Returns are owed first-in first-out per giving direction, in the order of
    the givings queue. None when the seat owes nothing.
    """
    if state.exchange_info is None:
        return None
    return _owed_return(state.exchange_info, seat)


# -------------------------------------------------------------------------
# Dealing and the reshuffle window
# -------------------------------------------------------------------------


def _fresh_deal(state: GameState) -> Dict[str, Any]:
    deal_count = state.deal_count + 1
    rng = seeded_rng(f"{state.seed}:{deal_count}") if state.seed is not None else None
    deck = shuffle(create_deck(), rng)
    hands, kitty = deal(deck)
    return {
        "deck": tuple(deck),
        "kitty": tuple(kitty),
        "player_hands": tuple(tuple(sort_for_display(hand)) for hand in hands),
        "deal_count": deal_count,
    }


def _handle_shuffle_deal(state: GameState, action: ShuffleDeal) -> GameState:
    _require_phase(state, Phase.SETUP_DEAL)
    hand_number = state.hand_number + 1
    logger.debug(
        "Game %s: dealing hand %d, dealer seat %d",
        state.game_id,
        hand_number,
        state.dealer_index,
    )
    return replace(
        state,
        **_PER_HAND_RESET,
        **_fresh_deal(state),
        hand_number=hand_number,
        targets=targets_for_dealer(state.dealer_index),
        reshuffle_used_by_8=False,
        reshuffle_used_by_35=False,
        reshuffle_window_for_8=True,
        reshuffle_window_for_35=True,
        phase=Phase.RESHUFFLE_WINDOW,
        current_player_index=state.dealer_index,
    )


def _handle_reshuffle(
    state: GameState,
    action: Union[ReshuffleAccept, ReshuffleDecline],
) -> GameState:
    _require_phase(state, Phase.RESHUFFLE_WINDOW)
    accept = isinstance(action, ReshuffleAccept)
    if action.side is ReshuffleSide.EIGHT:
        own_used, own_window = "reshuffle_used_by_8", "reshuffle_window_for_8"
        other_used, other_window = "reshuffle_used_by_35", "reshuffle_window_for_35"
    else:
        own_used, own_window = "reshuffle_used_by_35", "reshuffle_window_for_35"
        other_used, other_window = "reshuffle_used_by_8", "reshuffle_window_for_8"

    if getattr(state, own_used):
        raise IllegalActionError(
            f"Side {action.side.value} has already used its reshuffle this hand"
        )
    if not getattr(state, own_window):
        raise IllegalActionError(f"No reshuffle window open for side {action.side.value}")

    # A decline only closes the window; the side may still answer a later re-deal.
    changes: Dict[str, Any] = {own_window: False}
    if accept:
        changes[own_used] = True
        changes.update(_fresh_deal(state))
        changes[other_window] = not getattr(state, other_used)
        logger.debug(
            "Game %s: side %s reshuffled hand %d",
            state.game_id,
            action.side.value,
            state.hand_number,
        )
    new_state = replace(state, **changes)

    if not (new_state.reshuffle_window_for_8 or new_state.reshuffle_window_for_35):
        return _close_reshuffle_window(new_state)
    return replace(new_state, current_player_index=_reshuffle_actor(new_state))


def _reshuffle_actor(state: GameState) -> int:
    if state.reshuffle_window_for_8:
        return state.dealer_index
    return first_trick_leader(state.dealer_index)


def _close_reshuffle_window(state: GameState) -> GameState:
    givings: tuple = ()
    if state.hand_number > 1 and any(state.last_hand_delta):
        givings = compute_exchange_givings(state.last_hand_delta, state.targets)
    if givings:
        return replace(
            state,
            phase=Phase.EXCHANGE_GIVE,
            exchange_info=ExchangeInfo(givings=givings),
            current_player_index=givings[0].from_seat,
        )
    return replace(
        state,
        phase=Phase.CUTTER_PICK,
        current_player_index=state.dealer_index,
    )


# -------------------------------------------------------------------------
# Exchange
# -------------------------------------------------------------------------


def _handle_exchange_give(state: GameState, action: ExchangeGiveCard) -> GameState:
    _require_phase(state, Phase.EXCHANGE_GIVE)
    info = _require_exchange(state)
    giving = info.givings[info.current_giver_idx]
    if action.from_seat != giving.from_seat:
        raise WrongActorError(
            f"Seat {action.from_seat} may not give now, expected seat {giving.from_seat}"
        )
    card = _card_in_hand(state, action.from_seat, action.card_id)

    hands = list(state.player_hands)
    hands[giving.from_seat] = _without(hands[giving.from_seat], card)
    pending = state.dealer_pending_received
    if giving.to_seat == state.dealer_index:
        pending = pending + (card,)
    else:
        hands[giving.to_seat] = tuple(
            sort_for_display(hands[giving.to_seat] + (card,), state.cutter_suit)
        )

    given = info.given_cards + (ExchangeTransfer(giving.from_seat, giving.to_seat, card),)
    given_here = sum(
        1 for t in given
        if t.from_seat == giving.from_seat and t.to_seat == giving.to_seat
    )

    giver_idx = info.current_giver_idx
    sub_phase = info.sub_phase
    phase = Phase.EXCHANGE_GIVE
    current = giving.from_seat
    if given_here >= giving.count:
        giver_idx += 1
        if giver_idx < len(info.givings):
            current = info.givings[giver_idx].from_seat
        else:
            sub_phase = "returning"
            non_dealer = [g for g in info.givings if g.to_seat != state.dealer_index]
            if non_dealer:
                phase = Phase.EXCHANGE_RETURN
                current = non_dealer[0].to_seat
            else:
                # Only the dealer received: its returns wait for the cutter pick.
                phase = Phase.CUTTER_PICK
                current = state.dealer_index

    return replace(
        state,
        player_hands=tuple(hands),
        dealer_pending_received=pending,
        exchange_info=replace(
            info,
            given_cards=given,
            current_giver_idx=giver_idx,
            sub_phase=sub_phase,
        ),
        phase=phase,
        current_player_index=current,
    )


def _handle_exchange_return(state: GameState, action: ExchangeReturnCard) -> GameState:
    _require_phase(state, Phase.EXCHANGE_RETURN)
    info = _require_exchange(state)
    seat = action.from_seat
    dealer = state.dealer_index

    if seat == dealer and state.cutter_suit is None:
        raise WrongActorError("The dealer returns cards only after picking the cutter")
    if seat != state.current_player_index:
        raise WrongActorError(
            f"Seat {seat} may not return now, expected seat {state.current_player_index}"
        )
    owed = _owed_return(info, seat)
    if owed is None:
        raise WrongActorError(f"Seat {seat} has no pending returns")
    giver, received = owed

    hand = state.player_hands[seat]
    card = _card_in_hand(state, seat, action.card_id)
    required = required_return_card(hand, received)
    # A required card that already travelled back leaves the return unconstrained.
    if find_card(hand, required.id) is not None and card.id != required.id:
        raise RuleViolationError(
            f"Seat {seat} must return {required.id} for {received.id}, got {card.id}"
        )

    hands = list(state.player_hands)
    hands[seat] = _without(hand, card)
    hidden = state.dealer_hidden_returns
    if giver == dealer and state.cutter_suit is None:
        hidden = hidden + (card,)
    else:
        hands[giver] = tuple(sort_for_display(hands[giver] + (card,), state.cutter_suit))

    returned = info.returned_cards + (ExchangeTransfer(seat, giver, card),)
    new_info = replace(info, returned_cards=returned)

    deferred = 0
    if state.cutter_suit is None:
        for giving in info.givings:
            if giving.to_seat != dealer:
                continue
            given_to_dealer = sum(
                1 for t in info.given_cards
                if t.from_seat == giving.from_seat and t.to_seat == dealer
            )
            returned_by_dealer = sum(
                1 for t in returned
                if t.from_seat == dealer and t.to_seat == giving.from_seat
            )
            deferred += given_to_dealer - returned_by_dealer

    if len(returned) + deferred >= len(info.given_cards):
        phase = Phase.DEALER_DISCARD if state.cutter_suit is not None else Phase.CUTTER_PICK
        current = dealer
    else:
        phase = Phase.EXCHANGE_RETURN
        current = _next_returner(new_info, dealer, state.cutter_suit is not None)

    return replace(
        state,
        player_hands=tuple(hands),
        dealer_hidden_returns=hidden,
        exchange_info=new_info,
        phase=phase,
        current_player_index=current,
    )


def _owed_return(info: ExchangeInfo, seat: int) -> Optional[Tuple[int, Card]]:
    for giving in info.givings:
        if giving.to_seat != seat:
            continue
        received = [
            t.card for t in info.given_cards
            if t.from_seat == giving.from_seat and t.to_seat == seat
        ]
        returned = sum(
            1 for t in info.returned_cards
            if t.from_seat == seat and t.to_seat == giving.from_seat
        )
        if returned < len(received):
            return giving.from_seat, received[returned]
    return None


def _next_returner(info: ExchangeInfo, dealer: int, cutter_picked: bool) -> int:
    for giving in info.givings:
        if giving.to_seat == dealer and not cutter_picked:
            continue
        if _owed_return(info, giving.to_seat) is not None:
            return giving.to_seat
    raise RuntimeError("Exchange bookkeeping lost track of a pending return")


# -------------------------------------------------------------------------
# Cutter, discard and trick play
# -------------------------------------------------------------------------


def _handle_pick_cutter(state: GameState, action: PickCutter) -> GameState:
    _require_phase(state, Phase.CUTTER_PICK)
    dealer = state.dealer_index
    _require_dealer(state, action.seat_index)

    hands = list(state.player_hands)
    hands[dealer] = (
        hands[dealer] + state.dealer_hidden_returns + state.dealer_pending_received
    )
    hands = [tuple(sort_for_display(hand, action.suit)) for hand in hands]
    phase = Phase.EXCHANGE_RETURN if state.dealer_pending_received else Phase.DEALER_DISCARD
    logger.debug(
        "Game %s: dealer seat %d picked cutter %s",
        state.game_id,
        dealer,
        action.suit.value,
    )
    return replace(
        state,
        player_hands=tuple(hands),
        cutter_suit=action.suit,
        dealer_hidden_returns=(),
        dealer_pending_received=(),
        phase=phase,
        current_player_index=dealer,
    )


def _handle_dealer_discard(state: GameState, action: DealerDiscard4) -> GameState:
    _require_phase(state, Phase.DEALER_DISCARD)
    dealer = state.dealer_index
    _require_dealer(state, action.seat_index)
    card_ids = action.card_ids
    if len(card_ids) != DISCARD_COUNT or len(set(card_ids)) != DISCARD_COUNT:
        raise RuleViolationError(
            f"Dealer must discard exactly {DISCARD_COUNT} distinct cards, got {list(card_ids)}"
        )
    discarded = tuple(_card_in_hand(state, dealer, card_id) for card_id in card_ids)

    kept = [c for c in state.player_hands[dealer] if c.id not in card_ids]
    hands = list(state.player_hands)
    hands[dealer] = tuple(sort_for_display(kept + list(state.kitty), state.cutter_suit))
    leader = first_trick_leader(dealer)
    return replace(
        state,
        player_hands=tuple(hands),
        dealer_discarded=discarded,
        dealer_received_kitty=state.kitty,
        kitty=(),
        phase=Phase.TRICK_PLAY,
        trick_number=1,
        current_trick=CurrentTrick(leader_index=leader),
        current_player_index=leader,
    )


def _handle_play_card(state: GameState, action: PlayCard) -> GameState:
    _require_phase(state, Phase.TRICK_PLAY)
    seat = action.seat_index
    if seat != state.current_player_index:
        raise WrongActorError(
            f"Seat {seat} may not play now, expected seat {state.current_player_index}"
        )
    trick = state.current_trick
    if trick is None:
        raise WrongPhaseError("No trick in progress")
    hand = state.player_hands[seat]
    card = _card_in_hand(state, seat, action.card_id)
    if not is_legal_play(hand, card.id, trick.lead_suit):
        raise RuleViolationError(
            f"Seat {seat} must follow {trick.lead_suit.value}, cannot play {card.id}"
        )

    hands = list(state.player_hands)
    hands[seat] = _without(hand, card)
    plays = trick.cards_played + (TrickPlay(seat, card),)
    lead_suit = trick.lead_suit if trick.lead_suit is not None else card.suit

    if len(plays) < NUM_SEATS:
        return replace(
            state,
            player_hands=tuple(hands),
            current_trick=replace(trick, lead_suit=lead_suit, cards_played=plays),
            current_player_index=next_player_clockwise(seat),
        )

    winner = trick_winner(plays, state.cutter_suit)
    result = TrickResult(
        trick_number=state.trick_number,
        cards_played=plays,
        lead_suit=lead_suit,
        winner_index=winner,
    )
    taken = list(state.tricks_taken_count)
    taken[winner] += 1
    state = replace(
        state,
        player_hands=tuple(hands),
        tricks_history=state.tricks_history + (result,),
        tricks_taken_count=(taken[0], taken[1], taken[2]),
    )

    if state.trick_number >= TRICKS_PER_HAND:
        return _score_hand(state)
    return replace(
        state,
        trick_number=state.trick_number + 1,
        current_trick=CurrentTrick(leader_index=winner),
        current_player_index=winner,
    )


def _score_hand(state: GameState) -> GameState:
    taken = state.tricks_taken_count
    deltas = tuple(hand_delta(taken[s], state.targets[s]) for s in range(NUM_SEATS))
    totals = tuple(state.score_total[s] + deltas[s] for s in range(NUM_SEATS))
    record = HandRecord(
        hand_number=state.hand_number,
        dealer_index=state.dealer_index,
        cutter_suit=state.cutter_suit,
        tricks_taken=taken,
        targets=state.targets,
        deltas=deltas,
        tricks=state.tricks_history,
    )
    state = replace(
        state,
        score_total=totals,
        last_hand_delta=deltas,
        hand_history=state.hand_history + (record,),
        current_trick=None,
        current_player_index=NO_PLAYER,
    )
    logger.info(
        "Game %s: finished hand %d, tricks %s, deltas %s, totals %s",
        state.game_id,
        state.hand_number,
        list(taken),
        list(deltas),
        list(totals),
    )

    winners = check_victory(totals, state.victory_target)
    if not winners:
        return replace(state, phase=Phase.HAND_SCORING)

    winner, reason = apply_tie_break(winners, deltas, state.tricks_history)
    logger.info(
        "Game %s: %s wins (%s)",
        state.game_id,
        state.players[winner].name,
        reason,
    )
    return replace(
        state,
        phase=Phase.GAME_OVER,
        winner_index=winner,
        winner_reason=reason,
    )


def _handle_next_hand(state: GameState, action: NextHand) -> GameState:
    _require_phase(state, Phase.HAND_SCORING)
    dealer = next_dealer(state.dealer_index)
    return replace(
        state,
        **_PER_HAND_RESET,
        deck=(),
        kitty=(),
        player_hands=((), (), ()),
        reshuffle_used_by_8=False,
        reshuffle_used_by_35=False,
        reshuffle_window_for_8=False,
        reshuffle_window_for_35=False,
        dealer_index=dealer,
        targets=targets_for_dealer(dealer),
        phase=Phase.SETUP_DEAL,
        current_player_index=dealer,
    )


# -------------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------------


def _require_phase(state: GameState, phase: Phase) -> None:
    if state.phase is not phase:
        raise WrongPhaseError(
            f"Action requires phase {phase.value}, game is in {state.phase.value}"
        )


def _require_exchange(state: GameState) -> ExchangeInfo:
    if state.exchange_info is None:
        raise WrongPhaseError("No exchange in progress")
    return state.exchange_info


def _require_dealer(state: GameState, seat: Optional[int]) -> None:
    if seat is not None and seat != state.dealer_index:
        raise WrongActorError(
            f"Only the dealer (seat {state.dealer_index}) may act, got seat {seat}"
        )


def _card_in_hand(state: GameState, seat: int, card_id: str) -> Card:
    if not 0 <= seat < NUM_SEATS:
        raise WrongActorError(f"No such seat {seat}")
    card = find_card(state.player_hands[seat], card_id)
    if card is None:
        raise CardNotInHandError(f"Card {card_id} not in seat {seat}'s hand")
    return card


def _without(hand: Tuple[Card, ...], card: Card) -> Tuple[Card, ...]:
    return tuple(c for c in hand if c.id != card.id)


def _mask(cards: Sequence[Card]) -> Tuple[Card, ...]:
    return tuple(hidden_card() for _ in cards)


def _redact_transfer(
    state: GameState,
    transfer: ExchangeTransfer,
    seat: int,
) -> ExchangeTransfer:
    visible = seat in (transfer.from_seat, transfer.to_seat)
    if (
        visible
        and state.cutter_suit is None
        and seat == state.dealer_index
        and transfer.to_seat == seat
    ):
        visible = False
    if visible:
        return transfer
    return replace(transfer, card=hidden_card())


_HANDLERS: Dict[type, Callable[[GameState, Any], GameState]] = {
    ShuffleDeal: _handle_shuffle_deal,
    ReshuffleAccept: _handle_reshuffle,
    ReshuffleDecline: _handle_reshuffle,
    ExchangeGiveCard: _handle_exchange_give,
    ExchangeReturnCard: _handle_exchange_return,
    PickCutter: _handle_pick_cutter,
    DealerDiscard4: _handle_dealer_discard,
    PlayCard: _handle_play_card,
    NextHand: _handle_next_hand,
}
