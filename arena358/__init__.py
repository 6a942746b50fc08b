# arena358/__init__.py
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
from .cards import Card, Rank, Suit
from .engine import apply_action, create_game, owed_return, player_view
from .errors import (
    CardNotInHandError,
    EngineError,
    IllegalActionError,
    InvalidDeckSizeError,
    RuleViolationError,
    WrongActorError,
    WrongPhaseError,
)
from .state import GameState, Phase, ReshuffleSide

__all__ = [
    "Action",
    "Card",
    "CardNotInHandError",
    "DealerDiscard4",
    "EngineError",
    "ExchangeGiveCard",
    "ExchangeReturnCard",
    "GameState",
    "IllegalActionError",
    "InvalidDeckSizeError",
    "NextHand",
    "Phase",
    "PickCutter",
    "PlayCard",
    "Rank",
    "ReshuffleAccept",
    "ReshuffleDecline",
    "ReshuffleSide",
    "RuleViolationError",
    "ShuffleDeal",
    "Suit",
    "WrongActorError",
    "WrongPhaseError",
    "apply_action",
    "create_game",
    "owed_return",
    "player_view",
]
