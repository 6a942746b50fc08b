# arena358/errors.py
from __future__ import annotations


class EngineError(ValueError):
    """Base class for every rejected action. The caller's state is untouched."""


class WrongPhaseError(EngineError):
    """The action is not allowed in the current phase."""


class WrongActorError(EngineError):
    """The seat named by the action is not entitled to act right now."""


class CardNotInHandError(EngineError):
    """The named card is not in the acting seat's hand."""


class RuleViolationError(EngineError):
    """Structurally valid move that breaks a game rule."""


class IllegalActionError(EngineError):
    """Reshuffle request with no open window, or a second reshuffle by one side."""


class InvalidDeckSizeError(EngineError):
    """Dealing was attempted on a deck that does not hold exactly 52 cards."""
