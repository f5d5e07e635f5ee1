"""Market status progression and declared-result validation.

  waiting → open → closed    (transitionStatus)
  closed  → resulted         (declareResult only)
"""

import re

from src.bp_common.enums import MarketKind, MarketStatus, TossTeam
from src.bp_common.errors import InvalidResultError, InvalidTransitionError

_ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    MarketStatus.WAITING.value: {MarketStatus.OPEN.value},
    MarketStatus.OPEN.value: {MarketStatus.CLOSED.value},
    MarketStatus.CLOSED.value: set(),
    MarketStatus.RESULTED.value: set(),
}

_NUMBER_RESULT = re.compile(r"^[0-9]{2}$")


def check_transition(market_id: int, current: str, target: str) -> None:
    if target not in _ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(
            f"market {market_id} cannot move from {current} to {target}"
        )


def validate_result(kind: str, result: str) -> str:
    """Return the canonical declared result or raise InvalidResultError."""
    if kind == MarketKind.NUMBER:
        if _NUMBER_RESULT.match(result):
            return result
    elif kind == MarketKind.TOSS:
        team = result.lower()
        if team in (TossTeam.TEAM_A, TossTeam.TEAM_B):
            return team
    raise InvalidResultError(result, kind)
