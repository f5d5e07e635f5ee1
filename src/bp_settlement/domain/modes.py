"""Bet modes and their win predicates.

Every BetMode member has exactly one prediction parser and one predicate.
The check at the bottom of this module fails the import if a member is added
without both.

Declared results: "00"-"99" for number markets, team_a / team_b for toss.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from src.bp_common.enums import MarketKind, TossTeam
from src.bp_common.errors import UnknownModeError


class BetMode(str, Enum):
    JODI = "jodi"              # exact two-digit number
    HARF = "harf"              # one digit, optionally pinned to left/right
    CROSSING = "crossing"      # ordered pair of distinct digits from a set
    ODD_EVEN = "odd_even"      # parity of the two-digit number
    TEAM_TOSS = "team_toss"    # team_a / team_b


_NUMBER_RESULT = re.compile(r"^[0-9]{2}$")
_HARF_PREDICTION = re.compile(r"^([ABLR])?([0-9])$")
_CROSSING_SPLIT = re.compile(r"[,\s]+")
_SINGLE_DIGIT = re.compile(r"[0-9]")

_HARF_LEFT = {"A", "L"}
_HARF_RIGHT = {"B", "R"}


# ---------------------------------------------------------------------------
# Parsed predictions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class JodiPick:
    number: str


@dataclass(frozen=True)
class HarfPick:
    digit: str
    position: str | None = None   # "left" | "right" | None (either)


@dataclass(frozen=True)
class CrossingPick:
    exact: str | None = None
    digits: frozenset[str] = frozenset()


@dataclass(frozen=True)
class OddEvenPick:
    parity: str   # "odd" | "even"


@dataclass(frozen=True)
class TossPick:
    team: str


def parse_mode(mode: str) -> BetMode:
    try:
        return BetMode(mode)
    except ValueError:
        raise UnknownModeError(mode, "", "unknown bet mode") from None


def _parse_jodi(prediction: str) -> JodiPick:
    if not _NUMBER_RESULT.match(prediction):
        raise UnknownModeError(BetMode.JODI.value, prediction, "expected two digits")
    return JodiPick(prediction)


def _parse_harf(prediction: str) -> HarfPick:
    m = _HARF_PREDICTION.match(prediction.upper())
    if not m:
        raise UnknownModeError(
            BetMode.HARF.value, prediction, "expected optional A/L/B/R prefix and one digit"
        )
    prefix, digit = m.groups()
    if prefix in _HARF_LEFT:
        return HarfPick(digit, "left")
    if prefix in _HARF_RIGHT:
        return HarfPick(digit, "right")
    return HarfPick(digit)


def _parse_crossing(prediction: str) -> CrossingPick:
    if _NUMBER_RESULT.match(prediction):
        return CrossingPick(exact=prediction)
    tokens = [t for t in _CROSSING_SPLIT.split(prediction) if t]
    if len(tokens) < 2:
        raise UnknownModeError(
            BetMode.CROSSING.value, prediction, "expected at least two digits"
        )
    if not all(_SINGLE_DIGIT.fullmatch(t) for t in tokens):
        raise UnknownModeError(
            BetMode.CROSSING.value, prediction, "expected single digits"
        )
    digits = frozenset(tokens)
    if len(digits) != len(tokens):
        raise UnknownModeError(
            BetMode.CROSSING.value, prediction, "digits must be distinct"
        )
    return CrossingPick(digits=digits)


def _parse_odd_even(prediction: str) -> OddEvenPick:
    parity = prediction.lower()
    if parity not in ("odd", "even"):
        raise UnknownModeError(BetMode.ODD_EVEN.value, prediction, "expected odd or even")
    return OddEvenPick(parity)


def _parse_toss(prediction: str) -> TossPick:
    team = prediction.lower()
    if team not in (TossTeam.TEAM_A, TossTeam.TEAM_B):
        raise UnknownModeError(
            BetMode.TEAM_TOSS.value, prediction, "expected team_a or team_b"
        )
    return TossPick(team)


# ---------------------------------------------------------------------------
# Predicates: (parsed prediction, declared result) -> won
# ---------------------------------------------------------------------------

def _jodi_wins(pick: JodiPick, declared: str) -> bool:
    return pick.number == declared


def _harf_wins(pick: HarfPick, declared: str) -> bool:
    if not _NUMBER_RESULT.match(declared):
        return False
    left, right = declared[0], declared[1]
    if pick.position == "left":
        return pick.digit == left
    if pick.position == "right":
        return pick.digit == right
    return pick.digit in (left, right)


def _crossing_wins(pick: CrossingPick, declared: str) -> bool:
    if not _NUMBER_RESULT.match(declared):
        return False
    if pick.exact is not None:
        return pick.exact == declared
    left, right = declared[0], declared[1]
    return left != right and left in pick.digits and right in pick.digits


def _odd_even_wins(pick: OddEvenPick, declared: str) -> bool:
    if not _NUMBER_RESULT.match(declared):
        return False
    parity = "even" if int(declared) % 2 == 0 else "odd"
    return pick.parity == parity


def _toss_wins(pick: TossPick, declared: str) -> bool:
    return pick.team == declared


_PARSERS: dict[BetMode, Callable[[str], object]] = {
    BetMode.JODI: _parse_jodi,
    BetMode.HARF: _parse_harf,
    BetMode.CROSSING: _parse_crossing,
    BetMode.ODD_EVEN: _parse_odd_even,
    BetMode.TEAM_TOSS: _parse_toss,
}

_PREDICATES: dict[BetMode, Callable[[object, str], bool]] = {
    BetMode.JODI: _jodi_wins,          # type: ignore[dict-item]
    BetMode.HARF: _harf_wins,          # type: ignore[dict-item]
    BetMode.CROSSING: _crossing_wins,  # type: ignore[dict-item]
    BetMode.ODD_EVEN: _odd_even_wins,  # type: ignore[dict-item]
    BetMode.TEAM_TOSS: _toss_wins,     # type: ignore[dict-item]
}

MODES_BY_KIND: dict[str, frozenset[BetMode]] = {
    MarketKind.NUMBER.value: frozenset(
        {BetMode.JODI, BetMode.HARF, BetMode.CROSSING, BetMode.ODD_EVEN}
    ),
    MarketKind.TOSS.value: frozenset({BetMode.TEAM_TOSS}),
}


def parse_prediction(mode: str, prediction: str) -> object:
    """Parse a prediction for its mode. Raises UnknownModeError when malformed."""
    bet_mode = parse_mode(mode)
    return _PARSERS[bet_mode](prediction.strip())


def is_winner(mode: str, prediction: str, declared: str) -> bool:
    """Pure win predicate. Raises UnknownModeError for an unknown mode or bad prediction."""
    bet_mode = parse_mode(mode)
    pick = _PARSERS[bet_mode](prediction.strip())
    return _PREDICATES[bet_mode](pick, declared)


_missing = [
    m.value
    for m in BetMode
    if m not in _PARSERS
    or m not in _PREDICATES
    or not any(m in modes for modes in MODES_BY_KIND.values())
]
if _missing:
    raise RuntimeError(f"BetMode members without a parser/predicate/market kind: {_missing}")
