"""SettlementEngine — resolve a market's pending bets into win / loss.

Each bet settles in its own transaction:

  claim (UPDATE bets ... WHERE result='pending')
  → credit payout (win only)
  → BET_PAYOUT record
  → COMMIT

A bet already claimed by a concurrent run updates zero rows and is skipped
without being counted. A failure on one bet rolls back that bet only; the run
continues and the bet is reported in `failed`. Predictions the rules cannot
interpret settle as a loss.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_account.domain.models import NewTransaction
from src.bp_account.domain.repository import AccountRepositoryProtocol
from src.bp_account.infrastructure.persistence import AccountRepository
from src.bp_common.enums import BetResult, ReferenceType
from src.bp_common.errors import AppError, UnknownModeError
from src.bp_common.subunits import apply_odds
from src.bp_settlement.domain.models import PendingBet, SettlementSummary
from src.bp_settlement.domain.modes import is_winner
from src.bp_settlement.domain.odds import OddsResolver
from src.bp_settlement.domain.repository import (
    OddsRepositoryProtocol,
    SettlementRepositoryProtocol,
)
from src.bp_settlement.infrastructure.persistence import (
    OddsRepository,
    SettlementRepository,
)

logger = logging.getLogger(__name__)


class SettlementEngine:
    def __init__(
        self,
        bets: SettlementRepositoryProtocol | None = None,
        accounts: AccountRepositoryProtocol | None = None,
        odds: OddsRepositoryProtocol | None = None,
    ) -> None:
        self._bets: SettlementRepositoryProtocol = bets or SettlementRepository()
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()
        self._odds: OddsRepositoryProtocol = odds or OddsRepository()

    async def settle_market(
        self,
        db: AsyncSession,
        market_id: int,
        declared_result: str,
        performed_by: int | None = None,
    ) -> SettlementSummary:
        summary = SettlementSummary(market_id=market_id, declared_result=declared_result)
        pending = await self._bets.list_pending_bets(db, market_id)
        if not pending:
            logger.info("Market %d: no pending bets to settle", market_id)
            return summary

        odds = OddsResolver(self._odds)
        for bet in pending:
            try:
                outcome = await self._settle_bet(db, bet, declared_result, odds, performed_by)
                await db.commit()
            except (AppError, SQLAlchemyError):
                await db.rollback()
                logger.exception(
                    "Settlement failed for bet=%d market=%d", bet.id, market_id
                )
                summary.failed += 1
                summary.failed_bet_ids.append(bet.id)
                continue

            if outcome is None:
                continue
            won, payout = outcome
            summary.processed += 1
            if won:
                summary.won += 1
                summary.total_payout += payout
            else:
                summary.lost += 1

        logger.info(
            "Market %d settled with %s: processed=%d won=%d lost=%d failed=%d payout=%d",
            market_id,
            declared_result,
            summary.processed,
            summary.won,
            summary.lost,
            summary.failed,
            summary.total_payout,
        )
        return summary

    async def _settle_bet(
        self,
        db: AsyncSession,
        bet: PendingBet,
        declared_result: str,
        odds: OddsResolver,
        performed_by: int | None,
    ) -> tuple[bool, int] | None:
        """Settle one bet inside the current transaction. None if already claimed."""
        won = _evaluate(bet, declared_result)
        payout = 0
        if won:
            multiplier = await odds.odds_for(db, bet.mode, bet.owner_assigned_to)
            payout = apply_odds(bet.stake, multiplier)

        result = BetResult.WIN if won else BetResult.LOSS
        if not await self._bets.claim_bet(db, bet.id, result.value, payout):
            logger.info("Bet %d already settled by another run, skipping", bet.id)
            return None

        if won:
            balance_after = await self._accounts.credit(db, bet.account_id, payout)
            await self._accounts.append_transaction(
                db,
                NewTransaction(
                    account_id=bet.account_id,
                    amount=payout,
                    balance_after=balance_after,
                    performed_by=performed_by if performed_by is not None else bet.account_id,
                    description=(
                        f"Bet #{bet.id} won: {bet.mode} {bet.prediction} "
                        f"vs {declared_result}"
                    ),
                    reference_type=ReferenceType.BET_PAYOUT.value,
                    reference_id=bet.id,
                ),
            )
        return won, payout


def _evaluate(bet: PendingBet, declared_result: str) -> bool:
    try:
        return is_winner(bet.mode, bet.prediction, declared_result)
    except UnknownModeError as exc:
        logger.warning(
            "Bet %d settled as loss, cannot interpret prediction: %s", bet.id, exc.message
        )
        return False
