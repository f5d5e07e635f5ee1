"""BetService — createBet.

One transaction: share-lock the market, lock the account, debit the stake,
insert the pending bet and its BET_STAKE record, commit.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_account.domain.models import NewTransaction
from src.bp_account.domain.repository import AccountRepositoryProtocol
from src.bp_account.infrastructure.persistence import AccountRepository
from src.bp_betting.domain.models import Bet, NewBet
from src.bp_betting.domain.repository import BetRepositoryProtocol
from src.bp_betting.infrastructure.persistence import BetRepository
from src.bp_common.enums import MarketStatus, ReferenceType
from src.bp_common.errors import (
    AccountBlockedError,
    AccountNotFoundError,
    InsufficientBalanceError,
    InvalidTransitionError,
    MarketNotFoundError,
    PermissionDeniedError,
    UnknownModeError,
)
from src.bp_common.subunits import apply_odds
from src.bp_market.domain.repository import MarketRepositoryProtocol
from src.bp_market.infrastructure.persistence import MarketRepository
from src.bp_settlement.domain.modes import MODES_BY_KIND, parse_mode, parse_prediction
from src.bp_settlement.domain.odds import OddsResolver
from src.bp_settlement.domain.repository import OddsRepositoryProtocol
from src.bp_settlement.infrastructure.persistence import OddsRepository

logger = logging.getLogger(__name__)


class BetService:
    def __init__(
        self,
        bets: BetRepositoryProtocol | None = None,
        accounts: AccountRepositoryProtocol | None = None,
        markets: MarketRepositoryProtocol | None = None,
        odds: OddsRepositoryProtocol | None = None,
    ) -> None:
        self._bets: BetRepositoryProtocol = bets or BetRepository()
        self._accounts: AccountRepositoryProtocol = accounts or AccountRepository()
        self._markets: MarketRepositoryProtocol = markets or MarketRepository()
        self._odds: OddsRepositoryProtocol = odds or OddsRepository()

    async def create_bet(
        self,
        db: AsyncSession,
        account_id: int,
        market_id: int,
        mode: str,
        prediction: str,
        stake: int,
    ) -> Bet:
        if stake <= 0:
            raise InvalidTransitionError(f"stake must be positive, got {stake}")
        prediction = prediction.strip()
        bet_mode = parse_mode(mode)
        parse_prediction(bet_mode.value, prediction)

        try:
            market = await self._markets.lock_market(db, market_id, shared=True)
            if market is None:
                raise MarketNotFoundError(market_id)
            if market.status != MarketStatus.OPEN:
                raise InvalidTransitionError(
                    f"market {market_id} is {market.status}, bets need an open market"
                )
            if bet_mode not in MODES_BY_KIND.get(market.kind, frozenset()):
                raise UnknownModeError(
                    bet_mode.value, prediction, f"not offered on {market.kind} markets"
                )

            locked = await self._accounts.lock_accounts(db, [account_id])
            account = locked.get(account_id)
            if account is None:
                raise AccountNotFoundError(account_id)
            if account.is_blocked:
                raise AccountBlockedError(account_id)
            if not account.is_player:
                raise PermissionDeniedError("only players can place bets")
            if account.balance < stake:
                raise InsufficientBalanceError(account_id, stake, account.balance)

            odds = await OddsResolver(self._odds).odds_for(
                db, bet_mode.value, account.assigned_to
            )
            balance_after = await self._accounts.debit(db, account_id, stake)
            bet = await self._bets.insert_bet(
                db,
                NewBet(
                    account_id=account_id,
                    market_id=market_id,
                    mode=bet_mode.value,
                    prediction=prediction,
                    stake=stake,
                    potential_payout=apply_odds(stake, odds),
                ),
            )
            await self._accounts.append_transaction(
                db,
                NewTransaction(
                    account_id=account_id,
                    amount=-stake,
                    balance_after=balance_after,
                    performed_by=account_id,
                    description=f"Bet #{bet.id} on {market.name}: {bet.mode} {prediction}",
                    reference_type=ReferenceType.BET_STAKE.value,
                    reference_id=bet.id,
                ),
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Bet %d placed: account=%d market=%d mode=%s stake=%d potential=%d",
            bet.id, account_id, market_id, bet.mode, stake, bet.potential_payout,
        )
        return bet
