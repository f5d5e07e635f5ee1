"""Tests for CommissionResolver fallback chain."""

import logging

from src.bp_commission.domain.resolver import CommissionResolver


class TestRateFor:
    async def test_subadmin_rate_wins(self, state, db, commission_repo) -> None:
        state.commissions[2] = 2000
        state.default_commission = 5000
        assert await CommissionResolver(commission_repo).rate_for(db, 2) == 2000

    async def test_platform_default_next(self, state, db, commission_repo) -> None:
        state.default_commission = 5000
        assert await CommissionResolver(commission_repo).rate_for(db, 2) == 5000

    async def test_documented_fallback_logged(self, db, commission_repo, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="src.bp_commission.domain.resolver"):
            rate = await CommissionResolver(commission_repo).rate_for(db, 2)
        assert rate == 10000
        assert "No deposit commission configured" in caplog.text

    async def test_zero_rate_is_respected(self, state, db, commission_repo) -> None:
        state.commissions[2] = 0
        assert await CommissionResolver(commission_repo).rate_for(db, 2) == 0

    async def test_out_of_range_setting_clamped(self, state, db, commission_repo) -> None:
        state.default_commission = 25000
        assert await CommissionResolver(commission_repo).rate_for(db, 2) == 10000


class TestDiscountFor:
    async def test_configured_discount(self, state, db, commission_repo) -> None:
        state.discounts[(3, 2)] = 750
        assert await CommissionResolver(commission_repo).discount_for(db, 3, 2) == 750

    async def test_defaults_to_zero(self, db, commission_repo) -> None:
        assert await CommissionResolver(commission_repo).discount_for(db, 3, 2) == 0

    async def test_discount_scoped_to_subadmin(self, state, db, commission_repo) -> None:
        state.discounts[(3, 9)] = 750
        assert await CommissionResolver(commission_repo).discount_for(db, 3, 2) == 0
