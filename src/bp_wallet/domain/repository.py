"""Wallet request repository Protocol. Writes run in the caller's transaction."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bp_wallet.domain.models import NewWalletRequest, WalletRequest


class WalletRequestRepositoryProtocol(Protocol):
    async def insert_request(
        self, db: AsyncSession, request: NewWalletRequest
    ) -> WalletRequest: ...

    async def lock_request(
        self, db: AsyncSession, request_id: int
    ) -> WalletRequest | None: ...

    async def mark_reviewed(
        self,
        db: AsyncSession,
        request_id: int,
        status: str,
        reviewed_by: int,
        notes: str | None,
    ) -> WalletRequest | None:
        """pending → status. None when the request is no longer pending."""
        ...

    async def list_requests(
        self,
        db: AsyncSession,
        owner_id: int | None,
        superior_id: int | None,
        status: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[WalletRequest]: ...
