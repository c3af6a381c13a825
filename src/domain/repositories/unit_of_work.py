"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.card_repository import ICardRepository
from domain.repositories.invitation_repository import IInvitationRepository
from domain.repositories.transaction_repository import ITransactionRepository
from domain.repositories.user_repository import IRefreshTokenRepository, IUserRepository
from domain.repositories.workspace_repository import IWorkspaceRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    users: IUserRepository
    refresh_tokens: IRefreshTokenRepository
    workspaces: IWorkspaceRepository
    invitations: IInvitationRepository
    cards: ICardRepository
    transactions: ITransactionRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
