"""Workspace settings service."""

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from domain.entities.workspace import Theme, WorkspaceSettings
from domain.repositories.unit_of_work import IUnitOfWork


class SettingsService:
    """Reads and updates per-workspace defaults.

    Settings are created with defaults on first read, so older workspaces
    that never had a row still answer.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get(self, workspace_id: UUID) -> WorkspaceSettings:
        async with self._uow_factory() as uow:
            return await self._get_or_create(uow, workspace_id)

    async def update(
        self,
        workspace_id: UUID,
        default_buy_rate: Decimal | None = None,
        default_sell_rate: Decimal | None = None,
        theme: Theme | None = None,
        currency: str | None = None,
    ) -> WorkspaceSettings:
        """Update any subset of the settings."""
        async with self._uow_factory() as uow:
            settings = await self._get_or_create(uow, workspace_id)

            if default_buy_rate is not None:
                settings.default_buy_rate = default_buy_rate
            if default_sell_rate is not None:
                settings.default_sell_rate = default_sell_rate
            if theme is not None:
                settings.theme = theme
            if currency is not None:
                settings.currency = currency.strip().upper()

            settings.updated_at = datetime.utcnow()
            updated = await uow.workspaces.update_settings(settings)
            await uow.commit()
            return updated

    async def get_rates(self, workspace_id: UUID) -> tuple[Decimal, Decimal]:
        """Default (buy, sell) rates used to prefill new transactions."""
        settings = await self.get(workspace_id)
        return settings.default_buy_rate, settings.default_sell_rate

    async def update_rates(
        self,
        workspace_id: UUID,
        buy_rate: Decimal | None = None,
        sell_rate: Decimal | None = None,
    ) -> tuple[Decimal, Decimal]:
        settings = await self.update(
            workspace_id, default_buy_rate=buy_rate, default_sell_rate=sell_rate
        )
        return settings.default_buy_rate, settings.default_sell_rate

    @staticmethod
    async def _get_or_create(uow: IUnitOfWork, workspace_id: UUID) -> WorkspaceSettings:
        settings = await uow.workspaces.get_settings(workspace_id)
        if settings is None:
            settings = await uow.workspaces.create_settings(
                WorkspaceSettings(workspace_id=workspace_id)
            )
            await uow.commit()
        return settings
