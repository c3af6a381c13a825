"""SQLAlchemy implementation of Workspace repository."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.workspace import (
    Theme,
    Workspace,
    WorkspaceMember,
    WorkspaceRole,
    WorkspaceSettings,
    WorkspaceType,
)
from infrastructure.database.models import (
    WorkspaceMemberModel,
    WorkspaceModel,
    WorkspaceSettingsModel,
)


class SQLAlchemyWorkspaceRepository:
    """SQLAlchemy implementation of IWorkspaceRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Workspace | None:
        """Get a workspace by ID."""
        stmt = select(WorkspaceModel).where(WorkspaceModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, workspace: Workspace) -> Workspace:
        """Create a new workspace."""
        model = WorkspaceModel(
            id=workspace.id,
            name=workspace.name,
            type=workspace.type.value,
            created_at=workspace.created_at,
            updated_at=workspace.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, workspace: Workspace) -> Workspace:
        """Update an existing workspace."""
        model = await self._get_model(workspace.id)
        if not model:
            raise ValueError(f"Workspace {workspace.id} not found")

        model.name = workspace.name
        model.type = workspace.type.value
        model.updated_at = workspace.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def get_member(self, workspace_id: UUID, user_id: UUID) -> WorkspaceMember | None:
        """Get a workspace member by workspace and user IDs."""
        stmt = select(WorkspaceMemberModel).where(
            WorkspaceMemberModel.workspace_id == workspace_id,
            WorkspaceMemberModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._member_to_entity(model) if model else None

    async def get_member_by_id(
        self, workspace_id: UUID, member_id: UUID
    ) -> WorkspaceMember | None:
        """Get a membership row by its own ID, scoped to the workspace."""
        stmt = select(WorkspaceMemberModel).where(
            WorkspaceMemberModel.workspace_id == workspace_id,
            WorkspaceMemberModel.id == member_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._member_to_entity(model) if model else None

    async def get_members(self, workspace_id: UUID) -> list[WorkspaceMember]:
        """Get all members of a workspace, owner first then by join date."""
        stmt = (
            select(WorkspaceMemberModel)
            .where(WorkspaceMemberModel.workspace_id == workspace_id)
            .order_by(WorkspaceMemberModel.is_owner.desc(), WorkspaceMemberModel.joined_at)
        )
        result = await self._session.execute(stmt)
        return [self._member_to_entity(model) for model in result.scalars()]

    async def get_memberships_for_user(self, user_id: UUID) -> list[WorkspaceMember]:
        """Get every membership a user holds, oldest first."""
        stmt = (
            select(WorkspaceMemberModel)
            .where(WorkspaceMemberModel.user_id == user_id)
            .order_by(WorkspaceMemberModel.joined_at)
        )
        result = await self._session.execute(stmt)
        return [self._member_to_entity(model) for model in result.scalars()]

    async def add_member(self, member: WorkspaceMember) -> WorkspaceMember:
        """Add a member to a workspace."""
        model = WorkspaceMemberModel(
            id=member.id,
            workspace_id=member.workspace_id,
            user_id=member.user_id,
            role=member.role.value,
            is_owner=member.is_owner,
            profit_split=member.profit_split,
            joined_at=member.joined_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._member_to_entity(model)

    async def update_member(self, member: WorkspaceMember) -> WorkspaceMember:
        """Persist role and profit split changes of a membership."""
        stmt = select(WorkspaceMemberModel).where(WorkspaceMemberModel.id == member.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError("Member not found in workspace")

        model.role = member.role.value
        model.profit_split = member.profit_split
        await self._session.flush()
        return self._member_to_entity(model)

    async def remove_member(self, member_id: UUID) -> bool:
        """Remove a membership row."""
        stmt = delete(WorkspaceMemberModel).where(WorkspaceMemberModel.id == member_id)
        result = await self._session.execute(stmt)
        return (result.rowcount or 0) > 0  # type: ignore[attr-defined]

    async def count_members(self, workspace_id: UUID) -> int:
        """Count the number of members in a workspace."""
        stmt = (
            select(func.count())
            .select_from(WorkspaceMemberModel)
            .where(WorkspaceMemberModel.workspace_id == workspace_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def get_settings(self, workspace_id: UUID) -> WorkspaceSettings | None:
        """Get the settings row of a workspace."""
        stmt = select(WorkspaceSettingsModel).where(
            WorkspaceSettingsModel.workspace_id == workspace_id
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._settings_to_entity(model) if model else None

    async def create_settings(self, settings: WorkspaceSettings) -> WorkspaceSettings:
        """Create the settings row of a workspace."""
        model = WorkspaceSettingsModel(
            id=settings.id,
            workspace_id=settings.workspace_id,
            default_buy_rate=settings.default_buy_rate,
            default_sell_rate=settings.default_sell_rate,
            theme=settings.theme.value,
            currency=settings.currency,
            created_at=settings.created_at,
            updated_at=settings.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._settings_to_entity(model)

    async def update_settings(self, settings: WorkspaceSettings) -> WorkspaceSettings:
        """Update the settings row of a workspace."""
        stmt = select(WorkspaceSettingsModel).where(
            WorkspaceSettingsModel.workspace_id == settings.workspace_id
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Settings for workspace {settings.workspace_id} not found")

        model.default_buy_rate = settings.default_buy_rate
        model.default_sell_rate = settings.default_sell_rate
        model.theme = settings.theme.value
        model.currency = settings.currency
        model.updated_at = settings.updated_at

        await self._session.flush()
        return self._settings_to_entity(model)

    async def _get_model(self, id: UUID) -> WorkspaceModel | None:
        stmt = select(WorkspaceModel).where(WorkspaceModel.id == id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: WorkspaceModel) -> Workspace:
        """Convert ORM model to domain entity."""
        return Workspace(
            id=model.id,
            name=model.name,
            type=WorkspaceType(model.type),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _member_to_entity(self, model: WorkspaceMemberModel) -> WorkspaceMember:
        """Convert member ORM model to domain entity."""
        return WorkspaceMember(
            id=model.id,
            workspace_id=model.workspace_id,
            user_id=model.user_id,
            role=WorkspaceRole(model.role),
            is_owner=model.is_owner,
            profit_split=Decimal(str(model.profit_split)),
            joined_at=model.joined_at,
        )

    def _settings_to_entity(self, model: WorkspaceSettingsModel) -> WorkspaceSettings:
        """Convert settings ORM model to domain entity."""
        return WorkspaceSettings(
            id=model.id,
            workspace_id=model.workspace_id,
            default_buy_rate=Decimal(str(model.default_buy_rate)),
            default_sell_rate=Decimal(str(model.default_sell_rate)),
            theme=Theme(model.theme),
            currency=model.currency,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
