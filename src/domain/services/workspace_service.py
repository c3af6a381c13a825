"""Workspace service layer: membership resolution, onboarding and partners."""

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from uuid import UUID

import structlog

from core.exceptions import (
    CannotRemoveOwnerError,
    MemberNotFoundError,
    WorkspaceAlreadyExistsError,
    WorkspaceNotFoundError,
    WorkspaceTypeChangeError,
)
from domain.calculations import HUNDRED, to_money
from domain.entities.user import User
from domain.entities.workspace import (
    DEFAULT_BUY_RATE,
    DEFAULT_SELL_RATE,
    Workspace,
    WorkspaceMember,
    WorkspaceRole,
    WorkspaceSettings,
    WorkspaceType,
)
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class WorkspaceService:
    """Service layer for Workspace business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def resolve_membership(
        self, user_id: UUID, workspace_id: UUID
    ) -> WorkspaceMember | None:
        """Return the user's membership of the workspace, if any."""
        async with self._uow_factory() as uow:
            return await uow.workspaces.get_member(workspace_id, user_id)

    async def resolve_access(
        self, user_id: UUID, workspace_id: UUID
    ) -> tuple[Workspace, WorkspaceMember] | None:
        """Return the workspace and the user's membership of it, or None."""
        async with self._uow_factory() as uow:
            member = await uow.workspaces.get_member(workspace_id, user_id)
            if member is None:
                return None
            workspace = await uow.workspaces.get(workspace_id)
            if workspace is None:
                return None
            return workspace, member

    async def complete_onboarding(
        self,
        user_id: UUID,
        name: str,
        workspace_type: WorkspaceType = WorkspaceType.SOLE_TRADER,
        default_buy_rate: Decimal = DEFAULT_BUY_RATE,
        default_sell_rate: Decimal = DEFAULT_SELL_RATE,
    ) -> tuple[Workspace, WorkspaceMember, WorkspaceSettings]:
        """Create the user's workspace with the user as sole owner.

        Raises:
            WorkspaceAlreadyExistsError: If the user already belongs to a workspace.
        """
        async with self._uow_factory() as uow:
            if await uow.workspaces.get_memberships_for_user(user_id):
                raise WorkspaceAlreadyExistsError()

            workspace = await uow.workspaces.create(
                Workspace(name=name.strip(), type=workspace_type)
            )
            owner = await uow.workspaces.add_member(
                WorkspaceMember(
                    workspace_id=workspace.id,
                    user_id=user_id,
                    role=WorkspaceRole.OWNER,
                    is_owner=True,
                    profit_split=HUNDRED,
                )
            )
            settings = await uow.workspaces.create_settings(
                WorkspaceSettings(
                    workspace_id=workspace.id,
                    default_buy_rate=default_buy_rate,
                    default_sell_rate=default_sell_rate,
                )
            )
            await uow.commit()

        logger.info("workspace_created", workspace_id=str(workspace.id), user_id=str(user_id))
        return workspace, owner, settings

    async def get_details(
        self, workspace_id: UUID
    ) -> tuple[Workspace, int, WorkspaceSettings | None]:
        """Get a workspace with its member count and settings."""
        async with self._uow_factory() as uow:
            workspace = await uow.workspaces.get(workspace_id)
            if not workspace:
                raise WorkspaceNotFoundError(str(workspace_id))
            member_count = await uow.workspaces.count_members(workspace_id)
            settings = await uow.workspaces.get_settings(workspace_id)
            return workspace, member_count, settings

    async def update(
        self,
        workspace_id: UUID,
        name: str | None = None,
        workspace_type: WorkspaceType | None = None,
    ) -> Workspace:
        """Rename a workspace or promote it to a partnership.

        Raises:
            WorkspaceTypeChangeError: On an attempt to demote a partnership.
        """
        async with self._uow_factory() as uow:
            workspace = await uow.workspaces.get(workspace_id)
            if not workspace:
                raise WorkspaceNotFoundError(str(workspace_id))

            if name is not None:
                workspace.name = name.strip()
            if workspace_type is not None and workspace_type != workspace.type:
                if workspace_type == WorkspaceType.SOLE_TRADER:
                    raise WorkspaceTypeChangeError()
                workspace.promote_to_partnership()

            workspace.updated_at = datetime.utcnow()
            updated = await uow.workspaces.update(workspace)
            await uow.commit()
            return updated

    async def get_members(
        self, workspace_id: UUID
    ) -> list[tuple[WorkspaceMember, User | None]]:
        """Get the members of a workspace alongside their user records."""
        async with self._uow_factory() as uow:
            members = await uow.workspaces.get_members(workspace_id)
            users = await uow.users.get_many([m.user_id for m in members])

        by_id = {user.id: user for user in users}
        return [(member, by_id.get(member.user_id)) for member in members]

    @staticmethod
    def profit_split_total(members: list[WorkspaceMember]) -> Decimal:
        """Sum of the members' profit splits.

        Splits are expected to add up to 100 but nothing enforces it; callers
        surface an unbalanced total rather than reject it.
        """
        return to_money(sum((m.profit_split for m in members), Decimal("0")))

    async def update_profit_split(
        self, workspace_id: UUID, member_id: UUID, profit_split: Decimal
    ) -> WorkspaceMember:
        """Set one member's share of profit (percent, 0-100).

        Raises:
            MemberNotFoundError: If the member is not in this workspace.
        """
        async with self._uow_factory() as uow:
            member = await uow.workspaces.get_member_by_id(workspace_id, member_id)
            if not member:
                raise MemberNotFoundError(str(member_id))

            member.profit_split = to_money(profit_split)
            updated = await uow.workspaces.update_member(member)
            await uow.commit()
            return updated

    async def remove_member(
        self, workspace_id: UUID, member_id: UUID, actor_id: UUID
    ) -> None:
        """Remove a partner from a workspace.

        Raises:
            MemberNotFoundError: If the member is not in this workspace.
            CannotRemoveOwnerError: If the member owns the workspace.
        """
        async with self._uow_factory() as uow:
            member = await uow.workspaces.get_member_by_id(workspace_id, member_id)
            if not member:
                raise MemberNotFoundError(str(member_id))
            if member.is_owner:
                raise CannotRemoveOwnerError()

            await uow.workspaces.remove_member(member.id)
            await uow.commit()

        logger.info(
            "member_removed",
            workspace_id=str(workspace_id),
            member_id=str(member_id),
            removed_user_id=str(member.user_id),
            actor_id=str(actor_id),
        )
