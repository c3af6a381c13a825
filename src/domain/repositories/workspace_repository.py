"""Workspace repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.workspace import Workspace, WorkspaceMember, WorkspaceSettings


class IWorkspaceRepository(Protocol):
    """Repository interface for Workspace entities, memberships and settings."""

    async def get(self, id: UUID) -> Workspace | None:
        """Get a workspace by ID."""
        ...

    async def create(self, workspace: Workspace) -> Workspace:
        """Create a new workspace."""
        ...

    async def update(self, workspace: Workspace) -> Workspace:
        """Update an existing workspace."""
        ...

    async def get_member(self, workspace_id: UUID, user_id: UUID) -> WorkspaceMember | None:
        """Get a workspace member by workspace and user IDs."""
        ...

    async def get_member_by_id(
        self, workspace_id: UUID, member_id: UUID
    ) -> WorkspaceMember | None:
        """Get a membership row by its own ID, scoped to the workspace."""
        ...

    async def get_members(self, workspace_id: UUID) -> list[WorkspaceMember]:
        """Get all members of a workspace."""
        ...

    async def get_memberships_for_user(self, user_id: UUID) -> list[WorkspaceMember]:
        """Get every membership a user holds."""
        ...

    async def add_member(self, member: WorkspaceMember) -> WorkspaceMember:
        """Add a member to a workspace."""
        ...

    async def update_member(self, member: WorkspaceMember) -> WorkspaceMember:
        """Persist changes to a membership (role, profit split)."""
        ...

    async def remove_member(self, member_id: UUID) -> bool:
        """Remove a membership row."""
        ...

    async def count_members(self, workspace_id: UUID) -> int:
        """Count the number of members in a workspace."""
        ...

    async def get_settings(self, workspace_id: UUID) -> WorkspaceSettings | None:
        """Get the settings row of a workspace."""
        ...

    async def create_settings(self, settings: WorkspaceSettings) -> WorkspaceSettings:
        """Create the settings row of a workspace."""
        ...

    async def update_settings(self, settings: WorkspaceSettings) -> WorkspaceSettings:
        """Update the settings row of a workspace."""
        ...
