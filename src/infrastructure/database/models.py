"""SQLAlchemy ORM models."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

MONEY = Numeric(14, 2)
RATE = Numeric(10, 4)
PERCENT = Numeric(5, 2)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class UserModel(Base):
    """Account holder model (the credential store)."""

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("provider", "provider_id", name="uq_users_provider_identity"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str | None] = mapped_column(String(255))
    name: Mapped[str | None] = mapped_column(String(100))
    avatar: Mapped[str | None] = mapped_column(String(500))
    provider: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint("provider IN ('EMAIL', 'GOOGLE', 'APPLE')", name="ck_users_provider"),
        nullable=False,
        default="EMAIL",
    )
    provider_id: Mapped[str | None] = mapped_column(String(255))
    email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    refresh_tokens: Mapped[list["RefreshTokenModel"]] = relationship(
        "RefreshTokenModel",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    workspace_memberships: Mapped[list["WorkspaceMemberModel"]] = relationship(
        "WorkspaceMemberModel",
        back_populates="user",
        cascade="all, delete-orphan",
    )


class RefreshTokenModel(Base):
    """Refresh token ledger row. Only the SHA-256 hash of the token is stored."""

    __tablename__ = "refresh_tokens"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user: Mapped["UserModel"] = relationship("UserModel", back_populates="refresh_tokens")


class WorkspaceModel(Base):
    """Workspace model."""

    __tablename__ = "workspaces"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint("type IN ('SOLE_TRADER', 'PARTNERSHIP')", name="ck_workspaces_type"),
        nullable=False,
        default="SOLE_TRADER",
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    members: Mapped[list["WorkspaceMemberModel"]] = relationship(
        "WorkspaceMemberModel",
        back_populates="workspace",
        cascade="all, delete-orphan",
    )
    settings: Mapped[Optional["WorkspaceSettingsModel"]] = relationship(
        "WorkspaceSettingsModel",
        back_populates="workspace",
        cascade="all, delete-orphan",
        uselist=False,
    )
    cards: Mapped[list["CardModel"]] = relationship(
        "CardModel",
        back_populates="workspace",
        cascade="all, delete-orphan",
    )


class WorkspaceMemberModel(Base):
    """Workspace membership model."""

    __tablename__ = "workspace_members"
    __table_args__ = (
        UniqueConstraint("user_id", "workspace_id", name="uq_workspace_members_user_workspace"),
        CheckConstraint(
            "profit_split >= 0 AND profit_split <= 100",
            name="ck_workspace_members_profit_split",
        ),
        # At most one owning member per workspace
        Index(
            "uq_workspace_members_owner",
            "workspace_id",
            unique=True,
            postgresql_where=text("is_owner"),
            sqlite_where=text("is_owner = 1"),
        ),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    workspace_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint(
            "role IN ('OWNER', 'ADMIN', 'MEMBER')",
            name="ck_workspace_members_role",
        ),
        nullable=False,
        default="MEMBER",
    )
    is_owner: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    profit_split: Mapped[Decimal] = mapped_column(PERCENT, nullable=False, default=Decimal("0"))
    joined_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    workspace: Mapped["WorkspaceModel"] = relationship("WorkspaceModel", back_populates="members")
    user: Mapped["UserModel"] = relationship("UserModel", back_populates="workspace_memberships")


class WorkspaceSettingsModel(Base):
    """Per-workspace defaults."""

    __tablename__ = "workspace_settings"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    workspace_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    default_buy_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False)
    default_sell_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False)
    theme: Mapped[str] = mapped_column(
        String(10),
        CheckConstraint("theme IN ('LIGHT', 'DARK', 'SYSTEM')", name="ck_workspace_settings_theme"),
        nullable=False,
        default="SYSTEM",
    )
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default="MVR")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    workspace: Mapped["WorkspaceModel"] = relationship("WorkspaceModel", back_populates="settings")


class InvitationModel(Base):
    """Partner invitation model."""

    __tablename__ = "invitations"
    __table_args__ = (
        CheckConstraint(
            "profit_split >= 0 AND profit_split <= 100",
            name="ck_invitations_profit_split",
        ),
        # One live invitation per (workspace, email)
        Index(
            "uq_invitations_pending_workspace_email",
            "workspace_id",
            "email",
            unique=True,
            postgresql_where=text("status = 'PENDING'"),
            sqlite_where=text("status = 'PENDING'"),
        ),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    workspace_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    profit_split: Mapped[Decimal] = mapped_column(PERCENT, nullable=False, default=Decimal("0"))
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    invited_by_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    invited_user_id: Mapped[UUID | None] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
    )
    status: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint(
            "status IN ('PENDING', 'ACCEPTED', 'EXPIRED', 'CANCELLED')",
            name="ck_invitations_status",
        ),
        nullable=False,
        default="PENDING",
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    accepted_at: Mapped[datetime | None] = mapped_column(DateTime)

    # Relationships
    workspace: Mapped["WorkspaceModel"] = relationship("WorkspaceModel")
    inviter: Mapped["UserModel"] = relationship("UserModel", foreign_keys=[invited_by_id])


class CardModel(Base):
    """Payment card model."""

    __tablename__ = "cards"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    workspace_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    usd_limit: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    color: Mapped[str] = mapped_column(String(7), nullable=False, default="#3B82F6")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    workspace: Mapped["WorkspaceModel"] = relationship("WorkspaceModel", back_populates="cards")
    transactions: Mapped[list["TransactionModel"]] = relationship(
        "TransactionModel",
        back_populates="card",
    )


class TransactionModel(Base):
    """Recorded conversion model."""

    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_workspace_date", "workspace_id", "transaction_date"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    workspace_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
    )
    card_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("cards.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    usd_used: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    usdt_received: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    buy_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False)
    sell_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False)
    cost: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    sale: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    profit: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    site: Mapped[str | None] = mapped_column(String(200))
    notes: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint(
            "status IN ('PENDING', 'COMPLETED', 'CANCELLED')",
            name="ck_transactions_status",
        ),
        nullable=False,
        default="COMPLETED",
    )
    transaction_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    card: Mapped["CardModel"] = relationship("CardModel", back_populates="transactions")
