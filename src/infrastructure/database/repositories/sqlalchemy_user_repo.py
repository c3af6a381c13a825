"""SQLAlchemy implementation of the User repository."""

from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.user import AuthProvider, User
from infrastructure.database.models import UserModel


class SQLAlchemyUserRepository:
    """SQLAlchemy implementation of IUserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> User | None:
        """Get a user by ID."""
        stmt = select(UserModel).where(UserModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_email(self, email: str) -> User | None:
        """Get a user by (lower-cased) email."""
        stmt = select(UserModel).where(UserModel.email == email.strip().lower())
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_email_or_provider(
        self, email: str, provider: AuthProvider, provider_id: str
    ) -> User | None:
        """Get a user matching the email or the external provider identity.

        An email match wins over a provider match when both exist.
        """
        stmt = select(UserModel).where(
            or_(
                UserModel.email == email.strip().lower(),
                and_(
                    UserModel.provider == provider.value,
                    UserModel.provider_id == provider_id,
                ),
            )
        )
        result = await self._session.execute(stmt)
        models = list(result.scalars())
        if not models:
            return None
        models.sort(key=lambda m: m.email != email.strip().lower())
        return self._to_entity(models[0])

    async def get_many(self, ids: list[UUID]) -> list[User]:
        """Get several users in one query."""
        if not ids:
            return []
        stmt = select(UserModel).where(UserModel.id.in_(ids))
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, user: User) -> User:
        """Create a new user."""
        model = self._to_model(user)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, user: User) -> User:
        """Update an existing user."""
        stmt = select(UserModel).where(UserModel.id == user.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"User {user.id} not found")

        model.email = user.email
        model.password_hash = user.password_hash
        model.name = user.name
        model.avatar = user.avatar
        model.provider = user.provider.value
        model.provider_id = user.provider_id
        model.email_verified = user.email_verified

        await self._session.flush()
        return self._to_entity(model)

    def _to_entity(self, model: UserModel) -> User:
        """Convert ORM model to domain entity."""
        return User(
            id=model.id,
            email=model.email,
            password_hash=model.password_hash,
            name=model.name,
            avatar=model.avatar,
            provider=AuthProvider(model.provider),
            provider_id=model.provider_id,
            email_verified=model.email_verified,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: User) -> UserModel:
        """Convert domain entity to ORM model."""
        return UserModel(
            id=entity.id,
            email=entity.email,
            password_hash=entity.password_hash,
            name=entity.name,
            avatar=entity.avatar,
            provider=entity.provider.value,
            provider_id=entity.provider_id,
            email_verified=entity.email_verified,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
