"""
Repository Pattern for Database Operations

Async CRUD operations kept apart from the HTTP and workflow layers.
"""

import logging
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar, cast

from sqlalchemy import delete, func, select
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import AsyncSession

from core.utils.datetime import utcnow
from .engine import Base
from .models import Component, stage_name

logger = logging.getLogger(__name__)

# Generic type for repository operations
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository class for common database operations.
    """

    def __init__(self, session: AsyncSession, model: Type[ModelType]):
        self.session = session
        self.model = model

    async def create(self, obj_in: Dict[str, Any]) -> ModelType:
        """
        Create a new record.

        Args:
            obj_in: Dictionary of field values

        Returns:
            ModelType: Created model instance
        """
        db_obj = self.model(**obj_in)
        self.session.add(db_obj)
        await self.session.commit()
        await self.session.refresh(db_obj)

        logger.debug(f"Created {self.model.__name__} with id {db_obj.id}")
        return db_obj

    async def get(self, id: str) -> Optional[ModelType]:
        """
        Get a record by ID.

        Args:
            id: Record ID

        Returns:
            Optional[ModelType]: Model instance or None
        """
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def get_multi(
        self,
        *,
        skip: int = 0,
        limit: Optional[int] = 100,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None
    ) -> List[ModelType]:
        """
        Get multiple records with pagination and filtering.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return, None for all
            filters: Dictionary of field filters
            order_by: Field name to order by

        Returns:
            List[ModelType]: List of model instances
        """
        query = select(self.model)

        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field):
                    query = query.where(getattr(self.model, field) == value)

        if order_by and hasattr(self.model, order_by):
            query = query.order_by(getattr(self.model, order_by))

        query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def update(self, id: str, obj_in: Dict[str, Any]) -> Optional[ModelType]:
        """
        Update a record by ID.

        Args:
            id: Record ID
            obj_in: Dictionary of field values to update

        Returns:
            Optional[ModelType]: Updated model instance or None
        """
        db_obj = await self.get(id)
        if not db_obj:
            return None

        for field, value in obj_in.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await self.session.commit()
        await self.session.refresh(db_obj)

        logger.debug(f"Updated {self.model.__name__} with id {id}")
        return db_obj

    async def delete(self, id: str) -> bool:
        """
        Delete a record by ID.

        Returns:
            bool: True if deleted, False if not found
        """
        result = await self.session.execute(
            delete(self.model).where(self.model.id == id)
        )

        cursor = cast(CursorResult[Any], result)
        affected = cursor.rowcount or 0
        if affected > 0:
            await self.session.commit()
            logger.debug(f"Deleted {self.model.__name__} with id {id}")
            return True

        return False

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """Count records with optional equality filters."""
        query = select(func.count(self.model.id))

        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field):
                    query = query.where(getattr(self.model, field) == value)

        result = await self.session.execute(query)
        return int(result.scalar_one())

    async def exists(self, id: str) -> bool:
        result = await self.session.execute(
            select(func.count(self.model.id)).where(self.model.id == id)
        )
        return int(result.scalar_one()) > 0


class ComponentRepository(BaseRepository[Component]):
    """Repository for Component model operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Component)

    async def create(self, obj_in: Dict[str, Any]) -> Component:
        now = utcnow()
        return await super().create({"created_at": now, "updated_at": now, **obj_in})

    async def update(self, id: str, obj_in: Dict[str, Any]) -> Optional[Component]:
        return await super().update(id, {**obj_in, "updated_at": utcnow()})

    async def list_components(
        self,
        *,
        stage: Optional[str] = None,
        language: Optional[str] = None,
        output_type: Optional[str] = None,
        has_output: Optional[bool] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Component]:
        """
        List components newest first.

        Args:
            stage: Exact stage name, e.g. "stage2"
            language: Exact language name
            output_type: Matches ``output.type``
            has_output: True for components with an output record, False for
                those without one
        """
        query = select(Component)
        if stage:
            query = query.where(Component.stage == stage)
        if language:
            query = query.where(Component.language == language)
        if output_type:
            query = query.where(Component.output["type"].as_string() == output_type)
        if has_output is True:
            query = query.where(Component.output.is_not(None))
        elif has_output is False:
            query = query.where(Component.output.is_(None))

        query = query.order_by(Component.created_at.desc(), Component.id).offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def search_by_name(self, name: str) -> List[Component]:
        """Case-insensitive substring search on the component name."""
        escaped = name.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        result = await self.session.execute(
            select(Component)
            .where(func.lower(Component.name).like(pattern, escape="\\"))
            .order_by(Component.name)
        )
        return list(result.scalars().all())

    async def get_stage_stats(self) -> List[Dict[str, Any]]:
        """Number of components per stage, ordered by stage name."""
        result = await self.session.execute(
            select(Component.stage, func.count(Component.id))
            .group_by(Component.stage)
            .order_by(Component.stage)
        )
        return [{"stage": stage, "count": int(count)} for stage, count in result.all()]

    async def get_by_stage(self, stage: str) -> List[Component]:
        result = await self.session.execute(
            select(Component).where(Component.stage == stage).order_by(Component.created_at)
        )
        return list(result.scalars().all())

    async def get_by_stage_number(self, number: int) -> List[Component]:
        return await self.get_by_stage(stage_name(number))

    async def get_by_input_type(self, input_type: str) -> List[Component]:
        """Components with at least one input of the given type."""
        # JSON array membership differs between SQLite and PostgreSQL, filter here
        components = await self.list_components()
        return [
            component
            for component in components
            if any(item.get("type") == input_type for item in component.inputs or [])
        ]

    async def get_by_output_type(self, output_type: str) -> List[Component]:
        return await self.list_components(output_type=output_type)

    async def get_many(self, ids: Sequence[str]) -> Dict[str, Component]:
        """Fetch several components at once, keyed by id. Unknown ids are absent."""
        if not ids:
            return {}
        result = await self.session.execute(
            select(Component).where(Component.id.in_(set(ids)))
        )
        return {component.id: component for component in result.scalars().all()}


# Convenience functions for repository creation
def get_component_repository(session: AsyncSession) -> ComponentRepository:
    """Get component repository instance."""
    return ComponentRepository(session)
