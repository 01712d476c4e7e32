"""
Hospeda Backend — Tag Repositories
===================================

What:  `TagRepository` (the generic CRUD over `tags`) and
       `EntityTagRepository` for the `r_entity_tag` association rows.
How:   Relation rows are plain inserts and deletes; they carry no tombstone.
       Tag lookups through the relation skip soft-deleted tags.
"""

import uuid
from typing import List, Optional, Tuple

from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hospeda.models.tag import EntityTag, Tag
from hospeda.repositories.base import BaseRepository, database_errors


class TagRepository(BaseRepository[Tag]):
    model = Tag
    search_columns = ("name", "slug")


class EntityTagRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find(self, tag_id: uuid.UUID, entity_type: str, entity_id: uuid.UUID) -> Optional[EntityTag]:
        with database_errors("EntityTag", "find_relation"):
            return await self.session.get(EntityTag, (tag_id, entity_id, entity_type))

    async def add(
        self,
        tag_id: uuid.UUID,
        entity_type: str,
        entity_id: uuid.UUID,
        actor_id: Optional[uuid.UUID] = None,
    ) -> int:
        """Creates the relation. Returns 0 when it already exists."""
        if await self.find(tag_id, entity_type, entity_id) is not None:
            return 0
        relation = EntityTag(
            tag_id=tag_id,
            entity_type=entity_type,
            entity_id=entity_id,
            created_by_id=actor_id,
        )
        with database_errors("EntityTag", "add_relation"):
            self.session.add(relation)
            await self.session.flush()
        return 1

    async def remove(self, tag_id: uuid.UUID, entity_type: str, entity_id: uuid.UUID) -> int:
        query = delete(EntityTag).where(
            EntityTag.tag_id == tag_id,
            EntityTag.entity_type == entity_type,
            EntityTag.entity_id == entity_id,
        )
        with database_errors("EntityTag", "remove_relation"):
            result = await self.session.execute(query)
        return int(result.rowcount or 0)

    async def find_tags_for_entity(self, entity_type: str, entity_id: uuid.UUID) -> List[Tag]:
        query = (
            select(Tag)
            .join(EntityTag, EntityTag.tag_id == Tag.id)
            .where(
                EntityTag.entity_type == entity_type,
                EntityTag.entity_id == entity_id,
                Tag.deleted_at.is_(None),
            )
            .order_by(Tag.name)
        )
        with database_errors("EntityTag", "find_tags_for_entity"):
            return list((await self.session.execute(query)).scalars().all())

    async def find_entity_ids_for_tag(self, tag_id: uuid.UUID, entity_type: Optional[str] = None) -> List[uuid.UUID]:
        query = select(EntityTag.entity_id).where(EntityTag.tag_id == tag_id)
        if entity_type is not None:
            query = query.where(EntityTag.entity_type == entity_type)
        with database_errors("EntityTag", "find_entity_ids_for_tag"):
            return list((await self.session.execute(query)).scalars().all())

    async def find_popular_tags(self, limit: int = 10) -> List[Tuple[Tag, int]]:
        """Live tags ordered by how many entities use them, most used first."""
        usage = func.count(EntityTag.entity_id).label("usage_count")
        query = (
            select(Tag, usage)
            .join(EntityTag, EntityTag.tag_id == Tag.id)
            .where(Tag.deleted_at.is_(None))
            .group_by(Tag.id)
            .order_by(desc(usage), Tag.name)
            .limit(limit)
        )
        with database_errors("EntityTag", "find_popular_tags"):
            rows = (await self.session.execute(query)).all()
        return [(tag, int(count)) for tag, count in rows]
