"""
Hospeda Backend — Tag Service
==============================

What:  CRUD over tags plus the tag ↔ entity associations stored in
       `r_entity_tag`.
How:   Attaching or detaching a tag counts as updating the tag, so it needs
       TAG_UPDATE (or an elevated role). Both the tag and the target entity
       must exist and be live. Reads through the association only return
       tags the actor may view.

Association operations:
    add_tag_to_entity(actor, tag_id, entity_type, entity_id)      → {"count": 0|1}
    remove_tag_from_entity(actor, tag_id, entity_type, entity_id) → {"count": 0|1}
    get_tags_for_entity(actor, entity_type, entity_id)            → [TagRead]
    get_popular_tags(actor, limit=10)                             → [TagUsage]
"""

from typing import Any, Dict, Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession

from hospeda.enums import EntityTypeEnum
from hospeda.exceptions import ServiceError
from hospeda.permissions import Actor, Operation, can_perform
from hospeda.permissions.policies import TAG_POLICY
from hospeda.repositories.base import BaseRepository
from hospeda.repositories.entities import (
    AccommodationRepository,
    DestinationRepository,
    EventRepository,
    PostRepository,
    UserRepository,
)
from hospeda.repositories.tag import EntityTagRepository, TagRepository
from hospeda.schemas.tag import (
    EntityRef,
    EntityTagInput,
    PopularTagsQuery,
    TagCreate,
    TagRead,
    TagSearch,
    TagUpdate,
    TagUsage,
)
from hospeda.schemas.validation import validate_input
from hospeda.services.base import SluggedCrudService, parse_id
from hospeda.services.result import ServiceOutput

TAGGABLE_REPOSITORIES: Dict[str, Type[BaseRepository]] = {
    EntityTypeEnum.ACCOMMODATION.value: AccommodationRepository,
    EntityTypeEnum.DESTINATION.value: DestinationRepository,
    EntityTypeEnum.EVENT.value: EventRepository,
    EntityTypeEnum.POST.value: PostRepository,
    EntityTypeEnum.USER.value: UserRepository,
}


class TagService(SluggedCrudService):
    entity_name = "tag"
    repository_cls = TagRepository
    policy = TAG_POLICY
    create_schema = TagCreate
    update_schema = TagUpdate
    search_schema = TagSearch
    read_schema = TagRead

    def __init__(
        self,
        session: AsyncSession,
        repository: Optional[TagRepository] = None,
        relations: Optional[EntityTagRepository] = None,
    ):
        super().__init__(session, repository)
        self.relations = relations or EntityTagRepository(session)

    async def _ensure_target(self, entity_type: str, entity_id) -> None:
        repository = TAGGABLE_REPOSITORIES[entity_type](self.session)
        if await repository.find_by_id(entity_id) is None:
            raise ServiceError.not_found(entity_type.capitalize(), entity_id)

    async def _load_relation_input(self, actor: Actor, tag_id: Any, entity_type: Any, entity_id: Any):
        payload = validate_input(
            EntityTagInput,
            {"tag_id": tag_id, "entity_type": entity_type, "entity_id": entity_id},
        )
        tag = await self._get_existing(payload.tag_id)
        self._authorize(actor, Operation.UPDATE, tag)
        await self._ensure_target(payload.entity_type, payload.entity_id)
        return payload

    def _visible(self, actor: Actor, tag: Any) -> bool:
        return can_perform(actor, Operation.VIEW, self.policy, tag).allowed

    async def add_tag_to_entity(
        self, actor: Optional[Actor], tag_id: Any, entity_type: Any, entity_id: Any
    ) -> ServiceOutput:
        async def body(actor: Actor):
            payload = await self._load_relation_input(actor, tag_id, entity_type, entity_id)
            count = await self.relations.add(payload.tag_id, payload.entity_type, payload.entity_id, actor.id)
            return {"count": count}

        return await self._run("addTagToEntity", actor, body)

    async def remove_tag_from_entity(
        self, actor: Optional[Actor], tag_id: Any, entity_type: Any, entity_id: Any
    ) -> ServiceOutput:
        async def body(actor: Actor):
            payload = await self._load_relation_input(actor, tag_id, entity_type, entity_id)
            count = await self.relations.remove(payload.tag_id, payload.entity_type, payload.entity_id)
            return {"count": count}

        return await self._run("removeTagFromEntity", actor, body)

    async def get_tags_for_entity(self, actor: Optional[Actor], entity_type: Any, entity_id: Any) -> ServiceOutput:
        async def body(actor: Actor):
            ref = validate_input(EntityRef, {"entity_type": entity_type, "entity_id": entity_id})
            tags = await self.relations.find_tags_for_entity(ref.entity_type, ref.entity_id)
            return [self._to_read(tag) for tag in tags if self._visible(actor, tag)]

        return await self._run("getTagsForEntity", actor, body)

    async def get_entity_ids_for_tag(
        self, actor: Optional[Actor], tag_id: Any, entity_type: Any = None
    ) -> ServiceOutput:
        async def body(actor: Actor):
            tag = await self._get_existing(parse_id(tag_id, "tag_id"))
            self._authorize(actor, Operation.VIEW, tag)
            kind = None
            if entity_type is not None:
                kind = validate_input(EntityRef, {"entity_type": entity_type, "entity_id": tag.id}).entity_type
            return await self.relations.find_entity_ids_for_tag(tag.id, kind)

        return await self._run("getEntityIdsForTag", actor, body)

    async def get_popular_tags(self, actor: Optional[Actor], limit: Any = None) -> ServiceOutput:
        async def body(actor: Actor):
            query = validate_input(PopularTagsQuery, {} if limit is None else {"limit": limit})
            rows = await self.relations.find_popular_tags(query.limit)
            return [
                TagUsage(tag=self._to_read(tag), usage_count=count)
                for tag, count in rows
                if self._visible(actor, tag)
            ]

        return await self._run("getPopularTags", actor, body)
