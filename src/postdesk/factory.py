"""Construction of new posts, region data and block groups.

The post service never builds runtime instances itself; it asks a
ContentFactory, which knows how to turn a descriptor from the registry into
a value with the right defaults.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from postdesk.models.blocks import BlockGroup
from postdesk.models.content_type import (
    BlockTypeInfo,
    ContentTypeDescriptor,
    FieldDescriptor,
    RegionDescriptor,
)
from postdesk.models.fields import BaseField, create_field
from postdesk.models.post import DynamicPost, RegionData
from postdesk.registry import SchemaRegistry
from postdesk.services.exceptions import NotFoundError


GroupConstructor = Callable[[BlockTypeInfo], BlockGroup]


class ContentFactory(ABC):
    """Abstract interface for creating runtime content instances."""

    @abstractmethod
    def create_post(self, content_type: ContentTypeDescriptor) -> DynamicPost:
        """Create an unsaved post with default data for every region.

        Args:
            content_type: Type of the new post

        Returns:
            New post (no creation timestamp)
        """
        pass

    @abstractmethod
    def create_region(self, region: RegionDescriptor) -> RegionData:
        """Create the default data for one region.

        Collection regions start empty. Single-field regions hold one field
        value, multi-field regions a map of field id -> value.
        """
        pass

    @abstractmethod
    def create_field(self, field: FieldDescriptor) -> BaseField:
        """Create an empty value for a declared field.

        Raises:
            NotFoundError: If the field type is not registered
        """
        pass

    @abstractmethod
    def create_block_group(self, block_type: BlockTypeInfo) -> BlockGroup:
        """Create an empty block group of the given type."""
        pass


class DefaultContentFactory(ContentFactory):
    """Factory backed by a SchemaRegistry.

    Block groups are built by a constructor registered for their type id,
    falling back to a plain BlockGroup carrying the type's declared fields.
    """

    def __init__(self, registry: SchemaRegistry):
        self.registry = registry
        self._group_constructors: dict[str, GroupConstructor] = {}

    def register_group(self, block_type: str, constructor: GroupConstructor) -> None:
        """Register the constructor used for block groups of one type."""
        self._group_constructors[block_type] = constructor

    def create_post(self, content_type: ContentTypeDescriptor) -> DynamicPost:
        post = DynamicPost(type_id=content_type.id)
        for region in content_type.regions:
            post.regions[region.id] = self.create_region(region)
        return post

    def create_region(self, region: RegionDescriptor) -> RegionData:
        if region.collection:
            return []
        if len(region.fields) == 1:
            return self.create_field(region.fields[0])
        return {field.id: self.create_field(field) for field in region.fields}

    def create_field(self, field: FieldDescriptor) -> BaseField:
        info = self.registry.get_field_type(field.type)
        if info is None:
            raise NotFoundError("field_type", field.type)
        return create_field(info.kind)

    def create_block_group(self, block_type: BlockTypeInfo) -> BlockGroup:
        constructor: Optional[GroupConstructor] = self._group_constructors.get(block_type.type)
        if constructor is not None:
            return constructor(block_type)
        return BlockGroup(
            type=block_type.type,
            fields={field.id: self.create_field(field) for field in block_type.fields},
        )
