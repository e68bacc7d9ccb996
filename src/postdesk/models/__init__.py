"""Pydantic data models for Postdesk."""

from postdesk.models.blocks import AnyBlock, Block, BlockGroup
from postdesk.models.content_type import (
    BlockDisplayMode,
    BlockTypeInfo,
    ContentTypeDescriptor,
    CustomEditorDescriptor,
    FieldDescriptor,
    FieldTypeInfo,
    RegionDescriptor,
    RegionDisplayMode,
)
from postdesk.models.edit_model import (
    EMPTY_TITLE,
    BlockGroupModel,
    BlockItemModel,
    BlockMeta,
    BlockNode,
    EditModel,
    EditorModel,
    FieldMeta,
    FieldModel,
    RegionItemModel,
    RegionMeta,
    RegionModel,
)
from postdesk.models.post import (
    ArchivePage,
    ContentState,
    DynamicPost,
    RedirectType,
    RegionData,
    RegionValue,
    Site,
    Taxonomy,
)

__all__ = [
    "AnyBlock",
    "ArchivePage",
    "Block",
    "BlockDisplayMode",
    "BlockGroup",
    "BlockGroupModel",
    "BlockItemModel",
    "BlockMeta",
    "BlockNode",
    "BlockTypeInfo",
    "ContentState",
    "ContentTypeDescriptor",
    "CustomEditorDescriptor",
    "DynamicPost",
    "EMPTY_TITLE",
    "EditModel",
    "EditorModel",
    "FieldDescriptor",
    "FieldMeta",
    "FieldModel",
    "FieldTypeInfo",
    "RedirectType",
    "RegionData",
    "RegionDescriptor",
    "RegionDisplayMode",
    "RegionItemModel",
    "RegionMeta",
    "RegionModel",
    "RegionValue",
    "Site",
    "Taxonomy",
]
