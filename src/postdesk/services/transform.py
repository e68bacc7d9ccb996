"""Region and block transforms between stored posts and edit models.

Forward transforms (post -> edit model) build the editor tree from the
content type schema. Inverse transforms (edit model -> post) write edited
values back, following the schema rather than the shape of the model, so a
model that has drifted from the schema is rejected instead of silently
reshaping the post.
"""

from typing import NoReturn, Optional

import structlog

from postdesk.factory import ContentFactory
from postdesk.models.blocks import AnyBlock, Block, BlockGroup
from postdesk.models.content_type import (
    BlockDisplayMode,
    BlockTypeInfo,
    ContentTypeDescriptor,
    FieldDescriptor,
    RegionDescriptor,
)
from postdesk.models.edit_model import (
    EMPTY_TITLE,
    BlockGroupModel,
    BlockItemModel,
    BlockMeta,
    BlockNode,
    EditorModel,
    FieldMeta,
    FieldModel,
    RegionItemModel,
    RegionMeta,
    RegionModel,
)
from postdesk.models.fields import BaseField
from postdesk.models.post import RegionData, RegionValue
from postdesk.registry import SchemaRegistry
from postdesk.services.exceptions import NotFoundError, UnknownBlockTypeError


logger = structlog.get_logger()


GROUP_COMPONENTS = {
    BlockDisplayMode.MASTER_DETAIL: "block-group",
    BlockDisplayMode.HORIZONTAL: "block-group-horizontal",
    BlockDisplayMode.VERTICAL: "block-group-vertical",
}

MISSING_BLOCK_COMPONENT = "missing-block"


# ── Regions: post -> model ───────────────────────────────────────


def _field_meta(field: FieldDescriptor, registry: SchemaRegistry) -> FieldMeta:
    """Resolve a declared field into editor metadata.

    Raises:
        NotFoundError: If the field type is not registered
    """
    info = registry.get_field_type(field.type)
    if info is None:
        raise NotFoundError("field_type", field.type)

    meta = FieldMeta(
        id=field.id,
        name=field.title,
        component=info.component,
        placeholder=field.placeholder,
        description=field.description,
        is_half_width=field.half_width,
    )
    if info.is_selectable:
        meta.options = {int(value): label for value, label in info.options.items()}
    return meta


def _region_meta(region: RegionDescriptor) -> RegionMeta:
    return RegionMeta(
        id=region.id,
        name=region.title,
        description=region.description,
        placeholder=region.list_title_placeholder,
        is_collection=region.collection,
        icon=region.icon,
        display=region.display.value,
    )


def _shape_mismatch(region: RegionDescriptor, data: object) -> NoReturn:
    """Reject stored region data that doesn't have the shape the schema declares."""
    logger.warning(
        "region_shape_mismatch",
        region_id=region.id,
        collection=region.collection,
        fields=len(region.fields),
        stored=type(data).__name__,
    )
    raise NotFoundError(
        "region",
        region.id,
        f"Stored data for region '{region.id}' does not match its declared shape",
    )


def region_to_model(
    region: RegionDescriptor,
    data: Optional[RegionData],
    registry: SchemaRegistry,
    factory: ContentFactory,
) -> RegionModel:
    """Build the editor model of one region.

    Single regions are treated as a collection of exactly one row, so both
    kinds go through the same row logic. Rows keep their stored order.

    Args:
        region: Region declared by the content type
        data: Stored region data (None if the post predates the region)
        registry: Type registry for field metadata
        factory: Supplies defaults for missing region data and fields

    Returns:
        RegionModel with one item per row

    Raises:
        NotFoundError: If a field type used by the region is not registered,
            or the stored data doesn't match the region's shape (a single
            value where a list is declared, a map where one field is
            declared, and so on)
    """
    if data is None:
        logger.debug("region_missing_from_post", region_id=region.id)
        data = factory.create_region(region)

    if region.collection != isinstance(data, list):
        _shape_mismatch(region, data)
    rows: list[RegionValue] = list(data) if region.collection else [data]
    metas = [_field_meta(field, registry) for field in region.fields]
    single_field = len(region.fields) == 1

    model = RegionModel(meta=_region_meta(region))
    for row in rows:
        item = RegionItemModel(title="")
        if not isinstance(row, BaseField if single_field else dict):
            _shape_mismatch(region, row)

        for field, meta in zip(region.fields, metas):
            meta = meta.model_copy(deep=True)

            if single_field:
                value = row
                meta.notify_change = True
                item.title = value.get_title() or ""
            else:
                value = row.get(field.id)
                if value is None:
                    value = factory.create_field(field)
                if region.list_title_field == field.id:
                    item.title = value.get_title() or ""
                    meta.notify_change = True

            item.fields.append(FieldModel(meta=meta, value=value))

        if not item.title.strip():
            item.title = EMPTY_TITLE
        model.items.append(item)

    return model


# ── Regions: model -> post ───────────────────────────────────────


def _item_value(item: RegionItemModel, field: FieldDescriptor, region_id: str) -> BaseField:
    for field_model in item.fields:
        if field_model.meta.id == field.id:
            return field_model.value
    raise NotFoundError("field", f"{region_id}.{field.id}")


def region_from_model(
    region: RegionDescriptor,
    model: Optional[RegionModel],
    regions: dict[str, RegionData],
) -> None:
    """Write one edited region back into a post's region map.

    Collection regions are rebuilt from the model's items in order. Single
    multi-field regions are merged into the existing field map entry by
    entry: keys the schema does not declare are kept.

    Args:
        region: Region declared by the content type
        model: Edited region (None if the model lacks it)
        regions: The post's region map, updated in place

    Raises:
        NotFoundError: If the region, a region item or a declared field is
            missing from the model
    """
    if model is None:
        raise NotFoundError("region", region.id)

    single_field = len(region.fields) == 1

    if region.collection:
        rows: list[RegionValue] = []
        for item in model.items:
            if single_field:
                rows.append(_item_value(item, region.fields[0], region.id))
            else:
                rows.append({field.id: _item_value(item, field, region.id) for field in region.fields})
        regions[region.id] = rows
        return

    if not model.items:
        raise NotFoundError("region_item", region.id)
    item = model.items[0]

    if single_field:
        regions[region.id] = _item_value(item, region.fields[0], region.id)
        return

    existing = regions.get(region.id)
    if not isinstance(existing, dict):
        existing = {}
    for field in region.fields:
        existing[field.id] = _item_value(item, field, region.id)
    regions[region.id] = existing


# ── Blocks: post -> model ────────────────────────────────────────


def _block_meta(block: Block, registry: SchemaRegistry) -> BlockMeta:
    info = registry.get_block_type(block.type)
    if info is None:
        logger.warning("block_type_not_registered", block_id=block.id, block_type=block.type)
        return BlockMeta(
            name=block.type,
            title=block.get_title(),
            component=MISSING_BLOCK_COMPONENT,
        )
    return BlockMeta(
        name=info.name,
        title=block.get_title(),
        icon=info.icon,
        component=info.component,
    )


def _group_to_model(group: BlockGroup, registry: SchemaRegistry) -> BlockGroupModel:
    info: Optional[BlockTypeInfo] = registry.get_block_type(group.type)
    if info is None:
        logger.warning("block_type_not_registered", block_id=group.id, block_type=group.type)
        meta = BlockMeta(name=group.type, component=MISSING_BLOCK_COMPONENT, is_group=True)
    else:
        meta = BlockMeta(
            name=info.name,
            icon=info.icon,
            component=GROUP_COMPONENTS[info.display],
            is_group=True,
        )

    model = BlockGroupModel(id=group.id, type=group.type, meta=meta)

    # Group-level fields are described by the type registered for their kind
    for field_id, value in group.fields.items():
        field_type = registry.get_field_type(value.kind)
        if field_type is None:
            raise NotFoundError("field_type", value.kind)
        model.fields.append(FieldModel(
            meta=FieldMeta(id=field_id, name=field_id, component=field_type.component),
            value=value,
        ))

    for index, child in enumerate(group.items):
        model.items.append(BlockItemModel(
            is_active=index == 0,
            meta=_block_meta(child, registry),
            value=child,
        ))
    return model


def blocks_to_model(blocks: list[AnyBlock], registry: SchemaRegistry) -> list[BlockNode]:
    """Build the editor block tree of a post, keeping block order."""
    nodes: list[BlockNode] = []
    for block in blocks:
        if isinstance(block, BlockGroup):
            nodes.append(_group_to_model(block, registry))
        else:
            nodes.append(BlockItemModel(meta=_block_meta(block, registry), value=block))
    return nodes


def editors_to_model(content_type: ContentTypeDescriptor) -> list[EditorModel]:
    """Custom editor tabs declared by a content type."""
    return [
        EditorModel(component=editor.component, icon=editor.icon, name=editor.title)
        for editor in content_type.custom_editors
    ]


# ── Blocks: model -> post ────────────────────────────────────────


def _group_from_model(
    node: BlockGroupModel,
    registry: SchemaRegistry,
    factory: ContentFactory,
) -> BlockGroup:
    """Rebuild a block group from its editor model.

    Raises:
        UnknownBlockTypeError: If the group type is not a registered group
        NotFoundError: If the model sets a field the group does not declare
    """
    info = registry.get_block_type(node.type)
    if info is None or not info.is_group:
        raise UnknownBlockTypeError(node.type)

    group = factory.create_block_group(info)
    group.id = node.id
    group.type = node.type

    for field_model in node.fields:
        if field_model.meta.id not in group.fields:
            raise NotFoundError("field", f"{node.type}.{field_model.meta.id}")
        group.fields[field_model.meta.id] = field_model.value

    for item in node.items:
        group.items.append(item.value)
    return group


def blocks_from_model(
    nodes: list[BlockNode],
    registry: SchemaRegistry,
    factory: ContentFactory,
) -> list[AnyBlock]:
    """Rebuild a post's block list from the editor tree.

    The result replaces the post's blocks entirely. Groups whose type is no
    longer registered are dropped; every other block is kept in order.
    """
    blocks: list[AnyBlock] = []
    for node in nodes:
        if isinstance(node, BlockGroupModel):
            try:
                blocks.append(_group_from_model(node, registry, factory))
            except UnknownBlockTypeError as e:
                logger.warning(
                    "block_group_dropped",
                    block_id=node.id,
                    block_type=e.block_type,
                )
        else:
            blocks.append(node.value)
    return blocks
