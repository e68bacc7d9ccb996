"""Unit tests for region and block transforms."""

import pytest

from postdesk.models.blocks import Block, BlockGroup
from postdesk.models.content_type import FieldDescriptor, RegionDescriptor
from postdesk.models.edit_model import (
    EMPTY_TITLE,
    BlockGroupModel,
    BlockItemModel,
    BlockMeta,
    FieldMeta,
    FieldModel,
    RegionItemModel,
    RegionMeta,
    RegionModel,
)
from postdesk.models.fields import HtmlField, StringField, TextField
from postdesk.services.exceptions import NotFoundError
from postdesk.services.transform import (
    blocks_from_model,
    blocks_to_model,
    editors_to_model,
    region_from_model,
    region_to_model,
)


def _region(registry, region_id):
    return registry.get_content_type("article").get_region(region_id)


class TestRegionToModel:
    """Test post region data -> region model."""

    def test_single_region_has_one_item(self, registry, factory, article):
        """Test non-collection regions always produce exactly one item."""
        for region_id in ("hero", "intro"):
            model = region_to_model(
                _region(registry, region_id), article.regions[region_id], registry, factory
            )
            assert len(model.items) == 1

    def test_collection_keeps_row_order(self, registry, factory, article):
        """Test collection rows map one-to-one, in order."""
        model = region_to_model(_region(registry, "links"), article.regions["links"], registry, factory)

        assert len(model.items) == 3
        assert [item.fields[0].value.value for item in model.items] == [
            "https://example.com/a",
            "https://example.com/b",
            None,
        ]

    def test_single_field_region_titles_and_notifies(self, registry, factory, article):
        """Test single-field rows are titled by their value and notify changes."""
        model = region_to_model(_region(registry, "links"), article.regions["links"], registry, factory)

        assert model.items[0].title == "https://example.com/a"
        assert model.items[0].fields[0].meta.notify_change is True
        assert model.items[0].fields[0].meta.id == "default"

    def test_missing_title_uses_placeholder(self, registry, factory, article):
        """Test rows without a title get the '...' sentinel."""
        links = region_to_model(_region(registry, "links"), article.regions["links"], registry, factory)
        facts = region_to_model(_region(registry, "facts"), article.regions["facts"], registry, factory)

        assert links.items[2].title == EMPTY_TITLE
        assert facts.items[1].title == EMPTY_TITLE
        assert all(item.title for item in links.items + facts.items)

    def test_multi_field_list_title_field(self, registry, factory, article):
        """Test the list title field titles the row and is the only notifying field."""
        model = region_to_model(_region(registry, "facts"), article.regions["facts"], registry, factory)

        item = model.items[0]
        assert item.title == "Founded"
        assert [f.meta.id for f in item.fields] == ["label", "detail"]
        assert [f.meta.notify_change for f in item.fields] == [True, False]
        assert item.fields[1].value.value == "1999"

    def test_field_meta_from_descriptor_and_type(self, registry, factory, article):
        """Test field metadata combines the descriptor and the field type."""
        model = region_to_model(_region(registry, "hero"), article.regions["hero"], registry, factory)

        heading, image, priority = model.items[0].fields
        assert heading.meta.name == "Heading"
        assert heading.meta.component == "string-field"
        assert image.meta.is_half_width is True
        assert image.meta.component == "image-field"
        assert priority.meta.options == {1: "Low", 2: "Normal", 3: "High"}
        assert heading.meta.options == {}

    def test_region_meta(self, registry, factory, article):
        """Test region metadata is copied from the descriptor."""
        hero = region_to_model(_region(registry, "hero"), article.regions["hero"], registry, factory)
        links = region_to_model(_region(registry, "links"), article.regions["links"], registry, factory)

        assert hero.meta.id == "hero"
        assert hero.meta.name == "Hero"
        assert hero.meta.display == "horizontal"
        assert hero.meta.is_collection is False
        assert links.meta.is_collection is True
        assert links.meta.placeholder == "New link"

    def test_empty_collection(self, registry, factory):
        """Test empty collections produce no items."""
        model = region_to_model(_region(registry, "facts"), [], registry, factory)

        assert model.items == []

    def test_missing_region_data_uses_defaults(self, registry, factory):
        """Test posts saved before a region existed still render it."""
        model = region_to_model(_region(registry, "hero"), None, registry, factory)

        assert len(model.items) == 1
        assert model.items[0].title == EMPTY_TITLE
        assert model.items[0].fields[0].value == StringField()

    def test_missing_row_field_uses_default(self, registry, factory):
        """Test a row without a declared field gets an empty value."""
        rows = [{"label": StringField(value="Only label")}]

        model = region_to_model(_region(registry, "facts"), rows, registry, factory)

        assert model.items[0].fields[1].value == TextField()

    def test_single_value_under_collection_region(self, registry, factory):
        """Test a region that became a collection rejects its old single value."""
        with pytest.raises(NotFoundError) as exc_info:
            region_to_model(_region(registry, "links"), StringField(value="x"), registry, factory)

        assert exc_info.value.kind == "region"
        assert exc_info.value.identifier == "links"

    def test_map_under_single_field_region(self, registry, factory):
        """Test a field map stored where one field is declared is rejected."""
        stored = {"default": TextField(value="a"), "extra": TextField(value="b")}

        with pytest.raises(NotFoundError) as exc_info:
            region_to_model(_region(registry, "intro"), stored, registry, factory)

        assert exc_info.value.identifier == "intro"

    def test_map_under_multi_field_collection(self, registry, factory):
        """Test a single field map stored under a collection is not split into rows."""
        stored = {"label": StringField(value="Founded"), "detail": TextField(value="1999")}

        with pytest.raises(NotFoundError):
            region_to_model(_region(registry, "facts"), stored, registry, factory)

    def test_list_under_single_region(self, registry, factory):
        """Test a list stored where a single region is declared is rejected."""
        with pytest.raises(NotFoundError):
            region_to_model(_region(registry, "intro"), [TextField(value="a")], registry, factory)

    def test_value_row_in_multi_field_collection(self, registry, factory):
        """Test collection rows must be field maps when several fields are declared."""
        rows = [{"label": StringField(value="Ok")}, StringField(value="stray")]

        with pytest.raises(NotFoundError):
            region_to_model(_region(registry, "facts"), rows, registry, factory)

    def test_unregistered_field_type(self, registry, factory):
        """Test regions using unknown field types are rejected."""
        region = RegionDescriptor(id="tint", fields=[FieldDescriptor(id="default", type="color")])

        with pytest.raises(NotFoundError):
            region_to_model(region, StringField(), registry, factory)


class TestRegionFromModel:
    """Test region model -> post region data."""

    def _model(self, registry, factory, article, region_id):
        return region_to_model(
            _region(registry, region_id), article.regions[region_id], registry, factory
        )

    def test_collection_rebuilt_in_order(self, registry, factory, article):
        """Test collection rows are written back in the edited order."""
        model = self._model(registry, factory, article, "links")
        model.items.reverse()
        model.items.pop(0)
        regions = {"links": [StringField(value="stale")]}

        region_from_model(_region(registry, "links"), model, regions)

        assert [f.value for f in regions["links"]] == ["https://example.com/b", "https://example.com/a"]

    def test_multi_field_collection_rows_are_maps(self, registry, factory, article):
        """Test multi-field rows are written as field id -> value maps."""
        model = self._model(registry, factory, article, "facts")
        regions = {}

        region_from_model(_region(registry, "facts"), model, regions)

        assert regions["facts"] == article.regions["facts"]

    def test_single_field_region_assigned(self, registry, factory, article):
        """Test single-field regions take the field value directly."""
        model = self._model(registry, factory, article, "intro")
        model.items[0].fields[0].value = TextField(value="Edited")
        regions = {"intro": TextField(value="Old")}

        region_from_model(_region(registry, "intro"), model, regions)

        assert regions["intro"] == TextField(value="Edited")

    def test_multi_field_single_region_merges(self, registry, factory, article):
        """Test single multi-field regions keep keys the schema doesn't declare."""
        model = self._model(registry, factory, article, "hero")
        model.items[0].fields[0].value = StringField(value="New heading")
        extra = StringField(value="injected by an extension")
        regions = {"hero": {"heading": StringField(value="Old"), "tracking": extra}}

        region_from_model(_region(registry, "hero"), model, regions)

        assert regions["hero"]["heading"].value == "New heading"
        assert regions["hero"]["tracking"] is extra
        assert set(regions["hero"]) == {"heading", "image", "priority", "tracking"}

    def test_multi_field_single_region_without_existing_map(self, registry, factory, article):
        """Test a missing region slot starts from an empty map."""
        model = self._model(registry, factory, article, "hero")
        regions = {}

        region_from_model(_region(registry, "hero"), model, regions)

        assert set(regions["hero"]) == {"heading", "image", "priority"}

    def test_missing_region_model(self, registry):
        """Test a model without a declared region is rejected."""
        with pytest.raises(NotFoundError) as exc_info:
            region_from_model(_region(registry, "hero"), None, {})

        assert exc_info.value.kind == "region"

    def test_missing_field_in_item(self, registry):
        """Test an item without a declared field is rejected."""
        model = RegionModel(
            meta=RegionMeta(id="facts", is_collection=True),
            items=[RegionItemModel(fields=[FieldModel(
                meta=FieldMeta(id="label", component="string-field"),
                value=StringField(value="x"),
            )])],
        )

        with pytest.raises(NotFoundError) as exc_info:
            region_from_model(_region(registry, "facts"), model, {})

        assert exc_info.value.identifier == "facts.detail"

    def test_single_region_without_item(self, registry):
        """Test a single region model with no item is rejected."""
        model = RegionModel(meta=RegionMeta(id="intro"))

        with pytest.raises(NotFoundError):
            region_from_model(_region(registry, "intro"), model, {})


class TestBlocksToModel:
    """Test post blocks -> block tree."""

    def test_block_order_and_kinds(self, registry, article):
        """Test blocks keep order and groups become group nodes."""
        nodes = blocks_to_model(article.blocks, registry)

        assert [type(n) for n in nodes] == [BlockItemModel, BlockGroupModel, BlockItemModel]

    def test_simple_block_meta(self, registry, article):
        """Test simple block metadata comes from the block type and block title."""
        node = blocks_to_model(article.blocks, registry)[0]

        assert node.meta.name == "Content"
        assert node.meta.title == "First paragraph"
        assert node.meta.icon == "fas fa-paragraph"
        assert node.meta.component == "html-block"
        assert node.value is article.blocks[0]

    def test_group_node(self, registry, article):
        """Test groups carry their fields and children, first child active."""
        group = blocks_to_model(article.blocks, registry)[1]

        assert group.id == "g-1"
        assert group.type == "columns"
        assert group.meta.is_group is True
        assert group.meta.component == "block-group-horizontal"
        assert [f.meta.id for f in group.fields] == ["heading"]
        assert group.fields[0].meta.component == "string-field"
        assert [item.is_active for item in group.items] == [True, False]
        assert group.items[1].meta.title == "Ada"

    @pytest.mark.parametrize("block_type,component", [
        ("gallery", "block-group"),
        ("columns", "block-group-horizontal"),
    ])
    def test_group_component_by_display(self, registry, block_type, component):
        """Test the group component follows the display mode."""
        nodes = blocks_to_model([BlockGroup(type=block_type)], registry)

        assert nodes[0].meta.component == component

    def test_vertical_group_component(self, registry):
        """Test vertical groups use the vertical component."""
        registry.load({"block_types": [
            {"type": "stack", "name": "Stack", "is_group": True, "display": "vertical"},
        ]})

        nodes = blocks_to_model([BlockGroup(type="stack")], registry)

        assert nodes[0].meta.component == "block-group-vertical"

    def test_unregistered_block_type(self, registry):
        """Test unknown block types still render with fallback meta."""
        nodes = blocks_to_model([Block(type="video")], registry)

        assert nodes[0].meta.name == "video"
        assert nodes[0].meta.component == "missing-block"

    def test_custom_editors(self, registry):
        """Test custom editors are listed for display."""
        editors = editors_to_model(registry.get_content_type("article"))

        assert len(editors) == 1
        assert editors[0].component == "seo-editor"
        assert editors[0].name == "SEO"
        assert editors[0].icon == "fas fa-search"


class TestBlocksFromModel:
    """Test block tree -> post blocks."""

    def test_round_trip_preserves_structure(self, registry, factory, article):
        """Test blocks survive a forward and inverse transform."""
        nodes = blocks_to_model(article.blocks, registry)

        blocks = blocks_from_model(nodes, registry, factory)

        assert blocks == article.blocks

    def test_group_fields_set_by_id(self, registry, factory):
        """Test edited group fields are written to the new group."""
        node = BlockGroupModel(
            id="g-9",
            type="columns",
            meta=BlockMeta(name="Columns", component="block-group-horizontal", is_group=True),
            fields=[FieldModel(
                meta=FieldMeta(id="heading", component="string-field"),
                value=StringField(value="Edited"),
            )],
            items=[BlockItemModel(
                meta=BlockMeta(name="Content", component="html-block"),
                value=Block(type="html", fields={"body": HtmlField(value="x")}),
            )],
        )

        blocks = blocks_from_model([node], registry, factory)

        assert blocks[0].id == "g-9"
        assert blocks[0].fields["heading"].value == "Edited"
        assert len(blocks[0].items) == 1

    def test_unknown_group_type_dropped(self, registry, factory, article):
        """Test a group with an unregistered type is dropped alone."""
        nodes = blocks_to_model(article.blocks, registry)
        nodes[1].type = "carousel"

        blocks = blocks_from_model(nodes, registry, factory)

        assert [b.id for b in blocks] == ["b-1", "b-4"]

    def test_undeclared_group_field(self, registry, factory):
        """Test setting a field the group type doesn't declare is rejected."""
        node = BlockGroupModel(
            id="g-9",
            type="gallery",
            meta=BlockMeta(name="Gallery", component="block-group", is_group=True),
            fields=[FieldModel(
                meta=FieldMeta(id="heading", component="string-field"),
                value=StringField(value="Nope"),
            )],
        )

        with pytest.raises(NotFoundError):
            blocks_from_model([node], registry, factory)
