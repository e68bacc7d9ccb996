"""Type registry for content types, field types and block types.

The registry is populated once at startup (programmatically or from a YAML
schema file) and then only read. Lookups return None for unknown ids;
callers decide whether that is an error.

Schema file format:

    field_types:
      - type: priority
        kind: select
        component: select-field
        options: {1: Low, 2: Normal, 3: High}

    block_types:
      - type: html
        name: Content
        icon: fas fa-paragraph
        component: html-block
        fields: [{id: body, type: html}]
      - type: columns
        name: Columns
        is_group: true
        display: horizontal

    content_types:
      - id: article
        title: Article
        regions:
          - id: hero
            fields: [{id: heading, type: string}, {id: image, type: image}]
            list_title_field: heading
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from postdesk.models.content_type import BlockTypeInfo, ContentTypeDescriptor, FieldTypeInfo
from postdesk.models.fields import FIELD_KINDS
from postdesk.utils.logging import get_logger


logger = get_logger(__name__)


BUILTIN_FIELD_TYPES = [
    FieldTypeInfo(type="string", kind="string", component="string-field"),
    FieldTypeInfo(type="text", kind="text", component="text-field"),
    FieldTypeInfo(type="html", kind="html", component="html-field"),
    FieldTypeInfo(type="markdown", kind="markdown", component="markdown-field"),
    FieldTypeInfo(type="number", kind="number", component="number-field"),
    FieldTypeInfo(type="checkbox", kind="checkbox", component="checkbox-field"),
    FieldTypeInfo(type="date", kind="date", component="date-field"),
    FieldTypeInfo(type="select", kind="select", component="select-field", options={}),
    FieldTypeInfo(type="image", kind="image", component="image-field"),
]


class _SchemaFile(BaseModel):
    """Internal wrapper for YAML schema validation."""

    field_types: list[FieldTypeInfo] = Field(default_factory=list)
    block_types: list[BlockTypeInfo] = Field(default_factory=list)
    content_types: list[ContentTypeDescriptor] = Field(default_factory=list)


class SchemaRegistry:
    """Read-mostly lookup of content, field and block types.

    Built-in field kinds are registered under their kind name, so a field
    value can always be mapped back to a field type by ``value.kind``.
    """

    def __init__(self) -> None:
        self._content_types: dict[str, ContentTypeDescriptor] = {}
        self._field_types: dict[str, FieldTypeInfo] = {}
        self._block_types: dict[str, BlockTypeInfo] = {}

        for info in BUILTIN_FIELD_TYPES:
            self.register_field_type(info)

    # ── Registration ─────────────────────────────────────────────

    def register_field_type(self, info: FieldTypeInfo) -> None:
        """Register (or replace) a field type.

        Raises:
            ValueError: If the field kind is unknown
        """
        if info.kind not in FIELD_KINDS:
            raise ValueError(f"Unknown field kind '{info.kind}' for field type '{info.type}'")
        self._field_types[info.type] = info

    def register_block_type(self, info: BlockTypeInfo) -> None:
        """Register (or replace) a block type."""
        self._block_types[info.type] = info

    def register_content_type(self, descriptor: ContentTypeDescriptor) -> None:
        """Register (or replace) a content type.

        Raises:
            ValueError: If a region's list title field is not one of its fields
        """
        for region in descriptor.regions:
            if region.list_title_field is not None:
                field_ids = [f.id for f in region.fields]
                if region.list_title_field not in field_ids:
                    raise ValueError(
                        f"Region '{region.id}' of content type '{descriptor.id}' uses "
                        f"unknown list title field '{region.list_title_field}'"
                    )
        self._content_types[descriptor.id] = descriptor

    # ── Lookups ──────────────────────────────────────────────────

    def get_content_type(self, type_id: str) -> Optional[ContentTypeDescriptor]:
        """Return the content type with this id, or None."""
        return self._content_types.get(type_id)

    def get_field_type(self, field_type: str) -> Optional[FieldTypeInfo]:
        """Return the field type with this id, or None."""
        return self._field_types.get(field_type)

    def get_block_type(self, block_type: str) -> Optional[BlockTypeInfo]:
        """Return the block type with this id, or None."""
        return self._block_types.get(block_type)

    @property
    def content_types(self) -> list[ContentTypeDescriptor]:
        """All content types in registration order."""
        return list(self._content_types.values())

    # ── Loading ──────────────────────────────────────────────────

    def load(self, data: dict) -> None:
        """Register every type declared in a parsed schema document.

        Field types are registered before block and content types.

        Raises:
            ValueError: If the document is invalid
        """
        schema = _SchemaFile.model_validate(data)
        for info in schema.field_types:
            self.register_field_type(info)
        for block_info in schema.block_types:
            self.register_block_type(block_info)
        for descriptor in schema.content_types:
            self.register_content_type(descriptor)

        logger.debug(
            "schema_loaded",
            field_types=len(schema.field_types),
            block_types=len(schema.block_types),
            content_types=len(schema.content_types),
        )

    @classmethod
    def from_yaml(cls, path: Path) -> "SchemaRegistry":
        """Build a registry from a YAML schema file.

        Args:
            path: Path to schema file

        Returns:
            Populated SchemaRegistry

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the schema is invalid
        """
        logger.info("schema_loading", path=str(path))
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        registry = cls()
        registry.load(data)
        return registry
