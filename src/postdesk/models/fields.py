"""Field value models.

A field value is one typed value stored in a post region or on a block.
The set of kinds is closed; values are discriminated by their ``kind`` so a
serialized record can be validated back into the right concrete model.

Every kind knows how to describe itself with a short display title, which
the editor uses for region list rows and block headings.
"""

import re
from datetime import date
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


TITLE_MAX_LENGTH = 40

_TAG_RE = re.compile(r"<[^>]+>")
_MARKDOWN_RE = re.compile(r"[#*_`>\[\]]")


def _short_title(text: Optional[str]) -> Optional[str]:
    """Collapse whitespace and cut long text down to a display title."""
    if text is None:
        return None
    title = " ".join(text.split())
    if not title:
        return None
    if len(title) > TITLE_MAX_LENGTH:
        title = title[:TITLE_MAX_LENGTH] + "..."
    return title


class BaseField(BaseModel):
    """Common behaviour for all field kinds."""

    model_config = {"frozen": False}

    def get_title(self) -> Optional[str]:
        """Return a short display title, or None if the value has none."""
        return None


class StringField(BaseField):
    """Single line of plain text."""

    kind: Literal["string"] = "string"
    value: Optional[str] = None

    def get_title(self) -> Optional[str]:
        return _short_title(self.value)


class TextField(BaseField):
    """Multi-line plain text."""

    kind: Literal["text"] = "text"
    value: Optional[str] = None

    def get_title(self) -> Optional[str]:
        return _short_title(self.value)


class HtmlField(BaseField):
    """Rich text stored as HTML. Titles are taken from the text content."""

    kind: Literal["html"] = "html"
    value: Optional[str] = None

    def get_title(self) -> Optional[str]:
        if self.value is None:
            return None
        return _short_title(_TAG_RE.sub(" ", self.value))


class MarkdownField(BaseField):
    """Rich text stored as markdown."""

    kind: Literal["markdown"] = "markdown"
    value: Optional[str] = None

    def get_title(self) -> Optional[str]:
        if self.value is None:
            return None
        return _short_title(_MARKDOWN_RE.sub("", self.value))


class NumberField(BaseField):
    """Whole number."""

    kind: Literal["number"] = "number"
    value: Optional[int] = None

    def get_title(self) -> Optional[str]:
        return None if self.value is None else str(self.value)


class CheckBoxField(BaseField):
    """Boolean toggle. Has no title."""

    kind: Literal["checkbox"] = "checkbox"
    value: bool = False


class DateField(BaseField):
    """Calendar date."""

    kind: Literal["date"] = "date"
    value: Optional[date] = None

    def get_title(self) -> Optional[str]:
        return None if self.value is None else self.value.isoformat()


class SelectField(BaseField):
    """One option out of the option set of its registered field type.

    Only the integer option value is stored; labels live in the registry.
    """

    kind: Literal["select"] = "select"
    value: Optional[int] = None


class ImageField(BaseField):
    """Reference to a media item."""

    kind: Literal["image"] = "image"
    media_id: Optional[str] = None
    filename: Optional[str] = None

    def get_title(self) -> Optional[str]:
        return _short_title(self.filename)


FieldValue = Annotated[
    Union[
        StringField,
        TextField,
        HtmlField,
        MarkdownField,
        NumberField,
        CheckBoxField,
        DateField,
        SelectField,
        ImageField,
    ],
    Field(discriminator="kind"),
]

FIELD_KINDS: dict[str, type[BaseField]] = {
    "string": StringField,
    "text": TextField,
    "html": HtmlField,
    "markdown": MarkdownField,
    "number": NumberField,
    "checkbox": CheckBoxField,
    "date": DateField,
    "select": SelectField,
    "image": ImageField,
}


def create_field(kind: str) -> BaseField:
    """Create an empty field value of the given kind.

    Raises:
        KeyError: If the kind is not one of FIELD_KINDS
    """
    return FIELD_KINDS[kind]()
