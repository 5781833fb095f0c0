"""Generic tag directories and the per-format directories built on them."""

from typing import Any, ClassVar

from pydantic import BaseModel, Field

from .box import BoxInfo
from .tags import HEIF_TAG_NAMES, ICC_TAG_NAMES


class Tag(BaseModel):
    """A single tag with its display name, description and typed value."""

    tag_type: int
    name: str
    description: str
    value: Any = None


class Directory(BaseModel):
    """An ordered collection of tags plus non-fatal errors.

    Subclasses provide ``name`` and the ``tag_names`` lookup used to label
    tags as they are set.
    """

    name: ClassVar[str] = "Directory"
    tag_names: ClassVar[dict[int, str]] = {}

    tags: dict[int, Tag] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)

    @classmethod
    def get_tag_name(cls, tag_type: int) -> str:
        """Return the display name for a tag identifier."""
        return cls.tag_names.get(int(tag_type), f"Unknown tag (0x{int(tag_type):04x})")

    def set(self, tag_type: int, description: str, value: Any = None) -> None:
        """Set a tag, replacing any existing value."""
        key = int(tag_type)
        self.tags[key] = Tag(
            tag_type=key,
            name=self.get_tag_name(key),
            description=description,
            value=value,
        )

    def get(self, tag_type: int) -> Tag | None:
        return self.tags.get(int(tag_type))

    def get_description(self, tag_type: int) -> str | None:
        tag = self.get(tag_type)
        return tag.description if tag else None

    def get_value(self, tag_type: int) -> Any:
        tag = self.get(tag_type)
        return tag.value if tag else None

    def contains(self, tag_type: int) -> bool:
        return int(tag_type) in self.tags

    def add_error(self, message: str) -> None:
        """Record a non-fatal problem."""
        self.errors.append(message)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def descriptions_by_name(self) -> dict[str, str]:
        """Return ``{tag name: description}`` in insertion order."""
        return {tag.name: tag.description for tag in self.tags.values()}


class HeifDirectory(Directory):
    """Container-level values and the inventory of boxes seen."""

    name: ClassVar[str] = "HEIF"
    tag_names: ClassVar[dict[int, str]] = HEIF_TAG_NAMES

    boxes: list[BoxInfo] = Field(default_factory=list)


class IccDirectory(Directory):
    """Fields of an embedded ICC colour profile."""

    name: ClassVar[str] = "ICC Profile"
    tag_names: ClassVar[dict[int, str]] = ICC_TAG_NAMES
