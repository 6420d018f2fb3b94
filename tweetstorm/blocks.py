"""Data model shared by the extractor, boundary locator and segmenter."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

from tweetstorm.errors import InputError


@dataclass(frozen=True)
class ContentBlock:
    """One block from the editor, as handed to the segmenter.

    ``split_attributes`` holds multi-line attributes already split into
    lines (list items), keyed by attribute name.
    """

    client_id: str
    name: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    split_attributes: Mapping[str, Sequence[str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ContentBlock":
        """Build a block from the editor's JSON shape (``clientId``, ``name``, ...)."""
        if not isinstance(data, Mapping):
            raise InputError("Block must be an object")

        client_id = data.get("clientId")
        name = data.get("name")
        if not isinstance(client_id, str) or not client_id:
            raise InputError("Block is missing a clientId")
        if not isinstance(name, str) or not name:
            raise InputError(f"Block {client_id} is missing a name")

        raw_attributes = data.get("attributes") or {}
        if not isinstance(raw_attributes, Mapping):
            raise InputError(f"Block {client_id}: attributes must be an object")
        raw_split_attributes = data.get("splitAttributes") or {}
        if not isinstance(raw_split_attributes, Mapping):
            raise InputError(f"Block {client_id}: splitAttributes must be an object")

        attributes = {}
        for key, value in raw_attributes.items():
            # Non-text attributes (alignment, levels, ...) never reach a template.
            if isinstance(value, str):
                attributes[key] = value

        split_attributes = {}
        for key, lines in raw_split_attributes.items():
            if not isinstance(lines, (list, tuple)) or not all(isinstance(line, str) for line in lines):
                raise InputError(f"Block {client_id}: splitAttributes.{key} must be a list of strings")
            split_attributes[key] = tuple(lines)

        return cls(client_id, name, attributes, split_attributes)

    def to_dict(self) -> dict:
        data = {
            "clientId": self.client_id,
            "name": self.name,
            "attributes": dict(self.attributes),
        }
        if self.split_attributes:
            data["splitAttributes"] = {key: list(lines) for key, lines in self.split_attributes.items()}
        return data


@dataclass(frozen=True)
class Boundary:
    """Where a forced split falls inside the source attribute ``container``."""

    start: int
    end: int
    container: str

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end, "container": self.container}


@dataclass
class Tweet:
    """One chunk of segmented output."""

    blocks: list[ContentBlock]
    content: str
    current: bool = False
    boundaries: list[Boundary] = field(default_factory=list)

    @property
    def client_ids(self) -> list[str]:
        return [block.client_id for block in self.blocks]

    def to_dict(self) -> dict:
        return {
            "blocks": [block.to_dict() for block in self.blocks],
            "boundaries": [boundary.to_dict() for boundary in self.boundaries],
            "current": self.current,
            "content": self.content,
        }


def parse_blocks(payload: Optional[Sequence[Mapping[str, Any]]]) -> list[ContentBlock]:
    """Convert a list of editor block dicts into ``ContentBlock`` objects."""
    if payload is None:
        return []
    if not isinstance(payload, (list, tuple)):
        raise InputError("blocks must be a list")
    return [ContentBlock.from_dict(item) for item in payload]
