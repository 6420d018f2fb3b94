"""Block types that can be turned into tweets.

Each supported block type maps to a template. Templates are parsed once,
when the entry is created, so a malformed template fails at load time.
"""

import re
from dataclasses import dataclass, field
from typing import Iterator, Mapping, Optional, Union

from tweetstorm.errors import ConfigurationError

PLACEHOLDER_RE = re.compile(r"{{(\w+)}}")
LINE_PLACEHOLDER = "line"


@dataclass(frozen=True)
class TemplatePart:
    """A literal run of template text, or a placeholder when ``attribute`` is set."""

    text: str
    attribute: Optional[str] = None

    @property
    def is_placeholder(self) -> bool:
        return self.attribute is not None


def parse_template(template: str) -> tuple[TemplatePart, ...]:
    """Split a template into literal and placeholder parts, in order."""
    parts = []
    pos = 0
    for match in PLACEHOLDER_RE.finditer(template):
        if match.start() > pos:
            parts.append(TemplatePart(template[pos:match.start()]))
        parts.append(TemplatePart(match.group(0), match.group(1)))
        pos = match.end()
    if pos < len(template):
        parts.append(TemplatePart(template[pos:]))
    return tuple(parts)


@dataclass(frozen=True)
class TextTemplate:
    """A block whose text is built from single-value attributes."""

    content_attributes: tuple[str, ...]
    template: str
    parts: tuple[TemplatePart, ...] = field(init=False, repr=False, compare=False)

    kind = "text"

    def __post_init__(self):
        object.__setattr__(self, "content_attributes", tuple(self.content_attributes))
        parts = parse_template(self.template)
        for part in parts:
            if part.is_placeholder and part.attribute not in self.content_attributes:
                raise ConfigurationError(
                    f"Template {self.template!r} uses {{{{{part.attribute}}}}}, "
                    f"which is not one of {list(self.content_attributes)}"
                )
        object.__setattr__(self, "parts", parts)


@dataclass(frozen=True)
class MultilineTemplate:
    """A block rendered one template line per entry of a multi-line attribute."""

    attribute: str
    template: str
    parts: tuple[TemplatePart, ...] = field(init=False, repr=False, compare=False)

    kind = "multiline"

    def __post_init__(self):
        parts = parse_template(self.template)
        placeholders = [part.attribute for part in parts if part.is_placeholder]
        if placeholders != [LINE_PLACEHOLDER]:
            raise ConfigurationError(
                f"Multiline template {self.template!r} must contain exactly one "
                f"{{{{{LINE_PLACEHOLDER}}}}} placeholder"
            )
        object.__setattr__(self, "parts", parts)

    @property
    def content_attributes(self) -> tuple[str, ...]:
        return (self.attribute,)


BlockTypeSpec = Union[TextTemplate, MultilineTemplate]


def spec_from_definition(definition: Mapping) -> BlockTypeSpec:
    """Build a spec from the plain-dict form (``type``, ``content_attributes``, ``template``)."""
    kind = definition.get("type")
    attributes = tuple(definition.get("content_attributes") or ())
    template = definition.get("template")
    if not isinstance(template, str):
        raise ConfigurationError("Block definition needs a string template")

    if kind == "text":
        return TextTemplate(attributes, template)
    if kind == "multiline":
        if len(attributes) != 1:
            raise ConfigurationError(
                f"Multiline blocks take exactly one content attribute, got {list(attributes)}"
            )
        return MultilineTemplate(attributes[0], template)
    raise ConfigurationError(f"Unknown block definition type: {kind!r}")


class BlockRegistry:
    """Lookup table from block name (e.g. ``core/paragraph``) to its spec."""

    def __init__(self, specs: Optional[Mapping[str, BlockTypeSpec]] = None):
        self._specs: dict[str, BlockTypeSpec] = {}
        for name, spec in (specs or {}).items():
            self.register(name, spec)

    def register(self, name: str, spec: Union[BlockTypeSpec, Mapping]) -> BlockTypeSpec:
        if isinstance(spec, Mapping):
            spec = spec_from_definition(spec)
        if not isinstance(spec, (TextTemplate, MultilineTemplate)):
            raise ConfigurationError(f"Unsupported spec for {name}: {spec!r}")
        self._specs[name] = spec
        return spec

    def get(self, name: str) -> Optional[BlockTypeSpec]:
        return self._specs.get(name)

    def copy(self) -> "BlockRegistry":
        return BlockRegistry(self._specs)

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[str]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)


DEFAULT_REGISTRY = BlockRegistry({
    "core/heading": TextTemplate(("content",), "{{content}}"),
    "core/list": MultilineTemplate("values", "- {{line}}"),
    "core/paragraph": TextTemplate(("content",), "{{content}}"),
    "core/quote": TextTemplate(("value", "citation"), "“{{value}}” – {{citation}}"),
    "core/verse": TextTemplate(("content",), "{{content}}"),
})
