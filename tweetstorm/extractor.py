"""Turn a content block into the plain text it contributes to a tweet."""

from typing import Optional

from tweetstorm.blocks import ContentBlock
from tweetstorm.markup import strip_markup
from tweetstorm.registry import DEFAULT_REGISTRY, BlockRegistry, MultilineTemplate


def extract_text(block: ContentBlock, registry: Optional[BlockRegistry] = None) -> str:
    """Return the tweetable plain text for ``block``.

    Each literal and attribute is stripped on its own, the same way the
    boundary locator measures them, so markup left unbalanced in one
    attribute cannot swallow text from the next.
    """
    if registry is None:
        registry = DEFAULT_REGISTRY
    spec = registry.get(block.name)
    if spec is None:
        return ""

    if isinstance(spec, MultilineTemplate):
        lines = block.split_attributes.get(spec.attribute, ())
        return "\n".join(
            "".join(strip_markup(line if part.is_placeholder else part.text) for part in spec.parts)
            for line in lines
        )

    return "".join(
        strip_markup(block.attributes.get(part.attribute, "") if part.is_placeholder else part.text)
        for part in spec.parts
    )
