"""Map an offset in a block's generated text back to the attribute it came from."""

import logging
from typing import Optional

from tweetstorm.blocks import Boundary, ContentBlock
from tweetstorm.errors import ConfigurationError, InputError
from tweetstorm.markup import StrippedText, strip_markup, strip_with_offsets
from tweetstorm.registry import DEFAULT_REGISTRY, BlockRegistry, MultilineTemplate

logger = logging.getLogger(__name__)


def _boundary_at(container: str, stripped: StrippedText, index: int) -> Boundary:
    """Boundary covering plain-text character ``index`` of an attribute."""
    if not stripped.spans:
        return Boundary(0, 0, container)
    index = max(0, min(index, len(stripped.spans) - 1))
    start, end = stripped.raw_span(index)
    return Boundary(start, end, container)


def locate_boundary(
    block: ContentBlock,
    total_offset: int,
    registry: Optional[BlockRegistry] = None,
) -> Boundary:
    """Find which attribute holds the character just before ``total_offset``.

    ``total_offset`` counts characters into the block's extracted text. The
    returned boundary covers that character, with ``start``/``end`` given
    as offsets into the raw attribute value (markup included), which is
    what the editor needs to highlight the split.

    An offset that lands inside literal template text is anchored to the
    last character of the preceding attribute, or to the first character of
    the following attribute when none precedes it.
    """
    if registry is None:
        registry = DEFAULT_REGISTRY
    spec = registry.get(block.name)
    if spec is None:
        raise ConfigurationError(f"No template registered for block type {block.name!r}")
    if isinstance(spec, MultilineTemplate):
        raise ConfigurationError(
            f"Cannot locate boundaries in multiline block type {block.name!r}"
        )
    if total_offset < 1:
        raise InputError(f"Boundary offset must be positive, got {total_offset}")

    running = 0
    previous = None
    pending_literal = False
    for part in spec.parts:
        if not part.is_placeholder:
            length = len(strip_markup(part.text))
            if running < total_offset <= running + length:
                pending_literal = True
                if previous is not None:
                    container, stripped = previous
                    logger.debug(
                        "Offset %d of %s falls in template literal, anchoring to %s",
                        total_offset, block.client_id, container,
                    )
                    return _boundary_at(container, stripped, len(stripped.text) - 1)
            running += length
            continue

        stripped = strip_with_offsets(block.attributes.get(part.attribute, ""))
        if pending_literal:
            return _boundary_at(part.attribute, stripped, 0)

        length = len(stripped.text)
        if running + length >= total_offset:
            return _boundary_at(part.attribute, stripped, total_offset - running - 1)
        running += length
        previous = (part.attribute, stripped)

    raise InputError(
        f"Offset {total_offset} is outside the {running} characters of block {block.client_id}"
    )
