"""Tweetstorm segmenter.

Groups content blocks into tweets. Short blocks are packed together,
separated by a blank line, for as long as the result fits in one tweet.
A block too long for a tweet on its own is split at sentence boundaries,
falling back to word boundaries for sentences that are themselves too long.
"""

import functools
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from tweetstorm.blocks import ContentBlock, Tweet
from tweetstorm.boundary import locate_boundary
from tweetstorm.extractor import extract_text
from tweetstorm.length import LIMIT, TWITTER, PlatformConfig, estimate
from tweetstorm.registry import DEFAULT_REGISTRY, BlockRegistry, MultilineTemplate

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = "\n\n"
ELLIPSIS = "…"

Estimator = Callable[[str], int]


def _split_sentences(text: str) -> list[str]:
    """Split text into sentences, each keeping its terminal punctuation and trailing whitespace."""
    chunks = re.findall(r".+?(?:[.!?](?:\s+|$)|$)", text, flags=re.S)
    return [c for c in chunks if c]


def _split_words(text: str) -> list[str]:
    """Split into words, each carrying the whitespace that follows it."""
    return re.findall(r"\s*\S+\s*|\s+", text)


def _join_blocks(current: str, addition: str) -> str:
    if not current:
        return addition
    if not addition:
        return current
    return f"{current}{BLOCK_SEPARATOR}{addition}"


@dataclass
class _BlockSplit:
    """Pieces of one oversized block, built up while walking its sentences."""

    pieces: list[str] = field(default_factory=list)
    boundary_offsets: list[int] = field(default_factory=list)
    partial: str = ""
    committed: int = 0

    def flush(self, boundary_offset: int) -> None:
        self.pieces.append(self.partial)
        self.boundary_offsets.append(boundary_offset)
        self.committed += len(self.partial)
        self.partial = ""

    def finish(self) -> tuple[list[str], list[int]]:
        if self.partial:
            self.pieces.append(self.partial)
            self.partial = ""
        return self.pieces, self.boundary_offsets


def split_block_text(text: str, estimator: Estimator) -> tuple[list[str], list[int]]:
    """Split ``text`` into tweet-sized pieces.

    Returns the pieces, which concatenate back to ``text`` exactly, and the
    offsets at which a boundary should be reported for each split. A single
    word that does not fit even on its own is kept whole.
    """
    state = _BlockSplit()

    for sentence in _split_sentences(text):
        if estimator(sentence.strip()) > LIMIT:
            # The long sentence starts a fresh piece.
            if state.partial.strip():
                state.flush(state.committed + len(state.partial))

            for word in _split_words(sentence):
                candidate = f"{ELLIPSIS}{(state.partial + word).strip()}{ELLIPSIS}"
                if estimator(candidate) > LIMIT and state.partial.strip():
                    # Report the split on the last character of the previous word.
                    state.flush(state.committed + len(state.partial.rstrip()))
                state.partial += word
            continue

        if estimator((state.partial + sentence).strip()) > LIMIT and state.partial.strip():
            state.flush(state.committed + len(state.partial))
        state.partial += sentence

    return state.finish()


class _TweetAccumulator:
    """Finished tweets plus at most one tweet that later blocks may still join."""

    def __init__(self, estimator: Estimator):
        self.estimator = estimator
        self.tweets: list[Tweet] = []
        self.pending: Optional[Tweet] = None

    def add_block(self, block: ContentBlock, text: str, selected: bool) -> None:
        if self.pending is not None:
            candidate = _join_blocks(self.pending.content, text)
            if self.estimator(candidate) <= LIMIT:
                logger.debug("Block %s joins tweet %d", block.client_id, len(self.tweets))
                self.pending.blocks.append(block)
                self.pending.content = candidate
                self.pending.current = self.pending.current or selected
                return
            self._flush()

        logger.debug("Block %s starts tweet %d", block.client_id, len(self.tweets))
        self.pending = Tweet(blocks=[block], content=text, current=selected)

    def add_split(self, tweets: list[Tweet]) -> None:
        self._flush()
        self.tweets.extend(tweets)

    def finish(self) -> list[Tweet]:
        self._flush()
        return self.tweets

    def _flush(self) -> None:
        if self.pending is not None:
            self.tweets.append(self.pending)
            self.pending = None


def _split_block(
    block: ContentBlock,
    text: str,
    selected: bool,
    estimator: Estimator,
    registry: BlockRegistry,
) -> list[Tweet]:
    pieces, offsets = split_block_text(text, estimator)
    logger.debug("Block %s is too long, split into %d tweets", block.client_id, len(pieces))

    if isinstance(registry.get(block.name), MultilineTemplate):
        logger.warning(
            "Block %s (%s) was split, but boundaries are not tracked for multiline blocks",
            block.client_id, block.name,
        )
        boundaries = []
    else:
        boundaries = [locate_boundary(block, offset, registry) for offset in offsets]

    for piece in pieces:
        if estimator(piece.strip()) > LIMIT:
            logger.warning(
                "Block %s has a word too long for a single tweet (%d permille)",
                block.client_id, estimator(piece.strip()),
            )

    return [
        Tweet(blocks=[block], content=piece, current=selected, boundaries=list(boundaries))
        for piece in pieces
    ]


def _is_selected(block: ContentBlock, selected: Sequence[str]) -> bool:
    return len(selected) == 1 and selected[0] == block.client_id


def segment(
    blocks: Sequence[Union[ContentBlock, Mapping[str, Any]]],
    selected: Sequence[str] = (),
    config: PlatformConfig = TWITTER,
    registry: Optional[BlockRegistry] = None,
    estimator: Optional[Estimator] = None,
) -> list[Tweet]:
    """Segment content blocks into a tweetstorm.

    Args:
        blocks: Blocks in document order, as ``ContentBlock`` or editor dicts.
        selected: Client IDs of the selected blocks. A tweet is flagged
            ``current`` only when exactly one block is selected.
        config: Platform whose length rules decide what fits.
        registry: Supported block types; defaults to the core blocks.
        estimator: Overrides ``config`` with a custom text -> permillage function.

    Returns:
        Tweets in order. Every tweet from a forced split holds a single block
        and carries the boundaries of all split points within that block.
    """
    if registry is None:
        registry = DEFAULT_REGISTRY
    estimator = estimator or functools.partial(estimate, config=config)
    selected = list(selected or ())
    accumulator = _TweetAccumulator(estimator)

    for block in blocks:
        if not isinstance(block, ContentBlock):
            block = ContentBlock.from_dict(block)

        text = extract_text(block, registry)
        is_selected = _is_selected(block, selected)

        if estimator(text) > LIMIT:
            accumulator.add_split(_split_block(block, text, is_selected, estimator, registry))
        else:
            accumulator.add_block(block, text, is_selected)

    return accumulator.finish()
