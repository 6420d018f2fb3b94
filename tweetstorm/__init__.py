"""Tweetstorm: split editor content blocks into tweet-sized chunks."""

from tweetstorm.blocks import Boundary, ContentBlock, Tweet
from tweetstorm.boundary import locate_boundary
from tweetstorm.errors import ConfigurationError, InputError, TweetstormError
from tweetstorm.extractor import extract_text
from tweetstorm.length import BLUESKY, LIMIT, LINKEDIN, TWITTER, PlatformConfig, estimate
from tweetstorm.registry import DEFAULT_REGISTRY, BlockRegistry, MultilineTemplate, TextTemplate
from tweetstorm.segmenter import segment

__all__ = [
    "BLUESKY",
    "BlockRegistry",
    "Boundary",
    "ConfigurationError",
    "ContentBlock",
    "DEFAULT_REGISTRY",
    "InputError",
    "LIMIT",
    "LINKEDIN",
    "MultilineTemplate",
    "PlatformConfig",
    "TWITTER",
    "TextTemplate",
    "Tweet",
    "TweetstormError",
    "estimate",
    "extract_text",
    "locate_boundary",
    "segment",
]
