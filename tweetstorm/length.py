"""Length estimation for tweetstorm chunks.

Every platform length is normalized to a permillage of that platform's
limit, so the segmenter only ever compares against ``LIMIT``.
"""

import re
import unicodedata
from dataclasses import dataclass

import grapheme

from tweetstorm.errors import InputError

LIMIT = 1000

# twitter-text v3 weighting: code points in these ranges weigh 100, the rest 200.
WEIGHT_SCALE = 100
DEFAULT_WEIGHT = 200
LIGHT_WEIGHT = 100
LIGHT_RANGES = (
    (0x0000, 0x10FF),
    (0x2000, 0x200D),
    (0x2010, 0x201F),
    (0x2032, 0x2037),
)
TRANSFORMED_URL_LENGTH = 23

URL_RE = re.compile(r"(?:https?://|www\.)[^\s<>\"]*[^\s<>\".,!?;:)'\]]", flags=re.I)

_EMOJI_RANGES = (
    (0x1F000, 0x1FAFF),
    (0x2600, 0x27BF),
    (0x2B05, 0x2B55),
    (0x231A, 0x23FF),
)
_EMOJI_MODIFIERS = ("\ufe0f", "\u20e3", "\u200d")


@dataclass(frozen=True)
class PlatformConfig:
    name: str
    char_limit: int
    use_graphemes: bool
    weighted: bool = False


TWITTER = PlatformConfig("Twitter", 280, False, weighted=True)
BLUESKY = PlatformConfig("BlueSky", 300, True)
LINKEDIN = PlatformConfig("LinkedIn", 3000, False)

PLATFORM_CONFIGS = {
    "twitter": TWITTER,
    "bluesky": BLUESKY,
    "linkedin": LINKEDIN,
}


def _is_emoji(cluster: str) -> bool:
    if len(cluster) > 1 and any(mod in cluster for mod in _EMOJI_MODIFIERS):
        return True
    return any(
        low <= ord(char) <= high
        for char in cluster
        for low, high in _EMOJI_RANGES
    )


def _code_point_weight(char: str) -> int:
    code = ord(char)
    for low, high in LIGHT_RANGES:
        if low <= code <= high:
            return LIGHT_WEIGHT
    return DEFAULT_WEIGHT


def _weighted_units(text: str) -> int:
    """Weighted length of ``text`` in scaled units (one light char = 100)."""
    text = unicodedata.normalize("NFC", text)
    units = 0
    pos = 0
    for match in URL_RE.finditer(text):
        units += _weighted_plain_units(text[pos:match.start()])
        units += TRANSFORMED_URL_LENGTH * WEIGHT_SCALE
        pos = match.end()
    return units + _weighted_plain_units(text[pos:])


def _weighted_plain_units(text: str) -> int:
    units = 0
    for cluster in grapheme.graphemes(text):
        if _is_emoji(cluster):
            units += DEFAULT_WEIGHT
        else:
            units += sum(_code_point_weight(char) for char in cluster)
    return units


def measure(text: str, config: PlatformConfig = TWITTER) -> int:
    """Measure text length the way ``config``'s platform counts it."""
    if config.weighted:
        # Ceil so a half-weighted remainder still reports as a character.
        return -(-_weighted_units(text) // WEIGHT_SCALE)
    if config.use_graphemes:
        return grapheme.length(text)
    return len(text)


def estimate(text: str, config: PlatformConfig = TWITTER) -> int:
    """Return how much of the platform limit ``text`` fills, on a 0-1000 scale.

    Values above ``LIMIT`` mean the text does not fit in one post.
    """
    if not text:
        return 0
    if config.weighted:
        return _weighted_units(text) * LIMIT // (config.char_limit * WEIGHT_SCALE)
    return measure(text, config) * LIMIT // config.char_limit


def get_platform(name: str) -> PlatformConfig:
    """Look up a platform preset by its lowercase key."""
    if not isinstance(name, str):
        raise InputError(f"Platform must be a string, got {name!r}")
    config = PLATFORM_CONFIGS.get(name.strip().lower())
    if config is None:
        raise InputError(f"Unknown platform: {name!r}")
    return config
