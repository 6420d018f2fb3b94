"""Exceptions raised by the tweetstorm package."""


class TweetstormError(Exception):
    """Base class for all tweetstorm errors."""


class ConfigurationError(TweetstormError):
    """A block type registry entry or setting is malformed.

    These point at a caller bug; a correctly built registry never raises them.
    """


class InputError(TweetstormError, ValueError):
    """A block payload or offset supplied by the caller is invalid."""
