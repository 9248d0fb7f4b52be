"""
Exception types raised by Helpcord.

Platform and database failures are not wrapped: ``discord.HTTPException``
and ``aiosqlite.Error`` propagate unchanged to the command layer, which
reports them to the invoking member.
"""


class HelpcordError(Exception):
    """Base class for errors raised by Helpcord itself."""


class ConfigurationError(HelpcordError):
    """The configuration and the live guild state disagree.

    Raised for a forum missing a configured tag, a missing restriction role,
    or an invalid tag catalog. Never retried automatically.
    """


class AuthorizationDenied(HelpcordError):
    """A moderation precondition failed before any side effect happened.

    The message is meant to be shown to the invoking moderator as-is.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
