"""Discord cogs exposing the help system and moderation commands."""
