"""Moderation checks, the moderation action flow and revocation of temporary actions."""
