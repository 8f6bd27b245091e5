"""Exceptions raised by the matching core."""
from __future__ import annotations


class JobMatchError(Exception):
    pass


class ParseError(JobMatchError, ValueError):
    """Résumé text is empty or came from an unsupported format."""


class LexiconError(JobMatchError):
    """A lexicon table is missing or malformed."""
