"""Error types raised while declaring, parsing and answering questions."""

from __future__ import annotations


class PromptError(Exception):
    """Base class for every error the prompt engine raises on purpose."""


class ConfigurationError(PromptError):
    """The question set or positional declaration is malformed."""


class ArgumentError(PromptError):
    """A command-line token could not be resolved (unknown, missing, duplicate)."""


class ValidationError(PromptError):
    """A value failed its shape check or its ``validate`` callback."""


class PromptCancelledError(PromptError):
    """The user aborted an interactive question with Ctrl-C."""

    def __init__(self, message: str = "User cancelled the prompt") -> None:
        super().__init__(message)
