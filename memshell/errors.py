#!/usr/bin/env python3
"""
Error types for memshell.

Every fault a command can hit is a ShellError. Handlers raise them, the
command registry catches them and turns each one into a single error line,
so a failed command never ends the session.
"""

from typing import Optional


class ShellError(Exception):
    """Base class for user-facing shell faults."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint  # optional follow-up line, e.g. a usage example

    def __str__(self) -> str:
        return self.message


class MissingArgument(ShellError):
    """A verb was invoked without its required argument."""


class NotFound(ShellError):
    """A path, file or directory does not exist."""


class AlreadyExists(ShellError):
    """A name is already taken in the target directory."""


class NotADirectory(ShellError):
    """A directory was required but a file was found."""


class NotAFile(ShellError):
    """A file was required but a directory was found."""


class NotEmpty(ShellError):
    """rmdir on a directory that still has children."""


class UnknownCommand(ShellError):
    """The verb is not in the command registry."""

    def __init__(self, verb: str):
        super().__init__(f"Command not found: {verb}")
        self.verb = verb


class EvaluationError(ShellError):
    """The expression evaluator rejected its input."""
