#!/usr/bin/env python3
"""
Output sinks for memshell.

Commands emit semantic lines (text plus a kind). How a kind is shown is up
to the sink: BufferedOutput just records lines, ConsoleOutput prints them
with ANSI colours.
"""

import sys
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol, TextIO


class OutputKind(Enum):
    """Semantic class of an output line."""
    NORMAL = 'normal'
    ERROR = 'error'
    DIRECTORY = 'directory'
    FILE = 'file'
    PROMPT = 'prompt'


@dataclass(frozen=True)
class OutputLine:
    """A single emitted line."""
    text: str
    kind: OutputKind = OutputKind.NORMAL


class OutputSink(Protocol):
    """Where command output goes."""

    def emit(self, text: str, kind: OutputKind = OutputKind.NORMAL) -> None:
        ...

    def clear(self) -> None:
        ...


class BufferedOutput:
    """Sink that keeps every line in memory."""

    def __init__(self):
        self.lines: List[OutputLine] = []

    def emit(self, text: str, kind: OutputKind = OutputKind.NORMAL) -> None:
        self.lines.append(OutputLine(text, kind))

    def clear(self) -> None:
        self.lines.clear()

    def texts(self) -> List[str]:
        """Just the text of each line."""
        return [line.text for line in self.lines]

    def drain(self) -> List[OutputLine]:
        """Return all buffered lines and forget them."""
        lines = list(self.lines)
        self.lines.clear()
        return lines


class ConsoleOutput:
    """Sink that writes to a text stream, colouring by kind."""

    COLORS = {
        OutputKind.ERROR: '\033[31m',      # red
        OutputKind.DIRECTORY: '\033[34m',  # blue
        OutputKind.FILE: '\033[0m',
        OutputKind.PROMPT: '\033[32m',     # green
    }
    RESET = '\033[0m'
    CLEAR_SCREEN = '\033[2J\033[H'

    def __init__(self, stream: Optional[TextIO] = None, enable_colors: bool = True):
        self.stream = stream or sys.stdout
        self.enable_colors = enable_colors

    def emit(self, text: str, kind: OutputKind = OutputKind.NORMAL) -> None:
        color = self.COLORS.get(kind) if self.enable_colors else None
        if color:
            text = f'{color}{text}{self.RESET}'
        print(text, file=self.stream)

    def clear(self) -> None:
        self.stream.write(self.CLEAR_SCREEN)
        self.stream.flush()
