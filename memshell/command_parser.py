#!/usr/bin/env python3
"""
Command line parser for memshell.

Lines are split on runs of whitespace. The first token is the verb and the
rest are positional arguments. There is no quoting or escaping, so a
whitespace run always separates arguments.
"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass
class ParsedLine:
    """A submitted line broken into verb and arguments."""
    name: str
    args: List[str]
    raw: str  # the line exactly as submitted

    def __str__(self) -> str:
        return ' '.join([self.name] + self.args)


def parse_line(raw: str) -> Optional[ParsedLine]:
    """Parse a submitted line. Returns None for blank input."""
    tokens = raw.split()
    if not tokens:
        return None
    return ParsedLine(name=tokens[0], args=tokens[1:], raw=raw)
