#!/usr/bin/env python3
"""
Terminal front end for memshell.

This module turns raw terminal events into registry calls. It owns the
input line, echoes each submitted command under its prompt, and provides
the interactive REPL and the command-line entry point.

Design Principles:
- One event at a time, each processed to completion
- The registry never sees keystrokes, only whole lines
- Output goes through an OutputSink so the REPL and tests share one path
"""

import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Union

from .calculator import ExpressionEvaluator
from .commands import DEFAULT_SEARCH_URL, CommandRegistry
from .errors import ShellError
from .output import BufferedOutput, ConsoleOutput, OutputKind, OutputSink
from .providers import LinkOpener, SystemInfoProvider
from .session import ShellSession
from .vfs import VirtualFileSystem

logger = logging.getLogger(__name__)


@dataclass
class TerminalConfig:
    """Configuration for terminal session."""
    user: str = 'user'
    hostname: str = 'htmlos'
    home_dir: str = '/home/user'
    initial_dir: str = '/home/user'
    prompt_format: str = '{user}@{hostname}:{cwd}$ '
    enable_colors: bool = True
    history_size: int = 1000
    abbreviate_home: bool = False
    search_url: str = DEFAULT_SEARCH_URL


@dataclass(frozen=True)
class Submit:
    """The user pressed Enter on a line."""
    line: str
    echo: bool = True  # False when the terminal already shows the typed line


@dataclass(frozen=True)
class RecallOlder:
    """The user asked for the previous history entry."""


@dataclass(frozen=True)
class RecallNewer:
    """The user asked for the next history entry."""


Event = Union[Submit, RecallOlder, RecallNewer]


class TerminalSession:
    """
    Main terminal session manager.

    Wires a fresh seeded filesystem, a ShellSession and a CommandRegistry
    together and feeds them events.
    """

    def __init__(self, config: Optional[TerminalConfig] = None,
                 output: Optional[OutputSink] = None,
                 fs: Optional[VirtualFileSystem] = None,
                 evaluator: Optional[ExpressionEvaluator] = None,
                 system_info: Optional[SystemInfoProvider] = None,
                 link_opener: Optional[LinkOpener] = None,
                 clock=datetime.now):
        """Initialize terminal session."""
        self.config = config or TerminalConfig()
        self.output = output if output is not None else BufferedOutput()
        self.fs = fs or VirtualFileSystem.seeded()
        self.session = ShellSession(self.fs, self.config.initial_dir, self.config.history_size)
        self.registry = CommandRegistry(
            self.session, self.output,
            evaluator=evaluator,
            system_info=system_info,
            link_opener=link_opener,
            clock=clock,
            search_url=self.config.search_url,
        )
        self.input_line = ''
        self.running = False

    def get_prompt(self) -> str:
        """Generate the command prompt."""
        home = self.config.home_dir if self.config.abbreviate_home else None
        return self.config.prompt_format.format(
            user=self.config.user,
            hostname=self.config.hostname,
            cwd=self.session.display_path(home),
        )

    def welcome(self) -> None:
        """Print the banner shown at startup."""
        self.output.emit('Welcome to memshell!')
        self.output.emit("Type 'help' to see available commands.")

    # Events

    def handle(self, event: Event) -> str:
        """Process one event and return the resulting input line."""
        if isinstance(event, Submit):
            self.submit(event.line, event.echo)
        elif isinstance(event, RecallOlder):
            self.recall_older()
        elif isinstance(event, RecallNewer):
            self.recall_newer()
        else:
            raise TypeError(f"unknown event: {event!r}")
        return self.input_line

    def submit(self, line: str, echo: bool = True) -> None:
        """Echo a line under the prompt and dispatch it."""
        if echo:
            self.output.emit(f"{self.get_prompt().rstrip()} {line}", OutputKind.PROMPT)
        self.registry.dispatch(line)
        self.input_line = ''

    def recall_older(self) -> None:
        recalled = self.session.recall_older()
        if recalled is not None:
            self.input_line = recalled

    def recall_newer(self) -> None:
        recalled = self.session.recall_newer()
        if recalled is not None:
            self.input_line = recalled

    # Non-interactive use

    def run_command(self, command_line: str) -> str:
        """
        Run a single command and return its output text.

        The registry's output is captured whatever sink the session uses.
        """
        buffer = BufferedOutput()
        original, self.registry.output = self.registry.output, buffer
        try:
            self.registry.dispatch(command_line)
        finally:
            self.registry.output = original
        return '\n'.join(buffer.texts())

    def run_script(self, script_lines: List[str]) -> List[str]:
        """
        Run a script (list of command lines) and return outputs.
        """
        outputs = []
        for line in script_lines:
            # Skip comments and empty lines
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            outputs.append(self.run_command(line))
        return outputs

    def run_interactive(self):
        """Run the interactive REPL loop."""
        try:
            import readline
        except ImportError:
            readline = None

        self.running = True
        self.welcome()

        while self.running:
            try:
                command_line = input(self.get_prompt())
            except KeyboardInterrupt:
                print("^C")
                continue
            except EOFError:
                print()
                break

            if command_line.strip() in ('exit', 'quit'):
                break

            # readline keeps its own copy so the arrow keys recall lines
            if readline is not None and command_line.strip():
                readline.add_history(command_line)

            self.handle(Submit(command_line, echo=False))

        self.running = False
        print("Goodbye!")


def main(argv: Optional[List[str]] = None):
    """Main entry point for terminal emulator."""
    import argparse

    parser = argparse.ArgumentParser(description='memshell - an in-memory shell')
    parser.add_argument('-c', '--command', help='Execute command and exit')
    parser.add_argument('-u', '--user', help='Set username', default='user')
    parser.add_argument('-d', '--directory', help='Set initial directory', default='/home/user')
    parser.add_argument('--no-color', action='store_true', help='Disable ANSI colours')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (logs go to stderr)')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(name)s %(levelname)s %(message)s',
        stream=sys.stderr,
    )

    config = TerminalConfig(
        user=args.user,
        initial_dir=args.directory,
        enable_colors=not args.no_color and sys.stdout.isatty(),
    )
    output = ConsoleOutput(sys.stdout, enable_colors=config.enable_colors)

    try:
        session = TerminalSession(config=config, output=output)
    except ShellError as error:
        logger.error("cannot start in %s: %s", args.directory, error)
        return 1

    if args.command:
        session.registry.dispatch(args.command)
    else:
        session.run_interactive()
    return 0


if __name__ == '__main__':
    sys.exit(main())
