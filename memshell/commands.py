#!/usr/bin/env python3
"""
Command registry for memshell.

Maps each verb to a typed handler and runs one submitted line at a time.
Handlers report problems by raising ShellError; dispatch() turns those
into error lines so nothing escapes to the caller.

Design Principles:
- A fixed table of verb constants, no attribute lookup on user input
- Every handler declares whether it needs an argument
- The filesystem is only touched through the session's current directory
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional
from urllib.parse import quote

from .calculator import Calculator, ExpressionEvaluator, format_number
from .command_parser import parse_line
from .errors import EvaluationError, MissingArgument, ShellError, UnknownCommand
from .output import OutputKind, OutputSink
from .providers import (
    HostSystemInfoProvider, LinkOpener, SystemInfoProvider, WebBrowserLinkOpener
)
from .session import ShellSession
from .vfs import NodeKind

logger = logging.getLogger(__name__)

HELP = 'help'
ECHO = 'echo'
CLEAR = 'clear'
DATE = 'date'
LS = 'ls'
CD = 'cd'
MKDIR = 'mkdir'
RMDIR = 'rmdir'
TOUCH = 'touch'
RM = 'rm'
CAT = 'cat'
CALC = 'calc'
SYSFETCH = 'sysfetch'
BROWSER = 'browser'
DDG = 'ddg'

DEFAULT_SEARCH_URL = 'https://duckduckgo.com/?q={query}'

MASCOT = [
    r"     /\_/\ ",
    r"    ( o.o )  <---  Taggy the memshell mascot!",
    r"    > ^ <     /",
    r"   /   _ \   /",
    r"  |    / \  /",
    r"   \  /   \ ",
    r"    ||    *",
    r"    \/",
    "",
]

Handler = Callable[[List[str]], None]


@dataclass(frozen=True)
class CommandSpec:
    """A verb, its help text and its handler."""
    name: str
    usage: str
    description: str
    handler: Handler
    missing: Optional[str] = None  # error text when a required argument is absent
    hint: Optional[str] = None     # usage line shown after that error

    @property
    def requires_args(self) -> bool:
        return self.missing is not None


class CommandRegistry:
    """
    Executes submitted lines against a ShellSession.

    One call to dispatch() per submitted line: the line is parsed, recorded
    in history, routed to its handler, and every result or failure is
    pushed to the output sink.
    """

    def __init__(self, session: ShellSession, output: OutputSink,
                 evaluator: Optional[ExpressionEvaluator] = None,
                 system_info: Optional[SystemInfoProvider] = None,
                 link_opener: Optional[LinkOpener] = None,
                 clock: Callable[[], datetime] = datetime.now,
                 search_url: str = DEFAULT_SEARCH_URL):
        self.session = session
        self.output = output
        self.evaluator = evaluator or Calculator()
        self.system_info = system_info or HostSystemInfoProvider()
        self.link_opener = link_opener or WebBrowserLinkOpener()
        self.clock = clock
        self.search_url = search_url
        self.commands = self._build_table()

    def _build_table(self) -> Dict[str, CommandSpec]:
        specs = [
            CommandSpec(HELP, 'help', 'Show this help message', self._help),
            CommandSpec(ECHO, 'echo [text]', 'Print text to the terminal', self._echo),
            CommandSpec(CLEAR, 'clear', 'Clear the terminal', self._clear),
            CommandSpec(DATE, 'date', 'Display current date and time', self._date),
            CommandSpec(LS, 'ls', 'List files and directories in current directory', self._ls),
            CommandSpec(CD, 'cd [path]', 'Change directory', self._cd,
                        missing='Missing directory path.'),
            CommandSpec(MKDIR, 'mkdir [dir]', 'Create a directory', self._mkdir,
                        missing='Missing directory name.'),
            CommandSpec(RMDIR, 'rmdir [dir]', 'Remove a directory (empty only)', self._rmdir,
                        missing='Missing directory name.'),
            CommandSpec(TOUCH, 'touch [file]', 'Create an empty file', self._touch,
                        missing='Missing file name.'),
            CommandSpec(RM, 'rm [file]', 'Remove a file', self._rm,
                        missing='Missing file name.'),
            CommandSpec(CAT, 'cat [file]', 'Display file content', self._cat,
                        missing='Missing file name.'),
            CommandSpec(CALC, 'calc [expression]', 'Simple calculator (+ - * / and parentheses)',
                        self._calc,
                        missing='Missing expression for calculator.',
                        hint='Usage: calc [expression] (e.g., calc 2 + 3 * 4)'),
            CommandSpec(SYSFETCH, 'sysfetch', 'Display system information', self._sysfetch),
            CommandSpec(BROWSER, 'browser [query]', 'Search DuckDuckGo in a new tab', self._browser,
                        missing='Missing search query for browser.',
                        hint='Usage: browser [search query] (e.g., browser html os)'),
            CommandSpec(DDG, 'ddg [query]', 'Alias for browser', self._browser,
                        missing='Missing search query for browser.',
                        hint='Usage: ddg [search query] (e.g., ddg html os)'),
        ]
        return {spec.name: spec for spec in specs}

    def lookup(self, verb: str) -> CommandSpec:
        """Find the spec for a verb (exact, case-sensitive)."""
        spec = self.commands.get(verb)
        if spec is None:
            raise UnknownCommand(verb)
        return spec

    def dispatch(self, raw_line: str) -> None:
        """Run one submitted line. Blank lines are ignored entirely."""
        parsed = parse_line(raw_line)
        if parsed is None:
            return

        self.session.record(raw_line)
        logger.debug("dispatching %s", parsed)

        try:
            spec = self.lookup(parsed.name)
            if spec.requires_args and not parsed.args:
                raise MissingArgument(spec.missing, hint=spec.hint)
            spec.handler(parsed.args)
        except UnknownCommand as error:
            self.output.emit(str(error), OutputKind.ERROR)
            self._help([])
        except ShellError as error:
            self._report(error)
        except Exception as error:
            logger.exception("command %r failed", parsed.name)
            self.output.emit(f"Error: {error}", OutputKind.ERROR)
        finally:
            self.session.refresh()

    def _report(self, error: ShellError) -> None:
        self.output.emit(f"Error: {error}", OutputKind.ERROR)
        if error.hint:
            self.output.emit(error.hint)

    def help_lines(self) -> List[str]:
        """The full help listing."""
        lines = ['Available commands:']
        for spec in self.commands.values():
            lines.append(f"  {spec.usage:<18} - {spec.description}")
        return lines

    # Handlers

    def _help(self, args: List[str]) -> None:
        if args and args[0] in self.commands:
            spec = self.commands[args[0]]
            self.output.emit(f"{spec.usage} - {spec.description}")
            return
        for line in self.help_lines():
            self.output.emit(line)

    def _echo(self, args: List[str]) -> None:
        self.output.emit(' '.join(args))

    def _clear(self, args: List[str]) -> None:
        self.output.clear()

    def _date(self, args: List[str]) -> None:
        now = self.clock()
        hour = now.hour % 12 or 12
        meridiem = 'AM' if now.hour < 12 else 'PM'
        self.output.emit(f"{now.month}/{now.day}/{now.year}, {hour}:{now:%M:%S} {meridiem}")

    def _ls(self, args: List[str]) -> None:
        entries = self.session.fs.list(self.session.cwd)
        if not entries:
            self.output.emit('(empty directory)')
            return
        for entry in entries:
            kind = OutputKind.DIRECTORY if entry.kind is NodeKind.DIRECTORY else OutputKind.FILE
            self.output.emit(entry.name, kind)

    def _cd(self, args: List[str]) -> None:
        self.session.change_directory(args[0])

    def _mkdir(self, args: List[str]) -> None:
        name = args[0]
        self.session.fs.create_directory(self.session.cwd, name)
        self.output.emit(f'Directory "{name}" created.')

    def _rmdir(self, args: List[str]) -> None:
        name = args[0]
        self.session.fs.remove_directory(self.session.cwd, name)
        self.output.emit(f'Directory "{name}" removed.')

    def _touch(self, args: List[str]) -> None:
        name = args[0]
        self.session.fs.create_file(self.session.cwd, name)
        self.output.emit(f'File "{name}" created.')

    def _rm(self, args: List[str]) -> None:
        name = args[0]
        self.session.fs.remove_file(self.session.cwd, name)
        self.output.emit(f'File "{name}" removed.')

    def _cat(self, args: List[str]) -> None:
        self.output.emit(self.session.fs.read_file(self.session.cwd, args[0]))

    def _calc(self, args: List[str]) -> None:
        expression = ' '.join(args)
        try:
            result = self.evaluator.evaluate(expression)
        except EvaluationError as error:
            raise EvaluationError(f"Invalid expression: {error}") from error
        self.output.emit(f"= {format_number(result)}")

    def _sysfetch(self, args: List[str]) -> None:
        info = self.system_info.snapshot()
        for line in MASCOT:
            self.output.emit(line)
        self.output.emit(f"        OS Name:    {info.os_label}")
        self.output.emit(f"        Kernel:     {info.kernel_label}")
        self.output.emit(f"        Shell:      {info.shell_label}")
        self.output.emit(f"        Agent:      {info.agent_label}")
        self.output.emit(f"        Resolution: {info.resolution}")
        self.output.emit(f"        Uptime:     {info.uptime}")

    def _browser(self, args: List[str]) -> None:
        query = ' '.join(args)
        url = self.search_url.format(query=quote(query, safe="-_.!~*'()"))
        self.link_opener.open(url)
        self.output.emit(f'Opening DuckDuckGo in a new tab for query: "{query}"')
