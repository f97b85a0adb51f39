"""
memshell - An interactive shell over an in-memory filesystem

This package provides a memory-resident directory tree, the session state of
a shell positioned inside it, a registry of familiar shell verbs, and a
terminal front end that drives them.
"""

__version__ = "0.1.0"

from .errors import (
    ShellError,
    MissingArgument,
    NotFound,
    AlreadyExists,
    NotADirectory,
    NotAFile,
    NotEmpty,
    UnknownCommand,
    EvaluationError,
)

from .vfs import (
    VirtualFileSystem,
    FileNode,
    DirNode,
    Node,
    NodeKind,
    Entry,
    resolve,
)

from .session import (
    ShellSession,
    CommandHistory,
)

from .command_parser import (
    ParsedLine,
    parse_line,
)

from .calculator import Calculator, ExpressionEvaluator

from .output import (
    OutputKind,
    OutputLine,
    BufferedOutput,
    ConsoleOutput,
)

from .providers import (
    SystemInfo,
    HostSystemInfoProvider,
    StaticSystemInfoProvider,
    WebBrowserLinkOpener,
    RecordingLinkOpener,
)

from .commands import (
    CommandRegistry,
    CommandSpec,
)

from .terminal import (
    TerminalSession,
    TerminalConfig,
    Submit,
    RecallOlder,
    RecallNewer,
)

__all__ = [
    # Errors
    "ShellError",
    "MissingArgument",
    "NotFound",
    "AlreadyExists",
    "NotADirectory",
    "NotAFile",
    "NotEmpty",
    "UnknownCommand",
    "EvaluationError",

    # Filesystem
    "VirtualFileSystem",
    "FileNode",
    "DirNode",
    "Node",
    "NodeKind",
    "Entry",
    "resolve",

    # Session
    "ShellSession",
    "CommandHistory",

    # Parsing and evaluation
    "ParsedLine",
    "parse_line",
    "Calculator",
    "ExpressionEvaluator",

    # Output and collaborators
    "OutputKind",
    "OutputLine",
    "BufferedOutput",
    "ConsoleOutput",
    "SystemInfo",
    "HostSystemInfoProvider",
    "StaticSystemInfoProvider",
    "WebBrowserLinkOpener",
    "RecordingLinkOpener",

    # Shell
    "CommandRegistry",
    "CommandSpec",
    "TerminalSession",
    "TerminalConfig",
    "Submit",
    "RecallOlder",
    "RecallNewer",

    # Version info
    "__version__",
]
