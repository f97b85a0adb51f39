#!/usr/bin/env python3
"""
External capabilities used by a few commands.

sysfetch reads a SystemInfoProvider and browser/ddg hand URLs to a
LinkOpener. The shell never measures the host or opens links itself; these
defaults do it for a console session, and the static/recording variants
stand in for them when the shell is embedded or tested.
"""

import logging
import platform
import shutil
import time
import webbrowser
from dataclasses import dataclass
from typing import Callable, List, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SystemInfo:
    """What sysfetch displays."""
    os_label: str
    kernel_label: str
    shell_label: str
    agent_label: str
    resolution: str
    uptime: str


class SystemInfoProvider(Protocol):
    def snapshot(self) -> SystemInfo:
        ...


class LinkOpener(Protocol):
    def open(self, url: str) -> None:
        ...


def format_uptime(seconds: float) -> str:
    """Format elapsed seconds as 'Xm Ys'."""
    elapsed = int(seconds)
    return f"{elapsed // 60}m {elapsed % 60}s"


class HostSystemInfoProvider:
    """Reports the running interpreter and terminal."""

    def __init__(self, os_label: str = 'memshell OS',
                 kernel_label: str = 'memshell Kernel 1.0',
                 shell_label: str = 'memshell CLI',
                 clock: Callable[[], float] = time.monotonic):
        self.os_label = os_label
        self.kernel_label = kernel_label
        self.shell_label = shell_label
        self.clock = clock
        self.started = clock()

    def snapshot(self) -> SystemInfo:
        size = shutil.get_terminal_size()
        return SystemInfo(
            os_label=self.os_label,
            kernel_label=self.kernel_label,
            shell_label=self.shell_label,
            agent_label=f"{platform.python_implementation()} {platform.python_version()}",
            resolution=f"{size.columns}x{size.lines}",
            uptime=format_uptime(self.clock() - self.started),
        )


class StaticSystemInfoProvider:
    """Always returns the same snapshot."""

    def __init__(self, info: SystemInfo):
        self.info = info

    def snapshot(self) -> SystemInfo:
        return self.info


class WebBrowserLinkOpener:
    """Opens links in the host's default browser."""

    def open(self, url: str) -> None:
        logger.info("opening %s", url)
        if not webbrowser.open_new_tab(url):
            logger.warning("no browser available to open %s", url)


class RecordingLinkOpener:
    """Remembers links instead of opening them."""

    def __init__(self):
        self.opened: List[str] = []

    def open(self, url: str) -> None:
        self.opened.append(url)
