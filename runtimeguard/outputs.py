"""Alert outputs: a program's standard input, standard output and syslog."""

from __future__ import annotations

import subprocess
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class OutputConfig:
    """An output's name and its options."""

    name: str
    options: dict[str, str] = field(default_factory=dict)


@dataclass
class Message:
    """Something to send to outputs: a rule match or a generic notice."""

    ts: int
    priority: int
    msg: str
    rule: str = ""
    source: str = ""
    fields: dict[str, str] = field(default_factory=dict)
    tags: set[str] = field(default_factory=set)


class AbstractOutput(ABC):
    """Base class of every output."""

    def __init__(
        self, config: OutputConfig, buffered: bool, hostname: str, json_output: bool
    ) -> None:
        self.config = config
        self.buffered = buffered
        self.hostname = hostname
        self.json_output = json_output

    @property
    def name(self) -> str:
        """The output's name as configured."""
        return self.config.name

    @abstractmethod
    def output(self, msg: Message) -> None:
        """Send one message."""

    def reopen(self) -> None:
        """Close the output and open it again, where that means anything."""

    def cleanup(self) -> None:
        """Flush or close the output, where that means anything."""


class ProgramOutput(AbstractOutput):
    """Writes each message as a line to the standard input of a shell command."""

    def __init__(
        self, config: OutputConfig, buffered: bool, hostname: str, json_output: bool
    ) -> None:
        super().__init__(config, buffered, hostname, json_output)
        self._process: subprocess.Popen | None = None

    def _open(self) -> subprocess.Popen:
        if self._process is None:
            self._process = subprocess.Popen(
                self.config.options.get("program", ""),
                shell=True,
                stdin=subprocess.PIPE,
                bufsize=-1 if self.buffered else 0,
            )
        return self._process

    def output(self, msg: Message) -> None:
        process = self._open()
        process.stdin.write((msg.msg + "\n").encode())
        if self.config.options.get("keep_alive") != "true":
            self.cleanup()

    def cleanup(self) -> None:
        if self._process is not None:
            process, self._process = self._process, None
            process.stdin.close()
            process.wait()

    def reopen(self) -> None:
        self.cleanup()
        self._open()


class StdoutOutput(AbstractOutput):
    """Writes each message as a line to standard output."""

    def output(self, msg: Message) -> None:
        sys.stdout.write(msg.msg + "\n")
        if not self.buffered:
            sys.stdout.flush()

    def cleanup(self) -> None:
        sys.stdout.flush()


class SyslogOutput(AbstractOutput):
    """Sends each message to syslog at the message's priority."""

    def output(self, msg: Message) -> None:
        import syslog

        syslog.syslog(msg.priority, msg.msg)