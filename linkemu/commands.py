"""Command-line parsing for the link emulation shells."""

from __future__ import annotations

import getopt
import math
import os
import re
import sys
from dataclasses import dataclass, field

QUEUE_TYPES = ("infinite", "droptail", "drophead", "codel", "pie")
"""Queue disciplines a link can be given."""

_DECIMAL = re.compile(r"\d+")

_LINK_USAGE = """\
Usage: {prog} UPLINK-TRACE DOWNLINK-TRACE [OPTION]... [COMMAND]

Options = --once
          --uplink-log=FILENAME --downlink-log=FILENAME
          --meter-uplink --meter-uplink-delay
          --meter-downlink --meter-downlink-delay
          --meter-all
          --uplink-queue=QUEUE_TYPE --downlink-queue=QUEUE_TYPE
          --uplink-queue-args=QUEUE_ARGS --downlink-queue-args=QUEUE_ARGS

          QUEUE_TYPE = infinite | droptail | drophead | codel | pie
          QUEUE_ARGS = "NAME=NUMBER[, NAME2=NUMBER2, ...]"
              (with NAME = bytes | packets | target | interval | qdelay_ref | max_burst)
                  target, interval, qdelay_ref, max_burst are in milli-second
"""

_LINK_LONG_OPTIONS = [
    "uplink-log=",
    "downlink-log=",
    "once",
    "meter-uplink",
    "meter-downlink",
    "meter-uplink-delay",
    "meter-downlink-delay",
    "meter-all",
    "uplink-queue=",
    "downlink-queue=",
    "uplink-queue-args=",
    "downlink-queue-args=",
]


class UsageError(ValueError):
    """Raised when a command line is invalid; the message says how to use it."""


def _shell_path() -> str:
    """The current user's login shell."""
    try:
        import pwd

        shell = pwd.getpwuid(os.getuid()).pw_shell
        if shell:
            return shell
    except (ImportError, KeyError):
        pass
    return os.environ.get("SHELL") or "/bin/sh"


def _command(rest: list[str]) -> tuple[str, ...]:
    """The command to run, or the user's shell when none is given."""
    return tuple(rest) if rest else (_shell_path(),)


def _parse_int(text: str, what: str) -> int:
    if not _DECIMAL.fullmatch(text.strip()):
        raise UsageError(f"invalid {what}: {text!r}")
    return int(text)


def _parse_float(text: str, what: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise UsageError(f"invalid {what}: {text!r}") from None
    if math.isnan(value):
        raise UsageError(f"invalid {what}: {text!r}")
    return value


def _prog(argv: list[str]) -> str:
    return argv[0] if argv else "linkemu"


def shell_quote(arg: str) -> str:
    """Quote ``arg`` for a POSIX shell using single quotes."""
    return "'" + arg.replace("'", "'\\''") + "'"


@dataclass(frozen=True)
class DelayOptions:
    """Settings for a shell whose links add a fixed delay."""

    delay_ms: int
    command: tuple[str, ...]

    @property
    def shell_prefix(self) -> str:
        return f"[delay {self.delay_ms} ms] "


@dataclass(frozen=True)
class LossOptions:
    """Settings for a shell with independent random packet loss on one link."""

    link: str
    rate_text: str
    uplink_loss: float
    downlink_loss: float
    command: tuple[str, ...]

    @property
    def shell_prefix(self) -> str:
        direction = "up" if self.link == "uplink" else "down"
        return f"[loss {direction}={self.rate_text}] "


@dataclass(frozen=True)
class OnOffOptions:
    """Settings for a shell with one link switching on and off."""

    link: str
    on_text: str
    off_text: str
    uplink_on_time: float
    uplink_off_time: float
    downlink_on_time: float
    downlink_off_time: float
    command: tuple[str, ...]

    @property
    def shell_prefix(self) -> str:
        direction = "(up)" if self.link == "uplink" else "(down)"
        return f"[onoff {direction} on={self.on_text}s off={self.off_text}s] "


@dataclass(frozen=True)
class MeterOptions:
    """Settings for a shell that meters its traffic."""

    meter_uplink: bool
    meter_downlink: bool
    command: tuple[str, ...]

    uplink_name: str = "Uplink"
    downlink_name: str = "Downlink"

    @property
    def shell_prefix(self) -> str:
        return "[meter] "


@dataclass(frozen=True)
class LinkOptions:
    """Settings for a shell whose links follow delivery traces."""

    uplink_trace: str
    downlink_trace: str
    command: tuple[str, ...]
    command_line: str
    uplink_log: str = ""
    downlink_log: str = ""
    repeat: bool = True
    meter_uplink: bool = False
    meter_downlink: bool = False
    meter_uplink_delay: bool = False
    meter_downlink_delay: bool = False
    uplink_queue: str = "infinite"
    downlink_queue: str = "infinite"
    uplink_queue_args: str = ""
    downlink_queue_args: str = ""
    uplink_name: str = field(default="Uplink")
    downlink_name: str = field(default="Downlink")

    @property
    def shell_prefix(self) -> str:
        return "[link] "


def parse_delay_args(argv: list[str]) -> DelayOptions:
    """Parse ``PROGRAM delay-milliseconds [command...]``; ``argv[0]`` is the program."""
    if len(argv) < 2:
        raise UsageError(f"Usage: {_prog(argv)} delay-milliseconds [command...]")
    delay_ms = _parse_int(argv[1], "delay")
    return DelayOptions(delay_ms=delay_ms, command=_command(argv[2:]))


def parse_loss_args(argv: list[str]) -> LossOptions:
    """Parse ``PROGRAM uplink|downlink RATE [COMMAND...]``."""
    usage = f"Usage: {_prog(argv)} uplink|downlink RATE [COMMAND...]"
    if len(argv) < 3:
        raise UsageError(usage)

    loss_rate = _parse_float(argv[2], "loss rate")
    if not 0 <= loss_rate <= 1:
        raise UsageError("Error: loss rate must be between 0 and 1.\n" + usage)

    link = argv[1]
    if link == "uplink":
        uplink_loss, downlink_loss = loss_rate, 0.0
    elif link == "downlink":
        uplink_loss, downlink_loss = 0.0, loss_rate
    else:
        raise UsageError(usage)

    return LossOptions(
        link=link,
        rate_text=argv[2],
        uplink_loss=uplink_loss,
        downlink_loss=downlink_loss,
        command=_command(argv[3:]),
    )


def parse_onoff_args(argv: list[str]) -> OnOffOptions:
    """Parse ``PROGRAM uplink|downlink MEAN-ON-TIME MEAN-OFF-TIME [COMMAND...]``."""
    usage = f"Usage: {_prog(argv)} uplink|downlink MEAN-ON-TIME MEAN-OFF-TIME [COMMAND...]"
    if len(argv) < 4:
        raise UsageError(usage)

    on_time = _parse_float(argv[2], "mean on-time")
    if not on_time >= 0:
        raise UsageError("Error: mean on-time must be more than 0 seconds.\n" + usage)

    off_time = _parse_float(argv[3], "mean off-time")
    if not off_time >= 0:
        raise UsageError("Error: mean off-time must be more than 0 seconds.\n" + usage)

    if on_time == 0 and off_time == 0:
        raise UsageError(
            "Error: mean on-time and off-time cannot both be 0 seconds.\n" + usage
        )

    always_on = sys.float_info.max
    uplink = (always_on, 0.0)
    downlink = (always_on, 0.0)

    link = argv[1]
    if link == "uplink":
        uplink = (on_time, off_time)
    elif link == "downlink":
        downlink = (on_time, off_time)
    else:
        raise UsageError(usage)

    return OnOffOptions(
        link=link,
        on_text=argv[2],
        off_text=argv[3],
        uplink_on_time=uplink[0],
        uplink_off_time=uplink[1],
        downlink_on_time=downlink[0],
        downlink_off_time=downlink[1],
        command=_command(argv[4:]),
    )


def parse_meter_args(argv: list[str]) -> MeterOptions:
    """Parse ``PROGRAM [--meter-uplink] [--meter-downlink] [COMMAND...]``."""
    usage = f"Usage: {_prog(argv)} [--meter-uplink] [--meter-downlink] [COMMAND...]"
    try:
        options, rest = getopt.gnu_getopt(
            argv[1:], "ud", ["meter-uplink", "meter-downlink"]
        )
    except getopt.GetoptError as error:
        raise UsageError(f"{error}\n{usage}") from None

    meter_uplink = meter_downlink = False
    for name, _ in options:
        if name in ("-u", "--meter-uplink"):
            meter_uplink = True
        elif name in ("-d", "--meter-downlink"):
            meter_downlink = True

    return MeterOptions(
        meter_uplink=meter_uplink,
        meter_downlink=meter_downlink,
        command=_command(rest),
    )


def parse_link_args(argv: list[str]) -> LinkOptions:
    """Parse ``PROGRAM UPLINK-TRACE DOWNLINK-TRACE [OPTION]... [COMMAND]``."""
    usage = _LINK_USAGE.format(prog=_prog(argv))
    if len(argv) < 3:
        raise UsageError(usage)

    command_line = " ".join(shell_quote(arg) for arg in argv)

    try:
        options, rest = getopt.gnu_getopt(argv[1:], "u:d:", _LINK_LONG_OPTIONS)
    except getopt.GetoptError as error:
        raise UsageError(f"{error}\n{usage}") from None

    settings: dict[str, object] = {}
    for name, value in options:
        if name in ("-u", "--uplink-log"):
            settings["uplink_log"] = value
        elif name in ("-d", "--downlink-log"):
            settings["downlink_log"] = value
        elif name == "--once":
            settings["repeat"] = False
        elif name == "--meter-uplink":
            settings["meter_uplink"] = True
        elif name == "--meter-downlink":
            settings["meter_downlink"] = True
        elif name == "--meter-uplink-delay":
            settings["meter_uplink_delay"] = True
        elif name == "--meter-downlink-delay":
            settings["meter_downlink_delay"] = True
        elif name == "--meter-all":
            for key in (
                "meter_uplink",
                "meter_downlink",
                "meter_uplink_delay",
                "meter_downlink_delay",
            ):
                settings[key] = True
        elif name == "--uplink-queue":
            settings["uplink_queue"] = value
        elif name == "--downlink-queue":
            settings["downlink_queue"] = value
        elif name == "--uplink-queue-args":
            settings["uplink_queue_args"] = value
        elif name == "--downlink-queue-args":
            settings["downlink_queue_args"] = value

    if len(rest) < 2:
        raise UsageError(usage)

    for key in ("uplink_queue", "downlink_queue"):
        queue_type = settings.get(key, "infinite")
        if queue_type not in QUEUE_TYPES:
            raise UsageError(f"Unknown queue type: {queue_type}\n{usage}")

    return LinkOptions(
        uplink_trace=rest[0],
        downlink_trace=rest[1],
        command=_command(rest[2:]),
        command_line=command_line,
        **settings,  # type: ignore[arg-type]
    )