from __future__ import annotations

from typing import Protocol

from rich.console import ConsoleRenderable


class ConsoleLike(Protocol):
    def print(self, msg: ConsoleRenderable | str | None = None) -> None: ...

    def info(self, msg: str) -> None: ...

    def warn(self, msg: str) -> None: ...

    def error(self, msg: str) -> None: ...

    def ok(self, msg: str) -> None: ...

    def progress(self, msg: str) -> None: ...

    def rule(self, title: str, style: str = "bold") -> None: ...


class StdoutConsole:
    """Plain console used when no rich console is supplied.

    Lets the installer library run outside the CLI (scripts, tests).
    """

    def print(self, msg: ConsoleRenderable | str | None = None) -> None:
        print(msg if msg is not None else "")

    def info(self, msg: str) -> None:
        print(msg)

    def warn(self, msg: str) -> None:
        print(f"WARN  {msg}")

    def error(self, msg: str) -> None:
        print(f"ERROR {msg}")

    def ok(self, msg: str) -> None:
        print(msg)

    def progress(self, msg: str) -> None:
        print(msg)

    def rule(self, title: str, style: str = "bold") -> None:
        print("=" * 40)
        print(f"  {title}")
        print("=" * 40)


def coalesce_console(console: ConsoleLike | None) -> ConsoleLike:
    return console if console is not None else StdoutConsole()
