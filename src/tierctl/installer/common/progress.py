from __future__ import annotations

from tierctl.utils.console_like import ConsoleLike, coalesce_console


class ProgressTracker:
    """Step counter for a tier's install, printed as ``[k/n] (p%) label``.

    Display only: nothing branches on the percentage.
    """

    def __init__(self, console: ConsoleLike | None = None) -> None:
        self._console = coalesce_console(console)
        self.total_steps = 0
        self.current_step = 0

    def set_total_steps(self, total: int) -> None:
        """Start a new count of ``total`` steps."""
        self.total_steps = total
        self.current_step = 0

    def percent(self) -> int:
        if self.total_steps == 0:
            return 0
        return self.current_step * 100 // self.total_steps

    def progress(self, label: str) -> int:
        """Advance one step, print the progress line and return the percentage."""
        self.current_step += 1
        pct = self.percent()
        self._console.progress(
            f"[{self.current_step}/{self.total_steps}] ({pct}%) {label}"
        )
        return pct
