"""Pretty-printing of resolved snippet text."""

from __future__ import annotations

import subprocess
from typing import Callable, Optional, Protocol, Sequence

from ..logging import get_logger

DEFAULT_RUSTFMT_COMMAND: Sequence[str] = ("rustfmt", "--edition", "2021")
DEFAULT_TIMEOUT = 30.0

Runner = Callable[..., str]


class Formatter(Protocol):
    """``text -> formatted text``; None when the text cannot be formatted."""

    def format(self, text: str) -> Optional[str]:
        ...


class PassthroughFormatter:
    """Returns text unchanged apart from a guaranteed trailing newline."""

    def format(self, text: str) -> Optional[str]:
        stripped = text.strip()
        return stripped + "\n" if stripped else ""


class RustfmtFormatter:
    """Pipes text through ``rustfmt`` and reads the formatted result from stdout."""

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_RUSTFMT_COMMAND,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        runner: Runner | None = None,
    ) -> None:
        self.command = list(command)
        self.timeout = timeout
        self._runner = runner or self._default_runner
        self.logger = get_logger("formatter")

    def format(self, text: str) -> Optional[str]:
        try:
            return self._runner(self.command, input_text=text, timeout=self.timeout)
        except FileNotFoundError:
            self.logger.warning("Formatter %s is not installed", self.command[0])
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip().splitlines()
            self.logger.debug(
                "Formatter exited with status %s%s",
                exc.returncode,
                f": {detail[0]}" if detail else "",
            )
        except subprocess.TimeoutExpired:
            self.logger.warning("Formatter timed out after %.1fs", self.timeout)
        except OSError as exc:
            self.logger.warning("Formatter could not be started: %s", exc)
        return None

    @staticmethod
    def _default_runner(args: Sequence[str], *, input_text: str, timeout: float) -> str:
        completed = subprocess.run(
            list(args),
            input=input_text,
            check=True,
            text=True,
            capture_output=True,
            timeout=timeout,
        )
        return completed.stdout


__all__ = [
    "DEFAULT_RUSTFMT_COMMAND",
    "DEFAULT_TIMEOUT",
    "Formatter",
    "PassthroughFormatter",
    "RustfmtFormatter",
]
