# src/vault_cli/core/errors.py

"""Exception types raised by the core.

Missing files are reported with the builtin FileNotFoundError; everything the
core raises on its own derives from VaultCliError.
"""

from __future__ import annotations

from collections.abc import Sequence


class VaultCliError(Exception):
    """Base class for vault-cli failures."""


class ExternalToolError(VaultCliError):
    """The vault CLI (status/sync/search) exited non-zero, timed out, or could not start.

    stdout/stderr are kept verbatim for diagnostics.
    """

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
        timed_out: bool = False,
    ) -> None:
        super().__init__(message)
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.timed_out = timed_out


class StaleReferenceError(VaultCliError):
    """A task's recorded line no longer holds the checkbox it was scanned from."""

    def __init__(self, message: str, *, file_path: str, line_number: int) -> None:
        super().__init__(message)
        self.file_path = file_path
        self.line_number = line_number
