# src/vault_cli/sync/gateway.py

"""Boundary to the external vault CLI (`./cli.sh status|sync|daily` by default)."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import shlex
from pathlib import Path

from ..core.errors import ExternalToolError

logger = logging.getLogger(__name__)


class CliGateway:
    """
    Runs `<cli_command> <sub-command>` inside the vault root.

    Every call is bounded by `timeout` seconds; on timeout the child is killed
    and ExternalToolError(timed_out=True) is raised. A non-zero exit raises
    ExternalToolError carrying stdout/stderr verbatim.
    """

    def __init__(self, vault_path: str | Path, *, command: str = "./cli.sh", timeout: float = 30.0) -> None:
        self.vault_path = Path(vault_path)
        self.command = command
        self.timeout = timeout

    async def run(self, command: str) -> str:
        argv = [*shlex.split(self.command), *shlex.split(command)]
        logger.debug("Running %s (cwd=%s)", argv, self.vault_path)

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                cwd=self.vault_path,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ExternalToolError(f"Unable to run {argv[0]}: {exc}", command=argv) from exc

        try:
            raw_out, raw_err = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            raise ExternalToolError(
                f"{command} timed out after {self.timeout:g}s",
                command=argv,
                timed_out=True,
            ) from None

        stdout = raw_out.decode("utf-8", errors="replace") if raw_out else ""
        stderr = raw_err.decode("utf-8", errors="replace") if raw_err else ""

        if process.returncode != 0:
            message = stderr.strip() or stdout.strip() or f"{command} exited with status {process.returncode}"
            raise ExternalToolError(
                message,
                command=argv,
                returncode=process.returncode,
                stdout=stdout,
                stderr=stderr,
            )

        return stdout or stderr

    async def status(self) -> str:
        return await self.run("status")

    async def sync(self) -> str:
        return await self.run("sync")

    async def daily(self) -> str:
        return await self.run("daily")
