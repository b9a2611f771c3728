"""Grid Engine launcher: runs qsub as a subprocess off the event loop."""

from __future__ import annotations

import asyncio
import logging
import subprocess

from .base import Launcher

logger = logging.getLogger(__name__)

TIMEOUT_RETURNCODE = 124


class QsubLauncher(Launcher):
    """Launcher that wraps synchronous subprocess.run calls in asyncio.to_thread()."""

    def __init__(self, cwd: str | None = None, timeout: float | None = None):
        self.cwd = cwd
        self.timeout = timeout

    def _launch_sync(self, argv: list[str]) -> tuple[int, str, str]:
        try:
            result = subprocess.run(
                argv,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.error("%s timed out after %ss", argv[0], self.timeout)
            return (TIMEOUT_RETURNCODE, "", f"timed out after {self.timeout}s")
        if result.stdout.strip():
            logger.info("%s", result.stdout.strip())
        return (result.returncode, result.stdout, result.stderr)

    async def launch(self, argv: list[str]) -> tuple[int, str, str]:
        return await asyncio.to_thread(self._launch_sync, argv)
