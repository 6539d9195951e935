"""External command execution

Commands run one at a time through a shell chosen once by the caller
(see ``detect_shell``) and passed into ``CommandRunner``.
"""

import asyncio
import logging
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..api.exceptions import CommandFailedError
from ..constants import POWERSHELL_CANDIDATES, EMOJI_SUCCESS, EMOJI_ERROR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Shell:
    """Shell used to interpret command strings

    Attributes:
        executable: PowerShell executable, or None for the platform default shell
    """

    executable: Optional[str] = None

    @property
    def is_powershell(self) -> bool:
        return self.executable is not None

    @property
    def name(self) -> str:
        return self.executable or "default"


def detect_shell(platform: str = None,
                 which: Callable[[str], Optional[str]] = shutil.which) -> Shell:
    """
    Detect the shell to run commands with

    On Windows PowerShell is preferred (pwsh first, then Windows
    PowerShell). Everywhere else the platform default shell is used.

    Args:
        platform: Platform string (defaults to sys.platform)
        which: Executable lookup function

    Returns:
        Shell to pass to CommandRunner
    """
    platform = platform or sys.platform
    if platform != "win32":
        return Shell()

    for candidate in POWERSHELL_CANDIDATES:
        if which(candidate):
            return Shell(executable=candidate)

    return Shell()


class CommandRunner:
    """Runs command lists sequentially, stopping at the first failure"""

    def __init__(self, shell: Shell = None, timeout: Optional[float] = None):
        """
        Initialize command runner

        Args:
            shell: Shell to run commands with (platform default if None)
            timeout: Per-command timeout in seconds (None for no limit)
        """
        self.shell = shell or Shell()
        self.timeout = timeout

    async def run(self, commands: List[str], cwd: Union[str, Path], label: str) -> None:
        """
        Run commands in order

        Args:
            commands: Command strings
            cwd: Working directory
            label: Description used in logs and errors

        Raises:
            CommandFailedError: On the first command that exits non-zero
        """
        total = len(commands)
        logger.info(f"Executing {label} ({total} commands)")

        for index, command in enumerate(commands, 1):
            await self.run_command(command, cwd, f"{label} [{index}/{total}]: {command}")

        logger.info(f"All {label} completed successfully")

    async def run_command(self,
                          command: str,
                          cwd: Union[str, Path],
                          description: Optional[str] = None) -> str:
        """
        Run one command and capture its output

        Returns:
            Captured stdout

        Raises:
            CommandFailedError: If the command exits non-zero or times out
        """
        desc = description or command
        logger.info(f"Executing: {desc}")
        logger.debug(f"Command: {command}")
        logger.debug(f"Working directory: {cwd}")

        try:
            process = await self._spawn(command, cwd)
        except OSError as e:
            logger.error(f"{EMOJI_ERROR} {desc} failed")
            raise CommandFailedError(desc, None, stderr=str(e))

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                process.communicate(),
                timeout=self.timeout
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            logger.error(f"{EMOJI_ERROR} {desc} timed out after {self.timeout}s")
            raise CommandFailedError(
                desc, None, stderr=f"Command timed out after {self.timeout} seconds"
            )

        stdout = stdout_bytes.decode(errors="replace").strip()
        stderr = stderr_bytes.decode(errors="replace").strip()

        if process.returncode != 0:
            logger.error(f"{EMOJI_ERROR} {desc} failed")
            if stdout:
                logger.error(f"stdout: {stdout}")
            if stderr:
                logger.error(f"stderr: {stderr}")
            raise CommandFailedError(desc, process.returncode, stdout=stdout, stderr=stderr)

        if stdout:
            logger.info(stdout)
        if stderr:
            logger.warning(stderr)

        logger.info(f"{EMOJI_SUCCESS} {desc} completed successfully")
        return stdout

    async def _spawn(self, command: str, cwd: Union[str, Path]) -> asyncio.subprocess.Process:
        if self.shell.is_powershell:
            return await asyncio.create_subprocess_exec(
                self.shell.executable, "-Command", command,
                cwd=str(cwd),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )

        return await asyncio.create_subprocess_shell(
            command,
            cwd=str(cwd),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE
        )
