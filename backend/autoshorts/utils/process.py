"""Subprocess helpers shared by the ffmpeg and yt-dlp wrappers."""
import asyncio
import logging
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of an external tool invocation."""
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


async def run_command(cmd: List[str]) -> CommandResult:
    """
    Run an external command and wait for it to exit.

    If the awaiting task is cancelled the child process is killed before
    the cancellation propagates, so no tool keeps writing into the clips
    directory after its window has been abandoned.

    Args:
        cmd: Program and arguments

    Returns:
        CommandResult with decoded output
    """
    logger.debug(f"Running command: {' '.join(cmd)}")

    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE
    )

    try:
        stdout, stderr = await proc.communicate()
    except asyncio.CancelledError:
        if proc.returncode is None:
            logger.info(f"Terminating {cmd[0]} (pid {proc.pid}) after cancellation")
            proc.kill()
            await proc.wait()
        raise

    return CommandResult(
        returncode=proc.returncode,
        stdout=stdout.decode("utf-8", errors="ignore"),
        stderr=stderr.decode("utf-8", errors="ignore"),
    )
