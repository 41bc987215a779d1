"""
Media tool subprocess runner.

Runs ffmpeg/ffprobe with an explicit argument vector. A missing binary or a
non-zero exit status raises CompositionError carrying the tail of stderr.
"""

import asyncio
from typing import Sequence, Tuple

from shared.errors import CompositionError
from shared.logging import get_logger

logger = get_logger("compositor.runner")

# Characters of stderr kept in error messages
STDERR_TAIL = 1000


async def run_media_tool(binary: str, args: Sequence[str]) -> Tuple[bytes, bytes]:
    """
    Run a media tool to completion.

    Args:
        binary: Executable name or path (ffmpeg, ffprobe)
        args: Arguments after the executable

    Returns:
        (stdout, stderr)

    Raises:
        CompositionError: If the binary is missing or exits non-zero
    """
    argv = [binary, *[str(a) for a in args]]
    logger.debug(f"Running media tool: {' '.join(argv)}")

    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise CompositionError(f"{binary} not found. Install FFmpeg or set its path in settings") from e
    except OSError as e:
        raise CompositionError(f"Failed to start {binary}: {str(e)}") from e

    stdout, stderr = await process.communicate()

    if process.returncode != 0:
        tail = stderr.decode("utf-8", errors="replace")[-STDERR_TAIL:].strip()
        logger.error(
            f"{binary} exited with code {process.returncode}",
            extra={"returncode": process.returncode, "stderr_tail": tail}
        )
        raise CompositionError(f"{binary} exited with code {process.returncode}: {tail}")

    return stdout, stderr
