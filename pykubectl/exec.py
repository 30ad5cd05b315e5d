import logging
import subprocess
from typing import List, Optional, Sequence

from .errors import CommandError, CommandTimeout

logger = logging.getLogger("pykubectl.exec")


def run_command(
        executable: str,
        args: Sequence[str],
        stdin: Optional[bytes] = None,
        timeout: Optional[float] = None,
        action: str = "command failed",
) -> bytes:
    """Run ``executable`` with ``args`` and return its stdout verbatim.

    ``stdin`` is written to the child's input pipe, which is closed before
    waiting for exit. Without it the child reads from the null device.
    ``timeout`` is unbounded by default; on expiry the child is killed and
    :class:`CommandTimeout` is raised.

    Anything other than a zero exit raises :class:`CommandError` with the
    captured stderr attached.
    """
    argv: List[str] = [executable, *args]
    logger.debug("Running %s", argv)

    try:
        proc = subprocess.run(
            argv,
            input=stdin,
            stdin=None if stdin is not None else subprocess.DEVNULL,
            capture_output=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        stderr = _decode(e.stderr)
        raise CommandTimeout(
            action, argv, f"timed out after {timeout}s", stderr
        ) from e
    except OSError as e:
        raise CommandError(action, argv, str(e)) from e

    logger.debug("%s exited with status %s", executable, proc.returncode)
    if proc.returncode != 0:
        raise CommandError(
            action,
            argv,
            f"exit status {proc.returncode}",
            _decode(proc.stderr),
            proc.returncode,
        )
    return proc.stdout


def _decode(data: Optional[bytes]) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")
