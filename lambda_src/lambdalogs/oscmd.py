# oscmd.py
import logging
import subprocess

from .errors import CommandExecutionError, InvalidOutputError

logger = logging.getLogger(__name__)

STDERR_EXCERPT_CHARS = 200


def run_os_cmd(cmd: str, args=(), timeout=None) -> str:
    """Run a command on the host OS and return its trimmed stdout.

    Output is decoded leniently, invalid UTF-8 bytes become U+FFFD.
    """
    argv = [cmd, *args]
    try:
        result = subprocess.run(argv, capture_output=True, timeout=timeout, check=False)
    except OSError as e:
        raise CommandExecutionError(f"Unable to start command {argv}: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise CommandExecutionError(f"Command {argv} timed out after {timeout}s") from e

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise CommandExecutionError(
            f"Command {argv} exited with status {result.returncode}: "
            f"{stderr[:STDERR_EXCERPT_CHARS]}"
        )

    return result.stdout.decode("utf-8", errors="replace").strip()


class HostDiagnostics:
    """Queries about the host the function is running on."""

    CPU_COUNT_CMD = ("nproc", ("--all",))

    def __init__(self, runner=run_os_cmd):
        self._runner = runner

    def cpu_core_count(self, timeout=None) -> int:
        cmd, args = self.CPU_COUNT_CMD
        output = self._runner(cmd, args, timeout=timeout)
        try:
            cores = int(output)
        except ValueError:
            raise InvalidOutputError(f"Expected an integer from {cmd}, got '{output}'") from None
        logger.debug(f"Host reports {cores} CPU cores")
        return cores
