"""Ollama adapter implementing the ModelServer protocol via the ollama CLI."""

import logging
import os
import re
import subprocess
import sys
import time

from reclaim.domain.exceptions import LaunchError, ModelServerError

logger = logging.getLogger(__name__)

# "ollama list" reports failures as "Error: ..." lines, sometimes with exit code 0
_ERROR_LINE = re.compile(r"^\s*Error\b", re.MULTILINE)

# Windows process creation flags for a child that outlives this console
_DETACHED_PROCESS = 0x00000008
_CREATE_NEW_PROCESS_GROUP = 0x00000200


def parse_model_list(output: str) -> list[str]:
    """Parse the table printed by "ollama list" into model identifiers.

    Args:
        output: Raw stdout, e.g.
            NAME                      ID              SIZE      MODIFIED
            llama3.2-vision:latest    085a1fdae525    7.9 GB    2 days ago

    Returns:
        Model identifiers in the order listed (first column of each row).
    """
    models = []
    for line in output.splitlines():
        parts = line.split()
        if not parts:
            continue
        if parts[0] == "NAME":
            # Header row
            continue
        models.append(parts[0])
    return models


class OllamaCliServer:
    """Model server adapter using subprocess calls to the ollama CLI."""

    def __init__(self, executable: str = "ollama", port: int | None = None) -> None:
        """Initialize the adapter.

        Args:
            executable: Name or path of the ollama executable.
            port: Port the server listens on. Passed to ollama as OLLAMA_HOST
                unless the caller's environment already sets it.
        """
        self.executable = executable
        self.port = port

    def _env(self) -> dict[str, str]:
        env = os.environ.copy()
        if self.port is not None:
            env.setdefault("OLLAMA_HOST", f"127.0.0.1:{self.port}")
        return env

    def list_models(self, timeout: float) -> list[str]:
        """Run "ollama list" and return the listed model identifiers.

        Raises:
            ModelServerError: If ollama is missing, times out, exits non-zero
                or prints an error.
        """
        cmd = [self.executable, "list"]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
                env=self._env(),
            )
        except FileNotFoundError as e:
            raise ModelServerError(
                f"'{self.executable}' not found",
                hint="Install ollama or set server_executable in the config file",
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ModelServerError(f"'{' '.join(cmd)}' timed out after {timeout}s") from e
        except OSError as e:
            raise ModelServerError(f"Failed to run '{' '.join(cmd)}': {e}") from e

        output = f"{result.stdout}\n{result.stderr}"
        if result.returncode != 0 or _ERROR_LINE.search(output):
            detail = result.stderr.strip() or result.stdout.strip() or "no output"
            raise ModelServerError(
                f"'{' '.join(cmd)}' failed (exit code {result.returncode}): {detail}"
            )

        return parse_model_list(result.stdout)

    def _spawn_background_process(self, cmd: list[str]) -> subprocess.Popen:
        """Spawn the server detached from this process.

        Args:
            cmd: Command to execute

        Returns:
            The spawned process
        """
        kwargs: dict = {
            "stdout": subprocess.DEVNULL,
            "stderr": subprocess.DEVNULL,
            "stdin": subprocess.DEVNULL,
            "env": self._env(),
        }
        if sys.platform == "win32":
            kwargs["creationflags"] = _DETACHED_PROCESS | _CREATE_NEW_PROCESS_GROUP
        else:
            kwargs["start_new_session"] = True  # Detach from parent
        return subprocess.Popen(cmd, **kwargs)

    def launch(self) -> int:
        """Start "ollama serve" in the background.

        Returns:
            PID of the spawned server.

        Raises:
            LaunchError: If the process cannot be spawned or exits immediately.
        """
        cmd = [self.executable, "serve"]
        logger.debug("Spawning %s", " ".join(cmd))
        try:
            process = self._spawn_background_process(cmd)
        except OSError as e:
            raise LaunchError(f"Failed to start '{' '.join(cmd)}': {e}") from e

        time.sleep(0.1)  # Brief wait for instant failures
        exit_code = process.poll()
        if exit_code is not None:
            raise LaunchError(
                f"'{' '.join(cmd)}' exited immediately (exit code: {exit_code})"
            )
        return process.pid
