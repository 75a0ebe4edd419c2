"""Port interface for the model server.

The model server is treated as an opaque external process: reclaim only asks
it which models it can serve and knows how to start it.
"""

from typing import Protocol


class ModelServer(Protocol):
    """Protocol for querying and launching the target model server."""

    def list_models(self, timeout: float) -> list[str]:
        """List the identifiers of the models the server can serve.

        Args:
            timeout: Seconds to wait for the server to answer.

        Returns:
            Model identifiers, e.g. ["llama3.2-vision:latest"].

        Raises:
            ModelServerError: If the query fails, times out, or the server
                reports an error.
        """
        ...

    def launch(self) -> int:
        """Start the server as a detached background process.

        Returns:
            PID of the spawned process.

        Raises:
            LaunchError: If the process could not be started.
        """
        ...
