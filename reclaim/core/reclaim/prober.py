"""Availability prober: is the server already serving the required model?"""

import logging

from reclaim.domain.config import RunConfig
from reclaim.domain.entities import ProbeStatus
from reclaim.domain.exceptions import ModelServerError
from reclaim.ports.model_server import ModelServer

logger = logging.getLogger(__name__)


def model_matches(required: str, available: str) -> bool:
    """Check whether an available model identifier satisfies the required one.

    Identifiers must be equal, except that an untagged requirement matches
    any tag of the same model ("llama3.2-vision" matches
    "llama3.2-vision:latest"). Comparison is case-sensitive.

    Args:
        required: Model identifier the caller asked for.
        available: Model identifier reported by the server.

    Returns:
        True if the available model satisfies the requirement.
    """
    if required == available:
        return True
    if ":" in required:
        return False
    name, _, _tag = available.partition(":")
    return name == required


class AvailabilityProber:
    """Queries the model server once and classifies the answer."""

    def __init__(self, server: ModelServer) -> None:
        self._server = server

    def probe(self, config: RunConfig) -> ProbeStatus:
        """Probe the server for the required model.

        A failed query is never retried here; it simply means the server is
        not responding.

        Args:
            config: Run configuration with the required model and probe timeout.

        Returns:
            ProbeStatus classifying the server's state.
        """
        logger.debug("Listing models (timeout %ss)", config.probe_timeout_seconds)
        try:
            models = self._server.list_models(timeout=config.probe_timeout_seconds)
        except ModelServerError as e:
            logger.info(f"Model server not responding: {e.message}")
            return ProbeStatus.NOT_RESPONDING

        logger.debug("Server reports models: %s", models)
        if any(model_matches(config.required_model, model) for model in models):
            return ProbeStatus.SATISFIED
        return ProbeStatus.RUNNING_WITHOUT_MODEL
