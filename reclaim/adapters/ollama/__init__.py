"""Ollama model server adapter."""

from reclaim.adapters.ollama.cli_server import OllamaCliServer, parse_model_list

__all__ = ["OllamaCliServer", "parse_model_list"]
