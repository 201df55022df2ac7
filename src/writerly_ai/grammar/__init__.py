"""Grammar checker proxy client."""

from writerly_ai.grammar.client import GrammarClient, GrammarServiceError, GrammarTimeoutError

__all__ = ["GrammarClient", "GrammarServiceError", "GrammarTimeoutError"]
