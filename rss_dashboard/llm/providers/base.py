"""Abstract interface for LLM providers behind the command channel."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ProviderError(Exception):
    """Raised when the provider API cannot be reached or rejects the request."""


class CommandProvider(ABC):
    """Provider interface: one prompt in, one free-text reply out."""

    @abstractmethod
    def complete(self, prompt: str, system: str | None = None) -> str:
        """Return the model reply text for prompt.

        Raises:
            ProviderError: on any HTTP-level failure
        """
        raise NotImplementedError
