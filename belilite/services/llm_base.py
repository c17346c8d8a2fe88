"""
BeliLite Backend — Abstract Summarization Service Interface
=============================================================

What:  Abstract base class defining the contract for text summarization providers.
Why:   Routes depend on this interface, so tests (or another provider) can
       stand in for the xAI implementation without touching calling code.
How:   Concrete implementations inherit from LLMService and implement summarize().
"""

from abc import ABC, abstractmethod


class LLMService(ABC):
    """
    Abstract interface for AI-powered text summarization.

    Contract:
        - summarize() accepts raw user text and returns a trimmed summary
        - Input validation and credential checks happen before any network I/O
        - Provider failures are translated into UpstreamError subclasses
        - No retries: one call in, one result or one error out
    """

    @abstractmethod
    async def summarize(self, text: str) -> str:
        """
        Summarize text in 2-3 sentences.

        Raises:
            ValidationError: text is missing or whitespace-only
            ConfigurationError: provider credential is not configured
            UpstreamAuthError: provider rejected the credential
            UpstreamRateLimitError: provider is rate limiting us
            UpstreamError: any other provider or transport failure
        """
        ...

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """True when the provider credential is present (used by /health)."""
        ...
