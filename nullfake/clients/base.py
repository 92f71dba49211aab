"""
API client interface.

The dispatcher only depends on this capability: send a ChatRequest,
get back the model's message content or a classified error.
"""

from abc import ABC, abstractmethod

from nullfake.models.result import ChatRequest


class ApiClient(ABC):
    """
    Abstract chat completion client.

    Implementations must be safe to call from several threads at once
    and must raise TransportError / UpstreamError (from nullfake.errors)
    instead of vendor exceptions.
    """

    provider_name = "LLM"

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return the model identifier requests are sent to."""

    @abstractmethod
    def send(self, request: ChatRequest) -> str:
        """
        Send one request.

        Args:
            request: Prompts, sampling parameters and timeouts

        Returns:
            Message content produced by the model (may be empty)
        """
