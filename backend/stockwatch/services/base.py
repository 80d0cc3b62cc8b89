"""
Base Service Interface

Every service exposes one typed entry point (execute) plus a health probe.
Service failures are raised as ServiceError subclasses and mapped to HTTP
status codes by the API layer.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    Base class for all services.

    InputT / OutputT are the pydantic contracts in stockwatch.schemas.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Service name for logging and error payloads."""
        pass

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """
        Run the service on a request.

        Raises:
            ServiceError: If the request cannot be served
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass

    async def validate_input(self, input_data: InputT) -> InputT:
        """
        Normalize and check a request.
        Pydantic handles field validation; override for rules it cannot express.
        """
        return input_data


class ServiceError(Exception):
    """Base exception for service errors."""

    status_code = 500

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")

    def to_dict(self) -> dict:
        """Payload for HTTPException.detail."""
        return {
            "service": self.service_name,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(ServiceError):
    """Request rejected before any work was done (e.g. malformed symbol)."""

    status_code = 400


class ExternalAPIError(ServiceError):
    """Price provider or LLM failed or answered garbage."""

    status_code = 502
