"""
FastAPI dependencies.

Per-process client handles and the collaborators built from them.
"""

from fastapi import Depends, Request

from api_gateway.orchestrator import PipelineOrchestrator
from modules.compositor.engine import CompositingEngine
from modules.content_generator.client import ContentGenerator
from shared.clients import ServiceClients
from shared.errors import ConfigError


def get_clients(request: Request) -> ServiceClients:
    """
    Client handles created at application startup.

    Raises:
        ConfigError: If the application was started without clients
    """
    clients = getattr(request.app.state, "clients", None)
    if clients is None:
        raise ConfigError("Service clients are not initialized")
    return clients


def get_content_generator(clients: ServiceClients = Depends(get_clients)) -> ContentGenerator:
    """
    Raises:
        ConfigError: If OPENAI_API_KEY is not configured
    """
    return ContentGenerator.from_clients(clients)


def get_compositor(clients: ServiceClients = Depends(get_clients)) -> CompositingEngine:
    return CompositingEngine.from_settings(clients.settings)


def get_orchestrator(clients: ServiceClients = Depends(get_clients)) -> PipelineOrchestrator:
    return PipelineOrchestrator(clients)
