"""Health check endpoint."""

from pydantic import BaseModel
from robyn import SubRouter

from webhooks.core.logger import LogIcon, logger
from webhooks.core.registry import ReceiverRegistry
from webhooks.core.router import parse_response
from webhooks.core.settings import settings as st


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    service: str
    version: str
    receivers: list[str]


def create_health_router(registry: ReceiverRegistry) -> SubRouter:
    router = SubRouter(__file__)

    @router.get("/health")
    async def health_check():
        logger.info("Health check requested", icon=LogIcon.HEALTHCHECK)
        return parse_response(HealthResponse(
            status="healthy",
            service=st.API_NAME,
            version=st.API_VERSION,
            receivers=registry.names,
        ))

    return router
