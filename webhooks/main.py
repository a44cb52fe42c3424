"""robyn-webhook-receivers - WebHook receiver service powered by Robyn."""

from robyn import Robyn

from webhooks.api.health import create_health_router
from webhooks.api.incoming import create_incoming_router
from webhooks.core.logger import LogIcon, logger
from webhooks.core.receivers import select_receivers
from webhooks.core.registry import ReceiverRegistry
from webhooks.core.settings import settings as st
from webhooks.middlewares.base import MiddlewareHandler
from webhooks.middlewares.pipeline import build_webhook_pipeline


def create_app() -> Robyn:
    """Build the app. Configuration errors raise here, before serving traffic."""
    app = Robyn(__file__)

    registry = ReceiverRegistry.from_descriptors(select_receivers(st.ENABLED_RECEIVERS))

    # Routers
    incoming = create_incoming_router(registry, st.WEBHOOK_PATH)
    app.include_router(create_health_router(registry))
    app.include_router(incoming)

    # Middlewares
    middlewares = MiddlewareHandler(app)
    middlewares.register(*build_webhook_pipeline(incoming.actions, registry))
    middlewares.apply()

    logger.info("App ready", icon=LogIcon.COMPLETE, receivers=len(registry), actions=len(incoming.actions))
    return app


def main() -> None:
    logger.info("Starting server", icon=LogIcon.START, service=st.API_NAME, host=st.API_HOST, port=st.API_PORT)
    create_app().start(host=st.API_HOST, port=st.API_PORT)


if __name__ == "__main__":
    main()
