from typing import Optional

from fastapi import FastAPI, Request

from consult_bridge import __version__
from consult_bridge.api.routes.webhook_routes import router as webhook_routes
from consult_bridge.core.config import Settings, settings as default_settings
from consult_bridge.core.exceptions import ConfigurationError
from consult_bridge.core.logging import configure_logging, get_logger
from consult_bridge.services.collaborators import (
    LoggingMessageSender,
    LoggingRecordStore,
    MessageSender,
    RecordStore,
)
from consult_bridge.services.event_dispatcher import EventDispatcher

logger = get_logger(__name__)


def build_store(settings: Settings) -> RecordStore:
    settings.validate_storage()
    if not settings.ENABLE_DATA_STORAGE:
        return LoggingRecordStore()

    from consult_bridge.services.sheets_service import GoogleSheetsStore

    store = GoogleSheetsStore(
        spreadsheet_id=settings.GOOGLE_SHEETS_SPREADSHEET_ID,
        credentials_info=settings.sheets_credentials_info(),
        sheet_name=settings.GOOGLE_SHEETS_RANGE,
    )
    headers = store.initialize_headers()
    if not headers.ok:
        raise ConfigurationError(
            f"Could not write the header row to spreadsheet {settings.GOOGLE_SHEETS_SPREADSHEET_ID}: {headers.detail}"
        )
    return store


def build_sender(settings: Settings) -> MessageSender:
    if not settings.SMS_ENABLED:
        return LoggingMessageSender()

    from consult_bridge.services.sms_service import SnsSmsSender

    return SnsSmsSender(
        region=settings.AWS_REGION,
        access_key_id=settings.AWS_ACCESS_KEY_ID,
        secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
    )


def create_app(settings: Settings = default_settings, dispatcher: Optional[EventDispatcher] = None) -> FastAPI:
    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    settings.validate_signing()
    logger.info(f"Starting webhook bridge with configuration: {settings.describe()}")

    if dispatcher is None:
        dispatcher = EventDispatcher(
            store=build_store(settings),
            sender=build_sender(settings),
            settings=settings,
        )

    app = FastAPI(
        title="Consult Bridge – Call Analysis Webhook",
        description="Turns voice-agent call events into consultation records and confirmation texts",
        version=__version__,
    )
    app.state.dispatcher = dispatcher

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        return response

    @app.get("/")
    async def health():
        return {"status": "healthy"}

    app.include_router(webhook_routes)
    return app


app = create_app()


def run():
    import uvicorn

    uvicorn.run("consult_bridge.main:app", host="0.0.0.0", port=default_settings.PORT)
