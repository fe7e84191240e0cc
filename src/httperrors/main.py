from fastapi import FastAPI

from httperrors.config import Settings, get_settings
from httperrors.handlers import register_error_handlers
from httperrors.logging import LoggingSettings, configure_logging
from httperrors.middleware import ErrorResponseMiddleware, RequestIDMiddleware


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build a FastAPI app whose failed requests all end in respond().

    Logging is configured here, before the first request can log an error.
    """
    settings = settings or get_settings()
    configure_logging(LoggingSettings())

    app = FastAPI(title=settings.title)
    app.state.settings = settings

    # Last added runs first: RequestIDMiddleware wraps the error boundary.
    app.add_middleware(ErrorResponseMiddleware, settings=settings)
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app, settings)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness check."""
        return {"status": "ok"}

    return app


app = create_app()
