"""FastAPI application entry point."""
import logging

from fastapi import FastAPI

from core.constants import LOG_LEVEL
from routes import rooms, websocket


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app() -> FastAPI:
    """Build the application with all routers mounted."""
    configure_logging()

    app = FastAPI(title="Undercover")
    app.include_router(rooms.router)
    app.include_router(websocket.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
