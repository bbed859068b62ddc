"""Run the hosting API with uvicorn."""
import uvicorn

from ..config import get_settings
from .app import create_app

settings = get_settings()

uvicorn.run(
    create_app(settings),
    host=settings.host,
    port=settings.port,
)
