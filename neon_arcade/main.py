from fastapi import FastAPI
import logging

from neon_arcade.api.routes import router
from neon_arcade.settings import settings_from_env

app = FastAPI(title="neon-arcade", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=settings_from_env().log_level)
logger = logging.getLogger(__name__)


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "neon-arcade", "version": "0.1.0"}
