import logging

from movies_api.core.config import get_settings
from movies_api.main import app

# Setup basic logging to capture errors in Vercel Logs
logging.basicConfig(level=get_settings().log_level.upper())
logger = logging.getLogger(__name__)

logger.info("api/index.py initialized")

# This is the entry point for Vercel Serverless Functions
# It exports the FastAPI app instance
__all__ = ["app"]
