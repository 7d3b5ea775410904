"""
ASGI entry point for Sandwich Slots.

    uvicorn sandwich_slots.main:app

Environment variables are loaded from ``.env`` before anything reads config.
"""

# Load environment variables FIRST, before any module imports that need them
from dotenv import load_dotenv
load_dotenv()

import logging

from .app_factory import create_app
from .logging_config import setup_logging

# Configure logging at module load time
setup_logging()

logger = logging.getLogger(__name__)

app = create_app()
