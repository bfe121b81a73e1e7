"""
Serverless entry point.

Platforms that serve Python functions from api/index.py import the
module-level ``app``. Configuration comes from the environment; a missing
BACKEND_URL is reported per request rather than at import time.
"""

from app import create_app
from core.config import load_config
from ui.console_logger import ConsoleLogger

config = load_config()
app = create_app(config, ConsoleLogger(config.logging))
