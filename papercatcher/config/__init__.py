from .config import Config, Settings
from .log_config import setup_logging

__all__ = ["Config", "Settings", "setup_logging"]
