# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global logger instance for devflow."""
import logging

logger: logging.Logger = logging.getLogger("devflow")
