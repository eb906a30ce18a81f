"""Utility modules for ClawPress."""

from .json_utils import pretty_dumps
from .logger import ContextAwareLogger, get_logger, reset_logging
from .nonce_utils import create_nonce, verify_nonce
from .password_utils import chunk_password, generate_password, hash_password, verify_password

__all__ = [
    # JSON utilities
    "pretty_dumps",
    # Logging utilities
    "ContextAwareLogger",
    "get_logger",
    "reset_logging",
    # Nonce utilities
    "create_nonce",
    "verify_nonce",
    # Password utilities
    "chunk_password",
    "generate_password",
    "hash_password",
    "verify_password",
]
