"""
Secret generation and hashing for application passwords.
"""

import re
import secrets
import string

import bcrypt

PASSWORD_ALPHABET = string.ascii_letters + string.digits


def generate_password(length: int = 24) -> str:
    """Generate a random alphanumeric secret."""
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


def chunk_password(password: str, size: int = 4) -> str:
    """Split a secret into space-separated groups for readability."""
    return " ".join(password[i : i + size] for i in range(0, len(password), size))


def normalize_password(password: str) -> str:
    """Strip the separators users may paste along with a chunked secret."""
    return re.sub(r"[^a-zA-Z0-9]", "", password or "")


def hash_password(password: str) -> str:
    """Hash a secret using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a secret against its hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False
