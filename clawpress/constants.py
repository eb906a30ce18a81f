"""
Constants and enums for ClawPress.

This module centralizes the magic strings used throughout the package
to ensure consistency between the host stores and the integration layer.
"""

from enum import Enum

PLUGIN_VERSION = "0.2.1"

# Reserved credential name and app id bound to the OpenClaw integration
APP_PASSWORD_NAME = "OpenClaw"
APP_ID = "clawpress"

# Attribution tag written on content created via the integration credential
META_KEY = "_clawpress_created"

FLASH_PREFIX = "clawpress_"


class LogLevel(str, Enum):
    """Standard logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentVariable(str, Enum):
    """Standard environment variable names."""

    DATABASE_URL = "DATABASE_URL"
    DB_ECHO = "CLAWPRESS_DB_ECHO"
    LOG_LEVEL = "LOG_LEVEL"
    APP_PASSWORD_NAME = "CLAWPRESS_APP_PASSWORD_NAME"
    SITE_URL = "CLAWPRESS_SITE_URL"
    NONCE_SECRET = "CLAWPRESS_NONCE_SECRET"


class ContentType(str, Enum):
    """Content item types known to the content store."""

    POST = "post"
    PAGE = "page"
    ATTACHMENT = "attachment"


class PostStatus(str, Enum):
    """Content item statuses."""

    PUBLISH = "publish"
    DRAFT = "draft"
    PENDING = "pending"
    PRIVATE = "private"
    FUTURE = "future"
    INHERIT = "inherit"
    TRASH = "trash"


class ContentEvent(str, Enum):
    """Post-commit events fired by the content store."""

    POST_INSERTED = "post_inserted"
    ATTACHMENT_INSERTED = "attachment_inserted"


class UserRole(str, Enum):
    """User roles and their capability sets."""

    ADMINISTRATOR = "administrator"
    EDITOR = "editor"
    AUTHOR = "author"
    CONTRIBUTOR = "contributor"
    SUBSCRIBER = "subscriber"


class Capability(str, Enum):
    """Capabilities checked by the admin actions."""

    MANAGE_OPTIONS = "manage_options"
    LIST_USERS = "list_users"
    EDIT_POSTS = "edit_posts"
    PUBLISH_POSTS = "publish_posts"
    UPLOAD_FILES = "upload_files"
    READ = "read"


ROLE_CAPABILITIES = {
    UserRole.ADMINISTRATOR: frozenset(Capability),
    UserRole.EDITOR: frozenset(
        {Capability.EDIT_POSTS, Capability.PUBLISH_POSTS, Capability.UPLOAD_FILES, Capability.READ}
    ),
    UserRole.AUTHOR: frozenset(
        {Capability.EDIT_POSTS, Capability.PUBLISH_POSTS, Capability.UPLOAD_FILES, Capability.READ}
    ),
    UserRole.CONTRIBUTOR: frozenset({Capability.EDIT_POSTS, Capability.READ}),
    UserRole.SUBSCRIBER: frozenset({Capability.READ}),
}


class NonceAction(str, Enum):
    """CSRF nonce actions for the admin forms."""

    CREATE = "clawpress_create"
    REVOKE = "clawpress_revoke"


class PageState(str, Enum):
    """Mutually exclusive states of the per-user settings view."""

    DISCONNECTED = "disconnected"
    JUST_CREATED = "just_created"
    CONNECTED = "connected"
