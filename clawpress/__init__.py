"""
ClawPress: connect a site to the OpenClaw agent through a dedicated
application password and track what the agent publishes.
"""

from .constants import PLUGIN_VERSION
from .plugin import ClawPressPlugin

__version__ = PLUGIN_VERSION

__all__ = ["ClawPressPlugin", "__version__"]
