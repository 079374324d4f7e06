"""
Boomi Proxy - HTTP relay for the Boomi AtomSphere REST API

Lists process deployments, reports whether a deployment is listener- or
schedule-driven, toggles listeners and schedules, and lists processes.
Credentials travel with every request and are never stored.
"""

__version__ = "0.1.0"

from .config import ProxyConfig, load_config, config_from_env
from .server import create_app

__all__ = [
    "__version__",
    "ProxyConfig",
    "load_config",
    "config_from_env",
    "create_app",
]
