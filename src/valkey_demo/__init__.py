from valkey_demo.client import ClientOptions, build_client, build_client_options, open_client
from valkey_demo.config import Settings, load_settings
from valkey_demo.credentials import ConnectionDescriptor, resolve

__version__ = "0.1.0"

__all__ = [
    "ClientOptions",
    "ConnectionDescriptor",
    "Settings",
    "__version__",
    "build_client",
    "build_client_options",
    "load_settings",
    "open_client",
    "resolve",
]
