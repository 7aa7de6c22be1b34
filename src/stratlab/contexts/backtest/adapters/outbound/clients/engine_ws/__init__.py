from .engine_connector import (
    WebsocketsEngineConnection,
    WebsocketsEngineConnector,
    build_engine_ssl_context,
    closed_error,
)

__all__ = [
    "WebsocketsEngineConnection",
    "WebsocketsEngineConnector",
    "build_engine_ssl_context",
    "closed_error",
]
