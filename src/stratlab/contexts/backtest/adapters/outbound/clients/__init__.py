from .engine_ws import WebsocketsEngineConnector

__all__ = ["WebsocketsEngineConnector"]
