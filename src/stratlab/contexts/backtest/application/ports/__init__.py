from .engine_connector import EngineConnection, EngineConnector
from .source_artifact_store import SourceArtifactStore

__all__ = [
    "EngineConnection",
    "EngineConnector",
    "SourceArtifactStore",
]
