from .source_artifact_store import DEFAULT_ARTIFACT_EXTENSION, FilesystemSourceArtifactStore

__all__ = [
    "DEFAULT_ARTIFACT_EXTENSION",
    "FilesystemSourceArtifactStore",
]
