from .filesystem import FilesystemSourceArtifactStore

__all__ = ["FilesystemSourceArtifactStore"]
