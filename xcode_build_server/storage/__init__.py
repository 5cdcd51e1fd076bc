from xcode_build_server.storage.artifact_storage import ArtifactStorage, LogArtifactSet
from xcode_build_server.storage.latest_result import LatestResultPointer

__all__ = ["ArtifactStorage", "LogArtifactSet", "LatestResultPointer"]
