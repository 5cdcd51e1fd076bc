from xcode_build_server.orchestrator.coordinator import XcodeBuildOrchestrator

__all__ = ["XcodeBuildOrchestrator"]
