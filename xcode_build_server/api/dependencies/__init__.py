from xcode_build_server.api.dependencies.orchestrator import get_orchestrator

__all__ = ["get_orchestrator"]
