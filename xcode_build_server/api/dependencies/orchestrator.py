from fastapi import Request

from xcode_build_server.orchestrator.coordinator import XcodeBuildOrchestrator


def get_orchestrator(request: Request) -> XcodeBuildOrchestrator:
    return request.app.state.orchestrator
