from xcode_build_server.api.routes import health, tools, resources

__all__ = [
    "health",
    "tools",
    "resources",
]
