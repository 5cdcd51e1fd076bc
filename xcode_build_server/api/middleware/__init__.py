from xcode_build_server.api.middleware.logging_middleware import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
