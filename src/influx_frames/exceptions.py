"""Exceptions raised while turning engine responses into frames"""  # noqa: D415


class InfluxFramesError(Exception):
    """Base exception for response parsing errors"""  # noqa: D415


class DecodeError(InfluxFramesError):
    """Raised when the response body is not a valid result document"""  # noqa: D415


class EngineError(InfluxFramesError):
    """Raised when the query engine reports a failure for the whole request"""  # noqa: D415


class QueryError(InfluxFramesError):
    """Raised when the engine reports a failure for a single query"""  # noqa: D415
