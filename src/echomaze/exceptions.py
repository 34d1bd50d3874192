class EchoMazeError(Exception):
    """Base exception for the echo-maze project."""


class ConfigError(EchoMazeError):
    """Raised when configuration values are missing or out of range."""


class InvalidInputError(EchoMazeError):
    """Raised when malformed input (direction, finger count, event) reaches the core."""
