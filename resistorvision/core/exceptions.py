"""Custom exceptions for the application."""

class ApplicationError(Exception):
    """Base application error."""
    pass

class ConfigError(ApplicationError):
    """Configuration-related errors."""
    pass

class ModelError(ApplicationError):
    """Model loading/inference errors."""
    pass

class ImageLoadError(ApplicationError):
    """Photo could not be read or normalized."""
    pass

class ValidationError(ApplicationError):
    """Invalid input data (unknown color names, short band sequences...)."""
    pass

class DecodeError(ApplicationError):
    """Model output that cannot be mapped onto the color table."""
    pass
