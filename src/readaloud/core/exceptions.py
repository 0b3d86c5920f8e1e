"""
Custom exceptions for readaloud.
"""


class ReadAloudError(Exception):
    """Base exception for all readaloud errors"""

    pass


class ConfigurationError(ReadAloudError):
    """Raised when configuration is invalid"""

    pass


class TextSourceError(ReadAloudError):
    """Raised when text cannot be acquired from a text source"""

    pass


class SpeechEngineError(ReadAloudError):
    """Raised when a speech engine fails to start or accept a request"""

    pass


class PreferenceStoreError(ReadAloudError):
    """Raised when preferences cannot be persisted"""

    pass
