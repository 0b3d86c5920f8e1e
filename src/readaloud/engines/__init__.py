"""
Speech engine implementations.
"""

from readaloud.engines.pyttsx3_engine import Pyttsx3SpeechEngine

__all__ = ["Pyttsx3SpeechEngine"]
