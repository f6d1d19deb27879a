"""SpeechPace - real-time speaking rate monitor."""

__version__ = "0.1.0"
