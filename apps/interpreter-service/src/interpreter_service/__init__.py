"""Counseling Interpreter Service.

Real-time bilingual interpretation for psychological counseling sessions:
speech recognition, streaming translation and speech synthesis relayed
between a student and a counselor over Socket.IO.
"""

__version__ = "1.0.0"
