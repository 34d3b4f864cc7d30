"""RPS (Rencana Pembelajaran Semester) editor service."""

__version__ = "0.1.0"
