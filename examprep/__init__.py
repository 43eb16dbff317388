"""Exam-preparation chat service with a bounded TTL response cache."""

__version__ = "1.0.0"
