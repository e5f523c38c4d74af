"""Application services."""

from xiaoniu.application.services.repeat_detector import RepeatDetector

__all__ = ["RepeatDetector"]
