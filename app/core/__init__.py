"""Core building blocks."""

from .image_source import ImageIntakeError, UploadedImage
from .orchestrator import UploadOrchestrator
from .state_machine import InvalidTransitionError, UploadStateMachine

__all__ = [
    "ImageIntakeError",
    "InvalidTransitionError",
    "UploadOrchestrator",
    "UploadStateMachine",
    "UploadedImage",
]
