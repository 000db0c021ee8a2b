"""Public service client exports."""

from .base import ServiceError
from .classifier import ClassifierClient
from .duplicate_checker import DuplicateCheckClient, UnsupportedFileTypeError
from .multipart import MultipartEncodingError, encode_multipart

__all__ = [
    "ClassifierClient",
    "DuplicateCheckClient",
    "MultipartEncodingError",
    "ServiceError",
    "UnsupportedFileTypeError",
    "encode_multipart",
]
