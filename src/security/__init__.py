"""
Security module exports.
"""

from src.security.sanitizer import (
    DataSanitizer,
    RedactionMethod,
    SanitizationRule,
    SensitiveDataPattern,
    sanitize_dict,
    sanitize_string,
)

__all__ = [
    "DataSanitizer",
    "RedactionMethod",
    "SanitizationRule",
    "SensitiveDataPattern",
    "sanitize_dict",
    "sanitize_string",
]
