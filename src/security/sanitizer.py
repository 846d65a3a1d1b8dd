"""
Data sanitization for sensitive information protection.

The registration scenario types a password, an SSN and a phone number into
the application under test. These patterns keep those values out of logs.
"""

import logging
import re
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Pattern

logger = logging.getLogger(__name__)


class RedactionMethod(Enum):
    """Methods for redacting sensitive data."""
    MASK = auto()          # Replace with asterisks
    PARTIAL = auto()       # Show partial (first/last few chars)
    PLACEHOLDER = auto()   # Replace with placeholder text


@dataclass
class SensitiveDataPattern:
    """Pattern for identifying sensitive data."""

    name: str
    pattern: Pattern[str]
    redaction_method: RedactionMethod = RedactionMethod.MASK
    placeholder: str = "[REDACTED]"
    partial_chars: int = 3
    enabled: bool = True

    def matches(self, text: str) -> List[re.Match]:
        """Find all matches in text."""
        if not self.enabled:
            return []
        return list(self.pattern.finditer(text))


@dataclass
class SanitizationRule:
    """Fully redact values stored under matching keys."""

    name: str
    keys: List[str] = field(default_factory=list)
    placeholder: str = "[REDACTED]"
    enabled: bool = True

    def applies_to(self, key: Optional[str]) -> bool:
        if not self.enabled or not key:
            return False
        key_lower = key.lower()
        return any(k in key_lower for k in self.keys)


class DataSanitizer:
    """Sanitizer for log messages and structured log data."""

    def __init__(self):
        self.patterns: List[SensitiveDataPattern] = [
            SensitiveDataPattern(
                name="ssn",
                pattern=re.compile(r'\b\d{3}-\d{2}-\d{4}\b'),
            ),
            SensitiveDataPattern(
                name="phone_us",
                pattern=re.compile(r'\(?\b\d{3}\)?[-. ]\d{3}[-.]\d{4}\b'),
                redaction_method=RedactionMethod.PARTIAL,
            ),
            SensitiveDataPattern(
                name="password_field",
                pattern=re.compile(
                    r'(password|passwd|pwd)(\s*[:=]\s*)["\']?([^"\'\s,]+)["\']?',
                    re.IGNORECASE,
                ),
                redaction_method=RedactionMethod.PLACEHOLDER,
                placeholder="[PASSWORD]",
            ),
        ]
        self.rules: List[SanitizationRule] = [
            SanitizationRule(name="form_secrets", keys=["password", "ssn"]),
        ]

    def sanitize_string(self, text: str) -> str:
        """Redact every enabled pattern found in ``text``."""
        if not text:
            return text

        result = text
        all_matches = []
        for pattern in self.patterns:
            for match in pattern.matches(result):
                all_matches.append((match, pattern))

        # Apply from the end so earlier spans stay valid
        all_matches.sort(key=lambda x: x[0].start(), reverse=True)
        last_start = len(result) + 1
        for match, pattern in all_matches:
            if match.end() > last_start:
                continue
            result = self._apply_redaction(result, match, pattern)
            last_start = match.start()

        return result

    def _apply_redaction(
        self,
        text: str,
        match: re.Match,
        pattern: SensitiveDataPattern
    ) -> str:
        start, end = match.span()
        matched_text = match.group()

        if pattern.redaction_method == RedactionMethod.MASK:
            replacement = "*" * len(matched_text)
        elif pattern.redaction_method == RedactionMethod.PARTIAL:
            keep = pattern.partial_chars
            if len(matched_text) > keep * 2:
                replacement = (
                    matched_text[:keep]
                    + "*" * (len(matched_text) - keep * 2)
                    + matched_text[-keep:]
                )
            else:
                replacement = "*" * len(matched_text)
        elif pattern.name == "password_field":
            replacement = match.group(1) + match.group(2) + pattern.placeholder
        else:
            replacement = pattern.placeholder

        return text[:start] + replacement + text[end:]

    def sanitize_dict(self, data: Dict[str, Any], max_depth: int = 10) -> Dict[str, Any]:
        """
        Sanitize a dictionary recursively.

        Values under sensitive keys are replaced wholesale; other strings are
        pattern-scanned.

        Returns:
            Sanitized copy of ``data``
        """
        if max_depth <= 0:
            logger.warning("Max recursion depth reached in sanitize_dict")
            return data

        result = deepcopy(data)

        def _sanitize_value(value: Any, key: Optional[str] = None) -> Any:
            for rule in self.rules:
                if rule.applies_to(key) and value is not None:
                    return rule.placeholder
            if isinstance(value, str):
                return self.sanitize_string(value)
            if isinstance(value, dict):
                return self.sanitize_dict(value, max_depth - 1)
            if isinstance(value, list):
                return [_sanitize_value(item) for item in value]
            return value

        for key, value in result.items():
            result[key] = _sanitize_value(value, str(key))

        return result

    def sanitize_log_record(self, record: logging.LogRecord) -> logging.LogRecord:
        """Sanitize a log record's message and arguments in place."""
        if hasattr(record, 'msg'):
            record.msg = self.sanitize_string(str(record.msg))

        if hasattr(record, 'args') and record.args:
            if isinstance(record.args, dict):
                record.args = self.sanitize_dict(record.args)
            else:
                record.args = tuple(
                    self.sanitize_string(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )

        return record


_default_sanitizer = DataSanitizer()


def sanitize_string(text: str) -> str:
    """Sanitize a string using default patterns."""
    return _default_sanitizer.sanitize_string(text)


def sanitize_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    """Sanitize a dictionary using default rules."""
    return _default_sanitizer.sanitize_dict(data)
