"""
Configuration and constants for asp-sanitizer.

Holds the sensitive-name list, the redaction placeholder, the candidate
edit record, and the file-extension to language mapping used by the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Lowercase substrings matched case-insensitively against assignment targets.
# Order is significant only for reporting; matching is any-of.
SENSITIVE_NAMES: tuple[str, ...] = (
    "password",
    "secret",
    "token",
    "apikey",
    "key",
    "auth",
    "credential",
)

# Quotes are part of the placeholder so a replaced literal stays a literal
REDACTED_PLACEHOLDER = '"<REDACTED>"'

OPAQUE_TOKEN_MIN_LENGTH = 20

# Rule names reported in redaction statistics
RULE_SENSITIVE_ASSIGNMENT = "sensitive_assignment"
RULE_OPAQUE_TOKEN = "opaque_token"


@dataclass(frozen=True)
class CandidateEdit:
    """A proposed replacement of the half-open byte span [start, end)."""

    start: int
    end: int
    replacement: str
    rule: str = RULE_SENSITIVE_ASSIGNMENT


@dataclass
class SanitizerConfig:
    """
    Configuration for the code sanitizer.

    Loaded from a config file or set programmatically. The built-in
    sensitive names are always active; ``extra_sensitive_names`` only
    extends them.
    """

    enabled: bool = True

    # Appended to SENSITIVE_NAMES, lowercased
    extra_sensitive_names: list[str] = field(default_factory=list)

    replacement: str = REDACTED_PLACEHOLDER

    # Long opaque string literals, independent of assignment context
    opaque_tokens_enabled: bool = True
    opaque_min_length: int = OPAQUE_TOKEN_MIN_LENGTH

    # Literal values (without quotes) that are never treated as opaque tokens
    allowlist_strings: set[str] = field(default_factory=set)

    @property
    def sensitive_names(self) -> tuple[str, ...]:
        """Built-in names followed by any configured extras."""
        extras: list[str] = []
        for name in self.extra_sensitive_names:
            lowered = name.strip().lower()
            if lowered and lowered not in SENSITIVE_NAMES and lowered not in extras:
                extras.append(lowered)
        return SENSITIVE_NAMES + tuple(extras)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SanitizerConfig:
        """Create SanitizerConfig from a dictionary (e.g., from config file)."""
        config = cls()

        if "enabled" in data:
            config.enabled = bool(data["enabled"])

        names = data.get("extra_sensitive_names") or data.get("sensitive_names") or []
        if isinstance(names, str):
            names = [n.strip() for n in names.split(",")]
        if isinstance(names, (list, tuple, set)):
            config.extra_sensitive_names = [
                str(n).strip().lower() for n in names if str(n).strip()
            ]

        if isinstance(data.get("replacement"), str) and data["replacement"]:
            config.replacement = data["replacement"]

        # Opaque token detection: accept a nested table or flat keys
        opaque = data.get("opaque_tokens")
        if isinstance(opaque, dict):
            config.opaque_tokens_enabled = bool(opaque.get("enabled", True))
            min_length = opaque.get("min_length")
        else:
            if opaque is None:
                opaque = data.get("opaque_tokens_enabled")
            if opaque is not None:
                config.opaque_tokens_enabled = bool(opaque)
            min_length = data.get("opaque_min_length")

        if min_length is not None:
            try:
                config.opaque_min_length = max(OPAQUE_TOKEN_MIN_LENGTH, int(min_length))
            except (TypeError, ValueError):
                pass  # Keep the default

        allowlist = data.get("allowlist_strings", [])
        if isinstance(allowlist, (list, tuple, set)):
            config.allowlist_strings = {str(s) for s in allowlist}

        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (sorted keys for determinism)."""
        return {
            "allowlist_strings": sorted(self.allowlist_strings),
            "enabled": self.enabled,
            "extra_sensitive_names": list(self.extra_sensitive_names),
            "opaque_min_length": self.opaque_min_length,
            "opaque_tokens_enabled": self.opaque_tokens_enabled,
            "replacement": self.replacement,
        }


# Language detection by extension
EXTENSION_TO_LANGUAGE: dict[str, str] = {
    ".py": "python",
    ".pyi": "python",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
}


def get_language(path: Path | str) -> str:
    """
    Get the language key for a file path.

    Unknown extensions fall back to the bare suffix (``"rb"`` for
    ``app.rb``), which the sanitizer then treats as unsupported.
    """
    suffix = Path(path).suffix.lower()
    if suffix in EXTENSION_TO_LANGUAGE:
        return EXTENSION_TO_LANGUAGE[suffix]
    return suffix.lstrip(".")
