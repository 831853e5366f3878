"""asp-sanitizer: redact likely secrets from source code snippets."""

from .config import SanitizerConfig
from .engine import EngineInitError, SanitizerError
from .sanitizer import CodeSanitizer, create_sanitizer, sanitize

__version__ = "0.1.0"

__all__ = [
    "CodeSanitizer",
    "EngineInitError",
    "SanitizerConfig",
    "SanitizerError",
    "create_sanitizer",
    "sanitize",
]
