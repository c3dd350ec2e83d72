"""Input validation gates and PII stripping for the tape label service."""

import json
import os
import re
from pathlib import Path

# Identity fields: free text, but bounded
MAX_FIELD_LENGTH = 512
MAX_YEAR_LENGTH = 32

# Element cap ceiling; the densest algorithm emits a few thousand elements
MAX_ELEMENTS_LIMIT = 10_000

CONFIG_KEYS = {
    "max_elements",
    "enable_gradients",
    "simplify_paths",
    "maxElements",
    "enableGradients",
    "simplifyPaths",
}


def _check_text(name: str, value, max_length: int) -> list[str]:
    if not isinstance(value, str):
        return [f"{name} must be a string, got {type(value).__name__}"]
    errors = []
    if len(value) > max_length:
        errors.append(f"{name} too long: {len(value)} chars (max {max_length})")
    if "\x00" in value:
        errors.append(f"{name} contains a NUL character")
    return errors


def validate_identity(creator_name, item_title, year=None) -> list[str]:
    """Validate identity fields. Returns list of errors (empty = valid).

    Empty strings are valid; a missing year is rendered as "unknown".
    """
    errors: list[str] = []
    errors += _check_text("creator_name", creator_name, MAX_FIELD_LENGTH)
    errors += _check_text("item_title", item_title, MAX_FIELD_LENGTH)
    if year is not None:
        errors += _check_text("year", year, MAX_YEAR_LENGTH)
    return errors


def validate_config(config: dict | None) -> list[str]:
    """Validate a pattern config dict. Returns list of errors (empty = valid)."""
    errors: list[str] = []
    if config is None:
        return errors
    if not isinstance(config, dict):
        return [f"config must be an object, got {type(config).__name__}"]

    unknown = sorted(set(config) - CONFIG_KEYS)
    if unknown:
        errors.append(f"Unknown config keys: {unknown}")

    for key in ("max_elements", "maxElements"):
        if key not in config:
            continue
        value = config[key]
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, int):
            errors.append(f"{key} must be an integer")
        elif value < 0:
            errors.append(f"{key} must not be negative")
        elif value > MAX_ELEMENTS_LIMIT:
            errors.append(f"{key} {value} exceeds maximum {MAX_ELEMENTS_LIMIT}")

    for key in ("enable_gradients", "enableGradients", "simplify_paths", "simplifyPaths"):
        if key in config and not isinstance(config[key], bool):
            errors.append(f"{key} must be a boolean")

    return errors


BLOCKED_OUTPUT_PREFIXES = (
    "/System",
    "/Library",
    "/usr",
    "/bin",
    "/sbin",
    "/etc",
    "/proc",
    "/sys",
    "/private/var",
    "/private/etc",
)


def validate_output_dir(path: str) -> list[str]:
    """Validate a placeholder output directory. Returns list of errors.

    Checks:
    - Not a system directory
    - Not an existing file
    - Directory (or its nearest existing ancestor) is writable
    - No NUL bytes
    """
    errors: list[str] = []
    if not path or "\x00" in path:
        errors.append("Output directory must be a non-empty path")
        return errors

    p = Path(path)
    resolved = str(p.resolve())
    for prefix in BLOCKED_OUTPUT_PREFIXES:
        if resolved == prefix or resolved.startswith(prefix + "/"):
            errors.append(f"Cannot write to system directory: {prefix}")
            return errors

    if p.exists() and not p.is_dir():
        errors.append(f"Output path is not a directory: {path}")
        return errors

    existing = p
    while not existing.exists() and existing != existing.parent:
        existing = existing.parent
    if not os.access(str(existing), os.W_OK):
        errors.append(f"Output directory is not writable: {existing}")

    return errors


# --- PII stripping for Sentry and crash dumps ---

_HOME = os.path.expanduser("~")
_USERNAME = os.path.basename(_HOME)
_PATH_PATTERN = re.compile(r"/Users/[^/\s]+|/home/[^/\s]+|C:\\Users\\[^\\\s]+")
_SENSITIVE_KEYS = {"_token", "token", "auth", "key", "secret", "password", "dsn"}
# Identity text is user-supplied and can name real people
_IDENTITY_KEYS = {"creator_name", "item_title", "creator", "title"}


def _scrub_dict(d: dict):
    """Redact values for keys that look sensitive or carry identity text."""
    for key in list(d.keys()):
        lowered = key.lower()
        if lowered in _IDENTITY_KEYS or any(s in lowered for s in _SENSITIVE_KEYS):
            d[key] = "<REDACTED>"


def strip_pii(event: dict, hint: dict) -> dict:
    """Sentry before_send hook. Strips file paths, auth tokens and identities.

    Also usable for crash dump sanitization.
    """
    event_str = json.dumps(event)
    event_str = event_str.replace(_HOME, "<HOME>")
    if _USERNAME:
        event_str = event_str.replace(_USERNAME, "<USER>")
    event_str = _PATH_PATTERN.sub("<REDACTED_PATH>", event_str)
    event = json.loads(event_str)

    _scrub_dict(event.get("extra", {}))
    _scrub_dict(event.get("tags", {}))
    for ctx in event.get("contexts", {}).values():
        if isinstance(ctx, dict):
            _scrub_dict(ctx)
    return event


# Tapes JSON input for placeholder export
MAX_TAPES_FILE_SIZE = 50 * 1024 * 1024  # 50 MB


def validate_tapes_path(path: str) -> list[str]:
    """Validate a tapes JSON path. Returns list of errors (empty = valid)."""
    errors: list[str] = []
    p = Path(path)

    if not p.exists():
        errors.append(f"File not found: {path}")
        return errors

    if p.is_symlink():
        errors.append("Symlinks are not allowed")
        return errors

    if p.suffix.lower() != ".json":
        errors.append(f"Extension '{p.suffix.lower()}' not allowed. Allowed: ['.json']")

    size = p.stat().st_size
    if size > MAX_TAPES_FILE_SIZE:
        errors.append(
            f"File too large: {size / (1024 * 1024):.1f} MB "
            f"(max {MAX_TAPES_FILE_SIZE // (1024 * 1024)} MB)"
        )
    return errors
