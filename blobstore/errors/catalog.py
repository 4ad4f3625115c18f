"""
Error pattern catalog.

Maps raw medium errors to how the storage layer resolves them.
Object-store errors are matched by their error code (botocore's
Error.Code, falling back to the HTTP status); filesystem errors by
their OSError subclass.

When a medium starts reporting a new code in production:
  1. Capture the raw error from logs
  2. Add a pattern here
  3. Add a unit test
"""

import re

from blobstore.errors.models import ErrorKind

# Each entry: (compiled_regex, ErrorKind) matched against the error code.
# Order matters: first match wins.

ERROR_PATTERNS: list[tuple[re.Pattern, ErrorKind]] = [
    # ── Missing object ────────────────────────────────────────────────────
    (re.compile(r"^(NoSuchKey|NoSuchObject|NotFound|404)$"), ErrorKind.NOT_FOUND),

    # ── Conditional put lost to an existing or in-flight object ──────────
    (re.compile(r"^(PreconditionFailed|412)$"), ErrorKind.ALREADY_EXISTS),
    (re.compile(r"^(ConditionalRequestConflict|409)$"), ErrorKind.ALREADY_EXISTS),
]


# Filesystem errors, checked with isinstance in order.
OS_ERROR_KINDS: list[tuple[type[BaseException], ErrorKind]] = [
    (FileNotFoundError, ErrorKind.NOT_FOUND),
    (FileExistsError, ErrorKind.ALREADY_EXISTS),
]


# Pre-built fallback
DEFAULT_KIND = ErrorKind.MEDIUM
