#!/usr/bin/env python3
"""Gate: no customer PII in runtime logs.

VTEX payloads carry customer names, phones and e-mails. They may be stored
in webhook_logs but must never reach stdout. Fails if:
- print( found in runtime code (src/**)
- A logger call mentions a sensitive name without going through a
  redaction helper anywhere in the call

Usage:
    python scripts/gate_security_pii.py
"""

from __future__ import annotations

import re
import sys
from pathlib import Path

# Names that must not reach a logger call unredacted
SENSITIVE_KEYWORDS = (
    "payload",
    "body",
    "webhook",
    "phone",
    "email",
    "customer_name",
    "recipient",
    "clientprofiledata",
)

PRINT_PATTERN = re.compile(r"\bprint\s*\(")

# logger.info(...), self._logger.warning(...)
LOGGER_CALL_PATTERN = re.compile(
    r"logger\.(debug|info|warning|error|critical|exception)\s*\("
)

REDACTION_PATTERNS = (
    "safe_log_context",
    "order_log_context",
    "presence_flags",
    "redact_value",
    "redact_string",
)


def _call_text(lines: list[str], start: int) -> str:
    """Source of the logger call beginning at ``lines[start]``, up to its closing paren."""
    depth = 0
    parts = []
    for line in lines[start:]:
        code = line.split("#")[0]
        parts.append(code)
        depth += code.count("(") - code.count(")")
        if depth <= 0:
            break
    return "\n".join(parts)


def check_file(filepath: Path) -> list[str]:
    """Check a single file for violations. Returns list of error messages."""
    errors = []
    try:
        content = filepath.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return []

    lines = content.splitlines()

    for index, line in enumerate(lines):
        lineno = index + 1
        stripped = line.lstrip()
        if stripped.startswith("#"):
            continue

        code_part = line.split("#")[0]
        if PRINT_PATTERN.search(code_part):
            errors.append(f"{filepath}:{lineno}: print() not allowed in runtime code")

        if not LOGGER_CALL_PATTERN.search(code_part):
            continue

        call = _call_text(lines, index)
        if any(rp in call for rp in REDACTION_PATTERNS):
            continue
        call_lower = call.lower()
        for keyword in SENSITIVE_KEYWORDS:
            if keyword in call_lower:
                errors.append(
                    f"{filepath}:{lineno}: logger call with '{keyword}' "
                    "must use redaction (safe_log_context/order_log_context)"
                )

    return errors


def main() -> int:
    """Run gate check on src directory."""
    src_dir = Path("src")

    if not src_dir.exists():
        src_dir = Path(__file__).parent.parent / "src"

    if not src_dir.exists():
        sys.stderr.write("Error: src directory not found\n")
        return 1

    all_errors: list[str] = []
    for pyfile in sorted(src_dir.rglob("*.py")):
        all_errors.extend(check_file(pyfile))

    if all_errors:
        sys.stderr.write("PII gate FAILED - violations found:\n")
        for err in all_errors:
            sys.stderr.write(f"  {err}\n")
        return 1

    sys.stdout.write("PII gate PASSED - no violations found\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
