from __future__ import annotations


def dest_hint(v: str, keep: int = 4) -> str:
    # Phone numbers are PII: logs only ever carry the trailing digits.
    v = (v or "").strip()
    if not v:
        return ""
    if len(v) <= keep:
        return v
    return f"...{v[-keep:]}"
