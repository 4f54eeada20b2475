"""
Helpers flattening pydantic validation failures into API error entries.
"""
from typing import Any, Dict, List


def format_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic error dicts into [{field, message}] entries."""
    formatted = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body",)]
        formatted.append({
            "field": ".".join(loc) or "__root__",
            "message": err.get("msg", "Invalid value")
        })
    return formatted


def summarize_errors(errors: List[Dict[str, str]]) -> str:
    """One-line summary, e.g. "email: value is not a valid email address"."""
    return "; ".join(f"{e['field']}: {e['message']}" for e in errors)
