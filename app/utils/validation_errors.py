from typing import Any, Dict, Iterable, List, Mapping

# Location parts FastAPI prepends to request errors
_REQUEST_SECTIONS = ("body", "query", "path", "header", "cookie")


def flatten_errors(errors: Iterable[Mapping[str, Any]]) -> Dict[str, List[str]]:
    """Turn pydantic error dicts into ``{field: [messages]}`` keyed by wire name"""
    flattened: Dict[str, List[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in _REQUEST_SECTIONS]
        field = ".".join(loc) or "non_field_errors"
        message = str(error.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        flattened.setdefault(field, []).append(message)
    return flattened


def errors_from_pydantic(exc: Any) -> Dict[str, List[str]]:
    return flatten_errors(exc.errors())
