from __future__ import annotations

from typing import Any, Callable, Iterable, Optional, Sequence, Union

Extractor = Callable[[Any], Any]

_LOOKUP_ERRORS = (KeyError, IndexError, TypeError, AttributeError)


def is_empty(v: Any) -> bool:
    # 0 / False are real values
    return v is None or (isinstance(v, (str, list, dict, tuple, set)) and len(v) == 0)


def first_non_empty(item: Any, extractors: Iterable[Extractor], default: Any = None) -> Any:
    """Try each extractor in order; return the first non-empty result."""
    for fn in extractors:
        try:
            v = fn(item)
        except _LOOKUP_ERRORS:
            continue
        if not is_empty(v):
            return v
    return default


def field_path(*path: Union[str, int]) -> Extractor:
    """Extractor walking nested dict keys / list indexes, e.g. ("fields", "sprint", 0, "name")."""
    def walk(item: Any) -> Any:
        cur = item
        for p in path:
            if cur is None:
                return None
            cur = cur[p]
        return cur
    return walk


def first_field(item: Any, names: Sequence[str], default: Any = None, *, under: Optional[str] = None) -> Any:
    """Try several field names, e.g. a list of candidate custom-field ids."""
    prefix = (under,) if under else ()
    return first_non_empty(item, [field_path(*prefix, n) for n in names], default)
