"""
db2avro - Name Mappers

Composable string transforms applied to table names (schema names) and
column names (field names).

- to_camel_case: test_records -> testRecords
- to_pascal_case: test_records -> TestRecords
- to_snake_case: TestRecords -> test_records
- remove_plural: testRecords -> testRecord
- strip_prefix("tbl_"): tbl_orders -> orders

Mappers chain left to right:

    >>> to_camel_case.and_then(remove_plural)("test_records")
    'testRecord'

Mappers never repair names. A name that is not a valid Avro identifier is
rejected when the schema is rendered.
"""

import re
from typing import Callable, Dict, Iterable, Optional, Tuple, Union

from .errors import ConfigError

Transform = Callable[[str], str]


class NameMapper:
    """An ordered sequence of str -> str transforms."""

    def __init__(self, *transforms: Transform, name: Optional[str] = None):
        self.transforms: Tuple[Transform, ...] = tuple(transforms)
        self.name = name

    def __call__(self, value: str) -> str:
        for transform in self.transforms:
            value = transform(value)
        return value

    def and_then(self, other: Union["NameMapper", Transform]) -> "NameMapper":
        """Return a mapper applying self first, then other."""
        if isinstance(other, NameMapper):
            return NameMapper(*self.transforms, *other.transforms)
        return NameMapper(*self.transforms, other)

    def __repr__(self):
        if self.name:
            return f"NameMapper({self.name})"
        return f"NameMapper({len(self.transforms)} transforms)"


def _split_words(value: str) -> list:
    # fooBar -> foo_Bar, then split on separators
    value = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", value)
    return [w for w in re.split(r"[_\-\s]+", value) if w]


def _camel_case(value: str) -> str:
    words = _split_words(value)
    if not words:
        return value
    return words[0].lower() + "".join(w.capitalize() for w in words[1:])


def _pascal_case(value: str) -> str:
    words = _split_words(value)
    if not words:
        return value
    return "".join(w.capitalize() for w in words)


def _snake_case(value: str) -> str:
    words = _split_words(value)
    if not words:
        return value
    return "_".join(w.lower() for w in words)


def _remove_plural(value: str) -> str:
    lower = value.lower()

    if lower.endswith("ies") and len(value) > 3:
        return value[:-3] + ("Y" if value[-3].isupper() else "y")
    if lower.endswith(("sses", "uses", "xes", "ches", "shes")):
        return value[:-2]
    if lower.endswith(("ss", "us", "is")):
        return value
    if lower.endswith("s") and len(value) > 1:
        return value[:-1]
    return value


identity = NameMapper(name="identity")
to_camel_case = NameMapper(_camel_case, name="camel_case")
to_pascal_case = NameMapper(_pascal_case, name="pascal_case")
to_snake_case = NameMapper(_snake_case, name="snake_case")
remove_plural = NameMapper(_remove_plural, name="remove_plural")


def strip_prefix(prefix: str) -> NameMapper:
    """Mapper removing a leading prefix (e.g. 'tbl_') when present."""
    def _strip(value: str) -> str:
        if prefix and value.startswith(prefix):
            return value[len(prefix):]
        return value
    return NameMapper(_strip, name=f"strip_prefix:{prefix}")


MAPPERS: Dict[str, NameMapper] = {
    "identity": identity,
    "camel_case": to_camel_case,
    "pascal_case": to_pascal_case,
    "snake_case": to_snake_case,
    "remove_plural": remove_plural,
}


def mapper_from_names(names: Union[str, Iterable[str]]) -> NameMapper:
    """
    Build a mapper from registered names, e.g. ["camel_case", "remove_plural"].

    "strip_prefix:<prefix>" is accepted as well.

    Raises:
        ConfigError: for an unknown mapper name
    """
    if isinstance(names, str):
        names = [names]

    mapper = identity
    for entry in names:
        if not isinstance(entry, str):
            raise ConfigError(f"Name mapper entries must be strings, got {entry!r}")
        if entry.startswith("strip_prefix:"):
            mapper = mapper.and_then(strip_prefix(entry.split(":", 1)[1]))
        elif entry in MAPPERS:
            mapper = mapper.and_then(MAPPERS[entry])
        else:
            raise ConfigError(
                f"Unknown name mapper '{entry}'. Available: {', '.join(sorted(MAPPERS))}"
            )
    return mapper
