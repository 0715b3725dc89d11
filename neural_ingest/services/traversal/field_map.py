"""
Field map traversal: validation of a document against a field map, pre-order
extraction of leaf strings, and scatter of results back to the target keys.

Extraction, scatter and chunking all run through the same walk (_walk), so
leaves are always visited in the same order for the same (field map, document)
pair. Writes are deferred until the walk finishes, so a target key that is
also a later source key is still read with its original value.
"""

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from neural_ingest.services.errors import ConfigValidationError, DocumentValidationError
from neural_ingest.services.traversal.value import ValueKind, kind_of, type_name

FIELD_MAP_FIELD = "field_map"

# (path of source keys, leaf value) -> value to write at the target key, or None for no write
LeafTransform = Callable[[tuple[str, ...], Any], Any]

_Write = tuple[dict[str, Any], str, Any]


@dataclass
class Extraction:
    """Flat texts in traversal order plus the (path, text count) of every leaf visited."""

    texts: list[str] = field(default_factory=list)
    leaves: list[tuple[tuple[str, ...], int]] = field(default_factory=list)


def validate_field_map(field_map: Any, processor_type: str = "") -> None:
    """
    A field map must be a non-empty map of non-blank keys whose values are
    non-blank output keys or nested field maps. Raises ConfigValidationError.
    """
    label = f"{processor_type} processor" if processor_type else "the processor"
    if kind_of(field_map) is not ValueKind.MAP or not field_map:
        raise ConfigValidationError(
            f"Unable to create {label} as {FIELD_MAP_FIELD} has invalid key or value", field=FIELD_MAP_FIELD
        )
    for key, target in field_map.items():
        kind = kind_of(target)
        if kind_of(key) is not ValueKind.STRING or not key.strip():
            valid = False
        elif kind is ValueKind.STRING:
            valid = bool(target.strip())
        elif kind is ValueKind.MAP:
            validate_field_map(target, processor_type)
            valid = True
        else:
            valid = False
        if not valid:
            raise ConfigValidationError(
                f"Unable to create {label} as {FIELD_MAP_FIELD} has invalid key or value",
                field=str(key),
            )


def _mismatch(key: str, configured: Any, actual: Any) -> DocumentValidationError:
    return DocumentValidationError(
        f"[{key}] configuration doesn't match actual value type, configuration type is: "
        f"{type_name(configured)}, actual value type is: {type_name(actual)}",
        field=key,
    )


class FieldMapTraverser:
    """Walks documents in the shape described by one field map."""

    def __init__(self, field_map: dict[str, Any]) -> None:
        validate_field_map(field_map)
        self.field_map = field_map

    # Validation

    def validate(self, document: dict[str, Any], max_depth: int) -> None:
        """
        Check every configured field of the document. The document itself is
        depth 1. Raises DocumentValidationError naming the offending key.
        """
        self._validate_map(FIELD_MAP_FIELD, document, self.field_map, 1, max_depth)

    @staticmethod
    def _check_depth(key: str, depth: int, max_depth: int) -> None:
        if depth > max_depth:
            raise DocumentValidationError(
                f"map type field [{key}] reaches max depth limit, cannot process it",
                field=key,
                limit=max_depth,
            )

    def _validate_map(
        self, key: str, source: dict[str, Any], field_map: dict[str, Any], depth: int, max_depth: int
    ) -> None:
        self._check_depth(key, depth, max_depth)
        for next_key, next_field_map in field_map.items():
            value = source.get(next_key)
            kind = kind_of(value)
            nested = kind_of(next_field_map) is ValueKind.MAP
            if kind is ValueKind.NULL:
                continue
            if kind is ValueKind.LIST:
                self._validate_list(next_key, value, next_field_map, depth + 1, max_depth)
            elif kind is ValueKind.MAP:
                if not nested:
                    raise _mismatch(next_key, next_field_map, value)
                self._validate_map(next_key, value, next_field_map, depth + 1, max_depth)
            elif kind is ValueKind.STRING:
                if nested:
                    raise _mismatch(next_key, next_field_map, value)
            else:
                raise DocumentValidationError(
                    f"map type field [{next_key}] is neither string nor nested type, cannot process it",
                    field=next_key,
                )

    def _validate_list(
        self, key: str, values: Sequence[Any], field_map: Any, depth: int, max_depth: int
    ) -> None:
        self._check_depth(key, depth, max_depth)
        nested = kind_of(field_map) is ValueKind.MAP
        for element in values:
            kind = kind_of(element)
            if kind is ValueKind.NULL:
                raise DocumentValidationError(f"list type field [{key}] has null, cannot process it", field=key)
            if kind is ValueKind.LIST:
                raise DocumentValidationError(
                    f"list type field [{key}] is nested list type, cannot process it", field=key
                )
            if kind is ValueKind.MAP:
                if not nested:
                    raise _mismatch(key, field_map, element)
                self._validate_map(key, element, field_map, depth + 1, max_depth)
            elif kind is ValueKind.STRING:
                if nested:
                    raise _mismatch(key, field_map, element)
            else:
                raise DocumentValidationError(
                    f"list type field [{key}] has non string value, cannot process it", field=key
                )

    # Traversal

    def _walk(
        self,
        field_map: dict[str, Any],
        source: dict[str, Any],
        transform: LeafTransform,
        writes: list[_Write],
        path: tuple[str, ...] = (),
        visit_null: bool = False,
    ) -> None:
        for source_key, target in field_map.items():
            value = source.get(source_key)
            kind = kind_of(value)
            leaf_path = path + (source_key,)
            if kind_of(target) is ValueKind.MAP:
                if kind is ValueKind.MAP:
                    self._walk(target, value, transform, writes, leaf_path, visit_null)
                elif kind is ValueKind.LIST:
                    for element in value:
                        if kind_of(element) is ValueKind.MAP:
                            self._walk(target, element, transform, writes, leaf_path, visit_null)
            elif kind is ValueKind.STRING or kind is ValueKind.LIST or (
                visit_null and kind is ValueKind.NULL and source_key in source
            ):
                output = transform(leaf_path, value)
                if output is not None:
                    writes.append((source, target, output))

    def transform(self, document: dict[str, Any], fn: LeafTransform, visit_null: bool = False) -> None:
        """
        Apply fn to every leaf in pre-order, then write the outputs to the
        target keys. With visit_null, a leaf key present with a null value is
        passed to fn as well.
        """
        writes: list[_Write] = []
        self._walk(self.field_map, document, fn, writes, visit_null=visit_null)
        for container, target_key, output in writes:
            container[target_key] = output

    def extract(self, document: dict[str, Any]) -> Extraction:
        """Collect the leaf strings of a validated document in traversal order."""
        extraction = Extraction()

        def read(path: tuple[str, ...], value: Any) -> None:
            if kind_of(value) is ValueKind.STRING:
                extraction.texts.append(value)
                extraction.leaves.append((path, 1))
            else:
                extraction.texts.extend(value)
                extraction.leaves.append((path, len(value)))
            return None

        self.transform(document, read)
        return extraction

    def scatter(self, document: dict[str, Any], results: Sequence[Any], list_nested_key: str) -> None:
        """
        Write one result per extracted text to the target keys. A list leaf
        becomes a list of {list_nested_key: result} objects in list order.
        Nothing is written if the result count does not match.
        """
        remaining: Iterator[Any] = iter(results)
        consumed = 0

        def take() -> Any:
            nonlocal consumed
            try:
                result = next(remaining)
            except StopIteration:
                raise ValueError(f"inference returned {len(results)} results, more texts were submitted") from None
            consumed += 1
            return result

        def write(path: tuple[str, ...], value: Any) -> Any:
            if kind_of(value) is ValueKind.STRING:
                return take()
            return [{list_nested_key: take()} for _ in value]

        writes: list[_Write] = []
        self._walk(self.field_map, document, write, writes)
        if consumed != len(results):
            raise ValueError(f"inference returned {len(results)} results for {consumed} texts")
        for container, target_key, output in writes:
            container[target_key] = output
