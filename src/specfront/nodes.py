"""The NodeTree: an immutable, order-preserving representation of YAML/JSON.

Parsed documents are represented as a tree of three node kinds:

* :class:`Scalar` -- a string, bool, int, float, or ``None`` leaf.
* :class:`Sequence` -- an ordered tuple of child nodes.
* :class:`Mapping` -- an ordered tuple of ``(key, value)`` pairs.

Mappings are *not* dicts. Keys are not required to be unique, every lookup
takes the first matching pair, and source order is preserved so that a
document can be re-rendered deterministically (see :func:`render_yaml`).
Each node records the 1-based source ``line``/``column`` it was composed
from; positions never participate in equality, so two trees with the same
content compare equal regardless of where they came from.

:func:`compose` builds a tree from raw text using the PyYAML composer, which
keeps duplicate keys and key order that :func:`yaml.safe_load` would lose.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Union

import yaml
from yaml.constructor import ConstructorError, SafeConstructor
from yaml.representer import SafeRepresenter

from specfront.exceptions import ParseError

ScalarValue = Union[str, bool, int, float, None]

_MAP_TAG = "tag:yaml.org,2002:map"
_SEQ_TAG = "tag:yaml.org,2002:seq"
_STR_TAG = "tag:yaml.org,2002:str"

# Only the JSON-compatible core tags are converted; every other scalar tag
# (timestamps, binary, application tags) keeps its source text.
_SCALAR_TAGS = {
    "tag:yaml.org,2002:null": SafeConstructor.construct_yaml_null,
    "tag:yaml.org,2002:bool": SafeConstructor.construct_yaml_bool,
    "tag:yaml.org,2002:int": SafeConstructor.construct_yaml_int,
    "tag:yaml.org,2002:float": SafeConstructor.construct_yaml_float,
}


@dataclass(frozen=True)
class Scalar:
    """A leaf value."""

    value: ScalarValue
    line: Optional[int] = field(default=None, compare=False, repr=False)
    column: Optional[int] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Sequence:
    """An ordered list of nodes. Supports ``len``, iteration and indexing."""

    items: tuple["Node", ...] = ()
    line: Optional[int] = field(default=None, compare=False, repr=False)
    column: Optional[int] = field(default=None, compare=False, repr=False)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator["Node"]:
        return iter(self.items)

    def __getitem__(self, index: int) -> "Node":
        return self.items[index]


@dataclass(frozen=True)
class Mapping:
    """An ordered list of ``(key, value)`` pairs with first-match lookup.

    Iterating a Mapping yields its pairs in source order, duplicates
    included. Use :meth:`get` for lookup.
    """

    items: tuple[tuple[str, "Node"], ...] = ()
    line: Optional[int] = field(default=None, compare=False, repr=False)
    column: Optional[int] = field(default=None, compare=False, repr=False)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[tuple[str, "Node"]]:
        return iter(self.items)

    def get(self, key: str, default: Optional["Node"] = None) -> Optional["Node"]:
        """Return the value of the first pair whose key is *key*."""
        for item_key, value in self.items:
            if item_key == key:
                return value
        return default

    def has_key(self, key: str) -> bool:
        return any(item_key == key for item_key, _ in self.items)

    def keys(self) -> list[str]:
        """Keys in source order, duplicates included."""
        return [key for key, _ in self.items]

    def sorted_keys(self) -> list[str]:
        return sorted(self.keys())

    def missing_keys(self, required: list[str]) -> list[str]:
        """Return the entries of *required* that are not keys of this mapping."""
        return [key for key in required if not self.has_key(key)]

    def invalid_keys(
        self,
        allowed: list[str],
        patterns: Optional[list[re.Pattern[str]]] = None,
    ) -> list[str]:
        """Return keys that neither appear in *allowed* nor match any of *patterns*.

        Model builders use this to find vendor extensions and typos, e.g.
        ``invalid_keys(["swagger", "info"], [re.compile("^x-")])``.
        """
        allowed_set = set(allowed)
        invalid = []
        for key in self.keys():
            if key in allowed_set:
                continue
            if any(pattern.search(key) for pattern in patterns or []):
                continue
            invalid.append(key)
        return invalid


Node = Union[Scalar, Sequence, Mapping]


# ------------------------------------------------------------------ #
# Composition (text -> Node)
# ------------------------------------------------------------------ #


def compose(content: Union[str, bytes], locator: str = "") -> Node:
    """Parse *content* as a single YAML (or JSON) document into a Node tree.

    An empty document yields an empty :class:`Mapping`.

    Args:
        content: The raw document text or bytes (UTF-8/16/32, BOM allowed).
        locator: The document's identity, used in error messages.

    Returns:
        The root node.

    Raises:
        ParseError: If the content is not well-formed YAML, holds more than
            one document, uses a recursive alias, or has a non-scalar key.
    """
    try:
        root = yaml.compose(content, Loader=yaml.SafeLoader)
    except yaml.MarkedYAMLError as exc:
        mark = exc.problem_mark or exc.context_mark
        line = mark.line + 1 if mark is not None else None
        column = mark.column + 1 if mark is not None else None
        problem = exc.problem or str(exc)
        where = f" (line {line}, column {column})" if line is not None else ""
        raise ParseError(
            f"Invalid YAML in {locator or 'document'}{where}: {problem}",
            locator=locator,
            line=line,
            column=column,
        ) from exc
    except yaml.YAMLError as exc:
        raise ParseError(
            f"Invalid YAML in {locator or 'document'}: {exc}", locator=locator
        ) from exc

    if root is None:
        return Mapping()
    return _Composer(locator).convert(root)


class _Composer:
    """Converts a PyYAML node graph into a Node tree.

    Anchored nodes are converted once and shared between their aliases.
    """

    def __init__(self, locator: str) -> None:
        self._locator = locator
        self._constructor = SafeConstructor()
        self._done: dict[int, Node] = {}
        self._active: set[int] = set()

    def convert(self, node: yaml.Node) -> Node:
        key = id(node)
        if key in self._done:
            return self._done[key]
        if key in self._active:
            raise self._error("Recursive alias is not supported", node)

        self._active.add(key)
        try:
            if isinstance(node, yaml.MappingNode):
                result: Node = self._mapping(node)
            elif isinstance(node, yaml.SequenceNode):
                result = Sequence(
                    tuple(self.convert(child) for child in node.value),
                    *_position(node),
                )
            else:
                result = Scalar(self._scalar(node), *_position(node))
        finally:
            self._active.discard(key)

        self._done[key] = result
        return result

    def _mapping(self, node: yaml.MappingNode) -> Mapping:
        pairs = []
        for key_node, value_node in node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                raise self._error("Mapping keys must be scalars", key_node)
            pairs.append((key_node.value, self.convert(value_node)))
        return Mapping(tuple(pairs), *_position(node))

    def _scalar(self, node: yaml.ScalarNode) -> ScalarValue:
        construct = _SCALAR_TAGS.get(node.tag)
        if construct is None:
            return node.value
        try:
            return construct(self._constructor, node)
        except (ConstructorError, KeyError, ValueError) as exc:
            raise self._error(f"Invalid {node.tag} scalar {node.value!r}", node) from exc

    def _error(self, message: str, node: yaml.Node) -> ParseError:
        line, column = _position(node)
        return ParseError(
            f"{message} in {self._locator or 'document'} (line {line}, column {column})",
            locator=self._locator,
            line=line,
            column=column,
        )


def _position(node: yaml.Node) -> tuple[Optional[int], Optional[int]]:
    mark = node.start_mark
    if mark is None:
        return None, None
    return mark.line + 1, mark.column + 1


# ------------------------------------------------------------------ #
# Conversion helpers
# ------------------------------------------------------------------ #


def to_python(node: Node) -> Any:
    """Convert a node into plain dicts, lists and scalars.

    Duplicate mapping keys keep the first value, matching :meth:`Mapping.get`.
    """
    if isinstance(node, Mapping):
        result: dict[str, Any] = {}
        for key, value in node.items:
            if key not in result:
                result[key] = to_python(value)
        return result
    if isinstance(node, Sequence):
        return [to_python(item) for item in node.items]
    return node.value


def from_python(value: Any) -> Node:
    """Build a node tree from plain dicts, lists and JSON-compatible scalars.

    Raises:
        TypeError: If *value* contains an unsupported type.
    """
    if isinstance(value, dict):
        return Mapping(tuple((str(k), from_python(v)) for k, v in value.items()))
    if isinstance(value, (list, tuple)):
        return Sequence(tuple(from_python(item) for item in value))
    if value is None or isinstance(value, (str, bool, int, float)):
        return Scalar(value)
    raise TypeError(f"Cannot convert {type(value).__name__} to a node")


def string_value(node: Optional[Node]) -> Optional[str]:
    """Return the string form of a string or integer scalar, else ``None``."""
    if not isinstance(node, Scalar):
        return None
    if isinstance(node.value, str):
        return node.value
    if isinstance(node.value, int) and not isinstance(node.value, bool):
        return str(node.value)
    return None


def render_yaml(node: Node) -> str:
    """Render *node* back to YAML text, preserving key order and duplicates.

    This is the form in which vendor-extension values are handed to
    extension handler processes.
    """
    return yaml.serialize(
        _to_yaml_node(node, SafeRepresenter()),
        Dumper=yaml.SafeDumper,
        allow_unicode=True,
    )


def _to_yaml_node(node: Node, representer: SafeRepresenter) -> yaml.Node:
    if isinstance(node, Mapping):
        return yaml.MappingNode(
            _MAP_TAG,
            [
                (yaml.ScalarNode(_STR_TAG, key), _to_yaml_node(value, representer))
                for key, value in node.items
            ],
            flow_style=False,
        )
    if isinstance(node, Sequence):
        return yaml.SequenceNode(
            _SEQ_TAG,
            [_to_yaml_node(item, representer) for item in node.items],
            flow_style=False,
        )
    return representer.represent_data(node.value)


def describe(node: Node, indent: str = "") -> str:
    """Describe a node tree as indented text (for debugging)."""
    if isinstance(node, Mapping):
        return "".join(
            f"{indent}{key}:\n" + describe(value, indent + "  ")
            for key, value in node.items
        )
    if isinstance(node, Sequence):
        return "".join(
            f"{indent}{index}:\n" + describe(item, indent + "  ")
            for index, item in enumerate(node.items)
        )
    return f"{indent}{node.value}\n"
