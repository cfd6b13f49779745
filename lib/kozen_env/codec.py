"""Safe value codec: canonical text encoding plus cycle-safe clean and clone.

encode/clean/clone all go through ``walk``, a single identity-keyed graph
walk whose behaviour on re-entry is chosen by a CyclePolicy:
- OMIT: drop the member that would re-enter a visited node (clean)
- REUSE: point the member at the copy already built for that node (clone)
- RAISE: abort, so encode can fall back to plain text (encode)
"""

from __future__ import annotations

import copy
import inspect
import json
import logging
import types
from collections import defaultdict
from collections.abc import Callable, Iterator, Mapping
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class CyclePolicy(str, Enum):
    """What the graph walk does when it reaches a node it has already entered."""

    OMIT = "omit"
    REUSE = "reuse"
    RAISE = "raise"


class CycleError(ValueError):
    """Raised by ``walk`` under CyclePolicy.RAISE when a cycle is found."""


_OMIT = object()
_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def _is_non_data(value: Any) -> bool:
    """Functions, classes, modules and other behaviour-only values."""
    return (
        callable(value)
        or isinstance(value, types.ModuleType)
        or inspect.iscoroutine(value)
        or inspect.isgenerator(value)
    )


def _is_node(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray, Enum)):
        return False
    if isinstance(value, (Mapping, *_SEQUENCE_TYPES)):
        return True
    return hasattr(value, "__dict__") and not _is_non_data(value)


def _members(node: Any) -> Iterator[tuple[Any, Any]]:
    if isinstance(node, Mapping):
        yield from node.items()
    elif isinstance(node, _SEQUENCE_TYPES):
        yield from enumerate(node)
    else:
        yield from vars(node).items()


def _shell(node: Any, policy: CyclePolicy) -> Any:
    """Create the empty container that will receive a node's walked members."""
    if policy is not CyclePolicy.REUSE:
        return [] if isinstance(node, _SEQUENCE_TYPES) else {}
    if isinstance(node, _SEQUENCE_TYPES):
        return []
    if isinstance(node, defaultdict):
        return defaultdict(node.default_factory)
    if isinstance(node, Mapping):
        return {}
    # bare instance: copy.copy may hand back a live object (self, a singleton,
    # a registered logger) whose attributes must stay untouched
    return object.__new__(type(node))


def _assign(shell: Any, key: Any, value: Any) -> None:
    if isinstance(shell, dict):
        shell[key] = value
    elif isinstance(shell, list):
        shell.append(value)
    else:
        vars(shell)[key] = value


def _finish(node: Any, shell: Any) -> Any:
    """Convert a filled list back to the node's immutable/set type."""
    if isinstance(node, (tuple, set, frozenset)):
        return type(node)(shell)
    return shell


def walk(
    obj: Any,
    policy: CyclePolicy = CyclePolicy.OMIT,
    leaf: Callable[[Any], Any] | None = None,
) -> Any:
    """Rebuild an object graph, dropping non-data members.

    Mappings come back as dicts (defaultdicts keep their factory under
    REUSE), lists/tuples/sets keep their type, and plain
    objects come back as dicts of their attributes (or, under REUSE, as
    fresh instances of the same class holding the walked attributes).
    ``leaf`` transforms every non-container value; it defaults to identity.

    Nodes are identified by ``id()``. Under OMIT every node is visited once
    and later references to it are dropped. Under RAISE only the current
    path counts, so shared acyclic references are fine. Under REUSE, a
    member whose copy raises is kept as the original reference instead of
    aborting the walk; the source graph itself is never modified.
    Tuples and sets re-entered while still being built resolve to their
    list form.
    """
    visit = leaf or (lambda value: value)
    seen: dict[int, Any] = {}

    def _walk(node: Any) -> Any:
        if not _is_node(node):
            return visit(node)
        ident = id(node)
        if ident in seen:
            if policy is CyclePolicy.REUSE:
                return seen[ident]
            if policy is CyclePolicy.RAISE:
                raise CycleError(f"Circular reference detected at {type(node).__name__}")
            return _OMIT
        shell = _shell(node, policy)
        seen[ident] = shell
        try:
            for key, member in _members(node):
                if _is_non_data(member):
                    continue
                if policy is CyclePolicy.REUSE:
                    try:
                        value = _walk(member)
                    except Exception as exc:
                        logger.debug("codec: member %r not cloned: %s", key, exc)
                        value = member
                else:
                    value = _walk(member)
                if value is _OMIT:
                    continue
                _assign(shell, key, value)
        finally:
            if policy is CyclePolicy.RAISE:
                del seen[ident]
        result = _finish(node, shell)
        if result is not shell and policy is CyclePolicy.REUSE:
            seen[ident] = result
        return result

    result = _walk(obj)
    return None if result is _OMIT else result


def _copy_leaf(value: Any) -> Any:
    return copy.copy(value)


def clean(obj: Any) -> Any:
    """Return a copy of obj without non-data members or cyclic references."""
    return walk(obj, CyclePolicy.OMIT)


def clone(obj: Any) -> Any:
    """Deep-copy obj, preserving cycles within the copy."""
    return walk(obj, CyclePolicy.REUSE, leaf=_copy_leaf)


def encode(value: Any) -> str:
    """Encode a value to its canonical text form. Never raises."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value).strip()
    try:
        return json.dumps(
            walk(value, CyclePolicy.RAISE), separators=(",", ":"), ensure_ascii=False
        )
    except (TypeError, ValueError, RecursionError) as exc:
        logger.warning(
            "codec: SerializationFallback for %s, using str(): %s",
            type(value).__name__,
            exc,
        )
        return str(value).strip()


def decode(text: Any) -> Any | None:
    """Parse canonical text back into a value; None when it cannot be parsed."""
    if not isinstance(text, (str, bytes, bytearray)):
        return text
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        return None
