"""
Reference resolver.

Replaces every ``{dot.path}`` reference in a tree with the resolved value of
its target. Tokens are resolved in dependency order (Kahn's algorithm over
the reference edge list), so each target is computed exactly once before
anything that refers to it.
"""

from __future__ import annotations

import logging
import re
from collections import deque

from .errors import (
    CyclicReferenceError,
    ErrorContext,
    ReferenceInterpolationError,
    UnresolvedReferenceError,
)
from .ir.tokens import (
    CompositeList,
    CompositeMap,
    Scalar,
    TokenNode,
    TokenTree,
    TokenValue,
    scalar_text,
)
from .references import REFERENCE_PATTERN, alias_target, collect_references, normalize_target

logger = logging.getLogger(__name__)


def resolve_tree(tree: TokenTree) -> TokenTree:
    """
    Resolve all references in a tree.

    Args:
        tree: Merged token tree, possibly holding references

    Returns:
        New tree of identical shape and order with every value resolved.
        ``raw_value`` is carried over unchanged for diagnostics.

    Raises:
        UnresolvedReferenceError: If a reference names a missing token
        CyclicReferenceError: If tokens reference each other in a cycle
        ReferenceInterpolationError: If a composite is embedded in a string
    """
    edges = collect_references(tree)
    _check_targets(tree, edges)
    order = resolution_order(edges)

    values: dict[str, TokenValue] = {}
    types: dict[str, str | None] = {}

    for path in order:
        node = tree[path]
        values[path] = _substitute(node.value, node, values)

        # Pure aliases inherit the type of their target
        token_type = node.type
        if token_type is None:
            target = alias_target(node.value)
            if target is not None:
                token_type = types[target]
        types[path] = token_type

    logger.debug(
        "Resolved %d tokens (%d with references)",
        len(order),
        sum(1 for deps in edges.values() if deps),
    )
    return TokenTree(
        node.evolve(value=values[node.dotted], type=types[node.dotted]) for node in tree
    )


def resolution_order(edges: dict[str, list[str]]) -> list[str]:
    """
    Order token paths so that every token comes after the tokens it references.

    Args:
        edges: Reference edge list (path -> referenced paths); every
            referenced path must itself be a key

    Returns:
        Paths in dependency order; ties keep the edge list order

    Raises:
        CyclicReferenceError: If a cycle prevents ordering
    """
    # in_degree[X] = number of distinct tokens X references
    in_degree = {path: len(set(deps)) for path, deps in edges.items()}
    dependents: dict[str, list[str]] = {path: [] for path in edges}
    for path, deps in edges.items():
        for dep in dict.fromkeys(deps):
            dependents[dep].append(path)

    queue = deque(path for path, degree in in_degree.items() if degree == 0)
    ordered: list[str] = []

    while queue:
        path = queue.popleft()
        ordered.append(path)
        for dependent in dependents[path]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                queue.append(dependent)

    # Anything left over sits on or behind a cycle
    if len(ordered) != len(edges):
        done = set(ordered)
        start = next(path for path in edges if path not in done)
        raise CyclicReferenceError(_find_cycle(start, edges))

    return ordered


def resolve_reference_chain(tree: TokenTree, path: str) -> list[str]:
    """
    Follow a token's alias chain.

    Returns:
        ``[path, target, target's target, ...]`` ending at the first token
        that is not a pure alias.

    Raises:
        KeyError: If ``path`` is not in the tree
        UnresolvedReferenceError: If the chain reaches a missing token
        CyclicReferenceError: If the chain loops
    """
    chain = [path]
    node = tree[path]
    while (target := alias_target(node.value)) is not None:
        if target in chain:
            raise CyclicReferenceError(chain[chain.index(target) :] + [target])
        next_node = tree.get(target)
        if next_node is None:
            raise UnresolvedReferenceError(node.dotted, target, _context(node))
        chain.append(target)
        node = next_node
    return chain


def _check_targets(tree: TokenTree, edges: dict[str, list[str]]) -> None:
    for path, targets in edges.items():
        for target in targets:
            if target not in tree:
                node = tree[path]
                raise UnresolvedReferenceError(path, target, _context(node))


def _find_cycle(start: str, edges: dict[str, list[str]]) -> list[str]:
    """Find the cycle reachable from ``start``. Returns the cycle path."""
    visited = {start}
    path = [start]
    # node -> index in path, for nodes on the current walk
    on_path = {start: 0}
    stack = [iter(edges.get(start, []))]

    while stack:
        for neighbor in stack[-1]:
            if neighbor in on_path:
                return path[on_path[neighbor] :] + [neighbor]
            if neighbor not in visited:
                visited.add(neighbor)
                on_path[neighbor] = len(path)
                path.append(neighbor)
                stack.append(iter(edges.get(neighbor, [])))
                break
        else:
            stack.pop()
            del on_path[path.pop()]

    # Kahn's algorithm only leaves nodes on or behind a cycle
    raise AssertionError(f"no cycle reachable from {start}")


def _substitute(value: TokenValue, node: TokenNode, resolved: dict[str, TokenValue]) -> TokenValue:
    match value:
        case Scalar(str() as text):
            target = alias_target(value)
            if target is not None:
                return resolved[target]
            if not REFERENCE_PATTERN.search(text):
                return value
            return Scalar(REFERENCE_PATTERN.sub(lambda m: _interpolate(m, node, resolved), text))
        case Scalar():
            return value
        case CompositeList(items):
            return CompositeList(tuple(_substitute(item, node, resolved) for item in items))
        case CompositeMap(fields):
            return CompositeMap({k: _substitute(v, node, resolved) for k, v in fields.items()})
    raise TypeError(f"not a token value: {value!r}")


def _interpolate(match: re.Match[str], node: TokenNode, resolved: dict[str, TokenValue]) -> str:
    target = normalize_target(match.group(1))
    value = resolved[target]
    if not isinstance(value, Scalar):
        raise ReferenceInterpolationError(node.dotted, target, _context(node))
    return scalar_text(value.value)


def _context(node: TokenNode) -> ErrorContext:
    return ErrorContext(file=node.source, path=node.dotted)
