"""
Generic parameter list extraction for `.class` lines.

Handles the ILDasm forms:
    .class public auto ansi Box`1<T> extends [mscorlib]System.Object
    .class interface public abstract IProducer`1<+T>
    .class public Pair`2<class .ctor ([mscorlib]System.IComparable) K, - V>
"""

from __future__ import annotations

import re
from typing import Optional

from ..store.models import GenericParameter

SPECIAL_CONSTRAINTS = ("class", "valuetype", ".ctor")

_BASE_CLAUSE_RE = re.compile(r"\s(extends|implements)\s")

_OPENERS = {"<": ">", "(": ")", "[": "]"}
_CLOSERS = {">", ")", "]"}


def parse_generic_declaration(line: str) -> tuple[GenericParameter, ...]:
    """Return the generic parameters declared on a `.class` line.

    Only the list attached to the declared type counts, so anything after an
    `extends` or `implements` keyword is ignored. Lines without generic syntax,
    or with an unterminated list, give an empty tuple.
    """
    match = _BASE_CLAUSE_RE.search(line)
    head = line[:match.start()] if match else line

    start = head.find("<")
    if start < 0:
        return ()
    body = _balanced_body(head, start)
    if body is None:
        return ()

    params = []
    for position, raw in enumerate(_split_top_level(body)):
        param = _parse_parameter(raw, position)
        if param is not None:
            params.append(param)
    return tuple(params)


def _balanced_body(text: str, start: int) -> Optional[str]:
    """Text between the `<` at `start` and its matching `>`."""
    stack: list[str] = []
    for i in range(start, len(text)):
        ch = text[i]
        if ch in _OPENERS:
            stack.append(_OPENERS[ch])
        elif ch in _CLOSERS:
            if not stack or stack[-1] != ch:
                return None
            stack.pop()
            if not stack:
                return text[start + 1:i]
    return None


def _split_top_level(text: str) -> list[str]:
    """Split on commas that are not nested in brackets."""
    parts = []
    depth = 0
    current: list[str] = []
    for ch in text:
        if ch in _OPENERS:
            depth += 1
        elif ch in _CLOSERS:
            depth -= 1
        if ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return [p.strip() for p in parts if p.strip()]


def _parse_parameter(raw: str, position: int) -> Optional[GenericParameter]:
    text = raw.strip()
    variance = ""
    if text.startswith("+"):
        variance = "covariant"
        text = text[1:].lstrip()
    elif text.startswith("-"):
        variance = "contravariant"
        text = text[1:].lstrip()

    special = []
    while True:
        for keyword in SPECIAL_CONSTRAINTS:
            if text.startswith(keyword) and (len(text) == len(keyword) or not _is_name_char(text[len(keyword)])):
                special.append(keyword)
                text = text[len(keyword):].lstrip()
                break
        else:
            break

    constraints: tuple[str, ...] = ()
    if text.startswith("("):
        inner = _balanced_body(text, 0)
        if inner is None:
            return None
        constraints = tuple(_split_top_level(inner))
        text = text[len(inner) + 2:].strip()

    name = text.strip().strip("'")
    if not name:
        return None
    return GenericParameter(
        name=name,
        position=position,
        variance=variance,
        special_constraints=tuple(special),
        type_constraints=constraints,
    )


def _is_name_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_`."
