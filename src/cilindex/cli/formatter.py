"""
Human-readable output formatting for CLI.
"""

from __future__ import annotations

from typing import Any

from ..store.models import IndexStats, TypeRecord


def format_stats(stats: IndexStats) -> str:
    """Format index stats for display."""
    lines = [
        f"Files:       {stats.total_files}",
        f"Types:       {stats.total_types} ({stats.total_classes} classes, {stats.total_interfaces} interfaces)",
        f"Nested:      {stats.nested_types}",
        f"Generic:     {stats.generic_types}",
    ]
    if stats.parse_errors:
        lines.append(f"Parse errors: {stats.parse_errors}")
    return "\n".join(lines)


def format_type_line(t: dict[str, Any]) -> str:
    name = t.get("unique_name", "")
    return f"  {t.get('kind', ''):10s} {name:50s} {t.get('start_line', '')}-{t.get('end_line', '')}"


def format_types(types: list[TypeRecord], path: str) -> str:
    """Format the types of one parsed file."""
    if not types:
        return f"No types declared in {path}."
    lines = [f"Types in {path} ({len(types)}):"]
    for t in sorted(types, key=lambda t: t.start_line):
        lines.append(format_type_line(t.to_dict()))
    return "\n".join(lines)


def format_context(ctx: dict) -> str:
    """Format type context for display."""
    t = ctx.get("type", {})
    if not t:
        return "Type not found."

    lines = [f"{t.get('kind', '')} {t.get('unique_name', '')}"]
    lines.append(f"  {ctx.get('file', '')}:{t.get('start_line', 0)}-{t.get('end_line', 0)}")

    generics = t.get("generics") or []
    if generics:
        lines.append(f"\nGeneric parameters ({len(generics)}):")
        for g in generics:
            constraints = list(g.get("special_constraints", [])) + list(g.get("type_constraints", []))
            suffix = f" : {', '.join(constraints)}" if constraints else ""
            variance = f" [{g['variance']}]" if g.get("variance") else ""
            lines.append(f"  {g['name']}{variance}{suffix}")

    outer = ctx.get("outer")
    if outer:
        lines.append(f"\nDeclared in: {outer.get('unique_name', '?')}")

    nested = ctx.get("nested", [])
    if nested:
        lines.append(f"\nNested types ({len(nested)}):")
        for n in nested:
            lines.append(format_type_line(n))

    siblings = ctx.get("siblings", [])
    if siblings:
        lines.append(f"\nSiblings ({len(siblings)}):")
        for s in siblings[:10]:
            lines.append(format_type_line(s))

    return "\n".join(lines)


def format_search(results: list[dict]) -> str:
    """Format search results for display."""
    if not results:
        return "No results found."

    lines = []
    for r in results:
        lines.append(f"{format_type_line(r)}  {r.get('file', '')}")
    return f"Results ({len(results)}):\n" + "\n".join(lines)


def format_file_summary(summary: dict) -> str:
    f = summary["file"]
    lines = [f"{f['rel_path']} ({f['line_count']} lines, {f['type_count']} types)"]
    if f.get("parse_error"):
        lines.append(f"  parse error: {f['parse_error']}")
    for t in summary["types"]:
        lines.append(format_type_line(t))
    return "\n".join(lines)
