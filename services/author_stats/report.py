"""
Ranking and rendering of author statistics.

Text lines look like::

    Jane Doe(jane@example.com), 12, 3d4h5m(2024-1-2 ~ 2024-1-5)
"""

from datetime import datetime, timedelta
from typing import Iterable, List, Union

from rich.table import Table

from shared.models import AuthorStatistic, ResultCollection, SortOrder

_NS_PER_US = 1_000
_NS_PER_MS = 1_000_000
_NS_PER_S = 1_000_000_000
_NS_PER_M = 60 * _NS_PER_S
_NS_PER_H = 60 * _NS_PER_M


def rank(statistics: Iterable[AuthorStatistic], order: Union[SortOrder, str] = SortOrder.COUNT) -> List[AuthorStatistic]:
    """Sort ascending by commit count or by span. The sort is stable."""
    order = SortOrder.parse(order)
    if order is SortOrder.SPAN:
        return sorted(statistics, key=lambda s: s.span_ns)
    return sorted(statistics, key=lambda s: s.commit_count)


def _to_ns(span: timedelta) -> int:
    return (span // timedelta(microseconds=1)) * _NS_PER_US


def _trim_fraction(whole: int, fraction: int, digits: int) -> str:
    text = str(whole)
    if fraction:
        text += "." + str(fraction).rjust(digits, "0").rstrip("0")
    return text


def format_elapsed(span: timedelta) -> str:
    """Render a duration as an elapsed-time string such as ``1h2m3.5s``."""
    ns = _to_ns(span)
    sign = ""
    if ns < 0:
        sign, ns = "-", -ns
    if ns == 0:
        return "0s"
    if ns < _NS_PER_US:
        return f"{sign}{ns}ns"
    if ns < _NS_PER_MS:
        return f"{sign}{_trim_fraction(ns // _NS_PER_US, ns % _NS_PER_US, 3)}µs"
    if ns < _NS_PER_S:
        return f"{sign}{_trim_fraction(ns // _NS_PER_MS, ns % _NS_PER_MS, 6)}ms"

    hours, rest = divmod(ns, _NS_PER_H)
    minutes, rest = divmod(rest, _NS_PER_M)
    seconds = _trim_fraction(rest // _NS_PER_S, rest % _NS_PER_S, 9) + "s"
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}"
    if minutes:
        return f"{sign}{minutes}m{seconds}"
    return f"{sign}{seconds}"


def format_span(span: timedelta) -> str:
    """Spans of a day or more render as ``<days>d<hours>h<minutes>m``."""
    ns = _to_ns(span)
    if ns < 24 * _NS_PER_H:
        return format_elapsed(span)
    total_hours = ns // _NS_PER_H
    total_minutes = ns // _NS_PER_M
    return f"{total_hours // 24}d{total_hours % 24}h{total_minutes % 60}m"


def format_date(ts: datetime) -> str:
    return f"{ts.year}-{ts.month}-{ts.day}"


def render_line(stat: AuthorStatistic) -> str:
    return (
        f"{stat.user.name}({stat.user.email}), {stat.commit_count}, "
        f"{format_span(stat.span)}({format_date(stat.first_seen)} ~ {format_date(stat.last_seen)})"
    )


def render_lines(statistics: Iterable[AuthorStatistic]) -> List[str]:
    return [render_line(stat) for stat in statistics]


def render_table(statistics: Iterable[AuthorStatistic], title: str = "Authors") -> Table:
    """Build a rich table with one row per author."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Author", style="cyan")
    table.add_column("Email", style="green")
    table.add_column("Commits", style="yellow", justify="right")
    table.add_column("Span", style="blue")
    table.add_column("First", style="white")
    table.add_column("Last", style="white")

    for stat in statistics:
        table.add_row(
            stat.user.name,
            stat.user.email,
            str(stat.commit_count),
            format_span(stat.span),
            format_date(stat.first_seen),
            format_date(stat.last_seen),
        )
    return table


def render_json(result: ResultCollection, statistics: Iterable[AuthorStatistic]) -> str:
    """Serialize ranked statistics plus totals as JSON."""
    ranked = ResultCollection(statistics=tuple(statistics), total_commits=result.total_commits)
    return ranked.model_dump_json(indent=2)
