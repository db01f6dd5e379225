"""Console presentation — pure functions that turn results into text.

Nothing here touches stdin/stdout; the CLI decides where the text goes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import pandas as pd

from user_store.models import User

if TYPE_CHECKING:
    from user_store.service import InsertReport

_COLUMNS = {"id": "ID", "first_name": "First name", "last_name": "Last name", "email": "Email"}


def format_info(message: str) -> str:
    return f"[INFO] {message}"


def format_success(message: str) -> str:
    return f"[OK] {message}"


def format_error(message: str) -> str:
    return f"[ERROR] {message}"


def format_users(users: Sequence[User], elapsed_ms: float | None = None) -> str:
    """Render *users* as a fixed-width table followed by a summary line."""
    if not users:
        body = "No users found."
    else:
        df = pd.DataFrame([u.model_dump() for u in users], columns=list(_COLUMNS))
        body = df.rename(columns=_COLUMNS).to_string(index=False)

    summary = f"Found {len(users)} user(s)"
    if elapsed_ms is not None:
        summary += f" in {elapsed_ms:.0f} ms"
    return f"{body}\n\n{summary}."


def format_user(user: User | None, elapsed_ms: float | None = None) -> str:
    if user is None:
        text = "User not found."
    else:
        text = "\n".join(
            f"{label + ':':<12}{getattr(user, field)}" for field, label in _COLUMNS.items()
        )
    if elapsed_ms is not None:
        text += f"\n\nLookup took {elapsed_ms:.0f} ms."
    return text


def format_statistics(report: InsertReport) -> str:
    """Summarise an insert: how many, how fast, which strategy, new total."""
    per_second = (
        report.inserted / (report.elapsed_ms / 1000) if report.elapsed_ms > 0 else 0.0
    )
    lines = [
        "Insert statistics",
        "-----------------",
        f"  {'Strategy':<18}{report.strategy}",
        f"  {'Users inserted':<18}{report.inserted}",
        f"  {'Elapsed':<18}{report.elapsed_ms:.0f} ms",
        f"  {'Throughput':<18}{per_second:.0f} users/s",
        f"  {'Total in table':<18}{report.total}",
    ]
    return "\n".join(lines)


def format_strategies(strategies: dict[str, str]) -> str:
    """List registered insertion strategies, one per line."""
    lines = ["STRATEGIES", "----------"]
    if not strategies:
        lines.append("  (none)")
    for key, class_name in strategies.items():
        lines.append(f"  {key:30s} {class_name}")
    return "\n".join(lines)
