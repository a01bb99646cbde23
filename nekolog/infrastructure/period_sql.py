"""Period SQL: bucket-key expressions evaluated by the database engine.

Invariants:
    - Each expression yields exactly the string core/period_keys.py computes
      for the same UTC instant (day "YYYY-MM-DD", week-start Monday
      "YYYY-MM-DD", month "YYYY-MM")
    - Expressions render without bind parameters, so the same expression can
      appear in SELECT, GROUP BY and ORDER BY
    - Unsupported dialects fail at compile time, never silently

Design Decisions:
    - One FunctionElement subclass per granularity so SQLAlchemy's statement
      cache keys differ per bucket size
    - SQLite stores timestamps as UTC text: date() and its modifiers operate on
      it directly. PostgreSQL converts timestamptz to UTC wall time first
"""

from sqlalchemy.exc import CompileError
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.expression import ColumnElement, FunctionElement
from sqlalchemy.types import String

from nekolog.core.domain_types import Granularity


class _PeriodKey(FunctionElement):
    type = String()
    inherit_cache = True


class day_key(_PeriodKey):
    name = "day_key"
    inherit_cache = True


class week_start_key(_PeriodKey):
    name = "week_start_key"
    inherit_cache = True


class month_key(_PeriodKey):
    name = "month_key"
    inherit_cache = True


def _argument(element, compiler, **kw) -> str:
    return compiler.process(element.clauses, **kw)


@compiles(_PeriodKey)
def _unsupported(element, compiler, **kw):
    raise CompileError(
        f"{element.name} is not supported on dialect {compiler.dialect.name!r}",
    )


# ─── SQLite ──────────────────────────────────────────────────────

@compiles(day_key, "sqlite")
def _day_key_sqlite(element, compiler, **kw):
    return f"date({_argument(element, compiler, **kw)})"


@compiles(week_start_key, "sqlite")
def _week_start_key_sqlite(element, compiler, **kw):
    # step back 6 days, then forward to the next Monday (same day if Monday)
    return f"date({_argument(element, compiler, **kw)}, '-6 days', 'weekday 1')"


@compiles(month_key, "sqlite")
def _month_key_sqlite(element, compiler, **kw):
    return f"substr(date({_argument(element, compiler, **kw)}), 1, 7)"


# ─── PostgreSQL ──────────────────────────────────────────────────

@compiles(day_key, "postgresql")
def _day_key_pg(element, compiler, **kw):
    return f"to_char(timezone('UTC', {_argument(element, compiler, **kw)}), 'YYYY-MM-DD')"


@compiles(week_start_key, "postgresql")
def _week_start_key_pg(element, compiler, **kw):
    return (
        "to_char(date_trunc('week', timezone('UTC', "
        f"{_argument(element, compiler, **kw)})), 'YYYY-MM-DD')"
    )


@compiles(month_key, "postgresql")
def _month_key_pg(element, compiler, **kw):
    return f"to_char(timezone('UTC', {_argument(element, compiler, **kw)}), 'YYYY-MM')"


def period_key_expression(
    granularity: Granularity, column: ColumnElement,
) -> _PeriodKey:
    """Bucket-key SQL expression for `column` at the given granularity."""
    match granularity:
        case Granularity.DAILY:
            return day_key(column)
        case Granularity.WEEKLY:
            return week_start_key(column)
        case Granularity.MONTHLY:
            return month_key(column)
    raise ValueError(f"Unknown granularity: {granularity!r}")
