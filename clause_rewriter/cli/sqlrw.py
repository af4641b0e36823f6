"""sqlrw: rewrite log queries from the command line or an interactive shell."""

from __future__ import annotations

import sys
import time
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

import click
import pyarrow as pa
from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.history import FileHistory

from ..config import Config, DataSourceConfig, load_config
from ..datasources import DataSource, DataSourceError, DuckDBDataSource
from ..processor import (
    AutoLimitProcessor,
    AutoOrderByProcessor,
    LogsContextBrowser,
    QueryExecutor,
)
from ..rewriter import (
    CLAUSE_ORDER,
    ContextFilter,
    InvalidDirectionError,
    OrderDirection,
    build_context_query_sql,
    check_syntax,
    direction_from_sort_order,
    find_main_clause_position,
    inject_limit,
    inject_order_by,
)
from ..utils.logging import setup_logging


def _read_sql(sql: Optional[str]) -> str:
    """Use the argument, or stdin when it is missing or '-'."""
    if sql is None or sql == "-":
        return click.get_text_stream("stdin").read().strip()
    return sql


def _parse_filter(raw: str) -> ContextFilter:
    column, separator, value = raw.partition("=")
    if not separator or not column.strip():
        raise click.BadParameter(f"expected column=value, got {raw!r}", param_hint="--filter")
    return ContextFilter(column=column.strip(), value=value)


def _emit_rewritten(sql: str, check: bool) -> None:
    click.echo(sql)
    if not check:
        return
    for problem in check_syntax(sql):
        click.echo(f"warning: {problem}", err=True)


def _default_order_direction(config: Config) -> OrderDirection:
    return direction_from_sort_order(config.logs.sort_order).order_direction


@click.group()
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    help="Path to YAML config file.",
)
@click.option("--log-level", default=None, help="Override the configured log level.")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], log_level: Optional[str]) -> None:
    """Clause-aware SQL rewriting for log queries."""
    config = load_config(config_path) if config_path else Config()
    setup_logging(
        level=log_level or config.logging.level,
        structured=config.logging.structured,
        log_file=config.logging.log_file,
    )
    ctx.obj = config


@cli.command()
@click.argument("keyword", type=click.Choice(CLAUSE_ORDER, case_sensitive=False))
@click.argument("sql", required=False)
def locate(keyword: str, sql: Optional[str]) -> None:
    """Print the offset of KEYWORD in the main query."""
    position = find_main_clause_position(_read_sql(sql), keyword)
    if position is None:
        click.echo("not found")
        return
    click.echo(position)


@cli.command("inject-limit")
@click.argument("sql", required=False)
@click.option("--limit", type=int, default=None, help="Row limit (default: logs.default_limit).")
@click.option("--check", is_flag=True, help="Warn when the result does not parse.")
@click.pass_obj
def inject_limit_command(
    config: Config, sql: Optional[str], limit: Optional[int], check: bool
) -> None:
    """Add a LIMIT unless the query already has one."""
    if limit is None:
        limit = config.logs.default_limit
    _emit_rewritten(inject_limit(_read_sql(sql), limit), check)


@cli.command("inject-order-by")
@click.argument("sql", required=False)
@click.option("--column", default=None, help="Column to order by (default: logs.time_column).")
@click.option(
    "--direction",
    type=click.Choice(["ASC", "DESC"], case_sensitive=False),
    default=None,
    help="Sort direction (default: from logs.sort_order).",
)
@click.option("--check", is_flag=True, help="Warn when the result does not parse.")
@click.pass_obj
def inject_order_by_command(
    config: Config,
    sql: Optional[str],
    column: Optional[str],
    direction: Optional[str],
    check: bool,
) -> None:
    """Add an ORDER BY unless the query is ordered or a scalar aggregate."""
    column = column or config.logs.time_column
    if direction is None:
        order = _default_order_direction(config)
    else:
        order = OrderDirection(direction.upper())
    _emit_rewritten(inject_order_by(_read_sql(sql), column, order), check)


@cli.command("context")
@click.argument("sql", required=False)
@click.option("--time-column", default=None, help="Time column (default: logs.time_column).")
@click.option("--time-expr", "time_expression", required=True, help="Reference timestamp as a SQL expression.")
@click.option("--direction", default=None, help="forward or backward (default: from logs.sort_order).")
@click.option("--limit", type=int, default=None, help="Rows per page (default: context.limit).")
@click.option("--filter", "filters", multiple=True, help="Equality filter as column=value; repeatable.")
@click.option("--check", is_flag=True, help="Warn when the result does not parse.")
@click.pass_obj
def context_command(
    config: Config,
    sql: Optional[str],
    time_column: Optional[str],
    time_expression: str,
    direction: Optional[str],
    limit: Optional[int],
    filters: Tuple[str, ...],
    check: bool,
) -> None:
    """Rewrite the query into a context page around a timestamp."""
    context_filters: List[ContextFilter] = []
    for raw in filters:
        context_filters.append(_parse_filter(raw))
    if direction is None:
        direction = direction_from_sort_order(config.logs.sort_order).value
    try:
        rewritten = build_context_query_sql(
            _read_sql(sql),
            time_column or config.logs.time_column,
            time_expression,
            direction,
            limit if limit is not None else config.context.limit,
            context_filters,
        )
    except InvalidDirectionError as exc:
        raise click.BadParameter(str(exc), param_hint="--direction") from exc
    _emit_rewritten(rewritten, check)


class ResultPrinter:
    """Formats Arrow tables for CLI display."""

    def __init__(self, emit):
        self.emit = emit

    def display(self, table: pa.Table, elapsed_ms: float) -> None:
        headers = list(table.schema.names)
        rows = self._build_rows(table)
        for line in self._format_table(headers, rows):
            self.emit(line)
        self.emit(f"{table.num_rows} rows in {elapsed_ms:.2f} ms")

    def _build_rows(self, table: pa.Table) -> List[List[str]]:
        rows: List[List[str]] = []
        for record in table.to_pylist():
            row = []
            for value in record.values():
                row.append(self._stringify_cell(value))
            rows.append(row)
        return rows

    def _format_table(self, headers: List[str], rows: List[List[str]]) -> List[str]:
        widths = [len(header) for header in headers]
        for row in rows:
            for index, text in enumerate(row):
                widths[index] = max(widths[index], len(text))
        border = "+" + "+".join("-" * (width + 2) for width in widths) + "+"
        lines = [border, self._format_row(headers, widths), border]
        for row in rows:
            lines.append(self._format_row(row, widths))
        lines.append(border)
        return lines

    def _format_row(self, values: List[str], widths: List[int]) -> str:
        cells = []
        for index, value in enumerate(values):
            cells.append(f" {value.ljust(widths[index])} ")
        return "|" + "|".join(cells) + "|"

    def _stringify_cell(self, value: object) -> str:
        if value is None:
            return "NULL"
        return str(value)


class SqlrwRepl:
    """Interactive loop that runs auto-limited, auto-ordered queries."""

    def __init__(
        self,
        executor: QueryExecutor,
        limit_processor: AutoLimitProcessor,
        printer: ResultPrinter,
        history_path: Path = Path(".sqlrw_history"),
        context_browser: Optional[LogsContextBrowser] = None,
        context_direction: str = "backward",
    ):
        self.executor = executor
        self.limit_processor = limit_processor
        self.printer = printer
        self.history_path = history_path
        self.context_browser = context_browser
        self.context_direction = context_direction
        self.show_sql = False
        self.last_sql: Optional[str] = None
        self.last_result: Optional[pa.Table] = None
        self.session = self._create_session()

    def _create_session(self) -> PromptSession:
        """Create prompt session backed by persistent history."""
        if not self.history_path.exists():
            self.history_path.touch()
        history = FileHistory(str(self.history_path))
        return PromptSession(history=history, auto_suggest=AutoSuggestFromHistory())

    def run(self) -> None:
        buffer: List[str] = []
        while True:
            line, should_continue = self._read_line(buffer)
            if not should_continue:
                break
            if line is None:
                continue
            if not buffer and self._is_exit_command(line):
                break
            if not buffer and line.strip().startswith("."):
                self.execute_shortcut(line)
                continue
            buffer.append(line)
            if line.strip().endswith(";"):
                statement = "\n".join(buffer)
                buffer.clear()
                self.execute_query(statement)

    def _read_line(self, buffer: List[str]) -> Tuple[Optional[str], bool]:
        prompt = "...> " if buffer else "sqlrw> "
        try:
            return self.session.prompt(prompt), True
        except EOFError:
            click.echo("")
            return None, False
        except KeyboardInterrupt:
            click.echo("")
            buffer.clear()
            return None, True

    def _is_exit_command(self, line: str) -> bool:
        return line.strip().lower() in ("\\q", "quit", "exit")

    def execute_shortcut(self, line: str) -> None:
        parts = line.strip().split()
        command = parts[0].lower()
        if command == ".sql":
            self.show_sql = not self.show_sql
            click.echo(f"Show rewritten SQL: {'on' if self.show_sql else 'off'}")
        elif command == ".limit" and len(parts) == 2 and parts[1].isdigit():
            self.limit_processor.limit = int(parts[1])
            click.echo(f"Auto LIMIT set to {self.limit_processor.limit}")
        elif command == ".context" and len(parts) in (2, 3) and parts[1].isdigit():
            direction = parts[2] if len(parts) == 3 else self.context_direction
            self.show_context(int(parts[1]), direction)
        else:
            click.echo(f"Unknown shortcut: {line.strip()}")
            click.echo("Available shortcuts: .sql, .limit N, .context ROW [forward|backward]")

    def show_context(self, index: int, direction: str) -> None:
        """Show the rows around row ``index`` (0-based) of the last result."""
        if self.context_browser is None or self.last_result is None or self.last_sql is None:
            click.echo("No previous result to show context for")
            return
        if index >= self.last_result.num_rows:
            click.echo(f"Row {index} is out of range ({self.last_result.num_rows} rows)")
            return
        row = self.last_result.slice(index, 1).to_pylist()[0]
        timestamp = row.get(self.context_browser.time_column)
        if not isinstance(timestamp, datetime):
            click.echo(f"Row {index} has no timestamp in column {self.context_browser.time_column!r}")
            return
        try:
            start = time.time()
            result = self.context_browser.fetch(self.last_sql, timestamp, direction, row)
            elapsed = (time.time() - start) * 1000
            self.printer.display(result, elapsed)
        except (ValueError, DataSourceError) as exc:
            click.echo(f"error: {exc}")

    def execute_query(self, statement: str) -> None:
        if not statement.strip().rstrip(";").strip():
            return
        try:
            start = time.time()
            result = self.executor.execute(statement)
            elapsed = (time.time() - start) * 1000
            if self.show_sql:
                click.echo(self.executor.query_context.rewritten_sql)
            self.printer.display(result, elapsed)
            self.last_sql = statement
            self.last_result = result
        except (ValueError, DataSourceError) as exc:
            click.echo(f"error: {exc}")


def create_datasource(ds_config: DataSourceConfig) -> DataSource:
    if ds_config.type == "duckdb":
        return DuckDBDataSource("sqlrw", ds_config.config)
    raise ValueError(f"Unsupported data source type: {ds_config.type}")


def build_shell_executor(
    config: Config, datasource: DataSource
) -> Tuple[QueryExecutor, AutoLimitProcessor]:
    """Executor with the auto LIMIT / ORDER BY processors from ``config``."""
    limit_processor = AutoLimitProcessor(config.logs.default_limit)
    processors = [limit_processor]
    if config.logs.auto_order_by:
        processors.insert(
            0,
            AutoOrderByProcessor(config.logs.time_column, _default_order_direction(config)),
        )
    return QueryExecutor(datasource, processors), limit_processor


def build_context_browser(config: Config, datasource: DataSource) -> LogsContextBrowser:
    """Context browser using the ``context`` section of ``config``."""
    return LogsContextBrowser(
        datasource,
        config.logs.time_column,
        limit=config.context.limit,
        filter_columns=config.context.filter_columns,
    )


@cli.command()
@click.pass_obj
def shell(config: Config) -> None:
    """Interactive shell against the configured data source."""
    try:
        datasource = create_datasource(config.datasource)
        datasource.connect()
    except (ValueError, DataSourceError) as exc:
        click.echo(f"error: {exc}", err=True)
        sys.exit(1)
    executor, limit_processor = build_shell_executor(config, datasource)
    repl = SqlrwRepl(
        executor,
        limit_processor,
        ResultPrinter(click.echo),
        context_browser=build_context_browser(config, datasource),
        context_direction=direction_from_sort_order(config.logs.sort_order).value,
    )
    click.echo("Type SQL statements terminated by ';'. Use \\q to exit.")
    click.echo("Use .sql to toggle rewritten SQL, .limit N to change the auto LIMIT.")
    click.echo("Use .context ROW [forward|backward] to page around a row of the last result.")
    with datasource:
        repl.run()


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
