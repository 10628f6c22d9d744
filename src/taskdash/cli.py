"""taskdash CLI — terminal front-end over the task store and filter engine.

Installed as the ``taskdash`` console_script. Each command loads the snapshot,
performs one action and closes the store; filter criteria live only for the
duration of a ``list`` call.
"""

from __future__ import annotations

import sys
from datetime import date

import click
from rich.table import Table

from taskdash import __version__
from taskdash import log
from taskdash.config import Config
from taskdash.errors import ValidationError
from taskdash.store import TaskStore
from taskdash.tasks.criteria import CriteriaController
from taskdash.tasks.engine import get_visible_tasks
from taskdash.tasks.model import (
    FilterCriteria,
    SortOption,
    Task,
    TaskFormBuilder,
    TaskPriority,
    TaskStatus,
)

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

STATUS_CHOICES = [s.value for s in TaskStatus]
PRIORITY_CHOICES = [p.value for p in TaskPriority]
# The short priority spellings are accepted too.
SORT_CHOICES = [s.value for s in SortOption] + ["priority-high", "priority-low"]

STATUS_STYLE: dict[TaskStatus, str] = {
    TaskStatus.PENDING: "yellow",
    TaskStatus.IN_PROGRESS: "blue",
    TaskStatus.COMPLETED: "green",
}

PRIORITY_STYLE: dict[TaskPriority, str] = {
    TaskPriority.HIGH: "red",
    TaskPriority.MEDIUM: "yellow",
    TaskPriority.LOW: "green",
}


def _open_store(ctx: click.Context) -> TaskStore:
    cfg: Config = ctx.obj
    store = TaskStore.from_config(cfg)
    store.load_initial()
    return store


def _format_due(d: date) -> str:
    return d.strftime("%b %d, %Y")


def _status_label(status: TaskStatus) -> str:
    return status.value.replace("-", " ").capitalize()


def _describe_criteria(criteria: FilterCriteria) -> str:
    parts: list[str] = []
    if criteria.status is not None:
        parts.append(f"status={criteria.status.value}")
    if criteria.priority is not None:
        parts.append(f"priority={criteria.priority.value}")
    if criteria.search:
        parts.append(f"search={log.plain(repr(criteria.search))}")
    if criteria.sort is not None:
        parts.append(f"sort={criteria.sort.value}")
    return " ".join(parts)


def _render_tasks(tasks: list[Task], total: int) -> None:
    if not tasks:
        log.console.print("[bold]No tasks found[/bold]")
        log.console.print("Create a new task or try adjusting your filters")
        return

    table = Table(title=f"Tasks ({len(tasks)} of {total})", title_justify="left")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Status")
    table.add_column("Priority")
    table.add_column("Due")
    table.add_column("Description")
    for t in tasks:
        status_style = STATUS_STYLE[t.status]
        priority_style = PRIORITY_STYLE[t.priority]
        table.add_row(
            log.plain(t.id),
            log.plain(t.title),
            f"[{status_style}]{_status_label(t.status)}[/{status_style}]",
            f"[{priority_style}]{t.priority.value.capitalize()}[/{priority_style}]",
            _format_due(t.due_date),
            log.plain(t.description),
        )
    log.console.print(table)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option(
    "--data-dir",
    default="",
    envvar="TASKDASH_HOME",
    help="Directory holding the task snapshot (default: ~/.taskdash)",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.version_option(__version__, prog_name="taskdash")
@click.pass_context
def main(ctx: click.Context, data_dir: str, verbose: bool) -> None:
    """taskdash — a local task-tracking dashboard.

    \b
    EXAMPLES:
      taskdash add "Buy milk" --priority low --due 2024-01-05
      taskdash list --status pending --sort date-asc
      taskdash list --search ship
      taskdash status <task-id> completed
      taskdash delete <task-id>
    """
    cfg = Config(data_dir=data_dir, verbose=verbose)
    log.set_verbose(cfg.verbose)
    ctx.obj = cfg


@main.command()
@click.argument("title")
@click.option("-d", "--description", default="", help="Longer description")
@click.option("--status", type=click.Choice(STATUS_CHOICES), default=TaskStatus.PENDING.value, show_default=True)
@click.option("--priority", type=click.Choice(PRIORITY_CHOICES), default=TaskPriority.MEDIUM.value, show_default=True)
@click.option("--due", default="", help="Due date as YYYY-MM-DD (default: today)")
@click.pass_context
def add(ctx: click.Context, title: str, description: str, status: str, priority: str, due: str) -> None:
    """Create a task and print its id."""
    try:
        form = (
            TaskFormBuilder()
            .set_title(title)
            .set_description(description)
            .set_status(status)
            .set_priority(priority)
        )
        if due:
            form.set_due_date(due)
        with _open_store(ctx) as store:
            task = store.create_task(form.build())
    except ValidationError as exc:
        log.error(log.plain(exc.message))
        sys.exit(1)

    log.success(f"Created {log.plain(task.title)}")
    click.echo(task.id)


@main.command(name="list")
@click.option("--status", default="", help=f"Only this status ({', '.join(STATUS_CHOICES)}, all)")
@click.option("--priority", default="", help=f"Only this priority ({', '.join(PRIORITY_CHOICES)}, all)")
@click.option("--search", default="", help="Case-insensitive text in title or description")
@click.option("--sort", "sort_key", type=click.Choice(SORT_CHOICES), default=None, help="Sort order")
@click.pass_context
def list_tasks(ctx: click.Context, status: str, priority: str, search: str, sort_key: str | None) -> None:
    """Show tasks matching the given filters."""
    controller = CriteriaController()
    try:
        criteria = controller.on_criteria_change(
            status=status,
            priority=priority,
            search=search or None,
            sort=sort_key,
        )
    except ValidationError as exc:
        raise click.BadParameter(exc.message, param_hint=f"--{exc.field}") from None

    if not criteria.is_empty():
        log.info(f"Filters: {_describe_criteria(criteria)}")

    with _open_store(ctx) as store:
        visible = get_visible_tasks(store.tasks, criteria)
        total = len(store)
    _render_tasks(visible, total)


@main.command()
@click.argument("task_id")
@click.argument("new_status", type=click.Choice(STATUS_CHOICES))
@click.pass_context
def status(ctx: click.Context, task_id: str, new_status: str) -> None:
    """Change the status of TASK_ID."""
    with _open_store(ctx) as store:
        if store.get_task(task_id) is None:
            log.warn(f"No task with id {log.plain(task_id)}")
            return
        store.update_status(task_id, TaskStatus(new_status))
    log.success(f"Task {log.plain(task_id)} is now {_status_label(TaskStatus(new_status))}")


@main.command()
@click.argument("task_id")
@click.pass_context
def delete(ctx: click.Context, task_id: str) -> None:
    """Delete TASK_ID."""
    with _open_store(ctx) as store:
        if store.get_task(task_id) is None:
            log.warn(f"No task with id {log.plain(task_id)}")
            return
        store.delete_task(task_id)
    log.success(f"Deleted task {log.plain(task_id)}")
