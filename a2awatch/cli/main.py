"""a2awatch CLI — inspect, cancel and wait on remote A2A tasks.

    a2awatch get summarizer task-123
    a2awatch list summarizer --status running
    a2awatch wait summarizer task-123 --timeout 600
"""

from __future__ import annotations

import logging
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from a2awatch.a2a.models import A2ATask, TaskStatus
from a2awatch.a2a.monitor import TaskMonitor
from a2awatch.cli import context
from a2awatch.config import settings
from a2awatch.exceptions import A2AWatchError

console = Console()

app = typer.Typer(
    name="a2awatch",
    help="a2awatch -- talk to remote A2A agents and watch their tasks.",
    no_args_is_help=True,
)

_STATUS_STYLES = {
    "created": "white",
    "running": "bold yellow",
    "succeeded": "bold green",
    "failed": "bold red",
    "cancelled": "dim",
    "expired": "dim red",
}


@app.callback()
def _setup() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _styled(status: TaskStatus) -> str:
    style = _STATUS_STYLES.get(status.value, "white")
    return f"[{style}]{status.value}[/{style}]"


def _print_task(task: A2ATask) -> None:
    console.print(f"[bold]Task[/bold] [cyan]{task.id}[/cyan]  {_styled(task.status)}")
    if task.created_at:
        console.print(f"  Created:  {task.created_at.isoformat()}")
    if task.modified_at:
        console.print(f"  Modified: {task.modified_at.isoformat()}")
    if TaskMonitor.is_completed(task) and task.created_at and task.modified_at:
        console.print(f"  Took:     {TaskMonitor.execution_time(task)}")
    console.print(f"  Messages: {len(task.messages)}")
    for artifact in task.artifacts:
        console.print(f"  Artifact: {artifact.id} ({artifact.type}) {artifact.uri}")


def _fail(exc: Exception) -> NoReturn:
    console.print(f"[red]Error: {escape(str(exc))}[/red]")
    raise typer.Exit(code=1)


@app.command("get")
def get(
    agent_id: str = typer.Argument(help="Agent ID"),
    task_id: str = typer.Argument(help="Task ID"),
):
    """Show the current state of a task."""
    async def _run() -> A2ATask:
        async with context.build_client() as client:
            return await client.get_task(agent_id, task_id)

    try:
        task = context.run_async(_run())
    except A2AWatchError as e:
        _fail(e)
    _print_task(task)


@app.command("list")
def list_tasks(
    agent_id: str = typer.Argument(help="Agent ID"),
    status: Optional[TaskStatus] = typer.Option(None, "--status", "-s", help="Only tasks in this status"),
):
    """List an agent's tasks."""
    async def _run() -> list[A2ATask]:
        async with context.build_client() as client:
            return await context.build_monitor(client).monitor_agent_tasks(agent_id, status)

    try:
        tasks = context.run_async(_run())
    except A2AWatchError as e:
        _fail(e)

    if not tasks:
        console.print("[dim]No tasks.[/dim]")
        return

    table = Table(title=f"Tasks of {agent_id}")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Created", style="dim")
    table.add_column("Artifacts", justify="right")
    for task in tasks:
        table.add_row(
            task.id,
            _styled(task.status),
            task.created_at.isoformat() if task.created_at else "-",
            str(len(task.artifacts)),
        )
    console.print(table)


@app.command("cancel")
def cancel(
    agent_id: str = typer.Argument(help="Agent ID"),
    task_id: str = typer.Argument(help="Task ID"),
):
    """Cancel a running task."""
    async def _run() -> A2ATask:
        async with context.build_client() as client:
            return await client.cancel_task(agent_id, task_id)

    try:
        task = context.run_async(_run())
    except A2AWatchError as e:
        _fail(e)
    console.print(f"[yellow]Cancel requested for {task.id}[/yellow]")
    _print_task(task)


@app.command("wait")
def wait(
    agent_id: str = typer.Argument(help="Agent ID"),
    task_id: str = typer.Argument(help="Task ID"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", help="Give up after N seconds"),
    interval: Optional[float] = typer.Option(None, "--interval", "-i", help="Seconds between polls"),
):
    """Wait until a task finishes. Exits 1 unless it succeeded."""
    async def _run() -> A2ATask:
        async with context.build_client() as client:
            monitor = context.build_monitor(client, poll_interval=interval)
            if timeout is not None:
                return await monitor.wait_for_completion_with_timeout(agent_id, task_id, timeout)
            return await monitor.wait_for_completion(agent_id, task_id)

    with console.status(f"Waiting for {task_id}..."):
        try:
            task = context.run_async(_run())
        except A2AWatchError as e:
            _fail(e)
    _print_task(task)
    if task.status is not TaskStatus.SUCCEEDED:
        raise typer.Exit(code=1)


@app.command("card")
def card(agent_id: str = typer.Argument(help="Agent ID")):
    """Show an agent's card."""
    async def _run():
        async with context.build_client() as client:
            return await client.get_agent_card(agent_id)

    try:
        agent_card = context.run_async(_run())
    except A2AWatchError as e:
        _fail(e)

    console.print(f"[bold]{agent_card.name}[/bold] v{agent_card.version}")
    if agent_card.description:
        console.print(f"  {agent_card.description}")
    methods = ", ".join(agent_card.capabilities.supported_methods) or "-"
    console.print(f"  Methods:   {methods}")
    console.print(f"  Streaming: {agent_card.capabilities.streaming_support}")
    for name, url in agent_card.endpoints.items():
        console.print(f"  {name}: {url}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
