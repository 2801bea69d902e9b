# src/chore_ledger/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable

from ..core.models import ALL, Task, TaskDraft, TaskFilter
from ..core.query import filtered_sorted, stats, total_points
from ..core.state import AppState
from ..errors import ChoreLedgerError, NotFoundError

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Core errors become user-facing replies; anything else propagates.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}"
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except ChoreLedgerError as e:
            logger.info("/%s failed: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_options(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """Split ["a", "key=value", ...] into positionals and options."""
    positional: list[str] = []
    options: dict[str, str] = {}
    for a in args:
        key, sep, value = a.partition("=")
        if sep and key:
            options[key.strip().lower()] = value
        else:
            positional.append(a)
    return positional, options


def _resolve_task(state: AppState, ref: str) -> Task:
    """Accept a full task id or an unambiguous id prefix (as printed by /list)."""
    tasks = state.household.snapshot().tasks
    if not ref:
        raise NotFoundError("Task", ref)
    if ref in tasks:
        return tasks[ref]
    matches = [t for tid, t in tasks.items() if tid.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    raise NotFoundError("Task", ref)


def _format_task(task: Task) -> str:
    mark = "x" if task.is_completed else " "
    line = (
        f"[{mark}] {task.id[:8]} {task.title} -> {task.assigned_to} "
        f"(due {task.due_date.isoformat()}, {task.priority.value}, {task.points} pts)"
    )
    if task.description:
        line += f"\n      {task.description}"
    return line


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list                         -> all tasks
    /list status=Pending          -> filter by status
    /list who=Junior              -> filter by assignee
    """
    _, opts = _parse_options(args)
    status = opts.get("status", ALL).capitalize()
    who = opts.get("who", ALL)

    tasks = filtered_sorted(state.tasks.list(TaskFilter()), status, who)
    if not tasks:
        return "No tasks match the current filters."
    noun = "Task" if len(tasks) == 1 else "Tasks"
    return "\n".join([f"Family Chore List ({len(tasks)} {noun})"] + [_format_task(t) for t in tasks])


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add "Walk dog" Junior 2025-09-30 10 [priority=High] [desc="..."]
    """
    pos, opts = _parse_options(args)
    if len(pos) < 4:
        return 'Usage: /add "<title>" <member> <YYYY-MM-DD> <points> [priority=Low|Medium|High] [desc=...]'
    title, who, due, points = pos[:4]

    # Assignee must be a household member at creation time.
    state.ledger.get(who)

    task = state.tasks.create(
        TaskDraft(
            title=title,
            assigned_to=who,
            due_date=due,
            points=points,
            priority=opts.get("priority") or None,
            description=opts.get("desc"),
        )
    )
    return f"Task added: {_format_task(task)}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> field=value ...   (fields: title, who, due, priority, points, desc, status)
    """
    pos, opts = _parse_options(args)
    if len(pos) != 1 or not opts:
        return "Usage: /edit <id> title=... who=... due=YYYY-MM-DD priority=... points=N desc=..."
    task = _resolve_task(state, pos[0])

    aliases = {"who": "assigned_to", "due": "due_date", "desc": "description"}
    patch = {aliases.get(k, k): v for k, v in opts.items()}
    who = (patch.get("assigned_to") or "").strip()
    if who:
        state.ledger.get(who)
    updated = state.tasks.update(task.id, patch)
    return f"Task updated: {_format_task(updated)}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /done <id>"
    task = _resolve_task(state, args[0])
    result = state.coordinator.complete(task.id)
    if result is None:
        return f"Task {task.id[:8]} is already completed."
    if result.ledger_skipped:
        return f"Completed: {result.task.title} ({task.assigned_to} is not a member, no points credited)"
    balance = next((m.points for m in result.members if m.name == task.assigned_to), 0)
    return f"Completed: {result.task.title} (+{task.points} pts, {task.assigned_to} now has {balance})"


def cmd_toggle(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /toggle <id>"
    task = _resolve_task(state, args[0])
    result = state.coordinator.toggle_completion(task.id)
    return f"Task {result.task.id[:8]} is now {result.task.status.value}."


def cmd_delete(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /delete <id>"
    task = _resolve_task(state, args[0])
    state.tasks.delete(task.id)
    return f"Task deleted: {task.title}"


def cmd_members(state: AppState, args: list[str]) -> str:
    members = state.ledger.list()
    if not members:
        return "No household members."
    lines = ["Members:"]
    for m in members:
        avatar = f"{m.avatar} " if m.avatar else ""
        lines.append(f"  {avatar}{m.name}: {m.points} pts")
    lines.append(f"  Total: {total_points(members)} pts")
    return "\n".join(lines)


def cmd_stats(state: AppState, args: list[str]) -> str:
    s = stats(state.tasks.list())
    return f"Total Tasks: {s.total}\nPending: {s.pending}\nCompleted: {s.completed}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "list",
    cmd_list,
    help_text="List tasks: /list [status=Pending|Completed] [who=<member>].",
    aliases=["ls"],
)
registry.register(
    "add",
    cmd_add,
    help_text='Add a task: /add "<title>" <member> <YYYY-MM-DD> <points> [priority=..] [desc=..].',
)
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> field=value ...")
registry.register(
    "done", cmd_done, help_text="Mark a pending task completed and credit points: /done <id>."
)
registry.register(
    "toggle", cmd_toggle, help_text="Flip a task between Pending and Completed: /toggle <id>."
)
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("members", cmd_members, help_text="Show member point balances.")
registry.register("stats", cmd_stats, help_text="Show task counts by status.")
