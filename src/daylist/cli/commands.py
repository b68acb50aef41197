# src/daylist/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import date, datetime

from ..core.state import AppState
from ..errors import DaylistError, PersistenceError
from ..tasks.reminders import is_past_due
from ..tasks.task_models import TaskRecord

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """Bad command arguments; the message is shown to the user as is."""


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

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Domain errors are turned into user-facing text; the app keeps running.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await self._guarded(state, name, lambda: handler(state, args))

    async def handle_text(self, state: AppState, text: str) -> str:
        """Plain (non-command) input: the line becomes a task with its inner spacing kept."""
        return await self._guarded(state, "add", lambda: _add_text(state, text))

    async def _guarded(self, state: AppState, name: str, call: Callable[[], Awaitable[str]]) -> str:
        try:
            return await call()
        except CommandError as e:
            return str(e)
        except PersistenceError:
            return (
                "Saving failed; the change is kept for now but may be lost on restart.\n"
                + render_task_list(state)
            )
        except DaylistError as e:
            logger.info("/%s rejected: %s", name, e)
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  (plain text adds a task)")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----

def format_header(today: date) -> str:
    return f"To-Do {today.month:02d}/{today.day:02d}"


def format_task_line(position: int, task: TaskRecord, now: datetime) -> str:
    mark = "x" if task.completed else " "
    line = f"{position:>2}. [{mark}] {task.text}"
    reminder_time = task.reminder_time
    if reminder_time is not None:
        line += f"  @ {reminder_time.astimezone(now.tzinfo):%H:%M}"
        if is_past_due(reminder_time, now):
            line += " (past due)"
    return line


def render_task_list(state: AppState) -> str:
    now = state.clock()
    lines = [format_header(now.date())]
    tasks = state.store.tasks
    if not tasks:
        lines.append("  (no tasks)")
    for i, task in enumerate(tasks, start=1):
        lines.append(format_task_line(i, task, now))
    return "\n".join(lines)


# ---- argument helpers ----

def _task_at(state: AppState, raw: str | None) -> TaskRecord:
    if raw is None:
        raise CommandError("Task number is required.")
    try:
        pos = int(raw)
    except ValueError:
        raise CommandError(f"Not a task number: {raw}") from None

    tasks = state.store.tasks
    if pos < 1 or pos > len(tasks):
        raise CommandError(f"No task #{pos}. Use /list to see the numbers.")
    return tasks[pos - 1]


def parse_reminder_time(args: list[str], now: datetime) -> datetime:
    """
    Parse "HH:MM" (today) or "YYYY-MM-DD HH:MM" into an aware datetime in now's timezone.
    """
    if len(args) == 1:
        day, clock_part = now.date(), args[0]
    elif len(args) == 2:
        try:
            day = date.fromisoformat(args[0])
        except ValueError:
            raise CommandError(f"Bad date: {args[0]} (expected YYYY-MM-DD)") from None
        clock_part = args[1]
    else:
        raise CommandError("Usage: /remind N HH:MM  or  /remind N YYYY-MM-DD HH:MM")

    try:
        t = datetime.strptime(clock_part, "%H:%M").time()
    except ValueError:
        raise CommandError(f"Bad time: {clock_part} (expected HH:MM)") from None

    return datetime.combine(day, t, tzinfo=now.tzinfo)


# ---- handlers ----

async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, args: list[str]) -> str:
    return render_task_list(state)


async def _add_text(state: AppState, text: str) -> str:
    await state.store.add(text)
    return render_task_list(state)


async def cmd_add(state: AppState, args: list[str]) -> str:
    return await _add_text(state, " ".join(args))


async def cmd_done(state: AppState, args: list[str]) -> str:
    task = _task_at(state, args[0] if args else None)
    await state.store.toggle_complete(task.id)
    return render_task_list(state)


async def cmd_edit(state: AppState, args: list[str]) -> str:
    task = _task_at(state, args[0] if args else None)
    await state.store.edit(task.id, " ".join(args[1:]))
    return render_task_list(state)


async def cmd_delete(state: AppState, args: list[str]) -> str:
    task = _task_at(state, args[0] if args else None)
    await state.store.delete(task.id)
    return render_task_list(state)


async def cmd_remind(state: AppState, args: list[str]) -> str:
    task = _task_at(state, args[0] if args else None)
    target = parse_reminder_time(args[1:], state.clock())
    await state.reminders.schedule_reminder(task.id, target)
    return f"Reminder set for {target:%H:%M}.\n" + render_task_list(state)


async def cmd_clear(state: AppState, args: list[str]) -> str:
    await state.store.clear_all()
    return render_task_list(state)


registry.register("help", cmd_help, "show this help", aliases=["h", "?"])
registry.register("list", cmd_list, "show the task list", aliases=["ls"])
registry.register("add", cmd_add, "add a task: /add text")
registry.register("done", cmd_done, "toggle completion: /done N", aliases=["toggle"])
registry.register("edit", cmd_edit, "change a task's text: /edit N new text")
registry.register("del", cmd_delete, "delete a task: /del N", aliases=["delete", "rm"])
registry.register("remind", cmd_remind, "set a reminder: /remind N HH:MM | /remind N YYYY-MM-DD HH:MM")
registry.register("clear", cmd_clear, "delete all tasks")
