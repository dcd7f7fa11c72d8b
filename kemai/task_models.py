"""Task list shown in the task view, with its user and text filter."""

from __future__ import annotations

import re
from typing import Iterable, Iterator

from .api import Task


def _task_display(task: Task) -> str:
    display = task.title
    if task.description:
        display += "\n- " + task.description
    return display


class TaskListModel:
    """Ordered list of tasks with their display text."""

    def __init__(self) -> None:
        self._tasks: list[Task] = []

    def set_tasks(self, tasks: Iterable[Task]) -> None:
        self._tasks = list(tasks)

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def display(self, row: int) -> str:
        """Title, followed by the description on a second line when there is one."""
        return _task_display(self._tasks[row])

    def is_active(self, row: int) -> bool:
        """Whether the task at ``row`` has running time sheets."""
        return bool(self._tasks[row].active_timesheets)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def __getitem__(self, row: int) -> Task:
        return self._tasks[row]


class TaskFilter:
    """Keeps the tasks of one user whose display text matches a pattern."""

    def __init__(self, user_id: int = 0, pattern: str = "") -> None:
        self.user_id = user_id
        self.pattern = pattern

    def accepts(self, task: Task) -> bool:
        return re.search(self.pattern, _task_display(task)) is not None and task.user.id == self.user_id

    def apply(self, model: Iterable[Task]) -> list[Task]:
        """Tasks of ``model`` that pass the filter, in order."""
        return [task for task in model if self.accepts(task)]