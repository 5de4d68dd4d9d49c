import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from xcopy import CopyConfig, CopyFlags, LoggingCallback, copy_to_existing, copy_to_new, merge_to_new


class TaskStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class Task:
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING


@dataclass
class TaskList:
    """Tasks owned by one agent, as stored by the application."""

    owner: str = ""
    tasks: list[Task] = field(default_factory=list)
    priority: int = field(default=0, metadata={"xcopy": "prio"})


def main() -> None:
    # Raw payload, e.g. decoded JSON: strings everywhere, renamed field
    payload = {
        "owner": "agent-1",
        "prio": "3",
        "tasks": [
            {"description": "Collect data"},
            {"description": "Analyze data", "status": "in_progress"},
        ],
    }
    task_list = copy_to_new(payload, TaskList)
    print(f"Loaded: {task_list}")

    # Partial update applied in place
    copy_to_existing({"tasks": {"0": {"status": "completed"}}}, task_list)
    print(f"Updated: {task_list}")

    # Back to plain data for serialization
    print(f"As dict: {copy_to_new(task_list, dict[str, Any])}")

    # Layered defaults, later layers win
    merged = merge_to_new(TaskList, {"owner": "default", "prio": 1}, {"owner": "agent-2"})
    print(f"Merged: {merged}")

    # Step-by-step trace of a strict copy
    logging.basicConfig(level=logging.DEBUG, format="%(message)s")
    config = CopyConfig(flags=CopyFlags.ERROR_IF_STRUCT_FIELD_MISSING, callback=LoggingCallback())
    copy_to_new({"owner": "agent-3"}, TaskList, config=config)


if __name__ == "__main__":
    main()
