"""Interactive controllers, one per question kind."""

from pigment.prompts.base import ControllerContext, InputChannel
from pigment.prompts.select import SelectController, select
from pigment.prompts.spinner import TaskController, drive_task, spinner
from pigment.prompts.text import LineEditor, TextController, text

__all__ = [
    "ControllerContext",
    "InputChannel",
    "LineEditor",
    "SelectController",
    "TaskController",
    "TextController",
    "drive_task",
    "select",
    "spinner",
    "text",
]
