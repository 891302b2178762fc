"""pigment: declarative command-line questions, answered by flags or by prompt."""

# Declaring and running prompts
from pigment.engine import Prompt, Session, create

# Errors
from pigment.errors import (
    ArgumentError,
    ConfigurationError,
    PromptCancelledError,
    PromptError,
    ValidationError,
)
from pigment.options import PromptOptions

# Question declarations
from pigment.questions import (
    Choice,
    Conditional,
    ConfirmQuestion,
    MultiSelectQuestion,
    Question,
    SelectQuestion,
    TaskProgress,
    TaskQuestion,
    TaskResult,
    TextQuestion,
)

# Terminal
from pigment.components import Theme
from pigment.terminal import ProcessTerminal, Terminal

__all__ = [
    "ArgumentError",
    "Choice",
    "Conditional",
    "ConfigurationError",
    "ConfirmQuestion",
    "MultiSelectQuestion",
    "ProcessTerminal",
    "Prompt",
    "PromptCancelledError",
    "PromptError",
    "PromptOptions",
    "Question",
    "SelectQuestion",
    "Session",
    "TaskProgress",
    "TaskQuestion",
    "TaskResult",
    "Terminal",
    "TextQuestion",
    "Theme",
    "ValidationError",
    "create",
]
