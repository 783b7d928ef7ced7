"""
GitHub Actions Runner Toolkit

Reads action inputs, writes step outputs and renders log records as
workflow commands understood by the Actions runner.
"""

import os
import sys
import uuid
import logging
from pathlib import Path
from typing import Dict, Optional, TextIO


logger = logging.getLogger(__name__)


class InputError(ValueError):
    """Required action input missing"""


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace('%', '%25').replace('\r', '%0D').replace('\n', '%0A')


class WorkflowCommandHandler(logging.StreamHandler):
    """
    Logging handler emitting records as workflow commands.

    INFO records are written as plain lines; DEBUG, WARNING and ERROR
    records become ``::debug::``, ``::warning::`` and ``::error::``
    commands so the runner annotates them.
    """

    COMMANDS = (
        (logging.ERROR, 'error'),
        (logging.WARNING, 'warning'),
        (logging.INFO, None),
        (logging.NOTSET, 'debug'),
    )

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__(stream or sys.stdout)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for level, command in self.COMMANDS:
            if record.levelno >= level:
                break
        if command is None:
            return message
        return f"::{command}::{escape_data(message)}"


class ActionsRunner:
    """
    Access to the Actions runner environment.

    Mirrors the small part of the runner protocol a single-step action
    needs: inputs, outputs and the failure state of the step.
    """

    def __init__(self, environ: Optional[Dict[str, str]] = None, output_path: Optional[str] = None):
        self.environ = environ if environ is not None else os.environ
        self.output_path = output_path or self.environ.get('GITHUB_OUTPUT')
        self.failed = False
        self.outputs: Dict[str, str] = {}

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0

    def get_input(self, name: str, required: bool = False) -> str:
        """
        Read an action input.

        Args:
            name: Input name as declared in action.yml
            required: Raise InputError when the input is empty

        Returns:
            Trimmed input value ('' when unset)
        """
        key = f"INPUT_{name.replace(' ', '_').upper()}"
        value = self.environ.get(key, '').strip()
        if required and not value:
            raise InputError(f"Input required and not supplied: {name}")
        return value

    def set_output(self, name: str, value) -> None:
        """
        Set a step output.

        Written to the GITHUB_OUTPUT file with a unique delimiter; without
        that file the output is only logged.
        """
        value = str(value)
        self.outputs[name] = value

        if not self.output_path:
            logger.info(f"{name}={value}")
            return

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        if delimiter in name or delimiter in value:
            raise ValueError(f"Unexpected input: name and value must not contain the delimiter {delimiter}")

        path = Path(self.output_path)
        with open(path, 'a', encoding='utf-8') as f:
            f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")

    def set_failed(self, message: str) -> None:
        """Mark the step as failed and log the reason as an error."""
        self.failed = True
        logger.error(message)
