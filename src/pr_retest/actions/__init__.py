"""
GitHub Actions Runner Integration

Inputs, outputs and workflow-command logging for running as an action step.
"""

from .toolkit import ActionsRunner, InputError, WorkflowCommandHandler, escape_data

__all__ = ['ActionsRunner', 'InputError', 'WorkflowCommandHandler', 'escape_data']
