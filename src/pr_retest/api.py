"""
Main Retest API

Top-level invocation wrapper: loads the runner environment, runs the
retest handler and converts any uncaught error into a failed step.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

from .actions.toolkit import ActionsRunner, WorkflowCommandHandler
from .config import AppConfig, ConfigManager, LoggingConfig, configure_logging
from .github.client import GitHubClient
from .github.parser import GitHubResponseParser
from .models.event import EventContext
from .models.workflow import RetestResult
from .retest.handler import RetestHandler, check_event_kind


logger = logging.getLogger(__name__)

TOKEN_INPUT = 'github-token'
RERUN_COUNT_OUTPUT = 'rerun-count'


class RetestAPI:
    """
    Main Retest API interface.

    Wires configuration, the GitHub client and the retest handler:
    1. Read the token input and the triggering event
    2. Run the handler against the GitHub API
    3. Publish the rerun count as a step output
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        runner: Optional[ActionsRunner] = None,
        client_factory: Optional[Callable[..., GitHubClient]] = None,
    ):
        """
        Initialize Retest API.

        Args:
            config: Optional configuration object
            runner: Actions runner environment access
            client_factory: Builds a GitHub client from a token (default: GitHubClient)
        """
        self.config = config or AppConfig.from_env()
        self.runner = runner or ActionsRunner()
        if self.config.action.output_path:
            self.runner.output_path = self.config.action.output_path
        self.client_factory = client_factory or GitHubClient
        self.parser = GitHubResponseParser()

    def create_client(self, token: str) -> GitHubClient:
        """Create an authenticated GitHub client."""
        return self.client_factory(
            token,
            base_url=self.config.github.api_base_url,
            timeout=self.config.github.timeout_seconds,
            max_retries=self.config.github.max_retries,
        )

    def load_event(self) -> EventContext:
        """Read the triggering event from the runner environment."""
        action = self.config.action
        check_event_kind(action.event_name)

        payload: Dict[str, Any] = {}
        if action.event_path:
            event_file = Path(action.event_path)
            if event_file.exists():
                with open(event_file, 'r', encoding='utf-8') as f:
                    payload = json.load(f)
            else:
                logger.warning(f"Event file not found: {action.event_path}")

        return self.parser.parse_event_context(action.event_name, payload, action.repository)

    def retest(self, event: EventContext, token: str) -> RetestResult:
        """
        Run the retest handler for an event.

        Args:
            event: Triggering event
            token: GitHub token used for lookups and reruns

        Returns:
            RetestResult of the handler
        """
        handler = RetestHandler(self.create_client(token))
        return handler.handle(event)

    def run_action(self) -> int:
        """
        Run as an action step.

        Returns:
            Process exit code (1 when the step failed)
        """
        try:
            token = self.runner.get_input(TOKEN_INPUT, required=True)
            event = self.load_event()
            result = self.retest(event, token)
            if result.emits_output:
                self.runner.set_output(RERUN_COUNT_OUTPUT, result.rerun_count)
        except Exception as e:
            self.runner.set_failed(str(e))

        return self.runner.exit_code


def run(environ: Optional[Mapping[str, str]] = None, config_path: Optional[str] = None) -> int:
    """
    Entry point of the action.

    Args:
        environ: Environment to read (default: os.environ)
        config_path: Optional YAML configuration file

    Returns:
        Process exit code
    """
    runner = ActionsRunner(environ)
    configure_logging(LoggingConfig(), WorkflowCommandHandler())

    try:
        if config_path:
            config = AppConfig.from_yaml(config_path, environ)
        else:
            config = AppConfig.from_env(environ)
        manager = ConfigManager(config, WorkflowCommandHandler())
    except Exception as e:
        runner.set_failed(str(e))
        return runner.exit_code

    return RetestAPI(manager.config, runner).run_action()
