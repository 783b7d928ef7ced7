"""
GitHub Response Parser

Parses GitHub API responses and event payloads into the structured
models used by the retest handler.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..models.event import EventContext, IssueCommentPayload
from ..models.workflow import PullRequestSummary, RunConclusion, WorkflowRun, WorkflowRunList


logger = logging.getLogger(__name__)


class GitHubResponseParser:
    """
    Parser for GitHub API data.

    Converts pull request and workflow run responses as well as raw
    webhook/event payloads into model objects.
    """

    def parse_pull_request(self, pr_data: Dict) -> PullRequestSummary:
        """
        Parse pull request data.

        Args:
            pr_data: PR information from GitHub API

        Returns:
            PullRequestSummary with title and head commit SHA
        """
        try:
            head_sha = pr_data['head']['sha']
        except (KeyError, TypeError):
            raise ValueError(f"Pull request #{pr_data.get('number')} has no head commit")

        return PullRequestSummary(
            title=pr_data.get('title') or '',
            head_commit_sha=head_sha,
        )

    def parse_workflow_runs(self, runs_data: Dict) -> WorkflowRunList:
        """
        Parse a workflow run listing page.

        Args:
            runs_data: Response of the workflow runs listing endpoint

        Returns:
            WorkflowRunList preserving the API ordering
        """
        raw_runs: List[Dict] = runs_data.get('workflow_runs') or []
        runs = [self._parse_workflow_run(run_data) for run_data in raw_runs]

        total_count = runs_data.get('total_count')
        if total_count is None:
            total_count = len(runs)

        return WorkflowRunList(total_count=total_count, runs=runs)

    def _parse_workflow_run(self, run_data: Dict) -> WorkflowRun:
        return WorkflowRun(
            id=run_data['id'],
            name=run_data.get('name') or run_data.get('display_title') or '',
            run_number=run_data.get('run_number', 0),
            conclusion=RunConclusion.from_api(run_data.get('conclusion')),
        )

    def parse_event_context(
        self,
        event_name: str,
        payload: Dict[str, Any],
        repository: Optional[str] = None,
    ) -> EventContext:
        """
        Build an EventContext from an event payload.

        Args:
            event_name: Name of the triggering event
            payload: Raw event payload
            repository: "owner/repo" coordinates; falls back to the payload

        Returns:
            EventContext for the handler

        Raises:
            ValueError: When the payload is malformed or no repository is known
        """
        try:
            parsed = IssueCommentPayload.model_validate(payload or {})
        except ValidationError as e:
            raise ValueError(f"Invalid {event_name} payload: {e}") from e

        if not repository and parsed.repository is not None:
            repository = parsed.repository.coordinates

        owner, repo = self._split_repository(repository)
        logger.debug(f"Parsed {event_name} event for {owner}/{repo}")

        issue = parsed.issue
        return EventContext(
            event_name=event_name,
            comment_body=parsed.comment.body if parsed.comment else None,
            issue_number=issue.number if issue else None,
            has_pull_request_link=bool(issue and issue.pull_request is not None),
            repo_owner=owner,
            repo_name=repo,
        )

    @staticmethod
    def _split_repository(repository: Optional[str]) -> tuple:
        if not repository or '/' not in repository:
            raise ValueError(f"Repository must be in format 'owner/repo', got: {repository!r}")
        owner, repo = repository.split('/', 1)
        if not owner or not repo:
            raise ValueError(f"Repository must be in format 'owner/repo', got: {repository!r}")
        return owner, repo
