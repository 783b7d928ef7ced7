"""
Retest Handler

Reruns the failed workflow runs of a pull request's head commit when
someone comments the trigger phrase on the pull request.
"""

import logging
from typing import List

from ..models.event import EventContext, ISSUE_COMMENT_EVENT
from ..models.workflow import RerunOutcome, RetestResult, WorkflowRun
from ..github.client import GitHubClient, RUNS_PAGE_SIZE


logger = logging.getLogger(__name__)

TRIGGER_PHRASE = "/retest"


class UnsupportedEventError(Exception):
    """Handler invoked for an event other than issue_comment"""
    def __init__(self, event_name: str):
        super().__init__(
            f"This action only works with {ISSUE_COMMENT_EVENT} events. Current event: {event_name}"
        )
        self.event_name = event_name


def check_event_kind(event_name: str) -> None:
    """Raise UnsupportedEventError unless the event is an issue comment."""
    if event_name != ISSUE_COMMENT_EVENT:
        raise UnsupportedEventError(event_name)


class RetestHandler:
    """
    Handles a single comment event.

    Gates on the event kind, the pull request link and the trigger phrase,
    then reruns every failed, timed out or cancelled run of the head commit.
    A failed rerun request is logged and does not stop the remaining ones.
    Errors while looking up the pull request or listing runs propagate.
    """

    def __init__(self, client: GitHubClient, trigger_phrase: str = TRIGGER_PHRASE):
        """
        Initialize retest handler.

        Args:
            client: GitHub client used for lookups and reruns
            trigger_phrase: Exact comment text that requests a retest
        """
        self.client = client
        self.trigger_phrase = trigger_phrase

    def handle(self, event: EventContext) -> RetestResult:
        """
        Process a comment event.

        Args:
            event: Event that triggered the invocation

        Returns:
            RetestResult; status 'skipped' when a gate stopped processing

        Raises:
            UnsupportedEventError: For events other than issue_comment
            GitHubAPIError: When the pull request or its runs cannot be fetched
        """
        logger.info(f"Event name: {event.event_name}")

        check_event_kind(event.event_name)

        if not event.has_pull_request_link:
            logger.info("Comment is not on a pull request. Skipping.")
            return RetestResult(status='skipped')

        comment_body = event.trimmed_comment
        if comment_body != self.trigger_phrase:
            logger.info(
                f'Comment body "{comment_body or ""}" does not match trigger phrase "{self.trigger_phrase}". Skipping.'
            )
            return RetestResult(status='skipped')

        logger.info(f'Trigger phrase "{self.trigger_phrase}" detected!')

        pull_request = self.client.get_pull_request(event.repo_owner, event.repo_name, event.issue_number)
        logger.info(f"PR #{event.issue_number}: {pull_request.title} (SHA: {pull_request.head_commit_sha})")

        run_list = self.client.list_workflow_runs(
            event.repo_owner, event.repo_name, pull_request.head_commit_sha, per_page=RUNS_PAGE_SIZE
        )
        logger.info(f"Found {run_list.total_count} workflow runs for this commit")
        if run_list.is_truncated:
            logger.info(f"Only the first {len(run_list.runs)} workflow runs were inspected")

        failed_runs = run_list.rerunnable_runs
        if not failed_runs:
            logger.info("No failed workflow runs found to rerun.")
            return RetestResult(status='no_failures', pull_request=pull_request)

        logger.info(f"Found {len(failed_runs)} failed workflow run(s). Triggering reruns...")
        outcomes = self._rerun_all(event, failed_runs)

        result = RetestResult(status='completed', pull_request=pull_request, outcomes=outcomes)
        logger.info(f"Successfully re-triggered {result.rerun_count} workflow run(s).")
        return result

    def _rerun_all(self, event: EventContext, runs: List[WorkflowRun]) -> List[RerunOutcome]:
        outcomes = []
        for run in runs:
            outcomes.append(self._rerun(event, run))
        return outcomes

    def _rerun(self, event: EventContext, run: WorkflowRun) -> RerunOutcome:
        try:
            self.client.rerun_workflow(event.repo_owner, event.repo_name, run.id)
        except Exception as e:
            logger.warning(f"Failed to re-run workflow {run.name} (ID: {run.id}): {e}")
            return RerunOutcome.failure(run, str(e))

        logger.info(f"✓ Re-triggered workflow: {run.label}")
        return RerunOutcome.success(run)
