"""
GitHub API Client

Handles GitHub API authentication and communication for the three
operations a retest needs: pull request lookup, workflow run listing
for a commit, and workflow rerun.
"""

import time
import logging
from typing import Dict, Optional
from datetime import datetime
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..models.workflow import PullRequestSummary, WorkflowRunList
from .parser import GitHubResponseParser


logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
RUNS_PAGE_SIZE = 100


class GitHubAPIError(Exception):
    """GitHub API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class RateLimitExceeded(GitHubAPIError):
    """GitHub API rate limit exceeded"""
    def __init__(self, reset_time: datetime, status_code: int = 429):
        super().__init__(f"Rate limit exceeded. Resets at {reset_time}", status_code=status_code)
        self.reset_time = reset_time


class GitHubClient:
    """
    GitHub API client with authentication and error handling.

    Provides methods for:
    - Pull request lookup
    - Workflow run listing for a head commit
    - Workflow rerun requests

    Requests are not retried unless ``max_retries`` is raised, and rate
    limits are reported as errors rather than waited out.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_URL,
        timeout: Optional[float] = None,
        max_retries: int = 0,
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub token (opaque)
            base_url: GitHub API base URL (default: https://api.github.com)
            timeout: Optional per-request timeout in seconds
            max_retries: Transport-level retries for idempotent requests
        """
        if not token or not token.strip():
            raise ValueError("GitHub token is required")

        self.token = token
        self.base_url = (base_url or DEFAULT_API_URL).rstrip('/')
        self.timeout = timeout
        self.max_retries = max_retries
        self.parser = GitHubResponseParser()
        self.session = self._create_session()
        self.rate_limit_remaining: Optional[int] = None
        self.rate_limit_reset: Optional[datetime] = None

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self.session.headers)

    def _create_session(self) -> requests.Session:
        """Create requests session with retry policy and authentication."""
        session = requests.Session()

        retry_strategy = Retry(
            total=self.max_retries,
            backoff_factor=1,
            status_forcelist=[500, 502, 503, 504],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({
            'Authorization': f'token {self.token}',
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': '2022-11-28',
            'User-Agent': 'pr-retest/1.0'
        })

        return session

    def _update_rate_limit(self, response: requests.Response) -> None:
        """Update rate limit information from response headers."""
        if 'X-RateLimit-Remaining' in response.headers:
            self.rate_limit_remaining = int(response.headers['X-RateLimit-Remaining'])

        if 'X-RateLimit-Reset' in response.headers:
            reset_timestamp = int(response.headers['X-RateLimit-Reset'])
            self.rate_limit_reset = datetime.fromtimestamp(reset_timestamp)

    def _is_rate_limited(self, response: requests.Response) -> bool:
        if response.status_code == 429:
            return True
        return response.status_code == 403 and response.headers.get('X-RateLimit-Remaining') == '0'

    @staticmethod
    def _error_data(response: requests.Response) -> Dict:
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            return {'message': response.text}
        return data if isinstance(data, dict) else {}

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to GitHub API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            GitHubAPIError: For API errors
            RateLimitExceeded: When the API reports an exhausted rate limit
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise GitHubAPIError(f"Request failed: {str(e)}")

        self._update_rate_limit(response)

        if self._is_rate_limited(response):
            reset_time = datetime.fromtimestamp(int(response.headers.get('X-RateLimit-Reset', time.time() + 3600)))
            raise RateLimitExceeded(reset_time, status_code=response.status_code)

        if not response.ok:
            error_data = self._error_data(response)
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {error_data.get('message', 'Unknown error')}",
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    def get_pull_request(self, owner: str, repo: str, pr_number: int) -> PullRequestSummary:
        """
        Get pull request information.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            Pull request title and head commit
        """
        logger.debug(f"Fetching PR {owner}/{repo}#{pr_number}")

        response = self._make_request('GET', f'/repos/{owner}/{repo}/pulls/{pr_number}')
        return self.parser.parse_pull_request(response.json())

    def list_workflow_runs(
        self, owner: str, repo: str, head_sha: str, per_page: int = RUNS_PAGE_SIZE
    ) -> WorkflowRunList:
        """
        List workflow runs for a commit.

        Only the first page is requested.

        Args:
            owner: Repository owner
            repo: Repository name
            head_sha: Commit SHA the runs were triggered for
            per_page: Page size (GitHub caps this at 100)

        Returns:
            Total run count and the runs of the first page
        """
        logger.debug(f"Listing workflow runs for {owner}/{repo}@{head_sha}")

        response = self._make_request(
            'GET',
            f'/repos/{owner}/{repo}/actions/runs',
            params={'head_sha': head_sha, 'per_page': per_page}
        )
        return self.parser.parse_workflow_runs(response.json())

    def rerun_workflow(self, owner: str, repo: str, run_id: int) -> None:
        """
        Request a rerun of a workflow run.

        Args:
            owner: Repository owner
            repo: Repository name
            run_id: Workflow run id
        """
        logger.debug(f"Requesting rerun of {owner}/{repo} run {run_id}")

        self._make_request('POST', f'/repos/{owner}/{repo}/actions/runs/{run_id}/rerun')
