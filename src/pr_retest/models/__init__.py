"""
Data Models

PR Retest 시스템의 핵심 데이터 모델들
"""

from .event import EventContext, IssueCommentPayload, ISSUE_COMMENT_EVENT
from .workflow import (
    RunConclusion,
    PullRequestSummary,
    WorkflowRun,
    WorkflowRunList,
    RerunOutcome,
    RetestResult,
)

__all__ = [
    "EventContext",
    "IssueCommentPayload",
    "ISSUE_COMMENT_EVENT",
    "RunConclusion",
    "PullRequestSummary",
    "WorkflowRun",
    "WorkflowRunList",
    "RerunOutcome",
    "RetestResult",
]
