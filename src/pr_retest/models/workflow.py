"""
Workflow Data Models

Pull Request 및 워크플로우 실행 관련 데이터 모델들
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class RunConclusion(str, Enum):
    """워크플로우 실행의 최종 결과"""
    SUCCESS = "success"
    FAILURE = "failure"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"
    NEUTRAL = "neutral"
    SKIPPED = "skipped"
    STALE = "stale"
    ACTION_REQUIRED = "action_required"
    STARTUP_FAILURE = "startup_failure"
    OTHER = "other"

    @classmethod
    def from_api(cls, value: Optional[str]) -> Optional["RunConclusion"]:
        """API 응답 문자열을 변환 (진행 중인 실행은 None)"""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


# Conclusions that qualify a run for a rerun
RERUNNABLE_CONCLUSIONS = frozenset({
    RunConclusion.FAILURE,
    RunConclusion.TIMED_OUT,
    RunConclusion.CANCELLED,
})


@dataclass(frozen=True)
class PullRequestSummary:
    """Pull Request 요약"""
    title: str
    head_commit_sha: str

    def __post_init__(self):
        """데이터 검증"""
        if not self.head_commit_sha.strip():
            raise ValueError("Head commit SHA cannot be empty")


@dataclass(frozen=True)
class WorkflowRun:
    """개별 워크플로우 실행"""
    id: int
    name: str
    run_number: int
    conclusion: Optional[RunConclusion]

    def __post_init__(self):
        """데이터 검증"""
        if self.id <= 0:
            raise ValueError("Run id must be positive")
        if self.run_number < 0:
            raise ValueError("Run number must be non-negative")

    @property
    def is_rerunnable(self) -> bool:
        """재실행 대상인지 확인"""
        return self.conclusion in RERUNNABLE_CONCLUSIONS

    @property
    def label(self) -> str:
        return f"{self.name} (ID: {self.id}, Run #{self.run_number})"


@dataclass
class WorkflowRunList:
    """워크플로우 실행 목록 (단일 페이지)"""
    total_count: int
    runs: List[WorkflowRun]

    def __post_init__(self):
        """데이터 검증"""
        if self.total_count < 0:
            raise ValueError("Total count must be non-negative")

    @property
    def rerunnable_runs(self) -> List[WorkflowRun]:
        """재실행 대상 실행들 (목록 순서 유지)"""
        return [run for run in self.runs if run.is_rerunnable]

    @property
    def is_truncated(self) -> bool:
        return self.total_count > len(self.runs)


@dataclass(frozen=True)
class RerunOutcome:
    """개별 재실행 시도 결과"""
    run: WorkflowRun
    succeeded: bool
    error: Optional[str] = None

    def __post_init__(self):
        """데이터 검증"""
        if self.succeeded and self.error is not None:
            raise ValueError("Succeeded outcome cannot carry an error")
        if not self.succeeded and not self.error:
            raise ValueError("Failed outcome requires an error message")

    @classmethod
    def success(cls, run: WorkflowRun) -> "RerunOutcome":
        return cls(run=run, succeeded=True)

    @classmethod
    def failure(cls, run: WorkflowRun, reason: str) -> "RerunOutcome":
        return cls(run=run, succeeded=False, error=reason or "Unknown error")

    def to_dict(self) -> dict:
        return {
            'run_id': self.run.id,
            'name': self.run.name,
            'run_number': self.run.run_number,
            'succeeded': self.succeeded,
            'error': self.error,
        }


@dataclass
class RetestResult:
    """한 번의 /retest 처리 결과"""
    status: str  # 'skipped', 'no_failures', 'completed'
    pull_request: Optional[PullRequestSummary] = None
    outcomes: List[RerunOutcome] = field(default_factory=list)

    def __post_init__(self):
        """데이터 검증"""
        valid_statuses = {'skipped', 'no_failures', 'completed'}
        if self.status not in valid_statuses:
            raise ValueError(f"Invalid status: {self.status}")
        if self.status != 'completed' and self.outcomes:
            raise ValueError(f"Status {self.status} cannot carry rerun outcomes")

    @property
    def rerun_count(self) -> int:
        """재실행 요청이 수락된 실행 수"""
        return sum(1 for outcome in self.outcomes if outcome.succeeded)

    @property
    def failed_outcomes(self) -> List[RerunOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]

    @property
    def emits_output(self) -> bool:
        """rerun-count 출력 여부 (건너뛴 경우 출력 없음)"""
        return self.status != 'skipped'
