"""
Event Data Models

워크플로우를 트리거한 이벤트 관련 데이터 모델들
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
from pydantic import BaseModel, field_validator


ISSUE_COMMENT_EVENT = "issue_comment"


@dataclass(frozen=True)
class EventContext:
    """한 번의 실행에 전달되는 이벤트 정보"""
    event_name: str
    comment_body: Optional[str]
    issue_number: Optional[int]
    has_pull_request_link: bool
    repo_owner: str
    repo_name: str

    def __post_init__(self):
        """데이터 검증"""
        if not self.repo_owner.strip() or not self.repo_name.strip():
            raise ValueError("Repository owner and name cannot be empty")
        if self.issue_number is not None and self.issue_number <= 0:
            raise ValueError("Issue number must be positive")

    @property
    def repository(self) -> str:
        return f"{self.repo_owner}/{self.repo_name}"

    @property
    def trimmed_comment(self) -> Optional[str]:
        """앞뒤 공백을 제거한 코멘트 본문"""
        if self.comment_body is None:
            return None
        return self.comment_body.strip()


# Pydantic models for event payload validation
class OwnerPayload(BaseModel):
    """이벤트 페이로드의 저장소 소유자"""
    login: str


class RepositoryPayload(BaseModel):
    """이벤트 페이로드의 저장소"""
    name: str
    full_name: Optional[str] = None
    owner: Optional[OwnerPayload] = None

    @property
    def coordinates(self) -> Optional[str]:
        if self.full_name:
            return self.full_name
        if self.owner is not None:
            return f"{self.owner.login}/{self.name}"
        return None


class CommentPayload(BaseModel):
    """이벤트 페이로드의 코멘트"""
    body: Optional[str] = None


class IssuePayload(BaseModel):
    """이벤트 페이로드의 이슈 (PR 코멘트인 경우 pull_request 링크 포함)"""
    number: int
    pull_request: Optional[Dict[str, Any]] = None

    @field_validator('number')
    @classmethod
    def validate_number(cls, v):
        if v <= 0:
            raise ValueError('Issue number must be positive')
        return v


class IssueCommentPayload(BaseModel):
    """issue_comment 이벤트 페이로드 (다른 이벤트도 관대하게 파싱)"""
    action: Optional[str] = None
    issue: Optional[IssuePayload] = None
    comment: Optional[CommentPayload] = None
    repository: Optional[RepositoryPayload] = None
