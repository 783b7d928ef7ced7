"""
PR Retest

Pull Request 코멘트(/retest)로 실패한 GitHub Actions 워크플로우를 재실행하는 액션
"""

__version__ = "1.0.0"

from .api import RetestAPI, run

__all__ = ["RetestAPI", "run"]
