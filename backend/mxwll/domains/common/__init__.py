"""
Shared domain module

Models and utilities used by every domain.
"""

from mxwll.domains.common.utils.result import (
    Result,
    ResultStatus,
    Error,
    ErrorCode,
)
