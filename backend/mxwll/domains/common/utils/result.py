from enum import Enum
from typing import TypeVar, Generic, Optional, List, Dict, Any, Union
from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ResultStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class ErrorCode(str, Enum):
    """Why a parse or propagation produced no data"""

    PARSE_ERROR = "PARSE_ERROR"
    PROPAGATION_ERROR = "PROPAGATION_ERROR"
    NOT_FOUND = "NOT_FOUND"


class Error(BaseModel):
    code: str = Field(..., description="Machine readable error code")
    message: str = Field(..., description="What went wrong")
    details: Optional[Dict[str, Any]] = Field(
        None, description="Context such as the NORAD id or SGP4 error number"
    )

    @classmethod
    def build(
        cls,
        code: Union[ErrorCode, str],
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> "Error":
        # (str, Enum) members format as "ErrorCode.X", store the bare value
        value = code.value if isinstance(code, Enum) else str(code)
        return cls(code=value, message=message, details=details)


class Result(BaseModel, Generic[T]):
    """Outcome of a per-satellite operation.

    Batch callers keep one of these per record, so a single bad element set
    is reported next to the good ones rather than raised.
    """

    # data may hold plain classes such as sgp4 Satrec
    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: ResultStatus = Field(..., description="Operation status")
    data: Optional[T] = Field(None, description="Produced value on success")
    errors: List[Error] = Field(default_factory=list, description="Failure reasons")

    @classmethod
    def success(cls, data: Optional[T] = None) -> "Result[T]":
        return cls(status=ResultStatus.SUCCESS, data=data)

    @classmethod
    def failure(
        cls,
        error_code: Union[ErrorCode, str],
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> "Result[T]":
        """Failed result carrying a single error

        Args:
            error_code: An ``ErrorCode`` or free-form code string
            message: Human readable reason
            details: Extra context for logs and API responses
        """
        return cls(
            status=ResultStatus.FAILURE,
            errors=[Error.build(error_code, message, details)],
        )

    def is_success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    def is_failure(self) -> bool:
        return self.status == ResultStatus.FAILURE

    @property
    def error(self) -> Optional[Error]:
        """First recorded error, None on success"""
        return self.errors[0] if self.errors else None
