"""
Tools Base Interface

This module defines the common interface that every tool in the commit review
assistant follows. Tools return a `ToolResult` instead of raising so the
pipeline can decide which failures are fatal and which only degrade output.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from loguru import logger


class ToolStatus(Enum):
    """Tool execution status values."""

    SUCCESS = "success"
    ERROR = "error"


class ToolErrorCode(Enum):
    """Standard tool error codes."""

    INVALID_INPUT = "INVALID_INPUT"
    PROCESSING_ERROR = "PROCESSING_ERROR"
    TIMEOUT = "TIMEOUT"
    DEPENDENCY_ERROR = "DEPENDENCY_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NO_PARENT_COMMIT = "NO_PARENT_COMMIT"
    INSUFFICIENT_HISTORY = "INSUFFICIENT_HISTORY"


@dataclass
class ToolMetrics:
    """Tool execution performance metrics."""

    processing_time_ms: int
    files_processed: int | None = None


@dataclass
class ToolResult[OutputT]:
    """Standard structure for tool execution results."""

    status: ToolStatus
    output: OutputT | None = None
    error_code: ToolErrorCode | None = None
    error_message: str | None = None
    metrics: ToolMetrics | None = None

    def __post_init__(self) -> None:
        """Validate result data."""
        if self.status == ToolStatus.ERROR and not self.error_code:
            raise ValueError("error_code is required when status is ERROR")

        if self.status == ToolStatus.SUCCESS and self.output is None:
            logger.warning("Status is SUCCESS but no output provided")

    @property
    def ok(self) -> bool:
        """True unless the tool reported an error."""
        return self.status != ToolStatus.ERROR

    @classmethod
    def success(
        cls,
        output: OutputT,
        metrics: ToolMetrics | None = None,
    ) -> "ToolResult[OutputT]":
        """Create success result."""
        return cls(
            status=ToolStatus.SUCCESS,
            output=output,
            metrics=metrics,
        )

    @classmethod
    def error(
        cls,
        error_code: ToolErrorCode,
        error_message: str,
        metrics: ToolMetrics | None = None,
    ) -> "ToolResult[OutputT]":
        """Create error result."""
        return cls(
            status=ToolStatus.ERROR,
            error_code=error_code,
            error_message=error_message,
            metrics=metrics,
        )


class BaseTool[InputT, OutputT](ABC):
    """
    Base class for all tools.

    Subclasses implement `execute`; callers use `run`, which adds timing,
    logging and classification of unexpected exceptions.
    """

    def __init__(self, tool_name: str) -> None:
        """Initialize the tool."""
        self.tool_name = tool_name
        self.tool_id = f"{tool_name}_{uuid.uuid4().hex[:8]}"
        self.start_time: datetime | None = None

    @abstractmethod
    def execute(self, input_data: InputT) -> ToolResult[OutputT]:
        """
        Main method for tool execution.

        Args:
            input_data: Input data required for tool execution

        Returns:
            Tool execution result
        """
        pass

    def _start_execution(self) -> None:
        """Record execution start time."""
        self.start_time = datetime.now(UTC)

    def _end_execution(self) -> int:
        """Calculate processing time (milliseconds)."""
        if not self.start_time:
            return 0

        duration = (datetime.now(UTC) - self.start_time).total_seconds() * 1000
        return int(duration)

    def _create_metrics(self, **kwargs: Any) -> ToolMetrics:
        """Create metrics object."""
        return ToolMetrics(processing_time_ms=self._end_execution(), **kwargs)

    def run(self, input_data: InputT) -> ToolResult[OutputT]:
        """
        Wrapper method for tool execution.

        Handles common logging, error classification and metrics collection.

        Args:
            input_data: Input data required for tool execution

        Returns:
            Tool execution result
        """
        try:
            self._start_execution()
            logger.debug(f"Tool {self.tool_name} execution started: {self.tool_id}")

            result = self.execute(input_data)

            if not result.metrics:
                result.metrics = self._create_metrics()

            if result.ok:
                logger.debug(
                    f"Tool {self.tool_name} finished in "
                    f"{result.metrics.processing_time_ms}ms"
                )
            else:
                logger.debug(
                    f"Tool {self.tool_name} failed "
                    f"[{result.error_code.value if result.error_code else '?'}]: "
                    f"{result.error_message}"
                )
            return result

        except Exception as e:
            error_code = self._classify_error(e)
            logger.error(f"Tool {self.tool_name} execution failed: {self.tool_id}")
            logger.error(f"Error code: {error_code.value}")
            return ToolResult.error(
                error_code=error_code,
                error_message=str(e),
                metrics=self._create_metrics(),
            )

    def _classify_error(self, error: Exception) -> ToolErrorCode:
        """Classify error into standard error codes."""

        if isinstance(error, ValueError | TypeError):
            return ToolErrorCode.INVALID_INPUT
        elif isinstance(error, FileNotFoundError):
            return ToolErrorCode.FILE_NOT_FOUND
        elif isinstance(error, PermissionError):
            return ToolErrorCode.PERMISSION_ERROR
        elif isinstance(error, TimeoutError):
            return ToolErrorCode.TIMEOUT
        else:
            return ToolErrorCode.PROCESSING_ERROR

    def validate_input(self, input_data: InputT) -> bool:
        """
        Validate input data.

        Default implementation accepts everything; override in subclasses.
        """
        return True
