"""Response envelope returned by the benchmarked functions.

Only the fields the collector relies on are declared; anything else in the
payload is ignored. A payload that does not validate is treated as an error
response and never becomes a sample.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, ValidationError

from .exceptions import MalformedResponseError


class PerformanceBlock(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Non-positive durations would turn into zero or negative cost downstream.
    total_execution_time: float = Field(alias="totalExecutionTime", strict=True, gt=0)


class ExecutionEnvironmentBlock(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cold_start: StrictBool = Field(alias="coldStart")
    memory_limit: int = Field(alias="memoryLimit", gt=0)
    request_id: StrictStr = Field(alias="requestId")


class FunctionResponse(BaseModel):
    """Validated function response envelope."""

    model_config = ConfigDict(populate_by_name=True)

    performance: PerformanceBlock
    execution_environment: ExecutionEnvironmentBlock = Field(alias="executionEnvironment")


def parse_function_response(payload: Any) -> FunctionResponse:
    """
    Validate a decoded JSON payload against the response envelope.

    Args:
        payload: Decoded JSON body

    Returns:
        FunctionResponse: The validated envelope

    Raises:
        MalformedResponseError: If required fields are missing or invalid
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError(f"Expected a JSON object, got {type(payload).__name__}")

    try:
        return FunctionResponse.model_validate(payload)
    except ValidationError as e:
        raise MalformedResponseError(f"Invalid response envelope: {e.error_count()} error(s): {e}")
