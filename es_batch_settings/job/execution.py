"""Job execution state shared between lifecycle listeners."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from pydantic import (BaseModel, ConfigDict, Field, StrictInt, StrictStr,
                      TypeAdapter, ValidationError)

from es_batch_settings.exceptions import ContextValueTypeError

_STR_LIST = TypeAdapter(Union[List[StrictStr], Tuple[StrictStr, ...]])
_STR_MAPPING = TypeAdapter(Dict[StrictStr, StrictStr])
_INT_MAPPING = TypeAdapter(Dict[StrictStr, StrictInt])


class ExecutionContext:
    """Mutable key-value store scoped to one job run.

    The typed accessors return None when the key is absent and raise
    ContextValueTypeError when the stored value has the wrong shape.
    """

    def __init__(self, values: Optional[Dict[str, Any]] = None) -> None:
        self._values: Dict[str, Any] = dict(values or {})

    def put(self, key: str, value: Any) -> None:
        self._values[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def contains(self, key: str) -> bool:
        return key in self._values

    def remove(self, key: str) -> Any:
        return self._values.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._values.keys())

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ExecutionContext({self._values!r})"

    def get_str_list(self, key: str) -> Optional[List[str]]:
        value = self._get_validated(key, _STR_LIST, "a list of strings")
        return None if value is None else list(value)

    def get_str_mapping(self, key: str) -> Optional[Dict[str, str]]:
        return self._get_validated(key, _STR_MAPPING, "a mapping of string to string")

    def get_int_mapping(self, key: str) -> Optional[Dict[str, int]]:
        return self._get_validated(key, _INT_MAPPING, "a mapping of string to int")

    def _get_validated(self, key: str, adapter: TypeAdapter, expected: str) -> Any:  # type: ignore[type-arg]
        if key not in self._values:
            return None
        value = self._values[key]
        if value is None:
            return None
        try:
            return adapter.validate_python(value)
        except ValidationError as e:
            raise ContextValueTypeError(
                key,
                f"Execution context value for '{key}' must be {expected}, got {type(value).__name__}",
            ) from e


class BatchStatus(str, Enum):
    STARTING = "STARTING"
    STARTED = "STARTED"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class JobFailure(BaseModel):
    """Exception recorded on a job execution."""

    type: str
    message: str


class JobExecution(BaseModel):
    """One run of a batch job."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    job_name: str
    context: ExecutionContext = Field(default_factory=ExecutionContext)
    status: BatchStatus = BatchStatus.STARTING
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    failures: List[JobFailure] = Field(default_factory=list)

    def add_failure(self, error: BaseException) -> None:
        self.failures.append(JobFailure(type=type(error).__name__, message=str(error)))
