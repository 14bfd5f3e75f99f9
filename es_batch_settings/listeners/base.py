"""Shared capture / disable / restore sequence for index setting toggles."""

from abc import ABC, abstractmethod
from typing import Dict, Generic, List, Optional, TypeVar

from elasticsearch import Elasticsearch

from es_batch_settings.es.operations import IndexSettingsOperations
from es_batch_settings.exceptions import MissingContextValueError
from es_batch_settings.job.execution import ExecutionContext, JobExecution
from es_batch_settings.job.listener import JobExecutionListener
from es_batch_settings.logging.logger import log_error, log_info

V = TypeVar("V", str, int)


class IndexSettingToggleListener(JobExecutionListener, ABC, Generic[V]):
    """Relax one index setting for the duration of a job.

    before_job reads the indices from ``indices_context_key``, saves the
    current value of each under ``initial_values_context_key`` and disables
    the setting on all of them with one request. after_job puts every saved
    value back.
    """

    #: Flat setting name, used in logs
    setting_name: str
    #: Human-readable operation name, used in error messages
    operation_name: str
    default_indices_context_key: str
    default_initial_values_context_key: str

    def __init__(
        self,
        es_client: Elasticsearch,
        indices_context_key: Optional[str] = None,
        initial_values_context_key: Optional[str] = None,
    ) -> None:
        self.operations = IndexSettingsOperations(es_client)
        self.indices_context_key = indices_context_key or self.default_indices_context_key
        self.initial_values_context_key = initial_values_context_key or self.default_initial_values_context_key

    def set_indices_context_key(self, indices_context_key: str) -> None:
        self.indices_context_key = indices_context_key

    def before_job(self, job_execution: JobExecution) -> None:
        context = job_execution.context
        indices = context.get_str_list(self.indices_context_key)
        if indices is None:
            log_error("no indices in the execution context", context_key=self.indices_context_key,
                      job_name=job_execution.job_name)
            raise MissingContextValueError(
                self.indices_context_key,
                f"No indices have been specified in the execution context under '{self.indices_context_key}' "
                f"to {self.operation_name}, please configure the {type(self).__name__} properly",
            )

        initial_values: Dict[str, V] = {}
        for index in indices:
            value = self.get_value(index)
            initial_values[index] = value
            log_info("captured index setting", index=index, setting=self.setting_name, value=value)
        context.put(self.initial_values_context_key, initial_values)

        self.disable(indices)
        log_info("disabled index setting for the job", indices=indices, setting=self.setting_name)

    def after_job(self, job_execution: JobExecution) -> None:
        initial_values = self.read_initial_values(job_execution.context)
        if initial_values is None:
            log_error("no initial values in the execution context", context_key=self.initial_values_context_key,
                      job_name=job_execution.job_name)
            raise MissingContextValueError(
                self.initial_values_context_key,
                f"No initial values found in the execution context under '{self.initial_values_context_key}', "
                f"cannot restore {self.setting_name}; before_job of the {type(self).__name__} did not run",
            )

        for index, value in initial_values.items():
            self.restore_value(value, index)
            log_info("restored index setting", index=index, setting=self.setting_name, value=value)

    @abstractmethod
    def get_value(self, index: str) -> V:
        ...

    @abstractmethod
    def restore_value(self, value: V, index: str) -> None:
        ...

    @abstractmethod
    def disable(self, indices: List[str]) -> None:
        ...

    @abstractmethod
    def read_initial_values(self, context: ExecutionContext) -> Optional[Dict[str, V]]:
        ...
