from typing import Dict, List, Optional

from es_batch_settings.es.settings import (CONTEXT_KEYS,
                                           NUMBER_OF_REPLICAS_SETTING)
from es_batch_settings.job.execution import ExecutionContext
from es_batch_settings.listeners.base import IndexSettingToggleListener


class DisableReplicasDuringJobListener(IndexSettingToggleListener[int]):
    """Disable replicas of target indices for the duration of the job.

    Without replicas, indexing is faster and cheaper: documents are not pushed
    from primaries to replicas and indexed a second time there. After the job,
    the replica count of every index is reset to its previous value and
    Elasticsearch copies the shards by plain file transfer.

    Use this listener only if losing part of the index during the job is
    acceptable, e.g. for a cold index build that can simply be relaunched.

    The indices are read from the execution context key
    ``DISABLE_REPLICAS_INDICES`` and the previous counts are kept under
    ``INITIAL_REPLICAS_COUNT``.
    """

    setting_name = NUMBER_OF_REPLICAS_SETTING
    operation_name = "disable replicas"
    default_indices_context_key = CONTEXT_KEYS["disable_replicas_indices"]
    default_initial_values_context_key = CONTEXT_KEYS["initial_replicas_count"]

    def set_initial_replicas_context_key(self, initial_replicas_context_key: str) -> None:
        self.initial_values_context_key = initial_replicas_context_key

    def get_value(self, index: str) -> int:
        return self.operations.get_replicas(index)

    def restore_value(self, value: int, index: str) -> None:
        self.operations.set_replicas(value, index)

    def disable(self, indices: List[str]) -> None:
        self.operations.disable_replicas(indices)

    def read_initial_values(self, context: ExecutionContext) -> Optional[Dict[str, int]]:
        return context.get_int_mapping(self.initial_values_context_key)
