from typing import Dict, List, Optional

from es_batch_settings.es.settings import CONTEXT_KEYS, REFRESH_INTERVAL_SETTING
from es_batch_settings.job.execution import ExecutionContext
from es_batch_settings.listeners.base import IndexSettingToggleListener


class DisableRefreshDuringJobListener(IndexSettingToggleListener[str]):
    """Disable refresh of target indices for the duration of the job.

    Disabling refresh can improve indexing performance by a few tens of percent.
    After the job, the refresh interval of every index is reset to its previous value.

    The indices are read from the execution context key ``REFRESH_INDICES``
    (a list of index names) and the previous intervals are kept under
    ``INITIAL_REFRESH_INTERVAL``. Rename the latter only when several of these
    listeners are attached to a single job.

    Intervals that were only inherited from the cluster default are written
    back as explicit index settings, so after the job the index no longer
    follows the default (e.g. it loses search-idle behaviour).
    """

    setting_name = REFRESH_INTERVAL_SETTING
    operation_name = "disable refresh"
    default_indices_context_key = CONTEXT_KEYS["refresh_indices"]
    default_initial_values_context_key = CONTEXT_KEYS["initial_refresh_interval"]

    def set_initial_refresh_interval_context_key(self, initial_refresh_interval_context_key: str) -> None:
        self.initial_values_context_key = initial_refresh_interval_context_key

    def get_value(self, index: str) -> str:
        return self.operations.get_refresh_interval(index)

    def restore_value(self, value: str, index: str) -> None:
        self.operations.set_refresh_interval(value, index)

    def disable(self, indices: List[str]) -> None:
        self.operations.disable_refresh(indices)

    def read_initial_values(self, context: ExecutionContext) -> Optional[Dict[str, str]]:
        return context.get_str_mapping(self.initial_values_context_key)
