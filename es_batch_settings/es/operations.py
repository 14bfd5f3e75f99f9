"""Synchronous index settings operations used by batch job listeners."""

from typing import Sequence

from elasticsearch import Elasticsearch

from es_batch_settings.es.client import get_index_setting, put_index_settings
from es_batch_settings.es.settings import (DISABLED_REFRESH_INTERVAL,
                                           DISABLED_REPLICAS,
                                           NUMBER_OF_REPLICAS_SETTING,
                                           REFRESH_INTERVAL_SETTING)
from es_batch_settings.logging.logger import log_debug


class IndexSettingsOperations:
    """Read, set and disable the refresh interval and replica count of indexes.

    Every method issues one blocking request. Errors from the client are not caught.
    """

    def __init__(self, es_client: Elasticsearch) -> None:
        self.es_client = es_client

    # === Refresh interval ===

    def get_refresh_interval(self, index: str) -> str:
        return str(get_index_setting(self.es_client, index, REFRESH_INTERVAL_SETTING))

    def set_refresh_interval(self, interval: str, index: str) -> None:
        put_index_settings(self.es_client, index, {"refresh_interval": interval})

    def disable_refresh(self, indices: Sequence[str]) -> None:
        if not indices:
            log_debug("no indices to disable refresh on")
            return
        put_index_settings(self.es_client, list(indices), {"refresh_interval": DISABLED_REFRESH_INTERVAL})

    # === Replicas ===

    def get_replicas(self, index: str) -> int:
        return int(get_index_setting(self.es_client, index, NUMBER_OF_REPLICAS_SETTING))

    def set_replicas(self, count: int, index: str) -> None:
        put_index_settings(self.es_client, index, {"number_of_replicas": count})

    def disable_replicas(self, indices: Sequence[str]) -> None:
        if not indices:
            log_debug("no indices to disable replicas on")
            return
        put_index_settings(self.es_client, list(indices), {"number_of_replicas": DISABLED_REPLICAS})
