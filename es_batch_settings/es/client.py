"""Elasticsearch client management."""

from typing import Any, Dict, Sequence, Union

from elasticsearch import Elasticsearch

from es_batch_settings.config import Config
from es_batch_settings.exceptions import IndexSettingNotFoundError


def get_es_client(config: Config) -> Elasticsearch:
    """Create and return an Elasticsearch client."""
    return Elasticsearch(config.es_url, request_timeout=config.request_timeout)


def check_index_exists(es_client: Elasticsearch, index: str) -> bool:
    """Check if an index exists."""
    return es_client.indices.exists(index=index).meta.status == 200


def get_index_setting(es_client: Elasticsearch, index: str, name: str) -> Any:
    """Get the current value of a single index setting.

    An explicitly set value wins over the cluster default.

    Args:
        es_client: Elasticsearch client
        index: Index name
        name: Flat setting name (e.g., "index.refresh_interval")

    Raises:
        IndexSettingNotFoundError: If the setting is neither set nor defaulted
    """
    response = es_client.indices.get_settings(
        index=index,
        name=name,
        flat_settings=True,
        include_defaults=True,
    )
    body = response.body if hasattr(response, "body") else response

    if index in body:
        index_body = body[index]
    elif len(body) == 1:
        # index was an alias resolving to a single concrete index
        index_body = next(iter(body.values()))
    else:
        raise IndexSettingNotFoundError(index, name)

    for section in ("settings", "defaults"):
        value = index_body.get(section, {}).get(name)
        if value is not None:
            return value

    raise IndexSettingNotFoundError(index, name)


def put_index_settings(
    es_client: Elasticsearch,
    indices: Union[str, Sequence[str]],
    settings: Dict[str, Any],
) -> None:
    """Update dynamic settings of one or more indexes in a single request.

    Args:
        es_client: Elasticsearch client
        indices: Index name or list of index names
        settings: Settings under the "index" key (e.g., {"refresh_interval": "-1"})
    """
    target = indices if isinstance(indices, str) else ",".join(indices)
    es_client.indices.put_settings(
        index=target,
        body={"index": settings},
    )


def refresh_index(
    es_client: Elasticsearch,
    index: str,
    timeout: float = 600.0,
) -> None:
    """Manually refresh an index to make all documents searchable.

    Args:
        es_client: Elasticsearch client
        index: Index name
        timeout: Timeout in seconds for the refresh operation (default: 600s = 10 minutes)
    """
    es_client.options(request_timeout=timeout).indices.refresh(index=index)
