import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Generator
from unittest.mock import MagicMock

import pytest

from es_batch_settings.config import Config
from es_batch_settings.logging.logger import _ctx

IndexSettings = Dict[str, Dict[str, Any]]


@pytest.fixture(scope="session", autouse=True)
def reset_argv() -> Generator[None, None, None]:
    original_argv = sys.argv[:]
    sys.argv = ["es_batch_settings"]

    yield

    sys.argv = original_argv


@pytest.fixture(scope="session", autouse=True)
def reset_os_env() -> Generator[None, None, None]:
    original_os_env = {k: v for k, v in os.environ.items() if k.startswith("ES_BATCH_SETTINGS_")}
    keys = original_os_env.keys()
    for k in keys:
        del os.environ[k]

    yield

    for k in keys:
        os.environ[k] = original_os_env[k]


@pytest.fixture()
def test_config(tmp_path: Path) -> Config:
    return Config(result_dir=tmp_path.joinpath("result"), es_url="http://localhost:9200")


@pytest.fixture
def clean_ctx() -> Generator[None, None, None]:
    """Clean up logger context after each test."""
    yield
    _ctx.set(None)


def make_es_client(explicit: IndexSettings, defaults: IndexSettings | None = None) -> MagicMock:
    """Build a mock Elasticsearch client answering get_settings from dicts.

    ``explicit`` and ``defaults`` map index name to {flat setting name: value}.
    """
    defaults = defaults or {}
    es_client = MagicMock()

    def get_settings(index: str, name: str, **kwargs: Any) -> Dict[str, Any]:
        if index not in explicit and index not in defaults:
            raise KeyError(index)
        body: Dict[str, Any] = {"settings": {}, "defaults": {}}
        if name in explicit.get(index, {}):
            body["settings"][name] = explicit[index][name]
        if name in defaults.get(index, {}):
            body["defaults"][name] = defaults[index][name]
        return {index: body}

    es_client.indices.get_settings.side_effect = get_settings
    return es_client


@pytest.fixture(scope="session")
def es_client_factory() -> Callable[..., MagicMock]:
    return make_es_client
