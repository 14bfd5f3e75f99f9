import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from pydantic import BaseModel

RESULT_DIR = Path.cwd().joinpath("es_batch_settings_results")  # Path to dump logs
DATE_FORMAT = "%Y%m%d"
LOCAL_TZ = ZoneInfo("UTC")
TODAY = datetime.now(LOCAL_TZ).date()
TODAY_STR = TODAY.strftime(DATE_FORMAT)

LOG_DIR_NAME = "logs"


class Config(BaseModel):
    debug: bool = False
    result_dir: Path = RESULT_DIR
    es_url: str = "http://localhost:9200"
    request_timeout: float = 600.0  # seconds


default_config = Config()
ENV_PREFIX = "ES_BATCH_SETTINGS"


def _str_to_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_config() -> Config:
    debug_env = os.environ.get(f"{ENV_PREFIX}_DEBUG")
    return Config(
        debug=_str_to_bool(debug_env) if debug_env is not None else default_config.debug,
        result_dir=Path(os.environ.get(f"{ENV_PREFIX}_RESULT_DIR", default_config.result_dir)),
        es_url=os.environ.get(f"{ENV_PREFIX}_ES_URL", default_config.es_url),
        request_timeout=float(os.environ.get(f"{ENV_PREFIX}_REQUEST_TIMEOUT", default_config.request_timeout)),
    )
