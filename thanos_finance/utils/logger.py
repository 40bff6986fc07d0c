import logging
import logging.config
from typing import Optional

from thanos_finance.config import AppConfig, config as default_config

def setup_logging(app_config: Optional[AppConfig] = None) -> logging.Logger:
    app_config = app_config or default_config
    app_config.ensure_directories()
    logging.config.dictConfig(app_config.get_logging_config())
    return logging.getLogger("thanos_finance")
