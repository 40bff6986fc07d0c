#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Thanos Finance - Configuration
Centralised configuration read from environment variables, with validation

Version: 1.0.0
Date: 2026-10-18
"""

import os
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass
from enum import Enum

class Environment(Enum):
    """Runtime environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"

class LogLevel(Enum):
    """Logging levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

@dataclass
class StorageConfig:
    """Snapshot storage configuration"""
    data_dir: Path

@dataclass
class AIConfig:
    """Advice service configuration"""
    openai_api_key: Optional[str]
    openai_base_url: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_max_tokens: int = 1000
    request_timeout: int = 30
    max_retries: int = 3
    retry_delay: float = 1.0
    history_turns: int = 10

@dataclass
class ServerConfig:
    """HTTP server configuration"""
    host: str = "0.0.0.0"
    port: int = 8080
    debug_mode: bool = False

@dataclass
class MarketConfig:
    """Trade simulator configuration"""
    tick_seconds: float = 1.0
    start_cash: float = 10000.0
    window_size: int = 20

def _env_bool(key: str, default: str = 'false') -> bool:
    return os.getenv(key, default).lower() == 'true'

class AppConfig:
    """Main configuration object"""

    def __init__(self):
        self.environment = Environment(os.getenv('ENVIRONMENT', 'development'))
        self._load_config()
        self._validate_config()

    def _load_config(self):
        """Load configuration from environment variables"""

        # Directories
        self.data_dir = Path(os.getenv('DATA_DIR', 'data'))
        self.log_dir = Path(os.getenv('LOG_DIR', 'logs'))

        self.storage = StorageConfig(data_dir=self.data_dir)

        # AI
        self.ai = AIConfig(
            openai_api_key=os.getenv('OPENAI_API_KEY') or None,
            openai_base_url=os.getenv('OPENAI_BASE_URL') or None,
            openai_model=os.getenv('OPENAI_MODEL', 'gpt-4o-mini'),
            openai_max_tokens=int(os.getenv('OPENAI_MAX_TOKENS', 1000)),
            request_timeout=int(os.getenv('AI_TIMEOUT', 30)),
            max_retries=int(os.getenv('AI_MAX_RETRIES', 3)),
            history_turns=int(os.getenv('AI_HISTORY_TURNS', 10))
        )

        # Server
        self.server = ServerConfig(
            host=os.getenv('HOST', '0.0.0.0'),
            port=int(os.getenv('PORT', 8080)),
            debug_mode=_env_bool('DEBUG_MODE')
        )

        # Trade simulator
        self.market = MarketConfig(
            tick_seconds=float(os.getenv('MARKET_TICK_SECONDS', 1)),
            start_cash=float(os.getenv('MARKET_START_CASH', 10000))
        )

        # Logging
        self.log_level = LogLevel(os.getenv('LOG_LEVEL', 'INFO').upper())
        self.log_to_file = _env_bool('LOG_TO_FILE', 'true')
        self.log_format = os.getenv(
            'LOG_FORMAT',
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        )

    def _validate_config(self):
        """Validate configuration"""
        errors = []

        if not 1024 <= self.server.port <= 65535:
            errors.append(f"Port {self.server.port} is outside the allowed range (1024-65535)")

        if self.ai.max_retries < 1:
            errors.append("AI_MAX_RETRIES must be at least 1")

        if self.ai.history_turns < 0:
            errors.append("AI_HISTORY_TURNS must not be negative")

        if self.market.tick_seconds <= 0:
            errors.append("MARKET_TICK_SECONDS must be positive")

        if self.market.start_cash <= 0:
            errors.append("MARKET_START_CASH must be positive")

        if errors:
            raise ValueError("Configuration errors:\n" + "\n".join(f"• {error}" for error in errors))

    def ensure_directories(self):
        """Create the data and log directories"""
        directories = [self.data_dir]
        if self.log_to_file:
            directories.append(self.log_dir)

        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)

    def get_logging_config(self) -> Dict[str, Any]:
        """Build a dictConfig for the logging module"""
        handlers = ['console']
        if self.log_to_file:
            handlers.append('file')

        quiet = {
            name: {
                'level': 'WARNING',
                'handlers': handlers,
                'propagate': False
            }
            for name in ('httpx', 'openai', 'apscheduler', 'uvicorn.access')
        }

        logging_config = {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': self.log_format,
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'level': self.log_level.value,
                    'formatter': 'default',
                    'stream': sys.stdout
                }
            },
            'loggers': {
                '': {
                    'level': self.log_level.value,
                    'handlers': handlers,
                    'propagate': False
                },
                **quiet
            }
        }

        if self.log_to_file:
            logging_config['handlers']['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'filename': str(self.log_dir / f"thanos_{self.environment.value}.log"),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }

        return logging_config

    def to_dict(self) -> Dict[str, Any]:
        """Serialise configuration, hiding secrets"""
        return {
            'environment': self.environment.value,
            'server': {
                'host': self.server.host,
                'port': self.server.port,
                'debug_mode': self.server.debug_mode
            },
            'ai_enabled': bool(self.ai.openai_api_key),
            'ai_model': self.ai.openai_model,
            'data_dir': str(self.data_dir),
            'log_level': self.log_level.value
        }

# Global configuration instance
config = AppConfig()

__all__ = [
    'config',
    'AppConfig',
    'Environment',
    'LogLevel',
    'StorageConfig',
    'AIConfig',
    'ServerConfig',
    'MarketConfig'
]
