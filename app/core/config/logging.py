"""
Logging Configuration
"""
from typing import Optional
from pathlib import Path
from pydantic import Field, validator
from pydantic_settings import BaseSettings


class LogConfig(BaseSettings):
    """Logging configuration settings"""

    model_config = {
        "env_prefix": "LOG_",
        "extra": "ignore",
        "validate_assignment": True
    }

    LEVEL: str = Field("INFO", description="Logging level")
    FORMAT: str = Field(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        description="Log format string"
    )
    FILE: Optional[Path] = Field(
        None,
        description="Log file path (optional)"
    )

    @validator("LEVEL")
    def validate_level(cls, v):
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of {allowed}")
        return v.upper()

    @property
    def log_config(self) -> dict:
        """Get complete logging configuration dictionary"""
        config = {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'standard': {
                    'format': self.FORMAT
                },
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'standard',
                    'level': self.LEVEL
                }
            },
            'loggers': {
                '': {  # Root logger
                    'handlers': ['console'],
                    'level': self.LEVEL,
                    'propagate': True
                }
            }
        }

        if self.FILE:
            config['handlers']['file'] = {
                'class': 'logging.FileHandler',
                'filename': str(self.FILE),
                'formatter': 'standard',
                'level': self.LEVEL
            }
            config['loggers']['']['handlers'].append('file')

        return config
