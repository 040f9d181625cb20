"""
Executor factory for creating metadata executors
"""
from typing import Any, Dict

from sqlite_erd.executors.base import MetadataExecutor
from sqlite_erd.executors.fixture import FixtureExecutor
from sqlite_erd.executors.sqlite import SQLiteExecutor


class ExecutorFactory:
    """Factory for creating metadata executors"""

    _executors = {
        'sqlite': SQLiteExecutor,
        'sqlite3': SQLiteExecutor,
        'fixture': FixtureExecutor,
    }

    @classmethod
    def create_executor(cls, kind: str, config: Dict[str, Any]) -> MetadataExecutor:
        """
        Create a metadata executor based on kind

        Args:
            kind: Executor kind (sqlite, fixture, etc.)
            config: Executor configuration dictionary

        Returns:
            Executor instance

        Raises:
            ValueError: If the kind is not supported
        """
        kind_lower = kind.lower()

        if kind_lower not in cls._executors:
            raise ValueError(
                f"Unsupported executor type: {kind}. "
                f"Supported types: {', '.join(cls._executors.keys())}"
            )

        executor_class = cls._executors[kind_lower]
        if executor_class is FixtureExecutor and config.get('path'):
            return FixtureExecutor.from_yaml(config['path'])
        return executor_class(config)

    @classmethod
    def register_executor(cls, kind: str, executor_class: type) -> None:
        """Register a new executor type"""
        cls._executors[kind.lower()] = executor_class

    @classmethod
    def get_supported_types(cls) -> list:
        """Get list of supported executor types"""
        return list(cls._executors.keys())
