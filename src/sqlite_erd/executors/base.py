"""
Base executor interface for structural metadata queries
"""
from abc import ABC, abstractmethod
from typing import Any, Dict

from sqlite_erd.models.catalog import Query, ResultSet


class MetadataExecutor(ABC):
    """Abstract base class for metadata executors"""

    def __init__(self, config: Dict[str, Any]):
        self.config = config

    @abstractmethod
    def connect(self) -> None:
        """Prepare the executor for answering queries"""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release any resources held by the executor"""
        pass

    @abstractmethod
    def execute(self, query: Query) -> ResultSet:
        """
        Answer a structural query

        Args:
            query: Query descriptor

        Returns:
            ResultSet with named columns; zero rows means "no such entity"
        """
        pass

    def __call__(self, query: Query) -> ResultSet:
        return self.execute(query)

    def __enter__(self):
        """Context manager entry"""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.disconnect()
        return False
