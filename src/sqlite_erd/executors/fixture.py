"""
Executor answering from precomputed catalog results
"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from sqlite_erd.executors.base import MetadataExecutor
from sqlite_erd.models.catalog import Query, ResultSet

logger = logging.getLogger(__name__)


class FixtureExecutor(MetadataExecutor):
    """
    Metadata executor backed by result sets keyed by ``Query.key``

    Queries without a recorded result answer an empty result set.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 results: Optional[Dict[str, ResultSet]] = None):
        super().__init__(config or {})
        self.results: Dict[str, ResultSet] = dict(results or {})
        self.queries = []

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FixtureExecutor":
        """Build from ``{query_key: {columns: [...], rows: [[...]]}}``"""
        results = {key: ResultSet.from_dict(value) for key, value in (data or {}).items()}
        return cls(results=results)

    @classmethod
    def from_yaml(cls, fixture_path: str) -> "FixtureExecutor":
        """Load recorded results from a YAML file"""
        path = Path(fixture_path)
        if not path.exists():
            raise FileNotFoundError(f"Fixture file not found: {fixture_path}")

        with open(path, "r") as f:
            data = yaml.safe_load(f)

        logger.info(f"Loaded {len(data or {})} recorded results from {fixture_path}")
        return cls.from_dict(data)

    def record(self, query: Query, result: ResultSet) -> None:
        """Record the answer for a query"""
        self.results[query.key] = result

    def connect(self) -> None:
        pass

    def disconnect(self) -> None:
        pass

    def execute(self, query: Query) -> ResultSet:
        """Return the recorded result for the query"""
        self.queries.append(query)
        result = self.results.get(query.key)
        if result is None:
            logger.debug(f"No recorded result for {query.key}")
            return ResultSet()
        return result
