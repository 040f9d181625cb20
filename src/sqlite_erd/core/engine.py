"""
Engine tying extraction and rendering together
"""
import json
import logging
from typing import Optional

from sqlite_erd.core.config import Config
from sqlite_erd.core.extractor import SchemaExtractor
from sqlite_erd.core.layout import Layout
from sqlite_erd.executors.base import MetadataExecutor
from sqlite_erd.executors.factory import ExecutorFactory
from sqlite_erd.renderers.graph import GraphRenderer
from sqlite_erd.renderers.markup import MarkupRenderer

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ('dot', 'dbml', 'json')


class ErdEngine:
    """Extracts a schema snapshot and renders it in the requested format"""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    def load(self, executor: MetadataExecutor) -> Layout:
        """Build a fresh Layout from the executor"""
        return SchemaExtractor(executor, self.config.extraction).extract()

    def render(self, layout: Layout, fmt: Optional[str] = None) -> str:
        """
        Render a layout

        Args:
            layout: Populated layout
            fmt: One of dot, dbml, json; defaults to the configured format

        Returns:
            Document text
        """
        fmt = (fmt or self.config.output.format).lower()
        if fmt == 'dot':
            return GraphRenderer(self.config.graph).render(layout)
        if fmt == 'dbml':
            return MarkupRenderer(self.config.markup).render(layout)
        if fmt == 'json':
            return json.dumps(layout.to_dict(), indent=2, default=repr)
        raise ValueError(
            f"Unsupported output format: {fmt}. "
            f"Supported formats: {', '.join(SUPPORTED_FORMATS)}"
        )

    def run(self, database_path: str, fmt: Optional[str] = None) -> str:
        """Open an SQLite database file, extract its schema and render it"""
        logger.info(f"Extracting schema from {database_path}")
        with ExecutorFactory.create_executor('sqlite', {'path': database_path}) as executor:
            layout = self.load(executor)
        return self.render(layout, fmt)
