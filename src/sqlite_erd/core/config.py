"""
Configuration management for SQLite ERD
"""
from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sqlite_erd.models.schema import ForeignKeyAction


class ExtractionConfig(BaseModel):
    """Schema extraction configuration"""
    include_tables: List[str] = Field(default_factory=list)
    exclude_tables: List[str] = Field(default_factory=list)
    # Substituted for missing or unrecognized ON UPDATE / ON DELETE values
    fallback_action: ForeignKeyAction = ForeignKeyAction.NO_ACTION


class GraphStyleConfig(BaseModel):
    """Graph document styling"""
    name: str = "SQLiteLayout"
    rankdir: str = "LR"
    fontname: str = "helvetica"
    fontsize: int = 42
    text_color: str = "#29235c"
    background: str = "transparent"
    header_color: str = "#1d71b8"
    header_text_color: str = "#ffffff"
    row_color: str = "#e7e2dd"
    border_color: str = "#29235c"
    line_color: str = "#29235c"
    edge_width: int = 4
    label_distance: float = 3.5
    label_fontsize: int = 52
    arrowhead: str = "open"
    arrowsize: int = 2
    one_label: str = "1"
    many_label: str = "∞"


class MarkupConfig(BaseModel):
    """Schema markup document configuration"""
    indent: int = 2
    binary_placeholder: str = "<binary>"
    unsupported_placeholder: str = "<unsupported>"


class OutputConfig(BaseModel):
    """Output configuration"""
    format: Literal["dot", "dbml", "json"] = "dot"
    file: Optional[str] = None


class LoggingConfig(BaseModel):
    """Logging configuration"""
    level: str = "WARNING"
    format: str = "text"
    file: Optional[str] = None
    max_bytes: int = 10485760
    backup_count: int = 5


class Config(BaseSettings):
    """Main configuration class"""
    model_config = SettingsConfigDict(env_prefix="SQLITE_ERD_", env_nested_delimiter="__")

    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    graph: GraphStyleConfig = Field(default_factory=GraphStyleConfig)
    markup: MarkupConfig = Field(default_factory=MarkupConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, config_path: str) -> "Config":
        """Load configuration from YAML file"""
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(path, "r") as f:
            config_dict = yaml.safe_load(f) or {}

        return cls(**config_dict)
