"""
===================================================
Configuration management for the mapping generator.
===================================================

Loads all configuration from environment variables (.env file) and provides
a centralized Config singleton for application-wide access.

The configuration system covers:
- Source database connection (Oracle metadata source)
- Migration script conventions (schema placeholder, ticket reference)
- Output directory layout

Example:
    >>> from core.config import config
    >>>
    >>> # Source database URL for SQLAlchemy
    >>> url = config.get_connection_url()
    >>>
    >>> # Migration conventions
    >>> print(config.schema_placeholder, config.migration_ticket)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


@dataclass
class SourceDatabaseConfig:
    """Source database configuration settings.

    Attributes:
        host: Oracle server hostname or IP address
        port: Oracle listener port
        service_name: Oracle service name
        user: Database username
        password: Database password
        schema: Owner schema used for primary key lookups
    """

    host: str
    port: int
    service_name: str
    user: str
    password: str
    schema: Optional[str] = None

    def get_connection_url(self) -> URL:
        """Get SQLAlchemy URL for the Oracle source database.

        Returns:
            SQLAlchemy URL using the python-oracledb driver
        """
        return URL.create(
            drivername='oracle+oracledb',
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            query={'service_name': self.service_name}
        )


@dataclass
class GenerationConfig:
    """Conventions applied to generated artifacts.

    Attributes:
        schema_placeholder: Variable substituted by the migration runner
        migration_ticket: Ticket reference written in migration headers
        record_format: Serialization format tag of the source record
    """

    schema_placeholder: str = '${schema}'
    migration_ticket: str = 'PHANALYTIC-(replace jira number)'
    record_format: str = 'AVRO'


@dataclass
class ProjectConfig:
    """Project-wide configuration settings.

    Attributes:
        project_root: Absolute path to project root directory
        output_dir: Directory receiving generated artifacts
    """

    project_root: Path
    output_dir: Path


class Config:
    """Centralized configuration manager.

    Attributes:
        db: SourceDatabaseConfig with metadata source connection settings
        generation: GenerationConfig with migration script conventions
        project: ProjectConfig instance with project directory paths

    Example:
        >>> config = Config()
        >>> url = config.get_connection_url()
        >>> print(f"Reading metadata from {config.db_host}:{config.db_port}")
    """

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.db = SourceDatabaseConfig(
            host=os.getenv('ODS_DB_HOST', 'localhost'),
            port=int(os.getenv('ODS_DB_PORT', '1521')),
            service_name=os.getenv('ODS_DB_SERVICE_NAME', 'ORCLPDB1'),
            user=os.getenv('ODS_DB_USER', 'ods'),
            password=os.getenv('ODS_DB_PASSWORD', ''),
            schema=os.getenv('ODS_DB_SCHEMA') or None
        )

        self.generation = GenerationConfig(
            schema_placeholder=os.getenv('ODS_SCHEMA_PLACEHOLDER', '${schema}'),
            migration_ticket=os.getenv(
                'ODS_MIGRATION_TICKET', 'PHANALYTIC-(replace jira number)'
            ),
            record_format=os.getenv('ODS_RECORD_FORMAT', 'AVRO')
        )

        # Project structure
        project_root = Path(__file__).parent.parent
        self.project = ProjectConfig(
            project_root=project_root,
            output_dir=Path(os.getenv('ODS_OUTPUT_DIR', str(project_root / 'output')))
        )

    @property
    def db_host(self) -> str:
        """Get source database hostname."""
        return self.db.host

    @property
    def db_port(self) -> int:
        """Get source database port number."""
        return self.db.port

    @property
    def db_schema(self) -> Optional[str]:
        """Get owner schema for primary key lookups."""
        return self.db.schema

    @property
    def schema_placeholder(self) -> str:
        """Get the schema variable used in generated DDL."""
        return self.generation.schema_placeholder

    @property
    def migration_ticket(self) -> str:
        """Get the ticket reference written in migration headers."""
        return self.generation.migration_ticket

    @property
    def record_format(self) -> str:
        """Get the record serialization format tag."""
        return self.generation.record_format

    def get_connection_url(self) -> URL:
        """Get the SQLAlchemy URL of the source database.

        Example:
            >>> config = Config()
            >>> engine = create_engine(config.get_connection_url())
        """
        return self.db.get_connection_url()


# Global configuration instance
config = Config()
