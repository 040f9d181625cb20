"""
Main entry point for SQLite ERD
"""
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from sqlite_erd.core.config import Config
from sqlite_erd.core.engine import ErdEngine
from sqlite_erd.utils.logger import setup_logging

logger = logging.getLogger(__name__)
load_dotenv()


def main():
    """Main function"""
    try:
        config_file = os.getenv('CONFIG_FILE')
        if config_file and not Path(config_file).exists():
            print(f"Error: Configuration file not found: {config_file}", file=sys.stderr)
            sys.exit(1)
        config = Config.from_yaml(config_file) if config_file else Config()

        setup_logging(config.logging.model_dump())

        database = sys.argv[1] if len(sys.argv) > 1 else os.getenv('DATABASE_FILE')
        if not database:
            print("Usage: python -m sqlite_erd DATABASE (or set DATABASE_FILE)", file=sys.stderr)
            sys.exit(1)

        output_format = os.getenv('OUTPUT_FORMAT') or config.output.format
        output_file = os.getenv('OUTPUT_FILE') or config.output.file

        document = ErdEngine(config).run(database, output_format)

        if output_file:
            Path(output_file).write_text(document, encoding='utf-8')
            logger.info(f"Wrote {output_format} document to {output_file}")
        else:
            sys.stdout.write(document)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
