"""
=========================================================
Command-line entry point for the ODS mapping generator.
=========================================================

Generates, for one source table, the model mapping document and the
migration scripts of the three target warehouses (Snowflake, Oracle ADW,
Vertica), or the add-columns artifacts of an enhancement.

Key Design Principles:
    - core.logger for console logging (ALWAYS available)
    - MappingGenerator handles ALL generation logic
    - main.py is a thin CLI wrapper

Usage:
    # New table from the live source database
    python main.py --table PERSON --schema-file schemas/person.avdl --entity-type /person

    # New table from a metadata snapshot with explicit keys
    python main.py --table PERSON --schema-file person.avsc --entity-type /person \\
        --metadata-csv person_columns.csv --primary-keys ID

    # Enhancement adding two columns
    python main.py --table PERSON --enhancement --new-fields EMAIL PHONE \\
        --record-id com.example.Person

Exit Codes:
    0: Success
    1: Error
    130: User interrupt (Ctrl+C)
"""

import argparse
import sys

from core.logger import get_logger, setup_logging
from generator.mapping_generator import GenerationError, MappingGenerator
from utils.artifact_writer import ArtifactWriteError
from utils.metadata_extractor import MetadataExtractionError
from utils.schema_reader import MissingSchemaError

logger = get_logger(__name__)


def _split_names(values):
    """Accept both space separated and comma separated name lists."""
    if values is None:
        return None
    names = []
    for value in values:
        names.extend(name.strip() for name in value.split(',') if name.strip())
    return names


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="ODS Mapping Generator - model mapping and warehouse DDL",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # New table
  python main.py --table PERSON --schema-file person.avdl --entity-type /person

  # New table with a fixed mapping id, writing even if a dialect fails
  python main.py --table PERSON --schema-file person.avdl --entity-type /person \\
      --mapping-id 7f0c... --allow-partial

  # Enhancement
  python main.py --table PERSON --enhancement --new-fields EMAIL,PHONE \\
      --schema-file person.avdl
        """
    )

    parser.add_argument('--table', required=True, help='Source table name')
    parser.add_argument(
        '--schema-file',
        help='Interface definition (.avdl, .avsc, .avpr or .json)'
    )
    parser.add_argument(
        '--entity-type',
        help='Entity type of the source record (required for new tables)'
    )
    parser.add_argument(
        '--output-dir',
        help='Directory receiving the artifacts (default: ODS_OUTPUT_DIR)'
    )
    parser.add_argument('--mapping-id', help='Mapping id (default: random UUID)')
    parser.add_argument(
        '--metadata-csv',
        help='Read column metadata from a USER_TAB_COLUMNS CSV export'
    )
    parser.add_argument(
        '--primary-keys',
        nargs='+',
        help='Ordered primary key columns (default: read from the database)'
    )

    # Enhancement workflow
    parser.add_argument(
        '--enhancement',
        action='store_true',
        help='Generate add-columns artifacts for an already mapped table'
    )
    parser.add_argument(
        '--new-fields',
        nargs='+',
        help='Columns added by the enhancement'
    )
    parser.add_argument(
        '--record-id',
        help='Record identifier (default: namespace.name of the interface definition)'
    )

    parser.add_argument(
        '--allow-partial',
        action='store_true',
        help='Write successful artifacts even if other artifacts failed'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging (DEBUG level)'
    )
    return parser


def main(argv=None):
    """
    Command-line interface for the mapping generator.

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(log_level='DEBUG' if args.verbose else 'INFO')

    try:
        generator = MappingGenerator(output_dir=args.output_dir)

        if args.enhancement:
            result = generator.run_enhancement(
                table_name=args.table,
                new_fields=_split_names(args.new_fields),
                record_id=args.record_id,
                schema_file=args.schema_file,
                metadata_csv=args.metadata_csv
            )
        else:
            if not args.schema_file or not args.entity_type:
                parser.print_help()
                logger.warning("\n⚠️  New tables need --schema-file and --entity-type")
                return 1
            result = generator.run_new_table(
                table_name=args.table,
                schema_file=args.schema_file,
                entity_type=args.entity_type,
                mapping_id=args.mapping_id,
                metadata_csv=args.metadata_csv,
                primary_keys=_split_names(args.primary_keys),
                record_id=args.record_id
            )

        if result.errors and not args.allow_partial:
            logger.error(f"\n❌ Generation failed for {len(result.errors)} artifact(s); nothing written")
            return 1

        paths = generator.write(result, allow_partial=args.allow_partial)
        logger.info(f"\n🎉 Wrote {len(paths)} artifact(s) to {generator.output_dir}")
        return 0 if result.succeeded else 1

    except MissingSchemaError as e:
        logger.error(f"\n❌ Invalid interface definition: {e}")
        return 1
    except (MetadataExtractionError, GenerationError, ArtifactWriteError) as e:
        logger.error(f"\n❌ Generation failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("\n⚠️  Operation interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"\n❌ Unexpected error: {e}", exc_info=True)
        return 1


if __name__ == '__main__':
    sys.exit(main())
