from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from entiproxy.app import describe_entity_type, list_entity_ids
from entiproxy.config import configure_logging
from entiproxy.domain.methods import EntityDeclarationError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Inspect entity types and stored entities")
    subparsers = parser.add_subparsers(dest="command", required=True)

    describe = subparsers.add_parser(
        "describe",
        help="Register an entity type and show how its methods dispatch",
    )
    describe.add_argument(
        "target",
        type=str,
        help="Entity type to inspect, as MODULE:CLASS",
    )

    entities = subparsers.add_parser("entities", help="List stored entity ids")
    entities.add_argument(
        "--parent",
        type=str,
        help="Only list children of this entity id (defaults to root entities)",
    )

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _run_describe(target: str) -> None:
    description = describe_entity_type(target)
    log.info(
        "%s: %d creation method(s)",
        description.entity_type,
        len(description.methods),
    )
    for method in description.methods:
        fixed = f" ({method.fixed_id})" if method.fixed_id is not None else ""
        log.info(
            "  %s -> %s: shape=%s, id=%s%s",
            method.name,
            method.entity_type,
            method.shape,
            method.identifier_source,
            fixed,
        )


def _run_entities(parent_id: UUID | None) -> None:
    entity_ids = list_entity_ids(parent_id=parent_id)
    log.info("%d entities", len(entity_ids))
    for entity_id in entity_ids:
        log.info("  %s", entity_id)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parent_id: UUID | None = None
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command == "entities" and parsed_args.parent:
            parent_id = _parse_uuid(parsed_args.parent)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "describe":
            _run_describe(parsed_args.target)
        elif parsed_args.command == "entities":
            _run_entities(parent_id)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except EntityDeclarationError as exc:
        log.error("Invalid entity type declaration [%s]: %s", exc.diagnosis, exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point: load `.env`, trap Ctrl+C, run the CLI."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
