import argparse
import json
import logging
import sys
from pathlib import Path

from visit_attribution.adapters.file_store import JsonFileStore
from visit_attribution.components.attribution import (
    PageVisitInput,
    run_load_ledger,
    run_record_visit,
    run_resolve,
)
from visit_attribution.core.errors import RulesError
from visit_attribution.core.services.config import AttributionConfig
from visit_attribution.rules.loader import load_config

logger = logging.getLogger("cli")


def get_config(rules_path: Path | None) -> AttributionConfig:
    try:
        return load_config(rules_path)
    except RulesError as e:
        logger.error(str(e))
        sys.exit(1)


def print_json(data: dict) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def handle_resolve(config: AttributionConfig, args: argparse.Namespace) -> None:
    result = run_resolve(PageVisitInput(url=args.url, referrer=args.referrer), config)
    print_json(result.attribution.to_dict())


def handle_record(config: AttributionConfig, args: argparse.Namespace) -> None:
    store = JsonFileStore(args.store)
    result = run_record_visit(
        PageVisitInput(url=args.url, referrer=args.referrer), store, config=config
    )
    if result.reset_malformed:
        logger.warning("Stored ledger was malformed and has been reset.")
    if not result.persisted:
        logger.error(f"Visit could not be written to {args.store}.")
    print_json(result.ledger.to_dict())


def handle_show(config: AttributionConfig, args: argparse.Namespace) -> None:
    result = run_load_ledger(JsonFileStore(args.store), config)
    if result.malformed:
        logger.warning("Stored ledger is malformed; showing an empty ledger.")
    print_json(result.ledger.to_dict())


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Visit attribution CLI")
    parser.add_argument("--rules", type=Path, default=None, help="Path to a rules.yaml file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # resolve
    resolve_parser = subparsers.add_parser("resolve", help="Resolve attribution for a page URL")
    resolve_parser.add_argument("--url", required=True, help="Full URL of the landing page")
    resolve_parser.add_argument("--referrer", default="", help="Referrer string")

    # record
    record_parser = subparsers.add_parser("record", help="Record a visit into a store file")
    record_parser.add_argument("--url", required=True, help="Full URL of the landing page")
    record_parser.add_argument("--referrer", default="", help="Referrer string")
    record_parser.add_argument("--store", required=True, type=Path, help="JSON store file")

    # show
    show_parser = subparsers.add_parser("show", help="Show the stored visit ledger")
    show_parser.add_argument("--store", required=True, type=Path, help="JSON store file")

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    config = get_config(args.rules)

    if args.command == "resolve":
        handle_resolve(config, args)
    elif args.command == "record":
        handle_record(config, args)
    elif args.command == "show":
        handle_show(config, args)


if __name__ == "__main__":
    main()
