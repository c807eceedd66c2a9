"""
@file cli.py
@brief Command-line interface for the web element object repository.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

from .config import StoreConfig, load_config
from .exceptions import ObjectRepoError
from .interfaces import IRecordSource
from .sources import XmlDirectorySource, YamlRecordSource
from .store import ElementStore
from .utils.logging import get_logger, log_exception, setup_logging

logger = get_logger(__name__)


def _make_source(path: str) -> IRecordSource:
    """Pick a record source from the repository path."""
    if os.path.isdir(path):
        return XmlDirectorySource(path)
    if path.lower().endswith((".yaml", ".yml")):
        return YamlRecordSource(path)
    raise ObjectRepoError(f"Not an object repository folder or YAML object map: {path}")


def _build_config(args: argparse.Namespace) -> StoreConfig:
    config = load_config(args.config) if args.config else StoreConfig()
    if getattr(args, "skip_invalid", False):
        config = config.with_overrides(on_error="skip")
    return config


def _parse_attrs(specs: Optional[List[str]]) -> Dict[str, str]:
    attrs: Dict[str, str] = {}
    for spec in specs or []:
        if "=" not in spec:
            raise ObjectRepoError(f"Attribute must be in NAME=VALUE format: {spec}")
        key, value = spec.split("=", 1)
        attrs[key.strip()] = value
    return attrs


def _print_issues(store: ElementStore) -> None:
    print("\nSkipped Records")
    print("-" * 80)
    for idx, issue in enumerate(store.issues, start=1):
        where = f" [{issue.field}]" if issue.field else ""
        print(f"{idx:<4} {issue.record_ref}{where}: {issue.violation}")


def _emit(data: Any, as_json: bool, lines: List[str]) -> None:
    if as_json:
        print(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        for line in lines:
            print(line)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    argv = argv if argv is not None else sys.argv[1:]

    p = argparse.ArgumentParser(
        prog="uiauto-objrepo",
        description="Web element object repository - validate records and resolve selectors",
    )
    p.add_argument("--config", "-c", default=None, help="Path to YAML config with an 'objrepo' section")
    p.add_argument("--log-level", default=None, help="Override log level (DEBUG, INFO, WARNING, ...)")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_repo(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("--repo", "-r", required=True, help="Object Repository folder (*.rs files) or YAML object map")
        sp.add_argument("--json", action="store_true", help="Print machine-readable JSON")

    valp = sub.add_parser("validate", help="Load every record and report violations")
    add_repo(valp)
    valp.add_argument("--skip-invalid", action="store_true", help="Report all bad records instead of stopping at the first")

    listp = sub.add_parser("list", help="List element paths")
    add_repo(listp)

    showp = sub.add_parser("show", help="Show one element descriptor")
    add_repo(showp)
    showp.add_argument("name", help="Element name or scope/name path")

    resp = sub.add_parser("resolve", help="Print the selector an engine should use")
    add_repo(resp)
    resp.add_argument("name", help="Element name or scope/name path")
    resp.add_argument("--chain", action="store_true", help="Print the full fallback chain")

    matchp = sub.add_parser("match", help="Check candidate attributes against an element's attribute rules")
    add_repo(matchp)
    matchp.add_argument("name", help="Element name or scope/name path")
    matchp.add_argument("--attr", "-a", action="append", help="Candidate attribute in NAME=VALUE format (repeatable)")

    args = p.parse_args(argv)

    try:
        config = _build_config(args)
        setup_logging(args.log_level or config.log_level)
        store = _make_source(args.repo).load(config)
    except (ObjectRepoError, FileNotFoundError, ValueError) as e:
        print(f"Error loading object repository: {e}", file=sys.stderr)
        return 1

    try:
        if args.cmd == "validate":
            ok = not store.issues
            _emit(
                {
                    "status": "valid" if ok else "invalid",
                    "elements": len(store),
                    "issues": [issue.__dict__ for issue in store.issues],
                },
                args.json,
                [f"Loaded {len(store)} element(s) from {args.repo}"],
            )
            if not ok and not args.json:
                _print_issues(store)
            return 0 if ok else 2

        if args.cmd == "list":
            paths = store.list_elements()
            _emit(paths, args.json, paths)
            return 0

        descriptor = store.get(args.name)

        if args.cmd == "show":
            data = descriptor.to_dict()
            _emit(data, args.json, [f"{k}: {v}" for k, v in data.items()])
            return 0

        if args.cmd == "resolve":
            chain = store.fallback_chain(descriptor) if args.chain else [store.resolve(descriptor)]
            _emit(
                [{"kind": s.kind.value, "expression": s.expression} for s in chain],
                args.json,
                [f"{s.kind.value} {s.expression}" for s in chain],
            )
            return 0

        if args.cmd == "match":
            matched = store.matches_attributes(descriptor, _parse_attrs(args.attr))
            _emit({"element": descriptor.path, "matched": matched}, args.json, ["MATCH" if matched else "NO MATCH"])
            return 0 if matched else 2
    except ObjectRepoError as e:
        log_exception(logger, args.cmd, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    p.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
