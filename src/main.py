# src/main.py — v1
"""CLI entry point — document, component, directive, list, clear-cache commands.

Usage:
    varletmeta component Button --lib-version 3.0.0
    varletmeta directive ripple
    varletmeta list [--by-category]
    varletmeta document --lib-version latest
    varletmeta clear-cache [--lib-version 3.0.0]

Results are printed to stdout as JSON; logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from varletmeta.version import __version__

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_NOT_FOUND = 3
EXIT_INTERRUPTED = 130


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_FATAL

    from varletmeta.config.settings import ConfigurationError, load_settings
    from varletmeta.logging.logger import setup_logging_from_settings

    overrides: dict[str, Any] = {}
    if args.cache_dir is not None:
        overrides["cache_root"] = args.cache_dir
    if args.no_cache:
        overrides["cache_backend"] = "memory"
    try:
        settings = load_settings(**overrides)
    except (ConfigurationError, ValueError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return EXIT_FATAL

    setup_logging_from_settings(settings, level="DEBUG" if args.verbose else None)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return EXIT_FATAL


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="varletmeta",
        description=f"varletmeta v{__version__} — Varlet UI component metadata",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--cache-dir", type=Path, default=None,
        help="Cache directory (default: CACHE_ROOT or ~/.varlet-mcp)",
    )
    parser.add_argument(
        "--no-cache", action="store_true",
        help="Keep documents in memory only for this run",
    )

    subparsers = parser.add_subparsers(dest="command")

    def _with_version(p: argparse.ArgumentParser, default: str | None = "latest") -> None:
        p.add_argument(
            "-V", "--lib-version", dest="lib_version", default=default,
            help='Library version, e.g. "latest" or "3.0.0"'
            + (f" (default: {default})" if default else ""),
        )

    p_doc = subparsers.add_parser("document", help="Print the full metadata document")
    _with_version(p_doc)
    p_doc.set_defaults(func=_cmd_document)

    p_comp = subparsers.add_parser("component", help="Show one component's API")
    p_comp.add_argument("name", help='Component name, e.g. "Button" or "var-button"')
    _with_version(p_comp)
    p_comp.set_defaults(func=_cmd_component)

    p_dir = subparsers.add_parser("directive", help="Show one directive's API")
    p_dir.add_argument("name", help='Directive name, e.g. "ripple" or "v-ripple"')
    _with_version(p_dir)
    p_dir.set_defaults(func=_cmd_directive)

    p_list = subparsers.add_parser("list", help="List component names")
    p_list.add_argument(
        "--by-category", action="store_true",
        help="Group names by catalogue category",
    )
    _with_version(p_list)
    p_list.set_defaults(func=_cmd_list)

    p_clear = subparsers.add_parser("clear-cache", help="Invalidate cached documents")
    _with_version(p_clear, default=None)
    p_clear.set_defaults(func=_cmd_clear_cache)

    return parser


async def _run(settings: Any, request: Any) -> int:
    from varletmeta.api.facade import create_service

    async with create_service(settings) as service:
        result = await service.handle(request)

    if result.ok:
        _print_json(result.data)
        if result.data == {"invalidated": False}:
            return EXIT_FATAL
        return EXIT_OK

    error = result.error
    print(error.message if error else "Request failed", file=sys.stderr)
    if error is not None and error.code == "not_found":
        return EXIT_NOT_FOUND
    return EXIT_FATAL


async def _cmd_document(args: argparse.Namespace, settings: Any) -> int:
    from varletmeta.api.models import ServiceRequest

    return await _run(
        settings,
        ServiceRequest(operation="get_metadata_document", version=args.lib_version),
    )


async def _cmd_component(args: argparse.Namespace, settings: Any) -> int:
    from varletmeta.api.models import ServiceRequest

    return await _run(
        settings,
        ServiceRequest(
            operation="get_component", version=args.lib_version, entity_name=args.name
        ),
    )


async def _cmd_directive(args: argparse.Namespace, settings: Any) -> int:
    from varletmeta.api.models import ServiceRequest

    return await _run(
        settings,
        ServiceRequest(
            operation="get_directive", version=args.lib_version, entity_name=args.name
        ),
    )


async def _cmd_list(args: argparse.Namespace, settings: Any) -> int:
    from varletmeta.api.models import ServiceRequest

    return await _run(
        settings,
        ServiceRequest(
            operation="list_components_by_category" if args.by_category else "list_components",
            version=args.lib_version,
        ),
    )


async def _cmd_clear_cache(args: argparse.Namespace, settings: Any) -> int:
    from varletmeta.api.models import ServiceRequest

    return await _run(
        settings,
        ServiceRequest(operation="invalidate_cache", version=args.lib_version),
    )


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


if __name__ == "__main__":
    sys.exit(main())
