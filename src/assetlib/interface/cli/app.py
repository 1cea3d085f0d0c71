from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration store
resolution and command dispatch (``config``, ``tree``, ``probe``). Domain
errors are reported as one-line messages with exit code 1; invalid input
exits with 2.
"""

import argparse
import asyncio
import json
import sys
import time
from typing import Any, Dict, List, Optional

from assetlib.core.services.data_source import DataSource
from assetlib.core.services.hierarchy import HierarchyService
from assetlib.core.tree.render import build_tree
from assetlib.domain.config import ConfigStore
from assetlib.domain.errors import ApiError
from assetlib.infra.logging import LoggingConfig, configure_logging, get_logger
from assetlib.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 domain error, 2 invalid input,
        130 interrupted).
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console only)
    configure_logging(LoggingConfig.for_cli(args.debug))

    store = ConfigStore(args.config_file)
    logger.debug(f"CLI execution initiated. Command: {args.command}")

    # 3. Dispatch
    try:
        if args.command == "config":
            return _run_config(args, store)
        if args.command == "tree":
            return _run_tree(args, store)
        if args.command == "probe":
            return _run_probe(args, store)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return 130
    except ApiError as e:
        logger.error(f"Request failed: {e!r}")
        print(f"ERROR: {e.message} ({e.code})", file=sys.stderr)
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 2

# -----------------------------------------------------------------------------
# COMMANDS
# -----------------------------------------------------------------------------

def _run_config(args: argparse.Namespace, store: ConfigStore) -> int:
    if args.config_action == "show":
        config = store.get_config()
    elif args.config_action == "reset":
        config = store.reset()
    else:
        partial = cli_args.args_to_config_partial(args)
        if not partial:
            print("ERROR: Nothing to change. See 'assetlib config set --help'.", file=sys.stderr)
            return 2
        try:
            config = store.update_config(partial, strict=True)
        except (TypeError, ValueError) as e:
            print(f"ERROR: Invalid setting: {e}", file=sys.stderr)
            return 2

    if args.json_output:
        print(json.dumps(config, ensure_ascii=False, indent=2))
    else:
        _print_config(config, store)
    return 0


def _run_tree(args: argparse.Namespace, store: ConfigStore) -> int:
    service = HierarchyService(DataSource(store), args.kind)
    nodes = asyncio.run(service.refresh())

    if args.json_output:
        print(json.dumps(build_tree(nodes), ensure_ascii=False, indent=2))
        return 0

    if not nodes:
        print(f"(no {args.kind})")
        return 0
    for line in service.render(show_ids=args.show_ids, show_counts=args.show_counts):
        print(line)
    return 0


def _run_probe(args: argparse.Namespace, store: ConfigStore) -> int:
    if args.calls < 1:
        print("ERROR: --calls must be at least 1.", file=sys.stderr)
        return 2

    data_source = DataSource(store)
    report = asyncio.run(probe(data_source, args.kind, args.calls))

    if args.json_output:
        print(json.dumps(report, ensure_ascii=False, indent=2))
    else:
        print(f"Data source: {report['data_source']} ({report['backend']})")
        print(f"Calls: {report['calls']}  Failures: {report['failures']} "
              f"({report['failure_rate']:.1%})")
        print(f"Mean latency: {report['mean_latency_ms']:.0f} ms")
        for code, count in sorted(report["errors"].items()):
            print(f"  - {code}: {count}")
    return 0


async def probe(data_source: DataSource, kind: str, calls: int) -> Dict[str, Any]:
    """
    Issue ``calls`` sequential ``list`` requests and aggregate the outcome.

    Failures are counted per error code instead of being raised.
    """
    failures = 0
    errors: Dict[str, int] = {}
    elapsed: List[float] = []
    backend = data_source.backend(kind)

    for _ in range(calls):
        started = time.perf_counter()
        try:
            await data_source.backend(kind).list()
        except ApiError as e:
            failures += 1
            errors[e.code] = errors.get(e.code, 0) + 1
        elapsed.append((time.perf_counter() - started) * 1000.0)

    return {
        "kind": kind,
        "data_source": data_source.describe()["data_source"],
        "backend": type(backend).__name__,
        "calls": calls,
        "failures": failures,
        "failure_rate": failures / calls,
        "mean_latency_ms": sum(elapsed) / len(elapsed),
        "errors": errors,
    }

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_config(config: Dict[str, Any], store: ConfigStore) -> None:
    delay = config["simulated_delay"]
    if delay.get("fixed") is not None:
        delay_text = f"{delay['fixed']:g} ms (fixed)"
    else:
        delay_text = f"{delay['min']:g}-{delay['max']:g} ms"

    print(f"Config file:     {store.path}")
    print(f"Data source:     {'real' if config['use_real_backend'] else 'mock'}")
    print(f"Base endpoint:   {config['base_endpoint']}")
    print(f"Simulated delay: {delay_text}")
    print(f"Error rate:      {config['simulated_error_rate']:.1%}")
    print(f"Request timeout: {config['request_timeout']:g} s")


if __name__ == "__main__":
    sys.exit(main())
