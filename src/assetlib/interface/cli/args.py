from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the ``assetlib`` command schema (config, tree, probe) and translates
the ``config set`` flags into a partial data source configuration.
"""

import argparse
from typing import Any, Dict

from assetlib.domain import constants as const

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the AssetLib CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="assetlib",
        description="Inspect and configure the AssetLib data source.",
    )

    # --- Global flags ---
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print machine-readable JSON instead of text.",
    )
    p.add_argument(
        "--config-file",
        dest="config_file",
        default=None,
        help="State document to use instead of the one in the user data directory.",
    )

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    # --- config ---
    p_config = sub.add_parser("config", help="Show or change the data source settings.")
    config_sub = p_config.add_subparsers(dest="config_action", metavar="ACTION")
    config_sub.required = True

    config_sub.add_parser("show", help="Print the active configuration.")
    config_sub.add_parser("reset", help="Restore the default configuration.")

    p_set = config_sub.add_parser("set", help="Change one or more settings.")
    mode = p_set.add_mutually_exclusive_group()
    mode.add_argument("--real", dest="use_real_backend", action="store_const", const=True, default=None,
                      help="Serve requests from the HTTP backend.")
    mode.add_argument("--simulated", dest="use_real_backend", action="store_const", const=False,
                      help="Serve requests from the in-memory simulated backend.")
    p_set.add_argument("--endpoint", dest="base_endpoint", default=None, help="Base URL of the REST API.")
    p_set.add_argument("--delay-min", dest="delay_min", type=float, default=None, help="Minimum simulated delay (ms).")
    p_set.add_argument("--delay-max", dest="delay_max", type=float, default=None, help="Maximum simulated delay (ms).")
    fixed = p_set.add_mutually_exclusive_group()
    fixed.add_argument("--delay-fixed", dest="delay_fixed", type=float, default=None,
                       help="Fixed simulated delay (ms), overrides min/max.")
    fixed.add_argument("--no-fixed-delay", dest="no_fixed_delay", action="store_true",
                       help="Clear the fixed delay and use the min/max range.")
    p_set.add_argument("--error-rate", dest="error_rate", type=float, default=None,
                       help="Probability (0..1) that a simulated call fails.")
    p_set.add_argument("--timeout", dest="timeout", type=float, default=None,
                       help="Request timeout of the HTTP backend (seconds).")

    # --- tree ---
    p_tree = sub.add_parser("tree", help="Print a hierarchy through the active backend.")
    p_tree.add_argument("kind", nargs="?", default=const.KIND_FOLDERS, choices=list(const.TREE_KINDS))
    p_tree.add_argument("--ids", dest="show_ids", action="store_true", help="Show node identifiers.")
    p_tree.add_argument("--counts", dest="show_counts", action="store_true", help="Show member item counts.")

    # --- probe ---
    p_probe = sub.add_parser("probe", help="Issue repeated list calls and report failures and latency.")
    p_probe.add_argument("--kind", default=const.KIND_FOLDERS, choices=list(const.RESOURCE_KINDS))
    p_probe.add_argument("--calls", type=int, default=10, help="Number of calls to issue.")

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_config_partial(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate ``config set`` flags into a partial configuration.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Only the keys the user asked to change.
    """
    partial: Dict[str, Any] = {}

    if args.use_real_backend is not None:
        partial["use_real_backend"] = args.use_real_backend
    if args.base_endpoint:
        partial["base_endpoint"] = args.base_endpoint
    if args.error_rate is not None:
        partial["simulated_error_rate"] = args.error_rate
    if args.timeout is not None:
        partial["request_timeout"] = args.timeout

    # Delay block merges key by key
    delay: Dict[str, Any] = {}
    if args.delay_min is not None:
        delay["min"] = args.delay_min
    if args.delay_max is not None:
        delay["max"] = args.delay_max
    if args.delay_fixed is not None:
        delay["fixed"] = args.delay_fixed
    elif args.no_fixed_delay:
        delay["fixed"] = None
    if delay:
        partial["simulated_delay"] = delay

    return partial
