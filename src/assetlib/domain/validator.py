from __future__ import annotations

"""
Runtime Configuration Validation.

Gatekeeper for the data source configuration. Converts untrusted values
(from the persisted blob, environment variables or the CLI) into the typed
schema the backends rely on, filling missing keys from the defaults.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from assetlib.domain import constants as const

logger = logging.getLogger(__name__)

_TRUE_WORDS = ("true", "1", "yes", "y", "on", "real")
_FALSE_WORDS = ("false", "0", "no", "n", "off", "mock")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def get_default_config() -> Dict[str, Any]:
    """
    Generate the compiled-in data source configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Backend selection
        "use_real_backend": False,
        "base_endpoint": const.DEFAULT_BASE_ENDPOINT,

        # Simulated backend behaviour
        "simulated_delay": {"min": 200, "max": 800, "fixed": None},
        "simulated_error_rate": 0.05,

        # Real backend transport
        "request_timeout": 30.0,
        "default_headers": {"Content-Type": "application/json"},
    }


def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a runtime configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise on type or range violations instead of
            coercing and warning.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and
        the list of warnings produced while coercing it.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    merged["use_real_backend"] = _as_bool(
        merged.get("use_real_backend"), defaults["use_real_backend"], "use_real_backend", warnings, strict
    )
    merged["base_endpoint"] = _as_endpoint(
        merged.get("base_endpoint"), defaults["base_endpoint"], warnings, strict
    )
    merged["simulated_error_rate"] = _as_rate(
        merged.get("simulated_error_rate"), defaults["simulated_error_rate"], warnings, strict
    )
    merged["request_timeout"] = _as_positive_float(
        merged.get("request_timeout"), defaults["request_timeout"], "request_timeout", warnings, strict
    )
    merged["simulated_delay"] = _as_delay(
        merged.get("simulated_delay"), defaults["simulated_delay"], warnings, strict
    )
    merged["default_headers"] = _as_headers(
        merged.get("default_headers"), defaults["default_headers"], warnings, strict
    )

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce flags, accepting 0/1 and common keywords outside strict mode."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in _TRUE_WORDS:
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in _FALSE_WORDS:
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_number(value: Any, field: str, warnings: List[str], strict: bool) -> Optional[float]:
    """Return value as float, or None when it cannot be interpreted."""
    if isinstance(value, bool):
        pass
    elif isinstance(value, (int, float)):
        return float(value)
    elif isinstance(value, str) and not strict:
        try:
            number = float(value.strip())
        except ValueError:
            pass
        else:
            warnings.append(f"Field '{field}' converted from string '{value}' to number.")
            return number

    msg = f"Invalid field '{field}': expected number, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return None


def _as_rate(value: Any, fallback: float, warnings: List[str], strict: bool) -> float:
    """Probability in [0, 1]; out-of-range values are clamped."""
    if value is None:
        return fallback
    number = _as_number(value, "simulated_error_rate", warnings, strict)
    if number is None:
        return fallback
    if 0.0 <= number <= 1.0:
        return number

    msg = f"Field 'simulated_error_rate' out of range [0, 1]: {number}."
    if strict:
        raise ValueError(msg)
    clamped = min(1.0, max(0.0, number))
    warnings.append(f"{msg} Clamped to {clamped}.")
    return clamped


def _as_positive_float(value: Any, fallback: float, field: str, warnings: List[str], strict: bool) -> float:
    if value is None:
        return fallback
    number = _as_number(value, field, warnings, strict)
    if number is None:
        return fallback
    if number > 0:
        return number

    msg = f"Field '{field}' must be positive, received {number}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_millis(value: Any, fallback: Optional[int], field: str, warnings: List[str], strict: bool) -> Optional[int]:
    """Non-negative whole milliseconds."""
    number = _as_number(value, field, warnings, strict)
    if number is None:
        return fallback
    if number < 0:
        msg = f"Field '{field}' must not be negative, received {number}."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback
    return int(round(number))


def _as_delay(value: Any, fallback: Dict[str, Any], warnings: List[str], strict: bool) -> Dict[str, Any]:
    """
    Normalize the ``{min, max, fixed}`` delay block.

    Missing keys come from the fallback; inverted bounds are swapped.
    """
    if value is None:
        return dict(fallback)
    if not isinstance(value, dict):
        msg = f"Invalid field 'simulated_delay': expected dict, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return dict(fallback)

    low = _as_millis(value.get("min", fallback["min"]), fallback["min"], "simulated_delay.min", warnings, strict)
    high = _as_millis(value.get("max", fallback["max"]), fallback["max"], "simulated_delay.max", warnings, strict)

    raw_fixed = value.get("fixed", fallback["fixed"])
    fixed = None if raw_fixed is None else _as_millis(raw_fixed, None, "simulated_delay.fixed", warnings, strict)

    if low is not None and high is not None and low > high:
        msg = f"Field 'simulated_delay' has min ({low}) greater than max ({high})."
        if strict:
            raise ValueError(msg)
        warnings.append(f"{msg} Bounds swapped.")
        low, high = high, low

    return {"min": low, "max": high, "fixed": fixed}


def _as_endpoint(value: Any, fallback: str, warnings: List[str], strict: bool) -> str:
    """Base URL without a trailing slash."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip().rstrip("/")
        if v:
            return v
        return fallback

    msg = f"Invalid field 'base_endpoint': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_headers(value: Any, fallback: Dict[str, str], warnings: List[str], strict: bool) -> Dict[str, str]:
    if value is None:
        return dict(fallback)
    if isinstance(value, dict):
        return {str(k): str(v) for k, v in value.items()}

    msg = f"Invalid field 'default_headers': expected dict, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return dict(fallback)
