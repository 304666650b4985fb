"""Runtime configuration state management."""

from typing import Optional

# Global runtime configuration state
_config = {
    "service_name": None,
    "dataset": None,
    "sample_rate": 1,
    "sample_excludes_child_spans": False,
    "debug": False,
}


def set_service_name(value: Optional[str]) -> None:
    _config["service_name"] = value


def get_service_name() -> Optional[str]:
    return _config["service_name"]


def set_dataset(value: Optional[str]) -> None:
    _config["dataset"] = value


def get_dataset() -> Optional[str]:
    return _config["dataset"]


def set_sample_rate(value: int) -> None:
    _config["sample_rate"] = value


def get_sample_rate() -> int:
    return _config["sample_rate"]


def set_sample_excludes_child_spans(value: bool) -> None:
    _config["sample_excludes_child_spans"] = value


def get_sample_excludes_child_spans() -> bool:
    return _config["sample_excludes_child_spans"]


def set_debug(value: bool) -> None:
    _config["debug"] = value


def get_debug() -> bool:
    return _config["debug"]


def reset() -> None:
    """Restore the defaults (used by shutdown and tests)."""
    _config.update(
        service_name=None,
        dataset=None,
        sample_rate=1,
        sample_excludes_child_spans=False,
        debug=False,
    )
