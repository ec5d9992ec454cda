"""Read gwt-maven-plugin overrides from a POM configuration element."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Any, Callable, Dict, Optional, TypeVar

from lxml import etree

from .models import BuildConfigSettings
from .pom import interpolate

T = TypeVar("T")

ECLIPSE_LAUNCH_SRC_DIR_PROPERTY_KEY = "eclipseLaunchFromWarDir"
ECLIPSE_LAUNCH_SRC_DIR_DEFAULT = False
WAR_SRC_DIR_PROPERTY_KEY = "warSourceDirectory"
WAR_SRC_DIR_DEFAULT = "src/main/webapp"


def _local_name(element: Any) -> Optional[str]:
    # comments and processing instructions have a non-string tag
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


def parse_boolean(value: str) -> bool:
    """Lenient boolean parsing: only ``true`` in any case is true."""

    return value.lower() == "true"


def extract_value(config: Any, key: str, default: T, parse: Callable[[str], T]) -> T:
    """Return the parsed text of the first ``key`` child of ``config``.

    Falls back to ``default`` when the element is missing, the key is not
    present, or its text is empty.
    """

    if config is None:
        return default
    for child in config:
        if child is None or _local_name(child) != key:
            continue
        if child.text is None or not child.text.strip():
            return default
        return parse(child.text.strip())
    return default


def get_launch_from_here(config: Any) -> bool:
    return extract_value(
        config, ECLIPSE_LAUNCH_SRC_DIR_PROPERTY_KEY, ECLIPSE_LAUNCH_SRC_DIR_DEFAULT, parse_boolean
    )


def get_war_src_dir(config: Any, properties: Optional[Dict[str, str]] = None) -> str:
    """Return the war source directory such as ``src/main/webapp``.

    ``${...}`` references are expanded from ``properties`` when given.
    """

    value = extract_value(config, WAR_SRC_DIR_PROPERTY_KEY, WAR_SRC_DIR_DEFAULT, str)
    if properties:
        value = interpolate(value, properties) or WAR_SRC_DIR_DEFAULT
    return value


def relative_to_project(value: str, base_dir: Optional[Path]) -> str:
    """Express ``value`` relative to ``base_dir`` when it points inside it."""

    path = Path(value)
    if base_dir is None or not path.is_absolute():
        return value
    try:
        relative = path.relative_to(base_dir)
    except ValueError:
        return value
    return PurePosixPath(*relative.parts).as_posix()


def read_build_settings(
    config: Any,
    properties: Optional[Dict[str, str]] = None,
    base_dir: Optional[Path] = None,
) -> BuildConfigSettings:
    return BuildConfigSettings(
        launch_from_war_dir=get_launch_from_here(config),
        war_src_dir=relative_to_project(get_war_src_dir(config, properties), base_dir),
    )


__all__ = [
    "ECLIPSE_LAUNCH_SRC_DIR_PROPERTY_KEY",
    "WAR_SRC_DIR_PROPERTY_KEY",
    "WAR_SRC_DIR_DEFAULT",
    "extract_value",
    "get_launch_from_here",
    "get_war_src_dir",
    "parse_boolean",
    "read_build_settings",
    "relative_to_project",
]
