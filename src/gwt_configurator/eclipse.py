"""Eclipse project description and per-project preference stores."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger
from lxml import etree

from .errors import PreferenceStoreError

PROJECT_FILE_NAME = ".project"
SETTINGS_DIR_NAME = ".settings"
PREFERENCES_VERSION_KEY = "eclipse.preferences.version"

GWT_NATURE_ID = "com.gwtplugins.gwt.eclipse.core.gwtNature"
GDT_CORE_PREFERENCE_NODE = "com.gwtplugins.gdt.eclipse.core"

WAR_SRC_DIR_KEY = "warSrcDir"
WAR_SRC_DIR_IS_OUTPUT_KEY = "warSrcDirIsOutput"
LAST_USED_WAR_OUT_DIR_KEY = "lastWarOutDir"

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_HEX_PATTERN = re.compile(r"[0-9a-fA-F]{4}")


class EclipseProjectFile:
    """Natures stored in an Eclipse ``.project`` description."""

    def __init__(self, project_dir: Path, default_name: Optional[str] = None) -> None:
        self.path = project_dir / PROJECT_FILE_NAME
        self.default_name = default_name or project_dir.name

    def _load(self) -> etree._ElementTree:
        if not self.path.exists():
            root = etree.Element("projectDescription")
            etree.SubElement(root, "name").text = self.default_name
            etree.SubElement(root, "comment").text = ""
            etree.SubElement(root, "projects")
            etree.SubElement(root, "buildSpec")
            etree.SubElement(root, "natures")
            return etree.ElementTree(root)
        parser = etree.XMLParser(remove_blank_text=True)
        try:
            return etree.parse(str(self.path), parser)
        except (OSError, etree.XMLSyntaxError) as exc:
            raise PreferenceStoreError(f"Could not read {self.path}: {exc}") from exc

    def natures(self) -> List[str]:
        if not self.path.exists():
            return []
        root = self._load().getroot()
        return [node.text.strip() for node in root.iterfind("natures/nature") if node.text]

    def has_nature(self, nature_id: str) -> bool:
        return nature_id in self.natures()

    def add_nature(self, nature_id: str) -> bool:
        """Append ``nature_id``; return ``False`` when it was already present."""

        tree = self._load()
        root = tree.getroot()
        natures = root.find("natures")
        if natures is None:
            natures = etree.SubElement(root, "natures")
        if any(node.text and node.text.strip() == nature_id for node in natures):
            return False
        etree.SubElement(natures, "nature").text = nature_id
        try:
            tree.write(str(self.path), encoding="UTF-8", xml_declaration=True, pretty_print=True)
        except OSError as exc:
            raise PreferenceStoreError(f"Could not write {self.path}: {exc}") from exc
        logger.debug("Added nature {} to {}", nature_id, self.path)
        return True


def _escape_unicode(char: str) -> str:
    code = ord(char)
    if code > 0xFFFF:
        code -= 0x10000
        return "\\u%04X\\u%04X" % (0xD800 + (code >> 10), 0xDC00 + (code & 0x3FF))
    return "\\u%04X" % code


def _escape(text: str, *, is_key: bool) -> str:
    out: List[str] = []
    for index, char in enumerate(text):
        if char == "\\":
            out.append("\\\\")
        elif char in "=:#!" or (char == " " and (is_key or index == 0)):
            out.append("\\" + char)
        elif char == "\n":
            out.append("\\n")
        elif char == "\t":
            out.append("\\t")
        elif char == "\r":
            out.append("\\r")
        elif ord(char) < 0x20 or ord(char) > 0x7E:
            out.append(_escape_unicode(char))
        else:
            out.append(char)
    return "".join(out)


def _unescape(text: str) -> str:
    out: List[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        index += 1
        if char != "\\":
            out.append(char)
            continue
        following = text[index : index + 1]
        index += 1
        if following == "u" and _HEX_PATTERN.fullmatch(text[index : index + 4]):
            out.append(chr(int(text[index : index + 4], 16)))
            index += 4
        else:
            out.append(_ESCAPES.get(following, following))
    # \uXXXX pairs encode characters outside the BMP as surrogates
    return "".join(out).encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")


def _split_entry(line: str) -> tuple[str, str]:
    index = 0
    while index < len(line):
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in "=:":
            return line[:index].rstrip(), line[index + 1 :].lstrip()
        index += 1
    return line.rstrip(), ""


class ProjectPreferences:
    """A ``.settings/<node>.prefs`` file in Java properties format."""

    def __init__(self, project_dir: Path, node: str = GDT_CORE_PREFERENCE_NODE) -> None:
        self.node = node
        self.path = project_dir / SETTINGS_DIR_NAME / f"{node}.prefs"
        self._values: Dict[str, str] = {}
        self._dirty = False
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            lines = self.path.read_text(encoding="latin-1").splitlines()
        except OSError as exc:
            raise PreferenceStoreError(f"Could not read {self.path}: {exc}") from exc
        for raw in lines:
            line = raw.strip()
            if not line or line[0] in "#!":
                continue
            key, value = _split_entry(line)
            self._values[_unescape(key)] = _unescape(value)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(key, default)

    def get_boolean(self, key: str, default: bool = False) -> bool:
        value = self._values.get(key)
        if value is None:
            return default
        return value.strip().lower() == "true"

    def put(self, key: str, value: str) -> None:
        if self._values.get(key) != value:
            self._values[key] = value
            self._dirty = True

    def put_boolean(self, key: str, value: bool) -> None:
        self.put(key, "true" if value else "false")

    def keys(self) -> List[str]:
        return sorted(k for k in self._values if k != PREFERENCES_VERSION_KEY)

    def flush(self) -> None:
        """Write pending changes to disk."""

        if not self._dirty and self.path.exists():
            return
        self._values[PREFERENCES_VERSION_KEY] = "1"
        lines = [
            f"{_escape(key, is_key=True)}={_escape(value, is_key=False)}"
            for key, value in sorted(self._values.items())
        ]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("\n".join(lines) + "\n", encoding="latin-1")
        except (OSError, UnicodeEncodeError) as exc:
            raise PreferenceStoreError(f"Could not write {self.path}: {exc}") from exc
        self._dirty = False
        logger.debug("Flushed {} preferences to {}", len(lines), self.path)


class WebAppProjectProperties:
    """Typed access to the web application settings of a GWT project."""

    def __init__(self, preferences: ProjectPreferences) -> None:
        self.preferences = preferences

    def set_war_src_dir(self, war_src_dir: Path) -> None:
        self.preferences.put(WAR_SRC_DIR_KEY, war_src_dir.as_posix())

    def get_war_src_dir(self) -> Optional[Path]:
        value = self.preferences.get(WAR_SRC_DIR_KEY)
        return Path(value) if value else None

    def set_war_src_dir_is_output(self, is_output: bool) -> None:
        self.preferences.put_boolean(WAR_SRC_DIR_IS_OUTPUT_KEY, is_output)

    def get_war_src_dir_is_output(self) -> bool:
        return self.preferences.get_boolean(WAR_SRC_DIR_IS_OUTPUT_KEY, True)

    def set_last_used_war_out_location(self, location: Path) -> None:
        self.preferences.put(LAST_USED_WAR_OUT_DIR_KEY, str(location))

    def get_last_used_war_out_location(self) -> Optional[Path]:
        value = self.preferences.get(LAST_USED_WAR_OUT_DIR_KEY)
        return Path(value) if value else None

    def flush(self) -> None:
        self.preferences.flush()


__all__ = [
    "EclipseProjectFile",
    "GDT_CORE_PREFERENCE_NODE",
    "GWT_NATURE_ID",
    "LAST_USED_WAR_OUT_DIR_KEY",
    "ProjectPreferences",
    "WAR_SRC_DIR_IS_OUTPUT_KEY",
    "WAR_SRC_DIR_KEY",
    "WebAppProjectProperties",
]
