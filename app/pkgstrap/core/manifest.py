"""Package manifest registry patching.

This module registers a scoped package registry in the host project's
JSON package manifest. The document is parsed and validated with Pydantic
to decide what is missing; the change itself is spliced into the original
text so every byte outside the insertion point is kept. Nothing is written
when the registry and all requested scopes are already present.
"""

import json
import logging
import os
import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from pydantic import TypeAdapter, ValidationError

from pkgstrap.models.registry import ScopedRegistry

logger = logging.getLogger(__name__)

SCOPED_REGISTRIES_KEY = "scopedRegistries"
DEPENDENCIES_KEY = "dependencies"
SCOPES_KEY = "scopes"
DEFAULT_INDENT = 2

_REGISTRIES_ADAPTER = TypeAdapter(list[ScopedRegistry])
_INDENT_RE = re.compile(r"^\{\s*?\n([ \t]+)\S", re.MULTILINE)
_DECODER = json.JSONDecoder()
_WHITESPACE = " \t\n\r"


class ManifestError(Exception):
    """Base exception for manifest-related errors."""


class ManifestNotFoundError(ManifestError):
    """Raised when manifest file is not found."""


class ManifestParseError(ManifestError):
    """Raised when manifest file cannot be parsed."""


class PatchResult(Enum):
    """Outcome of an ensure_registry call."""

    UNCHANGED = "unchanged"
    PATCHED = "patched"


def _detect_indent(text: str) -> str:
    """Detect the indentation unit of a JSON document.

    Returns:
        The unit as a string: spaces, a tab, or DEFAULT_INDENT spaces.
    """
    match = _INDENT_RE.search(text)
    if match is None:
        return " " * DEFAULT_INDENT
    unit = match.group(1)
    if unit.startswith("\t"):
        return "\t"
    return unit


@dataclass(frozen=True, slots=True)
class _Element:
    """Location of one object member or array item in the manifest text.

    Attributes:
        lead: Offset just past the preceding ``{``, ``[`` or ``,``.
        start: Offset of the member key, or of the item value.
        value_start: Offset of the value.
        end: Offset just past the value.
        key: Member key; None for array items.
    """

    lead: int
    start: int
    value_start: int
    end: int
    key: str | None = None


def _skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in _WHITESPACE:
        pos += 1
    return pos


def _scan_container(text: str, open_pos: int) -> tuple[list[_Element], int]:
    """Locate the members or items of the object or array opened at ``open_pos``.

    The text must already be known to be valid JSON.

    Returns:
        The elements in order and the offset of the closing bracket.
    """
    is_object = text[open_pos] == "{"
    closing = "}" if is_object else "]"
    elements: list[_Element] = []
    lead = open_pos + 1
    pos = _skip_whitespace(text, lead)
    if text[pos] == closing:
        return elements, pos

    while True:
        start = pos
        key: str | None = None
        if is_object:
            key, pos = _DECODER.raw_decode(text, pos)
            pos = _skip_whitespace(text, pos) + 1
            pos = _skip_whitespace(text, pos)
        value_start = pos
        _, end = _DECODER.raw_decode(text, pos)
        elements.append(_Element(lead, start, value_start, end, key))
        pos = _skip_whitespace(text, end)
        if text[pos] == closing:
            return elements, pos
        lead = pos + 1
        pos = _skip_whitespace(text, lead)


def _member(elements: list[_Element], key: str) -> _Element | None:
    return next((element for element in reversed(elements) if element.key == key), None)


def _nested_base(whitespace: str) -> str | None:
    """Indentation of the line an element starts on, or None for inline layout."""
    if "\n" not in whitespace:
        return None
    return whitespace[whitespace.rindex("\n") + 1 :]


def _line_indent(text: str, pos: int) -> str:
    line_start = text.rfind("\n", 0, pos) + 1
    return text[line_start:_skip_whitespace(text, line_start)]


def _render(value: Any, unit: str, base: str | None) -> str:
    """Serialize a value inline, or block-indented below ``base``."""
    if base is None:
        return json.dumps(value, ensure_ascii=False)
    return json.dumps(value, indent=unit, ensure_ascii=False).replace("\n", "\n" + base)


def _splice(text: str, pos: int, insertion: str, end: int | None = None) -> str:
    return text[:pos] + insertion + text[pos if end is None else end :]


def _append_items(text: str, array_pos: int, values: list[Any], unit: str) -> str:
    """Append values to the array opened at ``array_pos``, following its layout.

    Items go after the last existing item with the same separator the
    array already uses; a lone inline item gets a single space. An empty
    array is filled block-style when the document spans several lines,
    inline otherwise.
    """
    items, close = _scan_container(text, array_pos)
    if items:
        last = items[-1]
        separator = text[last.lead : last.start]
        if len(items) == 1 and "\n" not in separator:
            separator = " "
        base = _nested_base(separator)
        insertion = "".join(f",{separator}{_render(value, unit, base)}" for value in values)
        return _splice(text, last.end, insertion)

    base = _line_indent(text, array_pos) if "\n" in text.strip() else None
    return _splice(text, array_pos, _render(values, unit, base), close + 1)


def _insert_member(
    text: str, object_pos: int, key: str, value: Any, unit: str, before: str | None = None
) -> str:
    """Insert a member into the object opened at ``object_pos``.

    The member goes ahead of ``before`` when that key exists, otherwise
    first, reusing the separator of the member it displaces.
    """
    members, close = _scan_container(text, object_pos)
    if not members:
        base = _line_indent(text, object_pos) if "\n" in text.strip() else None
        if base is None:
            rendered = f"{json.dumps(key)}: {_render(value, unit, None)}"
            return _splice(text, object_pos + 1, rendered)
        inner = base + unit
        rendered = f"\n{inner}{json.dumps(key)}: {_render(value, unit, inner)}\n{base}"
        return _splice(text, object_pos + 1, rendered, close)

    anchor = _member(members, before) if before is not None else None
    if anchor is None:
        anchor = members[0]
    separator = text[anchor.lead : anchor.start]
    base = _nested_base(separator)
    rendered = f"{json.dumps(key)}: {_render(value, unit, base)},{separator}"
    return _splice(text, anchor.start, rendered)


class ManifestRegistryPatcher:
    """Idempotently registers a scoped registry in a package manifest.

    Only ``scopedRegistries`` is ever touched: a new registry entry may be
    added and scopes may be appended to an existing entry. Existing scopes
    are never removed or reordered.

    Attributes:
        manifest_path: Location of the JSON manifest document.
        registry_name: Name written into newly created registry entries.
    """

    def __init__(self, manifest_path: Path, registry_name: str) -> None:
        self._manifest_path = manifest_path
        self._registry_name = registry_name

    @property
    def manifest_path(self) -> Path:
        """Location of the JSON manifest document."""
        return self._manifest_path

    def _read(self) -> tuple[str, dict[str, Any]]:
        """Read and parse the manifest.

        Raises:
            ManifestNotFoundError: If the manifest file doesn't exist.
            ManifestParseError: If the document is not a valid manifest.
            ManifestError: If the file cannot be read.
        """
        if not self._manifest_path.exists():
            raise ManifestNotFoundError(f"Manifest not found: {self._manifest_path}")

        try:
            text = self._manifest_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ManifestError(f"Failed to read manifest: {e}") from e

        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise ManifestParseError(f"Invalid JSON syntax: {e}") from e

        if not isinstance(document, dict):
            raise ManifestParseError("Manifest must be a JSON object")

        return text, document

    def _registries(self, document: dict[str, Any]) -> list[ScopedRegistry]:
        raw = document.get(SCOPED_REGISTRIES_KEY, [])
        if not isinstance(raw, list):
            raise ManifestParseError(f"'{SCOPED_REGISTRIES_KEY}' must be a list")
        try:
            return _REGISTRIES_ADAPTER.validate_python(raw)
        except ValidationError as e:
            raise ManifestParseError(f"Invalid '{SCOPED_REGISTRIES_KEY}' entry: {e}") from e

    def read_dependencies(self) -> dict[str, str]:
        """Return the manifest's dependency map.

        Raises:
            ManifestNotFoundError: If the manifest file doesn't exist.
            ManifestParseError: If the document is not a valid manifest.
        """
        _, document = self._read()
        dependencies = document.get(DEPENDENCIES_KEY, {})
        if not isinstance(dependencies, dict):
            raise ManifestParseError(f"'{DEPENDENCIES_KEY}' must be an object")
        return {str(name): str(version) for name, version in dependencies.items()}

    def ensure_registry(self, registry_url: str, scopes: Iterable[str]) -> PatchResult:
        """Ensure the registry exists and declares every scope.

        Args:
            registry_url: Base URL of the scoped registry.
            scopes: Scopes the registry must serve.

        Returns:
            PatchResult.PATCHED if the manifest was rewritten,
            PatchResult.UNCHANGED otherwise.

        Raises:
            ManifestNotFoundError: If the manifest file doesn't exist.
            ManifestParseError: If the document is not a valid manifest.
            ManifestError: If the manifest cannot be read or written.
        """
        wanted = list(dict.fromkeys(scope for scope in scopes if scope))
        text, document = self._read()
        registries = self._registries(document)

        if not wanted:
            return PatchResult.UNCHANGED

        unit = _detect_indent(text)
        root_pos = _skip_whitespace(text, 0)
        root_members, _ = _scan_container(text, root_pos)
        registries_member = _member(root_members, SCOPED_REGISTRIES_KEY)

        for position, registry in enumerate(registries):
            if not registry.matches_url(registry_url):
                continue
            missing = registry.missing_scopes(wanted)
            if not missing:
                logger.debug("Registry %s already declares all scopes", registry_url)
                return PatchResult.UNCHANGED
            assert registries_member is not None
            items, _ = _scan_container(text, registries_member.value_start)
            entry_pos = items[position].value_start
            entry_members, _ = _scan_container(text, entry_pos)
            scopes_member = _member(entry_members, SCOPES_KEY)
            if scopes_member is None:
                patched = _insert_member(text, entry_pos, SCOPES_KEY, missing, unit)
            else:
                patched = _append_items(text, scopes_member.value_start, missing, unit)
            logger.info("Adding scopes to registry %s: %s", registry_url, ", ".join(missing))
            self._write(patched)
            return PatchResult.PATCHED

        entry = ScopedRegistry(name=self._registry_name, url=registry_url, scopes=wanted)
        if registries_member is None:
            patched = _insert_member(
                text,
                root_pos,
                SCOPED_REGISTRIES_KEY,
                [entry.model_dump()],
                unit,
                before=DEPENDENCIES_KEY,
            )
        else:
            patched = _append_items(text, registries_member.value_start, [entry.model_dump()], unit)
        logger.info(
            "Registering scoped registry %s (%s) with scopes: %s",
            self._registry_name,
            registry_url,
            ", ".join(wanted),
        )
        self._write(patched)
        return PatchResult.PATCHED

    def _write(self, content: str) -> None:
        """Atomically replace the manifest with ``content``.

        Raises:
            ManifestError: If the file cannot be written.
        """
        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._manifest_path.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                f.write(content)
            os.replace(str(tmp_path), str(self._manifest_path))
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise ManifestError(f"Failed to write manifest: {e}") from e
