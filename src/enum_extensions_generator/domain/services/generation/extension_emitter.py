#!/usr/bin/env python3

"""Renders extension modules from description records.

The pipeline only needs an object with ``emit(record) -> str``; this module
provides the default implementation producing a Python module with one
extension class per record.
"""

from typing import Protocol

from ....infrastructure.logging import get_logger
from ...models import EnumToGenerate

logger = get_logger(__name__)

GENERATOR_NAME = "enum-extensions-generator"


class Emitter(Protocol):
    """Turns a description record into source text."""

    def emit(self, record: EnumToGenerate) -> str:
        """Render the output for one record."""
        ...


class ExtensionEmitter:
    """Generates allocation-light helper classes for enums.

    The generated class offers:
    - ``LENGTH``: number of members (aliases included)
    - ``to_string_fast``: member or raw value to name
    - ``is_defined`` / ``is_defined_name``: membership tests, a range check
      when values are contiguous
    - ``try_parse``: name to member, optionally ignoring case
    - ``get_values`` / ``get_names``: members and names in declaration order
    - ``has_flag_fast``: bit test, for enums marked with ``HasFlags``
    """

    def emit(self, record: EnumToGenerate) -> str:
        """Render the extension module for a record.

        Args:
            record: Description record

        Returns:
            Python source text
        """
        cls = record.name
        exported = f'["{cls}"]' if record.is_public else "[]"
        lines = [
            "# <auto-generated>",
            f"#   Generated by {GENERATOR_NAME} from {record.fully_qualified_name}.",
            "#   Changes to this file are lost when the code is regenerated.",
            "# </auto-generated>",
            f'"""Extension helpers for {record.fully_qualified_name}."""',
            "",
            "from pkgutil import resolve_name",
            "",
            f"__all__ = {exported}",
            "",
            f'_ENUM = resolve_name("{record.fully_qualified_name}")',
            "",
            "",
            f"class {cls}:",
            f'    """Fast name and value conversions for ``{record.fully_qualified_name}``."""',
            "",
            f"    LENGTH = {len(record.members)}",
            f"    UNDERLYING_TYPE = {record.underlying_type!r}",
            "",
        ]
        lines.extend(self._tables(record))
        lines.extend(self._methods(record))
        logger.debug(f"Rendered {cls} ({len(record.members)} members)")
        return "\n".join(lines) + "\n"

    @staticmethod
    def _tables(record: EnumToGenerate) -> list[str]:
        names_by_value: dict[int | str, str] = {}
        for member in record.members:
            names_by_value.setdefault(member.value, member.name)

        lines = ["    _NAMES = {"]
        lines.extend(f"        {value!r}: {name!r}," for value, name in names_by_value.items())
        lines.append("    }")
        lines.append("    _VALUES = {")
        lines.extend(f"        {m.name!r}: {m.value!r}," for m in record.members)
        lines.append("    }")
        lines.append("    _VALUES_IGNORE_CASE = {")
        folded: dict[str, int | str] = {}
        for member in record.members:
            folded.setdefault(member.name.casefold(), member.value)
        lines.extend(f"        {name!r}: {value!r}," for name, value in folded.items())
        lines.append("    }")
        lines.append("")
        return lines

    @staticmethod
    def _methods(record: EnumToGenerate) -> list[str]:
        cls = record.name
        lines = [
            "    @staticmethod",
            "    def to_string_fast(value):",
            '        """Name of a member or raw value; str() of the value when undefined."""',
            '        raw = getattr(value, "value", value)',
            f"        return {cls}._NAMES.get(raw, str(raw))",
            "",
            "    @staticmethod",
            "    def is_defined(value):",
            '        """Check if a member or raw value is declared by the enum."""',
            '        raw = getattr(value, "value", value)',
        ]
        if record.is_contiguous:
            values = [int(m.value) for m in record.members]
            lines.append(
                f"        return isinstance(raw, int) and {min(values)} <= raw <= {max(values)}"
            )
        else:
            lines.append(f"        return raw in {cls}._NAMES")
        lines.extend(
            [
                "",
                "    @staticmethod",
                "    def is_defined_name(name, ignore_case=False):",
                '        """Check if a member name is declared by the enum."""',
                "        if ignore_case:",
                f"            return name.casefold() in {cls}._VALUES_IGNORE_CASE",
                f"        return name in {cls}._VALUES",
                "",
                "    @staticmethod",
                "    def try_parse(name, ignore_case=False):",
                '        """Member with the given name, or None."""',
                "        if ignore_case:",
                f"            raw = {cls}._VALUES_IGNORE_CASE.get(name.casefold())",
                "        else:",
                f"            raw = {cls}._VALUES.get(name)",
                "        return None if raw is None else _ENUM(raw)",
                "",
                "    @staticmethod",
                "    def get_values():",
                '        """Members in declaration order, aliases included."""',
                f"        return [_ENUM(raw) for raw in {cls}._VALUES.values()]",
                "",
                "    @staticmethod",
                "    def get_names():",
                '        """Member names in declaration order."""',
                f"        return list({cls}._VALUES)",
            ]
        )
        if record.has_flags:
            lines.extend(
                [
                    "",
                    "    @staticmethod",
                    "    def has_flag_fast(value, flag):",
                    '        """Check if every bit of ``flag`` is set in ``value``."""',
                    '        raw = getattr(value, "value", value)',
                    '        bits = getattr(flag, "value", flag)',
                    "        return (raw & bits) == bits",
                ]
            )
        return lines
