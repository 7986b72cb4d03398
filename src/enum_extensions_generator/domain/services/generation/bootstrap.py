#!/usr/bin/env python3

"""The marker module injected into every analysed program.

Injecting it lets user code reference the markers without depending on this
package; the command line tool also writes it next to the generated modules.
"""

from ...models import MARKER_MODULE, ProgramSnapshot, SourceFile

MARKER_MODULE_PATH = f"{MARKER_MODULE}.py"

MARKER_MODULE_SOURCE = '''\
# <auto-generated>
#   Generated by enum-extensions-generator.
#   Changes to this file are lost when the code is regenerated.
# </auto-generated>
"""Markers read by enum-extensions-generator."""

__all__ = ["EnumExtensions", "HasFlags"]


class EnumExtensions:
    """Request generated extension helpers for the decorated enum.

    Use bare, ``@EnumExtensions``, or with options,
    ``@EnumExtensions(ExtensionClassName="...", ExtensionClassNamespace="...")``.
    """

    def __new__(cls, target=None, **options):
        if target is not None:
            return target
        return super().__new__(cls)

    def __init__(self, target=None, *, ExtensionClassName=None, ExtensionClassNamespace=None):
        self.ExtensionClassName = ExtensionClassName
        self.ExtensionClassNamespace = ExtensionClassNamespace

    def __call__(self, target):
        return target


class HasFlags:
    """Mark an enum whose values combine as independent bits."""

    def __new__(cls, target=None):
        if target is not None:
            return target
        return super().__new__(cls)

    def __call__(self, target):
        return target
'''


def with_marker_module(snapshot: ProgramSnapshot) -> ProgramSnapshot:
    """Add the marker module to a snapshot unless the program already has one.

    Args:
        snapshot: Program files supplied by the caller

    Returns:
        Snapshot containing a module named ``enum_extensions``
    """
    if snapshot.has_module(MARKER_MODULE):
        return snapshot
    return snapshot.with_file(
        SourceFile(path=MARKER_MODULE_PATH, module=MARKER_MODULE, text=MARKER_MODULE_SOURCE)
    )
