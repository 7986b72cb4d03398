#!/usr/bin/env python3

"""Generation services: marker resolution, extraction and emission."""

from .bootstrap import MARKER_MODULE_PATH, MARKER_MODULE_SOURCE, with_marker_module
from .extension_emitter import Emitter, ExtensionEmitter
from .metadata_extractor import MetadataExtractor
from .semantic_resolver import SemanticResolver

__all__ = [
    "Emitter",
    "ExtensionEmitter",
    "MARKER_MODULE_PATH",
    "MARKER_MODULE_SOURCE",
    "MetadataExtractor",
    "SemanticResolver",
    "with_marker_module",
]
