"""Type-checking engine contracts and the built-in import checker."""

from .base import (
    Diagnostic,
    DiagnosticCategory,
    EngineFactory,
    LanguageServiceHost,
    MessageChain,
    ScriptSnapshot,
    TypeCheckEngine,
)
from .imports import ImportCheckEngine
from .lexical import (
    BraceScan,
    LexicalRules,
    SpecifierSite,
    extract_specifiers,
    mask_comments_and_strings,
    scan_braces,
)

__all__ = [
    "BraceScan",
    "Diagnostic",
    "DiagnosticCategory",
    "EngineFactory",
    "ImportCheckEngine",
    "LanguageServiceHost",
    "LexicalRules",
    "MessageChain",
    "ScriptSnapshot",
    "SpecifierSite",
    "TypeCheckEngine",
    "extract_specifiers",
    "mask_comments_and_strings",
    "scan_braces",
]
