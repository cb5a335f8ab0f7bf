"""
footnote_munger - Convert e-book chapters and their footnote files to Markdown.

This package provides tools for:
- Loading and normalizing Calibre-style HTML (loader, normalizer)
- Resolving cross-document footnote links (collector, allocator, classifier)
- Emitting Markdown with [^id] footnotes (emitter)
"""

from footnote_munger.allocator import IdentifierAllocator, ResolutionContext
from footnote_munger.assembly import assemble_definitions
from footnote_munger.classifier import AnchorLinkClassifier, verify_resolution
from footnote_munger.collector import collect_referenced_files, discover_footnote_file
from footnote_munger.emitter import emit_document, emit_markdown, render_preview
from footnote_munger.engine import resolve_footnotes
from footnote_munger.errors import (
    ConflictingNumericIdentifierError,
    DuplicateDefinitionError,
    ExternalReferenceError,
    FootnoteError,
    MalformedLinkError,
    PassOrderError,
    TooManyReferencedFilesError,
    UnexpectedSiblingStructureError,
    UnresolvedAnchorError,
)
from footnote_munger.loader import (
    DocumentPair,
    load_document,
    load_pair,
    load_pair_from_epub,
    parse_document,
)

__version__ = "0.1.0"
