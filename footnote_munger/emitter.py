"""Markdown emission for resolved trees, with footnote syntax support."""

import re

import markdown
from markdownify import ATX, MarkdownConverter

from .tree import IDENTIFIER_ATTR


class FootnoteMarkdownConverter(MarkdownConverter):
    """
    markdownify converter that understands the resolver's footnote tags.

    ``<fnref>`` renders as ``[^id]`` and ``<fndef>`` as a ``[^id]: content``
    block. Everything else is plain markdownify.
    """

    def __init__(self, **options):
        options.setdefault('heading_style', ATX)
        super().__init__(**options)

    # markdownify passes either convert_as_inline or parent_tags here,
    # depending on its version
    def convert_fnref(self, el, text, *args, **kwargs):
        return f'[^{el[IDENTIFIER_ATTR]}]'

    def convert_fndef(self, el, text, *args, **kwargs):
        return f'\n\n[^{el[IDENTIFIER_ATTR]}]: {text.strip()}\n\n'


def tidy_markdown(text):
    """Ensure a single blank line between blocks."""
    return re.sub(r'\n\s*\n+', '\n\n', text).strip()


def emit_markdown(tree, **options):
    """Render one tree as Markdown."""
    return tidy_markdown(FootnoteMarkdownConverter(**options).convert_soup(tree))


def emit_document(chapter_tree, footnote_tree, **options):
    """Render the chapter followed by its footnote container as one document."""
    parts = [emit_markdown(chapter_tree, **options), emit_markdown(footnote_tree, **options)]
    return '\n\n'.join(part for part in parts if part) + '\n'


def render_preview(markdown_text):
    """Render Markdown to HTML with footnotes, for eyeballing the result."""
    return markdown.markdown(markdown_text, extensions=['footnotes'])
