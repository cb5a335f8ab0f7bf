"""
Loading chapter and footnote documents into trees.

Documents come either from a directory of extracted ``partNNNN.html`` files or
straight out of a ``.epub``. Either way the body is sanitized against an
allow-list, re-parsed, and normalized before the resolver sees it.
"""

import os
import posixpath

import bleach
from bs4 import BeautifulSoup
from ebooklib import ITEM_DOCUMENT, epub

from .collector import discover_footnote_file
from .normalizer import normalize
from .reporting import quiet

# --- SECURITY: HTML Sanitization ---

ALLOWED_TAGS = [
    'p', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'blockquote', 'pre', 'code',
    'a', 'em', 'strong', 'i', 'b', 'u', 'sub', 'sup', 'span', 'aside',
    'ul', 'ol', 'li', 'br', 'hr', 'img', 'table', 'thead', 'tbody',
    'tr', 'th', 'td', 'figure', 'figcaption', 'cite', 'q', 'abbr', 'mark',
    'section', 'article', 'header', 'footer', 'div'
]

ALLOWED_ATTRS = {
    'a': ['href', 'title', 'id', 'class'],
    'img': ['src', 'alt', 'title'],
    'td': ['colspan', 'rowspan'],
    'th': ['colspan', 'rowspan'],
    '*': ['id', 'class', 'epub:type', 'role']
}

DROPPED_TAGS = ['head', 'script', 'style']

# ebooklib only types application/xhtml+xml items as documents
HTML_MEDIA_TYPES = ['application/xhtml+xml', 'text/html']


class DocumentPair:
    """A chapter tree and its footnote container tree, with their file names."""

    def __init__(self, chapter, footnotes, chapter_file, footnote_file):
        self.chapter = chapter
        self.footnotes = footnotes
        self.chapter_file = chapter_file
        self.footnote_file = footnote_file


def sanitize_html(html_string):
    """Sanitize HTML against the allow-list, stripping anything else."""
    return bleach.clean(
        html_string,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRS,
        strip=True
    )


def is_html_item(item):
    """True for EPUB manifest items holding chapter markup."""
    return item.get_type() == ITEM_DOCUMENT or item.media_type in HTML_MEDIA_TYPES


def parse_document(html, log=quiet):
    """Parse raw markup into a sanitized, normalized tree of its body."""
    soup = BeautifulSoup(html, 'html.parser')
    for tag in soup.find_all(DROPPED_TAGS):
        tag.decompose()

    content = soup.body if soup.body else soup
    normalize(content, log)

    tree = BeautifulSoup(sanitize_html(content.decode_contents()), 'html.parser')
    log(f"  Parsed {len(html)} chars -> {len(tree.find_all(True))} elements")
    return tree


def load_document(path, log=quiet):
    """Read and parse one UTF-8 document."""
    log(f"Loading {path}")
    with open(path, 'r', encoding='utf-8') as f:
        return parse_document(f.read(), log)


def load_pair(input_dir, chapter_file, footnote_file=None, log=quiet):
    """
    Load a chapter and its footnote container from a directory.

    When footnote_file is not given it is discovered from the chapter's links.
    """
    chapter = load_document(os.path.join(input_dir, chapter_file), log)
    if footnote_file is None:
        footnote_file = discover_footnote_file(chapter, chapter_file)
        log(f"Footnote container: {footnote_file}")
    footnotes = load_document(os.path.join(input_dir, footnote_file), log)
    return DocumentPair(chapter, footnotes, chapter_file, footnote_file)


def load_pair_from_epub(epub_path, chapter_file, footnote_file=None, log=quiet):
    """
    Load a chapter and its footnote container straight from a .epub file.

    Items are matched by basename, so ``part0014.html`` finds
    ``text/part0014.html`` as well.
    """
    book = epub.read_epub(epub_path)
    log(f"Title: {book.get_metadata('DC', 'title')}")

    documents = {}
    for item in book.get_items():
        if is_html_item(item):
            documents[posixpath.basename(item.get_name())] = item

    def read_item(name):
        if name not in documents:
            raise FileNotFoundError(f"{name} not found in {epub_path}")
        log(f"Loading {name} from {epub_path}")
        return parse_document(documents[name].get_content().decode('utf-8'), log)

    chapter = read_item(chapter_file)
    if footnote_file is None:
        footnote_file = discover_footnote_file(chapter, chapter_file)
        log(f"Footnote container: {footnote_file}")
    footnotes = read_item(footnote_file)
    return DocumentPair(chapter, footnotes, chapter_file, footnote_file)
