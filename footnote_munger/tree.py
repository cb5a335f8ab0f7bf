"""
Node shapes of the document trees the resolver works on.

Trees are BeautifulSoup objects. Links are ``<a href="file#anchor">``, anchor
markers are empty ``<a id="...">`` tags, and the resolver replaces them with
two tags of its own that the emitter knows how to render:

    <fnref data-footnote-id="4"></fnref>     ->  [^4]
    <fndef data-footnote-id="4">...</fndef>  ->  [^4]: ...
"""

import posixpath
import re
from urllib.parse import unquote

from bs4 import NavigableString, Tag

REFERENCE_TAG = 'fnref'
DEFINITION_TAG = 'fndef'
IDENTIFIER_ATTR = 'data-footnote-id'

ABSOLUTE_URL_PATTERN = re.compile(r'^([a-zA-Z][a-zA-Z0-9+.-]*:|//)')


def is_absolute_url(href):
    """True for web and other scheme URLs, which are never footnote links."""
    return bool(ABSOLUTE_URL_PATTERN.match(href))


def is_link(node):
    """Check if node is an ``<a>`` pointing at a document anchor."""
    if not isinstance(node, Tag) or node.name != 'a':
        return False
    href = node.get('href')
    return bool(href) and not is_absolute_url(href)


def is_anchor_marker(node):
    """Check if node is a contentless ``<a>`` that only carries an id."""
    if not isinstance(node, Tag) or node.name != 'a':
        return False
    if node.get('href') is not None or not node.get('id'):
        return False
    return not node.find(True) and not node.get_text(strip=True)


def is_reference(node):
    return isinstance(node, Tag) and node.name == REFERENCE_TAG


def is_definition(node):
    return isinstance(node, Tag) and node.name == DEFINITION_TAG


def split_href(href):
    """
    Split ``file#anchor`` into its file and anchor parts.

    The file part is unquoted and reduced to its basename, since Calibre
    writes both ``part0014.html`` and ``../Text/part0014.html``. Either part
    may come back empty.
    """
    file_part, _, anchor = href.partition('#')
    return posixpath.basename(unquote(file_part)), anchor


def link_label(link):
    return link.get_text(strip=True)


def is_blank(node):
    return isinstance(node, NavigableString) and not node.strip()


def previous_significant_sibling(node):
    """Return the nearest preceding sibling, skipping whitespace-only text."""
    sibling = node.previous_sibling
    while sibling is not None and is_blank(sibling):
        sibling = sibling.previous_sibling
    return sibling


def next_significant_sibling(node):
    """Return the nearest following sibling, skipping whitespace-only text."""
    sibling = node.next_sibling
    while sibling is not None and is_blank(sibling):
        sibling = sibling.next_sibling
    return sibling


def describe(node):
    """Short name for a node, used in error messages."""
    if node is None:
        return None
    if isinstance(node, Tag):
        return node.name
    return 'text'


def new_reference(soup, identifier):
    return soup.new_tag(REFERENCE_TAG, attrs={IDENTIFIER_ATTR: identifier})


def new_definition(soup, identifier):
    return soup.new_tag(DEFINITION_TAG, attrs={IDENTIFIER_ATTR: identifier})


def footnote_identifier(node):
    return node.get(IDENTIFIER_ATTR)
