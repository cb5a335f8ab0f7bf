"""
Footnote container assembly.

After classification a definition is an empty ``<fndef>`` sitting where the
back-link used to be, with the footnote text trailing after it:

    <p><fndef data-footnote-id="4"></fndef>. Footnote
    text</p>

This moves that text into the definition, drops the stray separator left over
from the source numbering, and lifts the definition out of its paragraph.
Follow-on paragraphs of a multi-paragraph footnote are left as sibling blocks;
indenting them under the definition is a manual step.
"""

import re

from bs4 import NavigableString

from .reporting import quiet
from .tree import DEFINITION_TAG, footnote_identifier, is_blank, is_definition

SEPARATOR_PATTERN = re.compile(r'^\s*[.:]\s*')
LINE_BREAK_PATTERN = re.compile(r'\s*\n\s*')


def assemble_definitions(footnote_tree, log=quiet):
    """Fill every definition in footnote_tree with the text that follows it."""
    definitions = footnote_tree.find_all(DEFINITION_TAG)
    for definition in definitions:
        parent = definition.parent
        _absorb_following_siblings(definition)
        _strip_leading_separator(definition)
        _normalize_line_breaks(definition)
        if parent is not None and parent.name == 'p' and _is_sole_child(definition, parent):
            parent.unwrap()
        log(f"    Assembled [^{footnote_identifier(definition)}]: "
            f"{definition.get_text()[:50]!r}")
    return len(definitions)


def _absorb_following_siblings(definition):
    body = []
    for sibling in list(definition.next_siblings):
        if is_definition(sibling):
            break
        body.append(sibling.extract())
    for node in body:
        definition.append(node)


def _strip_leading_separator(definition):
    _strip_leading_whitespace(definition)
    if not definition.contents or not isinstance(definition.contents[0], NavigableString):
        return
    first = definition.contents[0]
    remainder = SEPARATOR_PATTERN.sub('', str(first), count=1)
    if remainder:
        first.replace_with(NavigableString(remainder))
    else:
        first.extract()
        _strip_leading_whitespace(definition)


def _strip_leading_whitespace(definition):
    while definition.contents and isinstance(definition.contents[0], NavigableString):
        first = definition.contents[0]
        stripped = str(first).lstrip()
        if stripped:
            first.replace_with(NavigableString(stripped))
            return
        first.extract()


def _normalize_line_breaks(definition):
    for br in definition.find_all('br'):
        br.replace_with(NavigableString('\n'))
    definition.smooth()
    for text in list(definition.find_all(string=True)):
        normalized = LINE_BREAK_PATTERN.sub(' ', str(text))
        if normalized != str(text):
            text.replace_with(NavigableString(normalized))


def _is_sole_child(node, parent):
    return all(child is node or is_blank(child) for child in parent.contents)
