"""
Reference collection: check that a document only links where we expect.

A chapter may only point at its footnote container, and the footnote
container may only point at itself and back at the chapter. Anything else
means the pair was not produced the way the classifier assumes, so we refuse
to go on before touching either tree.
"""

from .errors import ExternalReferenceError, MalformedLinkError, TooManyReferencedFilesError
from .tree import is_absolute_url, split_href

CHAPTER_FILE_LIMIT = 1
FOOTNOTE_FILE_LIMIT = 2


def iter_link_targets(tree, own_file):
    """
    Yield ``(href, file, anchor_id)`` for every document link in tree.

    Absolute URLs are skipped. An empty file part means the link points into
    ``own_file``.
    """
    for a_tag in tree.find_all('a', href=True):
        href = a_tag['href']
        if not href or is_absolute_url(href):
            continue
        target_file, anchor_id = split_href(href)
        yield href, target_file or own_file, anchor_id


def collect_referenced_files(tree, is_footnote_container, chapter_file, footnote_file):
    """
    Return the set of distinct files a tree's links point at.

    Raises MalformedLinkError for links without an anchor,
    ExternalReferenceError for links to a third file, and
    TooManyReferencedFilesError when the document references more files than
    its role allows.
    """
    own_file = footnote_file if is_footnote_container else chapter_file
    known_files = (chapter_file, footnote_file)
    limit = FOOTNOTE_FILE_LIMIT if is_footnote_container else CHAPTER_FILE_LIMIT

    referenced = set()
    for href, target_file, anchor_id in iter_link_targets(tree, own_file):
        if not anchor_id:
            raise MalformedLinkError(href)
        if target_file not in known_files:
            raise ExternalReferenceError(href, known_files)
        referenced.add(target_file)

    if len(referenced) > limit:
        document = 'footnote container' if is_footnote_container else 'chapter'
        raise TooManyReferencedFilesError(referenced, limit, document)

    return referenced


def discover_footnote_file(chapter_tree, chapter_file):
    """
    Find the footnote container a chapter points at.

    Self-links are ignored. The chapter must point at exactly one other file.
    """
    referenced = set()
    for href, target_file, anchor_id in iter_link_targets(chapter_tree, chapter_file):
        if not anchor_id:
            raise MalformedLinkError(href)
        if target_file != chapter_file:
            referenced.add(target_file)

    if len(referenced) > CHAPTER_FILE_LIMIT:
        raise TooManyReferencedFilesError(referenced, CHAPTER_FILE_LIMIT, 'chapter')
    if not referenced:
        raise ExternalReferenceError('', (chapter_file,))

    return referenced.pop()
