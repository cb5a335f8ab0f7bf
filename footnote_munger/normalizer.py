"""
Tag-soup normalization - Transform Pipeline
===========================================

Calibre output "looks right" in a reader but is full of layout-only markup:
blockquotes that are not quotes, spans that only carry a font class, empty
paragraphs used as spacers. Left alone, these end up in the Markdown, and a
span wrapped around an anchor marker hides it from the link right after it.

Each transform:
1. DETECTS whether its pattern exists in this document
2. TRANSFORMS the soup in place if so, and returns a dict of counts

TRANSFORM ORDER MATTERS:
- Comments go first so they never count as content
- Container unwrapping runs before empty-element removal
- Anchors (<a id="...">) are never removed; the classifier needs them
"""

import re
from abc import ABC, abstractmethod

from bs4 import Comment

from .reporting import quiet

CALIBRE_CLASS = re.compile(r'^calibre\d*$')


class TagSoupTransform(ABC):
    """
    Base class for all normalization transforms.

    Transforms should be idempotent - running twice should be safe.
    """

    name = "BaseTransform"
    description = "Base transform class"

    @abstractmethod
    def detect(self, soup) -> bool:
        """Check if this transform should run on this document."""

    @abstractmethod
    def transform(self, soup, log) -> dict:
        """
        Apply the transform to the soup (modified in place).

        Returns:
            Dict with counts of what was changed
        """


class CommentStripper(TagSoupTransform):
    """
    Removes HTML comments.

    Calibre sometimes leaves a comment as the first node of a file, which
    would otherwise survive into the Markdown as raw text.
    """

    name = "CommentStripper"
    description = "Remove HTML comments"

    def detect(self, soup) -> bool:
        return bool(soup.find(string=lambda s: isinstance(s, Comment)))

    def transform(self, soup, log) -> dict:
        comments = soup.find_all(string=lambda s: isinstance(s, Comment))
        for comment in comments:
            comment.extract()
        log(f"  Removed {len(comments)} comments")
        return {'removed': len(comments)}


class CalibreBlockquoteUnwrapper(TagSoupTransform):
    """
    Fixes Calibre's misuse of <blockquote> as a layout container.

    Calibre often wraps every paragraph in <blockquote class="calibreN">,
    which would turn the whole chapter into a Markdown quote.

    Detection: blockquotes with class matching "calibre" + digits
    Transform: unwraps them if they hold a single <p> (or nothing), otherwise
    demotes them to <div>
    """

    name = "CalibreBlockquoteUnwrapper"
    description = "Unwrap Calibre's fake blockquote containers"

    def detect(self, soup) -> bool:
        return bool(soup.find('blockquote', class_=CALIBRE_CLASS))

    def transform(self, soup, log) -> dict:
        blockquotes = soup.find_all('blockquote', class_=CALIBRE_CLASS)
        unwrapped = 0

        for bq in blockquotes:
            children = [c for c in bq.children if getattr(c, 'name', None)]
            if len(children) <= 1 and all(c.name == 'p' for c in children):
                bq.unwrap()
                unwrapped += 1
            else:
                bq.name = 'div'

        log(f"  Unwrapped {unwrapped} of {len(blockquotes)} Calibre-style blockquotes")
        return {'unwrapped': unwrapped, 'demoted': len(blockquotes) - unwrapped}


class SpanUnwrapper(TagSoupTransform):
    """
    Unwraps meaningless spans that only add styling classes.

    Preserves spans with: id, epub:type, role, or semantic classes
    """

    name = "SpanUnwrapper"
    description = "Unwrap meaningless styling-only spans"

    SEMANTIC_CLASSES = ['footnote', 'endnote', 'noteref', 'citation', 'ref']

    def detect(self, soup) -> bool:
        return bool(soup.find('span'))

    def transform(self, soup, log) -> dict:
        unwrapped = 0

        for span in list(soup.find_all('span')):
            classes = span.get('class', [])
            class_str = ' '.join(classes).lower()

            if span.get('id') or span.get('epub:type') or span.get('role'):
                continue
            if any(sc in class_str for sc in self.SEMANTIC_CLASSES):
                continue

            if not classes or all(CALIBRE_CLASS.match(c) for c in classes):
                span.unwrap()
                unwrapped += 1

        log(f"  Unwrapped {unwrapped} styling-only spans")
        return {'unwrapped': unwrapped}


class EmptyElementRemover(TagSoupTransform):
    """
    Removes empty <div> and <p> spacers.

    An element is only removed when it has neither text nor child tags, so a
    paragraph holding nothing but an anchor marker is kept.
    """

    name = "EmptyElementRemover"
    description = "Remove empty divs and spacing paragraphs"

    def detect(self, soup) -> bool:
        return True  # Always run

    def transform(self, soup, log) -> dict:
        removed = 0

        for elem in list(soup.find_all(['div', 'p'])):
            text = elem.get_text(strip=True)
            if text and text != '\xa0':
                continue
            if elem.find(True):
                continue
            elem.decompose()
            removed += 1

        log(f"  Removed {removed} empty elements")
        return {'removed': removed}


# Order matters! Comments first, containers before empties
TRANSFORM_PIPELINE = [
    CommentStripper(),
    CalibreBlockquoteUnwrapper(),
    SpanUnwrapper(),
    EmptyElementRemover(),
]


def normalize(soup, log=quiet, pipeline=None):
    """Run the transform pipeline over soup, returning results by transform name."""
    results = {}
    for transform in pipeline or TRANSFORM_PIPELINE:
        if transform.detect(soup):
            log(f"  [{transform.name}]")
            results[transform.name] = transform.transform(soup, log)
    return results
