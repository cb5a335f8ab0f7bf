"""
Footnote identifier allocation.

Markdown footnote labels share one namespace per document, but the chapter
and its footnote container were numbered independently, and some footnotes
are marked with ``*``, which cannot be a label at all. The allocator hands out
identifiers that are unique across the whole run:

- ``*`` becomes ``ast1``, then ``ast2``, ``ast3`` ... on collision
- any other free label is kept verbatim
- a colliding numeric label is an error, numbers are the author's
- a colliding non-numeric label is repeated (``a``, ``aa``, ``aaa`` ...)
"""

from .errors import ConflictingNumericIdentifierError

ASTERISK = '*'
SENTINEL_LABEL = 'ast'


def is_numeric_label(label):
    try:
        int(label)
    except ValueError:
        return False
    return True


class IdentifierAllocator:
    """Deterministically turns desired labels into unused identifiers."""

    def __init__(self, used_identifiers):
        self.used_identifiers = used_identifiers

    def allocate(self, desired_label) -> str:
        """Register and return the identifier to use for desired_label."""
        is_sentinel = desired_label == ASTERISK
        label = f'{SENTINEL_LABEL}1' if is_sentinel else desired_label

        if label not in self.used_identifiers:
            return self._register(label)

        if is_numeric_label(label):
            raise ConflictingNumericIdentifierError(label)

        if is_sentinel:
            suffix = 2
            while f'{SENTINEL_LABEL}{suffix}' in self.used_identifiers:
                suffix += 1
            return self._register(f'{SENTINEL_LABEL}{suffix}')

        candidate = label + label
        while candidate in self.used_identifiers:
            candidate += label
        return self._register(candidate)

    def _register(self, identifier):
        self.used_identifiers.add(identifier)
        return identifier


class ResolutionContext:
    """
    Identifier registry shared by the chapter pass and the footnote pass.

    Build a new one for every run; it must not outlive the pair of documents
    it was built for.
    """

    def __init__(self):
        self.used_identifiers = set()
        self.target_to_identifier = {}
        self.allocator = IdentifierAllocator(self.used_identifiers)

    def identifier_for(self, target_id):
        return self.target_to_identifier.get(target_id)

    def is_resolved(self, target_id):
        return target_id in self.target_to_identifier

    def record(self, target_id, identifier):
        self.target_to_identifier[target_id] = identifier

    def resolve(self, target_id, label):
        """Return the identifier for target_id, allocating one from label on first sight."""
        identifier = self.target_to_identifier.get(target_id)
        if identifier is None:
            identifier = self.allocator.allocate(label)
            self.record(target_id, identifier)
        return identifier
