"""
Errors raised when a chapter/footnote pair does not match the anchor and link
pairing convention the resolver relies on.

None of these are recoverable inside the engine. They propagate to the caller
unchanged and abort the whole run.
"""


class FootnoteError(ValueError):
    """Base class for every input-shape violation."""


class MalformedLinkError(FootnoteError):
    """A link has no anchor target (``file.html`` or ``file.html#``) or no label."""

    def __init__(self, href, reason="missing anchor target"):
        self.href = href
        self.reason = reason
        super().__init__(f"Malformed link {href!r}: {reason}")


class ExternalReferenceError(FootnoteError):
    """A link points at a file that is neither the chapter nor its footnotes."""

    def __init__(self, href, known_files):
        self.href = href
        self.known_files = tuple(known_files)
        super().__init__(
            f"Link {href!r} points outside the chapter/footnote pair "
            f"(known files: {', '.join(self.known_files) or 'none'})"
        )


class TooManyReferencedFilesError(FootnoteError):
    """A document references more distinct files than its role allows."""

    def __init__(self, files, limit, document="chapter"):
        self.files = sorted(files)
        self.limit = limit
        self.document = document
        super().__init__(
            f"More than {limit} referenced file(s) found in {document}:\n"
            f"{', '.join(self.files)}"
        )


class ConflictingNumericIdentifierError(FootnoteError):
    """A numeric footnote label was requested a second time."""

    def __init__(self, label):
        self.label = label
        super().__init__(
            f"Numeric footnote label {label!r} is already in use; "
            "numeric labels are never renamed"
        )


class UnexpectedSiblingStructureError(FootnoteError):
    """An anchor marker is not immediately followed by the link it pairs with."""

    def __init__(self, anchor_id, found=None):
        self.anchor_id = anchor_id
        self.found = found
        detail = f"found <{found}>" if found else "found nothing"
        super().__init__(
            f"Anchor marker {anchor_id!r} is referenced but is not followed "
            f"by a link ({detail})"
        )


class UnresolvedAnchorError(FootnoteError):
    """A footnote definition was produced that no reference ever cites."""

    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(
            f"Footnote definition [^{identifier}] is not cited by any reference"
        )


class DuplicateDefinitionError(FootnoteError):
    """Two footnote definitions ended up with the same identifier."""

    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(f"Footnote [^{identifier}] is defined more than once")


class PassOrderError(FootnoteError, RuntimeError):
    """The chapter and footnote passes were run out of order."""
