"""Footnote resolution engine: runs every stage over a chapter/footnote pair."""

from .allocator import ResolutionContext
from .assembly import assemble_definitions
from .classifier import AnchorLinkClassifier, verify_resolution
from .collector import collect_referenced_files
from .reporting import quiet


def resolve_footnotes(chapter_tree, footnote_tree, chapter_file, footnote_file, log=quiet):
    """
    Rewrite both trees in place so every footnote link becomes ``[^id]`` or
    ``[^id]: ...``.

    The chapter is classified to completion before the footnote container is
    touched. Any error aborts the run; the trees are then in an unspecified,
    partially rewritten state and must not be emitted.

    Returns the ResolutionContext that was used, for inspection.
    """
    log("--- Checking referenced files ---")
    chapter_refs = collect_referenced_files(chapter_tree, False, chapter_file, footnote_file)
    footnote_refs = collect_referenced_files(footnote_tree, True, chapter_file, footnote_file)
    log(f"  {chapter_file} -> {', '.join(sorted(chapter_refs)) or 'nothing'}")
    log(f"  {footnote_file} -> {', '.join(sorted(footnote_refs)) or 'nothing'}")

    context = ResolutionContext()
    classifier = AnchorLinkClassifier(context, chapter_file, footnote_file, log)

    log("--- Classifying chapter ---")
    classifier.classify_chapter(chapter_tree)

    log("--- Classifying footnotes ---")
    classifier.classify_footnotes(footnote_tree)

    log("--- Assembling footnote definitions ---")
    assembled = assemble_definitions(footnote_tree, log)

    log("--- Verifying resolution ---")
    defined = verify_resolution(context, chapter_tree, footnote_tree, log)

    log(f"Total references: {classifier.stats['references']}")
    log(f"Total definitions: {assembled}")
    log(f"Identifiers in use: {len(context.used_identifiers)} "
        f"({len(defined)} defined)")
    return context
