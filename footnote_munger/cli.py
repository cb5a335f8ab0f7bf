#!/usr/bin/env python3
"""
Command line: turn a Calibre chapter and its footnote file into Markdown.

With no arguments, reads input/part0014.html, finds the footnote file it
links to, and writes cap.md.
"""

import argparse
import os
import sys

from .emitter import emit_document, emit_markdown, render_preview
from .engine import resolve_footnotes
from .errors import FootnoteError
from .loader import load_pair, load_pair_from_epub
from .reporting import DebugLog

INPUT_DIR = "input"
DEFAULT_CHAPTER = "part0014.html"
DEFAULT_OUTPUT = "cap.md"
DEBUG_LOG_NAME = "footnote_munger_debug.txt"
TEMP_SUFFIX = ".part"


class FootnoteMunger:
    """
    Runs one chapter/footnote pair from loading to written Markdown.

    Output files are only written once every stage has succeeded.
    """

    def __init__(self, options, log):
        self.options = options
        self.log = log
        self.pair = None
        self.context = None

    def process(self):
        """Run the full pipeline."""
        self.log("=" * 70)
        self.log("FOOTNOTE MUNGER")
        self.log("=" * 70)

        # Step 1: Load both documents
        self.log("\n--- Loading Documents ---")
        self.pair = self._load()

        # Step 2: Resolve footnotes
        self.log("\n--- Resolving Footnotes ---")
        self.context = resolve_footnotes(
            self.pair.chapter,
            self.pair.footnotes,
            self.pair.chapter_file,
            self.pair.footnote_file,
            self.log
        )

        # Step 3: Emit Markdown
        self.log("\n--- Emitting Markdown ---")
        outputs = self._emit()

        # Step 4: Write output
        self.log("\n--- Writing Output ---")
        self._write(outputs)

        self.log("\nCOMPLETE")
        return outputs

    def _write(self, outputs):
        """Write every output to a temporary file, then move them all into place."""
        staged = {}
        try:
            for path, text in outputs.items():
                temp_path = path + TEMP_SUFFIX
                staged[temp_path] = path
                with open(temp_path, 'w', encoding='utf-8') as f:
                    f.write(text)
        except OSError:
            for temp_path in staged:
                if os.path.exists(temp_path):
                    os.remove(temp_path)
            raise

        for temp_path, path in staged.items():
            os.replace(temp_path, path)
            self.log(f"Output: {path}")

    def _load(self):
        opts = self.options
        if opts.epub:
            return load_pair_from_epub(opts.epub, opts.chapter, opts.footnotes, self.log)
        return load_pair(opts.input_dir, opts.chapter, opts.footnotes, self.log)

    def _emit(self):
        opts = self.options
        outputs = {}
        if opts.footnotes_output:
            outputs[opts.output] = emit_markdown(self.pair.chapter) + '\n'
            outputs[opts.footnotes_output] = emit_markdown(self.pair.footnotes) + '\n'
            combined = outputs[opts.output] + '\n' + outputs[opts.footnotes_output]
        else:
            combined = emit_document(self.pair.chapter, self.pair.footnotes)
            outputs[opts.output] = combined

        if opts.preview:
            outputs[opts.preview] = render_preview(combined)
        return outputs


def build_parser():
    parser = argparse.ArgumentParser(
        description="Convert an e-book chapter and its footnote file into Markdown with footnotes."
    )
    parser.add_argument("--input-dir", default=INPUT_DIR,
                        help=f"Directory holding the extracted HTML files (default: {INPUT_DIR}).")
    parser.add_argument("--chapter", default=DEFAULT_CHAPTER,
                        help=f"Chapter file name (default: {DEFAULT_CHAPTER}).")
    parser.add_argument("--footnotes", default=None,
                        help="Footnote file name (default: discovered from the chapter's links).")
    parser.add_argument("--epub", default=None,
                        help="Read both files from this .epub instead of --input-dir.")
    parser.add_argument("--output", default=DEFAULT_OUTPUT,
                        help=f"Markdown output path (default: {DEFAULT_OUTPUT}).")
    parser.add_argument("--footnotes-output", default=None,
                        help="Write the footnote definitions to this separate file.")
    parser.add_argument("--preview", default=None,
                        help="Also write an HTML preview of the Markdown to this path.")
    parser.add_argument("--debug-log", default=None,
                        help=f"Debug log path (default: {DEBUG_LOG_NAME} next to the output).")
    parser.add_argument("--quiet", action="store_true",
                        help="Only write progress to the debug log.")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    debug_log_path = args.debug_log or os.path.join(
        os.path.dirname(os.path.abspath(args.output)), DEBUG_LOG_NAME
    )

    with DebugLog(debug_log_path, echo=not args.quiet) as log:
        try:
            FootnoteMunger(args, log).process()
        except (FootnoteError, OSError) as e:
            log(f"\n--- ERROR ---\n{type(e).__name__}: {e}")
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
