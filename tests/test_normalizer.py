"""Tests for footnote_munger.normalizer module."""

from conftest import make_tree
from footnote_munger import normalizer
from footnote_munger.normalizer import (
    CalibreBlockquoteUnwrapper,
    CommentStripper,
    EmptyElementRemover,
    SpanUnwrapper,
    normalize,
)


def run(transform, html):
    tree = make_tree(html)
    result = transform.transform(tree, lambda message: None)
    return tree, result


class TestCommentStripper:
    """Tests for CommentStripper."""

    def test_detects_comments(self):
        assert CommentStripper().detect(make_tree("<!-- c --><p>x</p>")) is True
        assert CommentStripper().detect(make_tree("<p>x</p>")) is False

    def test_removes_leading_and_nested_comments(self):
        tree, result = run(CommentStripper(), "<!-- calibre --><p>a<!-- b -->c</p>")
        assert str(tree) == "<p>ac</p>"
        assert result == {"removed": 2}


class TestCalibreBlockquoteUnwrapper:
    """Tests for CalibreBlockquoteUnwrapper."""

    def test_detect(self):
        assert CalibreBlockquoteUnwrapper().detect(make_tree('<blockquote class="calibre6"></blockquote>'))
        assert not CalibreBlockquoteUnwrapper().detect(make_tree('<blockquote class="quote"></blockquote>'))

    def test_unwraps_single_paragraph(self):
        tree, result = run(
            CalibreBlockquoteUnwrapper(),
            '<blockquote class="calibre6"><p>Text</p></blockquote>',
        )
        assert str(tree) == "<p>Text</p>"
        assert result == {"unwrapped": 1, "demoted": 0}

    def test_demotes_multi_child_container(self):
        tree, result = run(
            CalibreBlockquoteUnwrapper(),
            '<blockquote class="calibre6"><p>One</p><p>Two</p></blockquote>',
        )
        assert tree.blockquote is None
        assert tree.div is not None
        assert result == {"unwrapped": 0, "demoted": 1}

    def test_leaves_real_quotes(self):
        tree, _ = run(CalibreBlockquoteUnwrapper(), '<blockquote class="epigraph"><p>Q</p></blockquote>')
        assert tree.blockquote is not None


class TestSpanUnwrapper:
    """Tests for SpanUnwrapper."""

    def test_unwraps_calibre_span_around_link(self):
        tree, result = run(
            SpanUnwrapper(),
            '<p>x<span class="calibre3"><a href="part0020.html#n1">1</a></span></p>',
        )
        assert str(tree) == '<p>x<a href="part0020.html#n1">1</a></p>'
        assert result == {"unwrapped": 1}

    def test_restores_marker_link_adjacency(self):
        tree, _ = run(
            SpanUnwrapper(),
            '<p><span class="calibre1"><a id="fn1"></a></span><a href="part0014.html#r1">1</a></p>',
        )
        assert tree.p.contents[0].get("id") == "fn1"
        assert tree.p.contents[1].get("href") == "part0014.html#r1"

    def test_unwraps_classless_span(self):
        tree, _ = run(SpanUnwrapper(), "<p><span>plain</span></p>")
        assert str(tree) == "<p>plain</p>"

    def test_keeps_spans_with_id_or_semantic_class(self):
        tree, result = run(
            SpanUnwrapper(),
            '<p><span id="s1">a</span><span class="noteref">b</span><span class="smallcaps">c</span></p>',
        )
        assert len(tree.find_all("span")) == 3
        assert result == {"unwrapped": 0}


class TestEmptyElementRemover:
    """Tests for EmptyElementRemover."""

    def test_removes_empty_spacers(self):
        tree, result = run(
            EmptyElementRemover(),
            '<p>Keep</p><p class="calibre7"> </p><div></div><p>\xa0</p>',
        )
        assert str(tree) == "<p>Keep</p>"
        assert result == {"removed": 3}

    def test_keeps_paragraph_with_only_an_anchor(self):
        tree, result = run(EmptyElementRemover(), '<p><a id="fn1"></a></p>')
        assert tree.find("a", id="fn1") is not None
        assert result == {"removed": 0}


class TestNormalize:
    """Tests for the normalize pipeline."""

    def test_runs_detected_transforms(self):
        tree = make_tree(
            '<!-- c --><blockquote class="calibre6"><p>Claim'
            '<span class="calibre3"><a href="part0020.html#n1">1</a></span></p></blockquote>'
            '<p> </p>'
        )
        results = normalize(tree)
        assert str(tree) == '<p>Claim<a href="part0020.html#n1">1</a></p>'
        assert set(results) == {
            "CommentStripper", "CalibreBlockquoteUnwrapper", "SpanUnwrapper", "EmptyElementRemover"
        }

    def test_skips_undetected_transforms(self, messages):
        results = normalize(make_tree("<p>Clean</p>"), messages.append)
        assert set(results) == {"EmptyElementRemover"}
        assert "  [EmptyElementRemover]" in messages

    def test_custom_pipeline(self):
        tree = make_tree("<!-- c --><p> </p>")
        results = normalize(tree, pipeline=[CommentStripper()])
        assert set(results) == {"CommentStripper"}
        assert tree.p is not None

    def test_pipeline_order(self):
        names = [t.name for t in normalizer.TRANSFORM_PIPELINE]
        assert names.index("CommentStripper") == 0
        assert names.index("CalibreBlockquoteUnwrapper") < names.index("EmptyElementRemover")
