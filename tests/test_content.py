"""Tests for content file numbering."""

from __future__ import annotations

from chapnum.exporters.markdown import MarkdownRenderer
from chapnum.loaders.markdown import MarkdownLoader
from chapnum.numbering.content import ContentFileProcessor, PendingTitle
from chapnum.numbering.counter import HierarchicalCounter


def _processor() -> ContentFileProcessor:
    return ContentFileProcessor(MarkdownLoader(), MarkdownRenderer())


def _counter(*levels: int) -> HierarchicalCounter:
    counter = HierarchicalCounter()
    for level in levels:
        counter.increment(level)
    return counter


class TestPendingTitle:
    """Tests for the carried-over chapter title."""

    def test_starts_empty(self):
        pending = PendingTitle()
        assert not pending
        assert pending.take() is None

    def test_take_consumes_once(self):
        pending = PendingTitle()
        pending.set("Appendix")

        assert pending
        assert pending.take() == ("Appendix", None)
        assert pending.take() is None

    def test_set_replaces(self):
        pending = PendingTitle("Old")
        pending.set("New")
        assert pending.text == "New"

    def test_empty_text_means_nothing_pending(self):
        pending = PendingTitle()
        pending.set("")
        assert not pending

    def test_spans_are_cleared_with_title(self):
        heading = MarkdownLoader().parse("## Appendix\n").headings()[0]
        pending = PendingTitle("Appendix", heading.spans)

        text, spans = pending.take()

        assert text == "Appendix"
        assert [span.content for span in spans] == ["Appendix"]
        assert pending.spans is None


class TestNumberDocument:
    """Tests for numbering a parsed content document."""

    def test_inserts_pending_title(self):
        doc = MarkdownLoader().parse("# App\n\n### Part\n")
        pending = PendingTitle("Appendix")

        numbered, title = _processor().number_document(doc, _counter(1, 2), pending)

        assert title == "Appendix"
        assert not pending
        assert [(h.level, h.text) for h in doc.headings()] == [
            (1, "Appendix"),
            (1, "App"),
            (3, "1.1.1 Part"),
        ]
        assert [n.number for n in numbered] == ["1.1.1"]

    def test_inserted_title_is_not_numbered(self):
        doc = MarkdownLoader().parse("Body only.\n")

        _processor().number_document(doc, _counter(1, 2), PendingTitle("1.1 Appendix"))

        assert MarkdownRenderer().render(doc) == "# 1.1 Appendix\n\nBody only.\n"

    def test_no_pending_title(self):
        doc = MarkdownLoader().parse("## Part\n")

        numbered, title = _processor().number_document(doc, _counter(2), PendingTitle())

        assert title is None
        assert [h.text for h in doc.headings()] == ["Part"]
        assert numbered == []

    def test_title_goes_below_front_matter(self):
        doc = MarkdownLoader().parse("---\nuid: app\n---\n## Part\n")

        _processor().number_document(doc, _counter(1), PendingTitle("Appendix"))

        assert MarkdownRenderer().render(doc) == "---\nuid: app\n---\n# Appendix\n\n## 1.1 Part\n"


class TestProcess:
    """Tests for processing a content file on disk."""

    def test_writes_numbered_file(self, temp_dir):
        source = temp_dir / "guide.md"
        source.write_text("# Guide\n\n### Install\n", encoding="utf-8")
        output = temp_dir / "out" / "guide.md"

        result = _processor().process(_counter(1, 2), PendingTitle(), source, output)

        assert result.output_path == output
        assert result.inserted_title is None
        assert output.read_text(encoding="utf-8") == "# Guide\n\n### 1.1.1 Install\n"
        # The source is never modified.
        assert source.read_text(encoding="utf-8") == "# Guide\n\n### Install\n"

    def test_counter_passed_in_is_advanced(self, temp_dir):
        source = temp_dir / "guide.md"
        source.write_text("## A\n\n## B\n", encoding="utf-8")
        counter = _counter(1)

        _processor().process(counter, PendingTitle(), source, temp_dir / "out.md")

        assert counter.format() == "1.2"

    def test_title_keeps_source_markup(self, temp_dir):
        toc_heading = MarkdownLoader().parse("## \\*Appendix\\*\n").headings()[0]
        source = temp_dir / "app.md"
        source.write_text("Body.\n", encoding="utf-8")
        output = temp_dir / "out" / "app.md"

        _processor().process(
            _counter(2), PendingTitle(toc_heading.text, toc_heading.spans), source, output
        )

        assert output.read_text(encoding="utf-8") == "# \\*Appendix\\*\n\nBody.\n"
