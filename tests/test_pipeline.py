"""Tests for the end-to-end numbering run."""

from __future__ import annotations

import pytest

from chapnum.config import NumberingConfig
from chapnum.errors import ChapnumError, LevelOutOfRangeError, MissingTocError
from chapnum.pipeline import ChapterNumberingPipeline


@pytest.fixture
def docs(write_tree, sample_toc_content, sample_guide_content):
    return write_tree(
        {
            "toc.md": sample_toc_content,
            "guide.md": sample_guide_content,
            "guide2.md": "# Sub\n\n### Part\n",
            "unlinked.md": "## Leave me\n",
            "images/logo.png": b"\x89PNG\r\n\x1a\n\x00\xff",
            "css/site.css": "body { margin: 0; }\n",
        }
    )


class TestPipeline:
    """Tests for ChapterNumberingPipeline.run."""

    def test_full_run(self, docs, temp_dir):
        target = temp_dir / "out"

        summary = ChapterNumberingPipeline().run(docs / "toc.md", target)

        assert summary.source_root == docs.resolve()
        assert summary.target_root == target.resolve()
        assert (target / "toc.md").read_text(encoding="utf-8").startswith("# 1 Intro\n")
        assert "### 1.1.1 Install" in (target / "guide.md").read_text(encoding="utf-8")
        assert (target / "guide2.md").read_text(encoding="utf-8") == "# Sub\n\n### 1.2.1 Part\n"
        assert len(summary.numbered) == 3
        assert summary.missing == []

    def test_untouched_files_are_byte_copies(self, docs, temp_dir):
        target = temp_dir / "out"

        summary = ChapterNumberingPipeline().run(docs / "toc.md", target)

        assert (target / "images" / "logo.png").read_bytes() == (
            docs / "images" / "logo.png"
        ).read_bytes()
        assert (target / "css" / "site.css").read_bytes() == (docs / "css" / "site.css").read_bytes()
        assert (target / "unlinked.md").read_text(encoding="utf-8") == "## Leave me\n"
        assert len(summary.copied) == 3

    def test_accepts_string_paths(self, docs, temp_dir):
        ChapterNumberingPipeline().run(str(docs / "toc.md"), str(temp_dir / "out"))
        assert (temp_dir / "out" / "toc.md").is_file()

    def test_missing_toc_touches_nothing(self, temp_dir):
        target = temp_dir / "out"

        with pytest.raises(MissingTocError) as exc_info:
            ChapterNumberingPipeline().run(temp_dir / "nope.md", target)

        assert "does not exist" in str(exc_info.value)
        assert not target.exists()

    def test_missing_content_file_is_not_fatal(self, write_tree, temp_dir):
        root = write_tree({"toc.md": "# [Gone](gone.md)\n"})

        summary = ChapterNumberingPipeline().run(root / "toc.md", temp_dir / "out")

        assert summary.missing == [root.resolve() / "gone.md"]
        assert summary.copied == []

    def test_target_equal_to_source_is_refused(self, docs):
        with pytest.raises(ChapnumError):
            ChapterNumberingPipeline().run(docs / "toc.md", docs)

        assert (docs / "guide.md").read_text(encoding="utf-8").count("1.1") == 0

    def test_force_on_parent_of_source_is_refused(self, docs, temp_dir):
        with pytest.raises(ChapnumError):
            ChapterNumberingPipeline().run(docs / "toc.md", temp_dir, force=True)

        assert (docs / "toc.md").is_file()

    def test_force_clears_stale_output(self, docs, temp_dir):
        target = temp_dir / "out"
        target.mkdir()
        (target / "stale.md").write_text("old", encoding="utf-8")

        ChapterNumberingPipeline().run(docs / "toc.md", target, force=True)

        assert not (target / "stale.md").exists()
        assert (target / "toc.md").is_file()

    def test_without_force_existing_files_are_overwritten(self, docs, temp_dir):
        target = temp_dir / "out"
        target.mkdir()
        (target / "toc.md").write_text("old", encoding="utf-8")
        (target / "stale.md").write_text("old", encoding="utf-8")

        ChapterNumberingPipeline().run(docs / "toc.md", target)

        assert (target / "toc.md").read_text(encoding="utf-8").startswith("# 1 Intro")
        assert (target / "stale.md").exists()

    def test_max_depth_is_enforced(self, write_tree, temp_dir):
        root = write_tree({"toc.md": "# A\n\n## B\n\n### C\n"})

        with pytest.raises(LevelOutOfRangeError):
            ChapterNumberingPipeline(NumberingConfig(max_depth=2)).run(
                root / "toc.md", temp_dir / "out"
            )

    def test_target_inside_source(self, docs):
        target = docs / "build"

        ChapterNumberingPipeline().run(docs / "toc.md", target)

        assert (target / "toc.md").is_file()
        assert not (target / "build").exists()

    def test_linked_image_is_copied_not_numbered(self, write_tree, temp_dir):
        png = b"\x89PNG\r\n\x1a\n\x00\xff\xfe"
        root = write_tree({"toc.md": "# Intro\n\n## [Logo](logo.png)\n", "logo.png": png})
        target = temp_dir / "out"

        summary = ChapterNumberingPipeline().run(root / "toc.md", target)

        assert (target / "logo.png").read_bytes() == png
        assert summary.copied == [target.resolve() / "logo.png"]
        assert summary.numbered == [target.resolve() / "toc.md"]
