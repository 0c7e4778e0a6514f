"""
Pytest configuration and fixtures for chapnum tests.
"""

import tempfile
from collections.abc import Callable
from pathlib import Path

import pytest

from chapnum.exporters.markdown import MarkdownRenderer
from chapnum.loaders.markdown import MarkdownLoader


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for file operations."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def loader() -> MarkdownLoader:
    return MarkdownLoader()


@pytest.fixture
def renderer() -> MarkdownRenderer:
    return MarkdownRenderer()


@pytest.fixture
def write_tree(temp_dir: Path) -> Callable[[dict[str, str | bytes]], Path]:
    """Write a {relative path: content} mapping below a fresh source root."""

    def _write(files: dict[str, str | bytes]) -> Path:
        root = temp_dir / "src"
        for name, content in files.items():
            path = root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root

    return _write


@pytest.fixture
def sample_toc_content() -> str:
    """TOC with one chapter and two linked content files."""
    return """# Intro

## [Guide](guide.md)

## [Sub](guide2.md)
"""


@pytest.fixture
def sample_guide_content() -> str:
    return """# Guide

Some introduction.

### Install

#### Linux

### Use
"""


@pytest.fixture
def sample_markdown_content() -> str:
    """Markdown exercising most block and inline constructs."""
    return """# Document Title

This is an *introduction* paragraph with **bold** text and a [link](other.md "Other").

## Section One

- first item
- second item
  - nested item

1. one
2. two

> A quote
> spanning lines

### Subsection 1.1

```python
def hello():
    print("Hello, World!")
```

| Name | Value |
|:-----|------:|
| a    | 1     |
| b    | 2     |

## Conclusion

Final thoughts with `code` and an image ![logo](logo.png).
"""
