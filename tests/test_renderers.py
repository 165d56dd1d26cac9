from pathlib import Path

from inkwell.protocols import ContentRenderer
from inkwell.renderers import (
    HTMLRenderer,
    MarkdownRenderer,
    RendererRegistry,
    _generate_heading_id,
)


def test_markdown_renders_headings_with_unique_ids():
    html = MarkdownRenderer().render("# Akka Streams\n\n## Setup\n\n## Setup\n\ntext")
    assert '<h1 id="akka-streams">Akka Streams</h1>' in html
    assert '<h2 id="setup">Setup</h2>' in html
    assert '<h2 id="setup-1">Setup</h2>' in html
    assert "<p>text</p>" in html


def test_markdown_highlights_known_languages():
    html = MarkdownRenderer().render("```scala\nval x = 1\n```\n")
    assert 'class="highlight"' in html


def test_markdown_escapes_unknown_languages():
    html = MarkdownRenderer().render("```nosuchlang\na < b\n```\n")
    assert '<pre><code class="language-nosuchlang">a &lt; b\n</code></pre>' in html


def test_markdown_plugins_and_raw_html():
    html = MarkdownRenderer().render(
        "~~old~~\n\n| a | b |\n|---|---|\n| 1 | 2 |\n\n<div class=\"note\">raw</div>\n"
    )
    assert "<del>old</del>" in html
    assert "<table>" in html
    assert '<div class="note">raw</div>' in html


def test_html_renderer_passes_through():
    assert HTMLRenderer().render("<p>{{ x }}</p>") == "<p>{{ x }}</p>"


def test_registry_selects_renderer_by_suffix():
    registry = RendererRegistry()
    assert registry.get_renderer(Path("post.md")).source_type == "markdown"
    assert registry.get_renderer(Path("post.markdown")).source_type == "markdown"
    assert registry.get_renderer(Path("index.html")).source_type == "html"
    assert registry.get_renderer(Path("notes.txt")) is None


def test_renderers_satisfy_protocol():
    assert isinstance(MarkdownRenderer(), ContentRenderer)
    assert isinstance(HTMLRenderer(), ContentRenderer)


def test_generate_heading_id():
    assert _generate_heading_id("Hello, <em>World</em>!") == "hello-world"
