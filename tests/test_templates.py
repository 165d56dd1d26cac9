from datetime import datetime
from pathlib import Path

from inkwell.documents import Document, Layout
from inkwell.protocols import TemplateRenderer
from inkwell.templates import TemplateEngine


def make_document(title, layout=Layout.PAGE, date=None, url="/x/", draft=False):
    rel = Path(f"{title.lower()}.md")
    return Document(
        layout=layout,
        title=title,
        permalink=None,
        description="Desc & more",
        date=date,
        body="",
        source=rel,
        rel_path=rel,
        url=url,
        draft=draft,
    )


def create_layouts(tmp_path: Path) -> Path:
    (tmp_path / "_layouts").mkdir()
    (tmp_path / "_includes").mkdir()
    (tmp_path / "_includes" / "meta.html").write_text(
        '<meta name="description" content="{{ page.description }}">', encoding="utf-8"
    )
    (tmp_path / "_layouts" / "default.html").write_text(
        "<title>{{ page.title }} | {{ site.title }}</title>"
        '{% include "meta.html" %}<main>{{ content }}</main>',
        encoding="utf-8",
    )
    (tmp_path / "_layouts" / "post.html").write_text(
        '{% extends "default.html" %}', encoding="utf-8"
    )
    return tmp_path


def test_render_document_uses_layout_and_marks_content_safe(tmp_path):
    root = create_layouts(tmp_path)
    engine = TemplateEngine(root, {"title": "Blog"})
    doc = make_document("About")
    html = engine.render_document(doc, "<p>Hi</p>")
    assert html == (
        "<title>About | Blog</title>"
        '<meta name="description" content="Desc &amp; more">'
        "<main><p>Hi</p></main>"
    )


def test_layout_falls_back_to_default_then_body(tmp_path):
    root = create_layouts(tmp_path)
    engine = TemplateEngine(root, {"title": "Blog"})
    post = make_document("Post", layout=Layout.POST)
    assert "<main><p>x</p></main>" in engine.render_document(post, "<p>x</p>")

    bare = TemplateEngine(tmp_path / "missing", {})
    assert bare.render_document(make_document("A"), "<p>x</p>") == "<p>x</p>"


def test_site_collections_list_published_posts_newest_first(tmp_path):
    engine = TemplateEngine(tmp_path, {"title": "Blog"})
    engine.update_collections(
        [
            make_document("Old", Layout.POST, datetime(2018, 1, 1), "/old/"),
            make_document("New", Layout.POST, datetime(2019, 8, 21), "/new/"),
            make_document("Draft", Layout.POST, datetime(2020, 1, 1), "/draft/", True),
            make_document("About", url="/about/"),
        ]
    )
    listing = make_document("Home", url="/")
    html = engine.render_body(
        listing,
        "{% for post in site.posts %}<a href=\"{{ url_for(post.url) }}\">"
        "{{ post.title }}</a>{% endfor %}|{{ site.pages | length }}",
    )
    assert html == '<a href="/new/">New</a><a href="/old/">Old</a>|1'


def test_url_for_applies_baseurl(tmp_path):
    engine = TemplateEngine(tmp_path, {"baseurl": "/blog/"})
    assert engine._url_for("/about/") == "/blog/about/"
    assert engine._url_for("feed.xml") == "/blog/feed.xml"
    assert engine._url_for("https://cdn.example.com/x.js") == "https://cdn.example.com/x.js"

    plain = TemplateEngine(tmp_path, {})
    assert plain._url_for("about/") == "/about/"


def test_pygments_css_global(tmp_path):
    engine = TemplateEngine(tmp_path, {})
    assert ".highlight" in engine.env.globals["pygments_css"]()


def test_engine_satisfies_template_renderer_protocol(tmp_path):
    assert isinstance(TemplateEngine(tmp_path, {}), TemplateRenderer)
