import logging
from datetime import datetime
from pathlib import Path

import pytest

from inkwell.documents import (
    Document,
    DocumentBuilder,
    DocumentLoader,
    Layout,
    load_site,
)


def create_blog(tmp_path: Path) -> Path:
    root = tmp_path / "blog"
    (root / "_posts").mkdir(parents=True)
    (root / "_drafts").mkdir()
    (root / "_layouts").mkdir()
    (root / "_site").mkdir()
    (root / ".git").mkdir()
    (root / "css").mkdir()

    (root / "_config.yml").write_text("title: Blog\n", encoding="utf-8")
    (root / "_layouts" / "default.html").write_text("{{ content }}", encoding="utf-8")
    (root / "_site" / "stale.html").write_text("old", encoding="utf-8")
    (root / ".git" / "HEAD").write_text("ref", encoding="utf-8")
    (root / "css" / "main.css").write_text("body {}", encoding="utf-8")
    (root / "README.md").write_text("# Readme", encoding="utf-8")

    (root / "about.md").write_text(
        "---\nlayout: page\ntitle: About\npermalink: /about/\n"
        "description: Who I am\n---\nHello.\n",
        encoding="utf-8",
    )
    (root / "_posts" / "2019-08-21-akka-streams.md").write_text(
        "---\nlayout: post\ntitle: Akka Streams\ncomments: true\n"
        "keywords: scala, akka , streams\n---\nBody\n",
        encoding="utf-8",
    )
    (root / "_posts" / "2018-01-01-hbase.md").write_text(
        "---\ntitle: HBase\ndate: 2018-01-02 10:00:00 +0200\n---\nBody\n",
        encoding="utf-8",
    )
    (root / "_drafts" / "scala-3.md").write_text(
        "---\ntitle: Scala 3\n---\nSoon\n", encoding="utf-8"
    )
    return root


def test_loader_finds_documents_in_sorted_order(tmp_path):
    root = create_blog(tmp_path)
    loader = DocumentLoader(root, exclude=["README.md"], destination=root / "_site")
    names = [p.relative_to(root).as_posix() for p in loader.iter_files()]
    assert names == [
        "_posts/2018-01-01-hbase.md",
        "_posts/2019-08-21-akka-streams.md",
        "about.md",
    ]

    with_drafts = [
        p.relative_to(root).as_posix() for p in loader.iter_files(include_drafts=True)
    ]
    assert "_drafts/scala-3.md" in with_drafts


def test_loader_static_files(tmp_path):
    root = create_blog(tmp_path)
    loader = DocumentLoader(root, exclude=["README.md"], destination=root / "_site")
    static = [p.relative_to(root).as_posix() for p in loader.iter_static_files()]
    assert static == ["css/main.css"]


def test_builder_reads_metadata(tmp_path):
    root = create_blog(tmp_path)
    builder = DocumentBuilder(root)

    about = builder.build(root / "about.md")
    assert about.layout is Layout.PAGE
    assert about.title == "About"
    assert about.permalink == "/about/"
    assert about.description == "Who I am"
    assert about.date is None
    assert about.body == "Hello.\n"
    assert about.url == "/about/"
    assert about.rel_path == Path("about.md")

    post = builder.build(root / "_posts" / "2019-08-21-akka-streams.md")
    assert post.is_post
    assert post.date == datetime(2019, 8, 21)
    assert post.url == "/2019/08/21/akka-streams/"
    assert post.comments is True
    assert post.keywords == ["scala", "akka", "streams"]
    assert post.metadata["comments"] == "true"
    assert about.comments is False


def test_builder_defaults_layout_from_directory_and_prefers_explicit_date(tmp_path):
    root = create_blog(tmp_path)
    builder = DocumentBuilder(root)
    post = builder.build(root / "_posts" / "2018-01-01-hbase.md")
    assert post.layout is Layout.POST
    assert post.date == datetime(2018, 1, 2, 8, 0, 0)


def test_builder_unknown_layout_falls_back(tmp_path, caplog):
    root = tmp_path
    path = root / "landing.md"
    path.write_text("---\nlayout: home\n---\nHi", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="inkwell.documents"):
        doc = DocumentBuilder(root).build(path)
    assert doc.layout is Layout.PAGE
    assert "unknown layout" in caplog.text


def test_builder_bad_date_falls_back_to_filename(tmp_path):
    path = tmp_path / "_posts" / "2019-07-01-x.md"
    path.parent.mkdir()
    path.write_text("---\ndate: someday\n---\n", encoding="utf-8")
    doc = DocumentBuilder(tmp_path).build(path)
    assert doc.date == datetime(2019, 7, 1)


def test_document_without_frontmatter_is_all_body(tmp_path):
    path = tmp_path / "notes.md"
    path.write_text("# Notes\n\nplain", encoding="utf-8")
    doc = DocumentBuilder(tmp_path).build(path)
    assert doc.metadata == {}
    assert doc.body == "# Notes\n\nplain"
    assert doc.title is None
    assert doc.display_title == "Notes"
    assert doc.url == "/notes/"


def test_document_is_immutable(tmp_path):
    path = tmp_path / "notes.md"
    path.write_text("x", encoding="utf-8")
    doc = DocumentBuilder(tmp_path).build(path)
    with pytest.raises(AttributeError):
        doc.title = "changed"


def test_load_site_partitions_pages_and_posts(tmp_path):
    root = create_blog(tmp_path)
    site = load_site(root, {"exclude": ["README.md"]}, destination=root / "_site")
    assert [d.title for d in site.pages] == ["About"]
    assert [d.title for d in site.posts] == ["HBase", "Akka Streams"]
    assert all(isinstance(d, Document) for d in site.documents)
    assert not any(d.draft for d in site.documents)

    with_drafts = load_site(root, {"exclude": ["README.md"]}, include_drafts=True)
    draft = next(d for d in with_drafts.documents if d.draft)
    assert draft.is_post
    assert draft.url == "/posts/scala-3/"
