# Copyright (C) 2023, CERN
# This software is distributed under the terms of the MIT
# licence, copied verbatim in the file "LICENSE".
# In applying this license, CERN does not waive the privileges and immunities
# granted to it by virtue of its status as Intergovernmental Organization
# or submit itself to any jurisdiction.

"""Test the single pass html parsers used for (remote) Simple index html pages

Invalid HTML is not tested for errors: html.parser.HTMLParser does not raise
on it. Only undecodable pages make parsing fail.
"""

from __future__ import annotations

import typing

import pytest

from .. import errors, model, parser
from ..html_parser import (
    AnchorTextHTMLParser,
    ProjectInfoHTMLParser,
    _Missing,
    get_attr,
)
from ..packaging import parse_artifact_name

SHA256_HEX = "ab" * 32
MD5_HEX = "cd" * 16


def test_parse_html_project_page__example() -> None:
    page = b"""<html>
        <head>
          <meta name="pypi:repository-version" content="1.0">
          <base href="https://example.com/new-base/">
        </head>
        <body>
          <a href="link1-1.0.tar.gz#sha256=0000000000000000000000000000000000000000000000000000000000000000">link1</a>
          <a href="/elsewhere/link2-2.0.zip" data-yanked="some reason">link2</a>
          <a href="link3-3.0.tar.gz" data-requires-python=">= 3.17">link3</a>
        </body>
      </html>
    """

    result = parser.parse_html_project_page(page, "https://example.com/old-base/")

    assert result == model.ProjectInfo(
        meta=model.Meta("1.0"),
        files=(
            model.ArtifactInfo(
                filename=parse_artifact_name("link1-1.0.tar.gz"),
                url=(
                    "https://example.com/new-base/link1-1.0.tar.gz#sha256="
                    "0000000000000000000000000000000000000000000000000000000000000000"
                ),
                hashes=model.ArtifactHashes(sha256=bytes(32)),
            ),
            model.ArtifactInfo(
                filename=parse_artifact_name("link2-2.0.zip"),
                url="https://example.com/elsewhere/link2-2.0.zip",
                yanked=model.Yanked(yanked=True, reason="some reason"),
            ),
            model.ArtifactInfo(
                filename=parse_artifact_name("link3-3.0.tar.gz"),
                url="https://example.com/new-base/link3-3.0.tar.gz",
                requires_python=">= 3.17",
            ),
        ),
    )
    assert result.files[0].hashes is not None
    assert result.files[0].hashes.md5 is None


def test_parse_html_project_page__base_applies_to_following_links() -> None:
    page = """
        <a href="before-1.0.tar.gz">before</a>
        <base href="https://mirror.example.com/files/">
        <a href="after-1.0.tar.gz">after</a>
    """

    result = parser.parse_html_project_page(page, "https://example.com/simple/proj/")

    assert [file.url for file in result.files] == [
        "https://example.com/simple/proj/before-1.0.tar.gz",
        "https://mirror.example.com/files/after-1.0.tar.gz",
    ]


def test_parse_html_project_page__only_first_base() -> None:
    page = """
        <base href="https://mirror.example.com/files/">
        <a href="first-1.0.tar.gz">first</a>
        <base href="https://other.example.com/">
        <a href="second-1.0.tar.gz">second</a>
    """

    result = parser.parse_html_project_page(page, "https://example.com/simple/proj/")

    assert [file.url for file in result.files] == [
        "https://mirror.example.com/files/first-1.0.tar.gz",
        "https://mirror.example.com/files/second-1.0.tar.gz",
    ]


def test_parse_html_project_page__base_without_href_is_still_first() -> None:
    page = """
        <base target="_blank">
        <base href="https://other.example.com/">
        <a href="proj-1.0.tar.gz">proj</a>
    """

    result = parser.parse_html_project_page(page, "https://example.com/simple/proj/")

    assert result.files[0].url == "https://example.com/simple/proj/proj-1.0.tar.gz"


def test_parse_html_project_page__relative_base() -> None:
    page = """
        <base href="../../files/">
        <a href="proj-1.0.tar.gz">proj</a>
    """

    result = parser.parse_html_project_page(page, "https://example.com/simple/proj/")

    assert result.files[0].url == "https://example.com/files/proj-1.0.tar.gz"


def test_parse_html_project_page__unresolvable_base() -> None:
    page = """
        <base href="http://[::1/">
        <a href="proj-1.0.tar.gz">proj</a>
    """

    result = parser.parse_html_project_page(page, "https://example.com/simple/proj/")

    assert result.files[0].url == "https://example.com/simple/proj/proj-1.0.tar.gz"


def test_parse_html_project_page__malformed_links_are_skipped() -> None:
    page = """
        <a href="../">parent directory</a>
        <a href="not-a-distribution">not a distribution</a>
        <a>no href</a>
        <a href="proj-1.0.egg">legacy egg</a>
        <a href="http://[::1/proj-1.0.tar.gz">bad url</a>
        <a href="proj-1.0-py3-none-any.whl">wheel</a>
        <a href="proj-1.0.tar.gz">sdist</a>
    """

    result = parser.parse_html_project_page(page, "https://example.com/simple/proj/")

    assert [str(file.filename) for file in result.files] == [
        "proj-1.0-py3-none-any.whl",
        "proj-1.0.tar.gz",
    ]


def test_parse_html_project_page__ignores_unrelated_markup() -> None:
    page = """<!DOCTYPE html>
        <html>
          <head>
            <title>Links for proj</title>
            <meta name="description" content="2.0">
            <script>var link = '<a href="script-1.0.tar.gz">';</script>
          </head>
          <body>
            <!-- <a href="comment-1.0.tar.gz">comment</a> -->
            <h1>Links for proj</h1>
            <p><a href="proj-1.0.tar.gz">proj-1.0.tar.gz</a><br/></p>
          </body>
        </html>
    """

    result = parser.parse_html_project_page(page, "https://example.com/simple/proj/")

    assert result.meta == model.Meta("1.0")
    assert [str(file.filename) for file in result.files] == ["proj-1.0.tar.gz"]


def test_parse_html_project_page__repository_version() -> None:
    page = """
        <meta name="pypi:repository-version" content="1.1">
        <meta name="pypi:repository-version">
    """

    result = parser.parse_html_project_page(page, "https://example.com/simple/proj/")

    assert result == model.ProjectInfo(meta=model.Meta("1.1"))


def test_parse_html_project_page__self_closing_tags() -> None:
    page = """
        <meta name="pypi:repository-version" content="1.1"/>
        <base href="https://mirror.example.com/"/>
        <a href="proj-1.0.tar.gz"/>
    """

    result = parser.parse_html_project_page(page, "https://example.com/simple/proj/")

    assert result.meta == model.Meta("1.1")
    assert result.files[0].url == "https://mirror.example.com/proj-1.0.tar.gz"


@pytest.mark.parametrize(
    "fragment, hashes",
    [
        ("", None),
        ("#", None),
        (
            f"#sha256={SHA256_HEX}",
            model.ArtifactHashes(sha256=bytes.fromhex(SHA256_HEX)),
        ),
        (f"#md5={MD5_HEX}", None),
        ("#sha256=abc", None),
        (f"#sha512={SHA256_HEX}", None),
        ("#argh!", None),
    ],
)
def test_parse_html_project_page__url_fragment(
    fragment: str,
    hashes: typing.Optional[model.ArtifactHashes],
) -> None:
    page = f"""<a href="proj-1.0.tar.gz{fragment}">proj-1.0.tar.gz</a>"""

    result = parser.parse_html_project_page(page, "https://example.com/simple/proj/")

    assert result.files[0].hashes == hashes


@pytest.mark.parametrize(
    "yank_attr, yanked",
    [
        ("", model.Yanked()),
        ("data-yanked", model.Yanked(yanked=True, reason="")),
        ('data-yanked=""', model.Yanked(yanked=True, reason="")),
        ('data-yanked="reason"', model.Yanked(yanked=True, reason="reason")),
        ('data-yanked="false"', model.Yanked(yanked=True, reason="false")),
    ],
)
def test_parse_html_project_page__yank(yank_attr: str, yanked: model.Yanked) -> None:
    page = f"""<a href="proj-1.0.tar.gz" {yank_attr}>proj-1.0.tar.gz</a>"""

    result = parser.parse_html_project_page(page, "https://example.com/simple/proj/")

    assert result.files[0].yanked == yanked


@pytest.mark.parametrize(
    "metadata_attr, metadata",
    [
        ("", model.DistInfoMetadata()),
        ("data-dist-info-metadata", model.DistInfoMetadata(available=True)),
        ('data-dist-info-metadata="true"', model.DistInfoMetadata(available=True)),
        (
            f'data-dist-info-metadata="sha256={SHA256_HEX}"',
            model.DistInfoMetadata(
                available=True,
                hashes=model.ArtifactHashes(sha256=bytes.fromhex(SHA256_HEX)),
            ),
        ),
        (
            f'data-core-metadata="md5={MD5_HEX}"',
            model.DistInfoMetadata(
                available=True,
                hashes=model.ArtifactHashes(md5=bytes.fromhex(MD5_HEX)),
            ),
        ),
        (
            'data-dist-info-metadata="something incompatible"',
            model.DistInfoMetadata(available=True),
        ),
        ('data-core-metadata="sha256=zz"', model.DistInfoMetadata(available=True)),
        (
            f'data-core-metadata="sha256={SHA256_HEX}" data-dist-info-metadata="true"',
            model.DistInfoMetadata(
                available=True,
                hashes=model.ArtifactHashes(sha256=bytes.fromhex(SHA256_HEX)),
            ),
        ),
        (
            f'data-dist-info-metadata="sha256={SHA256_HEX}" data-core-metadata',
            model.DistInfoMetadata(available=True),
        ),
    ],
)
def test_parse_html_project_page__metadata(
    metadata_attr: str,
    metadata: model.DistInfoMetadata,
) -> None:
    page = f"""<a href="proj-1.0.tar.gz" {metadata_attr}>proj-1.0.tar.gz</a>"""

    result = parser.parse_html_project_page(page, "https://example.com/simple/proj/")

    assert result.files[0].dist_info_metadata == metadata


def test_parse_html_project_page__requires_python_is_unescaped() -> None:
    page = """<a href="proj-1.0.tar.gz" data-requires-python="&gt;=3.7,&lt;4">proj</a>"""

    result = parser.parse_html_project_page(page, "https://example.com/simple/proj/")

    assert result.files[0].requires_python == ">=3.7,<4"


def test_parse_html_project_page__duplicated_attribute() -> None:
    page = """<a href="proj-1.0.tar.gz" href="other-1.0.tar.gz">proj</a>"""

    result = parser.parse_html_project_page(page, "https://example.com/simple/proj/")

    assert str(result.files[0].filename) == "proj-1.0.tar.gz"


def test_parse_html_project_page__escaped_url() -> None:
    page = """
        <a href="proj-1.0+local.tar.gz">local version</a>
        <a href="proj-1.1%2Blocal.tar.gz">escaped local version</a>
        <a href="unnormalized path/proj-1.2.tar.gz">space</a>
    """

    result = parser.parse_html_project_page(page, "https://example.com/simple/proj/")

    assert [(str(file.filename), file.url) for file in result.files] == [
        (
            "proj-1.0+local.tar.gz",
            "https://example.com/simple/proj/proj-1.0+local.tar.gz",
        ),
        (
            "proj-1.1+local.tar.gz",
            "https://example.com/simple/proj/proj-1.1%2Blocal.tar.gz",
        ),
        (
            "proj-1.2.tar.gz",
            "https://example.com/simple/proj/unnormalized%20path/proj-1.2.tar.gz",
        ),
    ]


def test_parse_html_project_page__chunked_bytes() -> None:
    page = """<html><head><title>Liens pour “proj”</title>
        <base href="https://mirror.example.com/files/"></head>
        <body><a href="proj-1.0.tar.gz" data-yanked="cassé">proj</a>
        <a href="proj-1.1.tar.gz" data-requires-python="&gt;=3.8">proj</a></body></html>
    """.encode()
    chunks = [page[i : i + 7] for i in range(0, len(page), 7)]

    result = parser.parse_html_project_page(chunks, "https://example.com/simple/proj/")

    assert result == parser.parse_html_project_page(
        page,
        "https://example.com/simple/proj/",
    )
    assert result.files[0].yanked == model.Yanked(yanked=True, reason="cassé")
    assert result.files[1].url == "https://mirror.example.com/files/proj-1.1.tar.gz"


def test_parse_html_project_page__invalid_utf8() -> None:
    page = b'<a href="proj-1.0.tar.gz">\xff\xfe</a>'

    with pytest.raises(errors.UnreadablePageError):
        parser.parse_html_project_page(page, "https://example.com/simple/proj/")


@pytest.mark.parametrize(
    "url",
    ["", "not a url", "/simple/proj/", "https://[::1/simple/"],
)
def test_parse_html_project_page__invalid_source_url(url: str) -> None:
    with pytest.raises(errors.InvalidSourceURLError):
        parser.parse_html_project_page("<a href='proj-1.0.tar.gz'>proj</a>", url)


def test_ProjectInfoHTMLParser__state() -> None:
    html_parser = ProjectInfoHTMLParser("https://example.com/simple/proj/")
    html_parser.feed('<a href="proj-1.0.tar.gz">proj</a>')
    assert html_parser.base == "https://example.com/simple/proj/"
    assert not html_parser.base_fixed

    html_parser.feed('<base href="https://mirror.example.com/">')
    assert html_parser.base == "https://mirror.example.com/"
    assert html_parser.base_fixed

    html_parser.close()
    assert len(html_parser.project_info.files) == 1


def test_parse_html_project_list() -> None:
    page = """
    <html>
      <head>
        <meta name="pypi:repository-version" content="1.1">
        <title>Simple index</title>
      </head>
      <body>
        <a href="/simple/0/">0</a>
        <a href="/simple/0-0/">0-._.-._.-._.-._.-._.-._.-0</a>
        <a href="/simple/00print-lol/">00print_lol</a>
        <a href="/simple/00smalinux/">00SMALINUX</a>
        <a href="/simple/0-618/">0.618</a>
        <a href="/simple/0x-contract-addresses/">0x-contract-addresses</a>
        <a href="/simple/0/">0</a>
      </body>
    </html>
    """

    assert parser.parse_html_project_list(page) == [
        "0",
        "0-._.-._.-._.-._.-._.-._.-0",
        "00print_lol",
        "00SMALINUX",
        "0.618",
        "0x-contract-addresses",
        "0",
    ]


@pytest.mark.parametrize(
    "page, names",
    [
        ("", []),
        ("<html><body><p>No links</p></body></html>", []),
        ('<a href="/a/"><span>nested</span> text</a>', ["nested text"]),
        ("<a>a&amp;b</a>", ["a&b"]),
        ("<a>one<a>two", ["one", "two"]),
        ("<a></a>", [""]),
    ],
)
def test_parse_html_project_list__text_content(
    page: str,
    names: typing.List[str],
) -> None:
    assert parser.parse_html_project_list(page) == names


def test_parse_html_project_list__invalid_utf8() -> None:
    with pytest.raises(errors.UnreadablePageError):
        parser.parse_html_project_list(b"<a>\xff</a>")


def test_AnchorTextHTMLParser__incremental() -> None:
    html_parser = AnchorTextHTMLParser()
    html_parser.feed("<a href='/a/'>fir")
    html_parser.feed("st</a><a href='/b/'>sec")
    html_parser.feed("ond</a>")
    html_parser.close()
    assert html_parser.names == ["first", "second"]


@pytest.mark.parametrize(
    "name, expected",
    [
        ("href", "first.tar.gz"),
        ("data-yanked", None),
        ("data-requires-python", _Missing.MISSING),
    ],
)
def test_get_attr(name: str, expected: typing.Union[str, None, _Missing]) -> None:
    attrs = [("href", "first.tar.gz"), ("data-yanked", None), ("href", "second")]
    assert get_attr(attrs, name) == expected
