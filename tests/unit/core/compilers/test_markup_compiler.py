from __future__ import annotations

"""
Unit tests for the MarkupCompiler and the shared Compiler contract.
"""

import asyncio
from pathlib import Path
from typing import Callable, Dict, List

import pytest

from modforge.core.compilers.markup import MarkupCompiler, substitute_basepath


def test_markup_without_tokens_is_unchanged() -> None:
    """TC-01: Markup without tokens or islands round-trips byte for byte."""
    html = "<html>\n  <body>\r\n\t<p>[plain] text</p>\n</body>\n</html>\n"

    assert asyncio.run(MarkupCompiler(content=html).parse()) == html


def test_basepath_token_is_case_insensitive() -> None:
    """TC-02: Every spelling of the basepath token is substituted."""
    html = '<a href="{$basepath}/a">{$BasePath}</a><img src="{$BASEPATH}/b.png">'
    out = asyncio.run(MarkupCompiler(content=html, basepath="/app/1").parse())

    assert out == '<a href="/app/1/a">/app/1</a><img src="/app/1/b.png">'
    assert substitute_basepath("x{$basepath}y", "$1\\g<0>") == "x$1\\g<0>y"


def test_multiline_style_island_is_compiled_in_place() -> None:
    """TC-03: Islands are compacted and surrounding lines kept intact."""
    html = "<head>\n<style>{css}\nbody {\n  margin: 0;\n}\n{/css}</style>\n</head>\n"
    out = asyncio.run(MarkupCompiler(content=html).parse())

    assert out == "<head>\n<style>body{margin:0}</style>\n</head>\n"


def test_several_islands_and_basepath_inside_island() -> None:
    """TC-04: Each island is compiled on its own with the basepath applied."""
    html = (
        "{css}a { color: red; }{/css}\n<p>between</p>\n"
        "{CSS}.x { background: url({$basepath}/i.png); }{/CSS}"
    )
    out = asyncio.run(MarkupCompiler(content=html, basepath="/b").parse())

    assert out == "a{color:red}\n<p>between</p>\n.x{background:url(/b/i.png)}"


def test_default_basepath_is_file_directory(make_tree: Callable[[Dict[str, str]], Path]) -> None:
    """TC-05: Files default to their own directory, content to '/'."""
    root = make_tree({"views/home/page.html": "<base href=\"{$basepath}\">"})

    out = asyncio.run(MarkupCompiler(file="views/home/page.html", root=root).parse())
    assert out == '<base href="views/home">'
    assert MarkupCompiler(content="").basepath == "/"


def test_parse_invokes_callback_once(make_tree: Callable[[Dict[str, str]], Path]) -> None:
    """TC-06: The callback receives the result exactly once, sync or async."""
    root = make_tree({"page.html": "<p>hi</p>"})
    received: List[str] = []

    async def async_sink(result: str) -> None:
        received.append("async:" + result)

    async def scenario() -> str:
        compiler = MarkupCompiler(file="page.html", root=root, basepath="/")
        await compiler.parse(received.append)
        return await MarkupCompiler(content="<i/>").parse(async_sink)

    assert asyncio.run(scenario()) == "<i/>"
    assert received == ["<p>hi</p>", "async:<i/>"]


def test_compiler_requires_input() -> None:
    """TC-07: A compiler built from nothing is rejected."""
    with pytest.raises(ValueError):
        MarkupCompiler()


def test_missing_file_raises(tmp_path: Path) -> None:
    """TC-08: Read failures propagate to the caller."""
    with pytest.raises(FileNotFoundError):
        asyncio.run(MarkupCompiler(file="nope.html", root=tmp_path).parse())


def test_file_markup_keeps_crlf(tmp_path: Path) -> None:
    """TC-09: CRLF line endings of a file survive compilation, islands included."""
    (tmp_path / "page.html").write_bytes(b"<a>\r\n<style>{css}\r\nb { top: 0; }\r\n{/css}</style>\r\n<b>\r\n")
    out = asyncio.run(MarkupCompiler(file="page.html", root=tmp_path, basepath="/x").parse())

    assert out == "<a>\r\n<style>b{top:0}</style>\r\n<b>\r\n"


def test_literal_sentinel_text_is_preserved() -> None:
    """TC-10: Text that looks like the internal newline marker is left alone."""
    html = "<p>[[__BR__]]</p>\n<i>[[__BR__1]]</i>\n{css}a { top: 0; }{/css}\n"

    assert asyncio.run(MarkupCompiler(content=html).parse()) == (
        "<p>[[__BR__]]</p>\n<i>[[__BR__1]]</i>\na{top:0}\n"
    )
