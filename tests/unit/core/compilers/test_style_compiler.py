from __future__ import annotations

"""
Unit tests for the StyleCompiler.
"""

import asyncio

from modforge.core.compilers.style import StyleCompiler


def test_style_is_compacted() -> None:
    """TC-01: Comments and insignificant whitespace are removed."""
    css = "/* header */\n.a  >  .b {\n  color : red ;\n  margin: 0 auto;\n}\n\n.c, .d { top: 0 }\n"
    out = asyncio.run(StyleCompiler(content=css).parse())

    assert out == ".a>.b{color:red;margin:0 auto}.c,.d{top:0}"


def test_style_basepath_substitution() -> None:
    """TC-02: The basepath token is only replaced when a basepath is given."""
    css = ".logo { background: url({$BASEPATH}/logo.png); }"

    assert asyncio.run(StyleCompiler(content=css, basepath="/s/1").parse()) == (
        ".logo{background:url(/s/1/logo.png)}"
    )
    assert "{$BASEPATH}" in asyncio.run(StyleCompiler(content=css).parse())


def test_style_keeps_descendant_pseudo_class_space() -> None:
    """TC-03: 'div :first-child' differs from 'div:first-child' and stays so."""
    css = "div :first-child { color : red; }\na:hover{ top :0 }\n@media print { p { margin : 0 } }"
    out = asyncio.run(StyleCompiler(content=css).parse())

    assert out == "div :first-child{color:red}a:hover{top:0}@media print{p{margin:0}}"
