import io

import pytest

from synthfont import mac, name_table, os2_table, sfnt, utf16

NAME_STRINGS = {
    "copyright": "Copyright 2024 Sample Foundry",
    "familyName": "Sample Sans",
    "styleName": "Bold",
    "fullName": "Sample Sans Bold",
    "psName": "SampleSans-Bold",
    "typographicFamily": "Sample",
}


def build_fonttools_font(name_strings=NAME_STRINGS, weight_class=700) -> bytes:
    """
    a complete TrueType font written by fontTools
    """
    fontBuilder = pytest.importorskip("fontTools.fontBuilder")
    ttGlyphPen = pytest.importorskip("fontTools.pens.ttGlyphPen")

    fb = fontBuilder.FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder([".notdef", "space"])
    fb.setupCharacterMap({32: "space"})

    pen = ttGlyphPen.TTGlyphPen(None)
    pen.moveTo((100, 0))
    pen.lineTo((100, 700))
    pen.lineTo((500, 700))
    pen.lineTo((500, 0))
    pen.closePath()
    fb.setupGlyf({".notdef": pen.glyph(), "space": ttGlyphPen.TTGlyphPen(None).glyph()})

    fb.setupHorizontalMetrics({".notdef": (600, 100), "space": (250, 0)})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable(name_strings)
    fb.setupOS2(usWeightClass=weight_class, sTypoAscender=800, usWinAscent=800, usWinDescent=200)
    fb.setupPost()

    buf = io.BytesIO()
    fb.save(buf)
    return buf.getvalue()


@pytest.fixture
def fonttools_font():
    return build_fonttools_font()


@pytest.fixture
def font_dir(tmp_path):
    """
    a small font tree, one broken font and one file that is not a font
    """
    root = tmp_path / "fonts"
    (root / "truetype" / "sample").mkdir(parents=True)
    (root / "opentype").mkdir()

    regular = sfnt(
        [
            (b"OS/2", os2_table(400)),
            (
                b"name",
                name_table(
                    [
                        (1, 0, 0, 1, mac("Sample")),
                        (1, 0, 0, 2, mac("Regular")),
                        (3, 1, 1033, 4, utf16("Sample Regular")),
                        (3, 1, 1033, 6, utf16("Sample-Regular")),
                    ]
                ),
            ),
        ]
    )
    bold = sfnt(
        [
            (b"OS/2", os2_table(700)),
            (
                b"name",
                name_table(
                    [
                        (3, 1, 1033, 1, utf16("Sample Bold")),
                        (3, 1, 1033, 2, utf16("Bold")),
                        (3, 1, 1033, 16, utf16("Sample")),
                    ]
                ),
            ),
        ]
    )
    (root / "truetype" / "sample" / "Sample-Regular.ttf").write_bytes(regular)
    (root / "opentype" / "Sample-Bold.OTF").write_bytes(bold)
    (root / "truetype" / "broken.ttf").write_bytes(regular[:20])
    (root / "README.txt").write_text("not a font")
    return root
