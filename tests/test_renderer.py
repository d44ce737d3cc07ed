"""
Tests for the renderer and pixel mappers.
"""
import io

import pytest
from prompt_toolkit.data_structures import Size
from prompt_toolkit.output import ColorDepth
from prompt_toolkit.output.vt100 import Vt100_Output

from image_term.cache import PixelCache
from image_term.rendering.renderer import (
    BLOCK_GLYPH,
    Renderer,
    ascii_luminance,
    frame_text,
    print_frame,
    true_color_block,
)
from image_term.rgb import RGB


class TestTrueColorBlock:
    """Tests for the true-color block mapper."""

    def test_style_and_glyph(self):
        """Each cell is two full blocks in the cell's color."""
        assert true_color_block(RGB(255, 128, 0)) == ("fg:#ff8000", "██")
        assert BLOCK_GLYPH == "██"


class TestAsciiLuminance:
    """Tests for the ASCII luminance mapper."""

    @pytest.mark.parametrize("total,expected", [
        (0, " "), (85, " "),
        (86, ":"), (170, ":"),
        (171, ";"), (255, ";"),
        (256, "="), (340, "="),
        (341, "*"), (425, "*"),
        (426, "#"), (510, "#"),
        (511, "@"), (595, "@"),
        (596, "&"), (680, "&"),
        (681, "%"), (765, "%"),
    ])
    def test_bin_edges(self, total, expected):
        """Bins are inclusive ranges of width 85."""
        # Red carries the remainder so red + 2 * green == total.
        g = min(255, total // 2)
        r = total - 2 * g
        assert ascii_luminance(RGB(r, g, 0)) == ("", expected)

    def test_green_counted_twice(self):
        """The sum is red + green + green; blue does not count."""
        # r + 2g = 0 + 200 = 200 -> ";" ; a true r+g+b sum (100) would give ":".
        assert ascii_luminance(RGB(0, 100, 0))[1] == ";"
        assert ascii_luminance(RGB(0, 0, 255))[1] == " "
        assert ascii_luminance(RGB(255, 255, 255))[1] == "%"


class TestRenderer:
    """Tests for Renderer."""

    def test_ascii_frame(self):
        """One line per row, cells left to right."""
        cache = PixelCache([
            [RGB(0, 0, 0), RGB(255, 255, 255)],
            [RGB(255, 255, 255), RGB(0, 0, 0)],
        ])
        frame = Renderer().render(cache, "ascii")
        assert frame == [[("", " %")], [("", "% ")]]
        assert frame_text(frame) == " %\n% \n"

    def test_color_runs_merge(self):
        """Neighbouring cells with one color share a run."""
        red, blue = RGB(255, 0, 0), RGB(0, 0, 255)
        cache = PixelCache([[red, red, blue]])
        frame = Renderer().render(cache, "color")
        assert frame == [[("fg:#ff0000", "████"), ("fg:#0000ff", "██")]]

    def test_unknown_mode_falls_back(self):
        """Unknown modes use the default color mapper."""
        cache = PixelCache([[RGB(1, 2, 3)]])
        assert Renderer().render(cache, "sixel") == [[("fg:#010203", "██")]]

    def test_register_custom_mapper(self):
        """Any RGB -> (style, text) callable can be registered."""
        renderer = Renderer()
        renderer.register("threshold", lambda p: ("", "-" if p.r > 128 else "+"))
        cache = PixelCache([[RGB(200, 0, 0), RGB(10, 0, 0)]])
        assert frame_text(renderer.render(cache, "threshold")) == "-+\n"

    def test_empty_cache(self):
        """An empty cache renders no lines."""
        assert Renderer().render(PixelCache()) == []

    def test_print_frame_true_color(self):
        """print_frame writes the glyphs with a 24-bit color escape."""
        buf = io.StringIO()
        output = Vt100_Output(
            buf,
            lambda: Size(rows=24, columns=80),
            term="xterm",
            default_color_depth=ColorDepth.TRUE_COLOR,
        )
        frame = Renderer().render(PixelCache([[RGB(9, 9, 9)]]))
        print_frame(frame, output=output)
        text = buf.getvalue()
        assert "██" in text
        assert "38;2;9;9;9" in text
