"""Tests for the plain-text patch renderer."""

import pytest

from rdmpatcher.layout import LayoutEngine
from rdmpatcher.models import create_device
from rdmpatcher.render import TextPatchRenderer

EMPTY = ".".center(6)


@pytest.fixture
def assignment(dimmer, spot, par):
    return LayoutEngine().pack([dimmer, spot, par])


@pytest.fixture
def renderer():
    return TextPatchRenderer(cell_width=6)


class TestTextPatchRenderer:
    """Test TextPatchRenderer output."""

    @pytest.mark.unit
    def test_cell_width_minimum(self):
        with pytest.raises(ValueError):
            TextPatchRenderer(cell_width=2)

    @pytest.mark.unit
    def test_header_numbers_are_one_based(self, renderer, assignment):
        assert renderer.header_line(assignment, 0).split() == [str(n) for n in range(1, 9)]
        assert renderer.header_line(assignment, 63).split()[-1] == "512"

    @pytest.mark.unit
    def test_device_spanning_row(self, renderer, assignment):
        assert renderer.lane_line(assignment, 0, 0) == "[" + "Dimmer".ljust(46) + "]"

    @pytest.mark.unit
    def test_stacked_lane(self, renderer, assignment):
        expected = EMPTY * 4 + "[" + "Spot".ljust(16) + "]" + EMPTY
        assert renderer.lane_line(assignment, 0, 1) == expected

    @pytest.mark.unit
    def test_lines_have_equal_width(self, renderer, assignment):
        for row in range(3):
            lines = renderer.render_row(assignment, row)
            assert len(lines) == 3
            assert {len(line) for line in lines} == {48}

    @pytest.mark.unit
    def test_hidden_device_drawn_as_empty(self, renderer, assignment):
        """Devices awaiting the registry are left out of the drawing."""
        assert renderer.lane_line(assignment, 0, 1, hidden={"b"}) == EMPTY * 8

    @pytest.mark.unit
    def test_label_truncated(self):
        renderer = TextPatchRenderer(cell_width=3)
        device = create_device("a", "Dimmer", start_address=1, footprint=1)
        assignment = LayoutEngine().pack([device])
        assert renderer.lane_line(assignment, 0, 0).startswith("[D]")

    @pytest.mark.unit
    def test_uid_used_without_label(self, renderer):
        device = create_device("7a70:1", "", start_address=1, footprint=2)
        assignment = LayoutEngine().pack([device])
        assert "7a70:1" in renderer.lane_line(assignment, 0, 0)

    @pytest.mark.unit
    def test_overflow_uses_braces(self, renderer):
        device = create_device("z", "Strobe", start_address=510, footprint=6)
        assignment = LayoutEngine().pack([device])
        line = renderer.lane_line(assignment, 63, 0)
        assert line.endswith("{" + "Strobe".ljust(16) + "}")

    @pytest.mark.unit
    def test_render_all_rows(self, renderer, assignment):
        text = renderer.render(assignment)
        assert len(text.splitlines()) == 64 * 3

    @pytest.mark.unit
    def test_render_skip_empty_rows(self, renderer, assignment):
        text = renderer.render(assignment, skip_empty_rows=True)
        # Rows 0-2 hold devices, each drawn as a header plus two lanes
        assert len(text.splitlines()) == 9

    @pytest.mark.unit
    def test_render_empty_patch(self, renderer):
        text = renderer.render(LayoutEngine().pack([]), skip_empty_rows=True)
        assert text == ""
