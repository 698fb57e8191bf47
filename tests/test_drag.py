"""Tests for drag-to-address calculations."""

import pytest

from rdmpatcher.layout import DragController, GeometryMapper, LayoutEngine, compute_drop_address
from rdmpatcher.layout.drag import clamp_delta
from rdmpatcher.models import AddressSpace


@pytest.fixture
def controller():
    return DragController(GeometryMapper(AddressSpace()))


class TestComputeDropAddress:
    """The drop formula."""

    @pytest.mark.unit
    def test_origin_is_address_one(self):
        assert compute_drop_address(0, 0, 50, 28, 8, 64) == 1

    @pytest.mark.unit
    def test_second_cell(self):
        assert compute_drop_address(50, 0, 50, 28, 8, 64) == 2

    @pytest.mark.unit
    def test_second_row(self):
        assert compute_drop_address(0, 28, 50, 28, 8, 64) == 9

    @pytest.mark.unit
    def test_centre_decides(self):
        # Left edge in cell 0, centre in cell 1
        assert compute_drop_address(30, 0, 50, 28, 8, 64, half_width_px=25) == 2

    @pytest.mark.unit
    def test_far_corner_is_last_address(self):
        assert compute_drop_address(10_000, 10_000, 50, 28, 8, 64) == 512

    @pytest.mark.unit
    @pytest.mark.parametrize("cell_width", [7, 12.5, 50, 101])
    @pytest.mark.parametrize("cell_height", [28, 42, 57])
    def test_always_in_range(self, cell_width, cell_height):
        for dx in range(0, 2000, 37):
            for dy in range(0, 5000, 211):
                address = compute_drop_address(
                    dx, dy, cell_width, cell_height, 8, 64,
                    half_width_px=cell_width / 2, half_height_px=7,
                )
                assert 1 <= address <= 512


class TestClampDelta:
    """Negative drags snap to the origin."""

    @pytest.mark.unit
    def test_negative(self):
        assert clamp_delta(-12) == 0

    @pytest.mark.unit
    def test_positive(self):
        assert clamp_delta(12.5) == 12.5


class TestDragController:
    """Controller and session behaviour."""

    @pytest.mark.unit
    def test_propose_clamps_negative(self, controller):
        assert controller.propose(-100, -100, 400, 1) == 1

    @pytest.mark.unit
    def test_propose_uses_row_height(self, controller):
        # Two lanes: rows are 42px tall
        assert controller.propose(0, 42, 400, 2) == 9
        assert controller.propose(0, 41, 400, 2) == 1

    @pytest.mark.unit
    def test_limits(self, controller):
        limits = controller.drag_limits(400, 28, 50, 14)
        assert limits.left == 0
        assert limits.top == 0
        assert limits.width == 349
        assert limits.height == 64 * 28 - 15

    @pytest.mark.unit
    def test_session_drop(self, controller, dimmer):
        assignment = LayoutEngine().pack([dimmer])
        session = controller.begin(dimmer, assignment, 400)
        assert session.active
        assert session.device_width_px == 50
        assert session.device_height_px == 14

        # Centre lands at (125, 35): cell 2 of row 1
        assert session.drop(100, 28) == 11
        assert not session.active

    @pytest.mark.unit
    def test_session_drop_twice(self, controller, dimmer):
        session = controller.begin(dimmer, LayoutEngine().pack([dimmer]), 400)
        session.drop(0, 0)
        assert session.drop(0, 0) is None

    @pytest.mark.unit
    def test_cancelled_session(self, controller, dimmer):
        session = controller.begin(dimmer, LayoutEngine().pack([dimmer]), 400)
        session.cancel()
        assert session.drop(100, 100) is None

    @pytest.mark.unit
    def test_geometry_captured_at_begin(self, controller, dimmer, spot):
        session = controller.begin(dimmer, LayoutEngine().pack([dimmer]), 400)
        assert session.lane_count == 1
        # A later pack with more lanes does not affect the session
        LayoutEngine().pack([dimmer, spot])
        assert session.drop(0, 28) == 9
