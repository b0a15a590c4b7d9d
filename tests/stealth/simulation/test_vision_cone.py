# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Tests for VisionConeCalculator and VisibilityOverlay.

Covers the 90 degree fan shape, Bresenham wall occlusion, the player-visible
mark and overlay aggregation across guards.
"""

import pytest

from stealth.simulation.grid import Direction
from stealth.simulation.table import GuardState
from stealth.simulation.vision import (
    VisibilityKind,
    VisibilityOverlay,
    VisionConeCalculator,
    cone_cells,
)


def cells_of(cone):
    return {cell for cell, _ in cone}


class TestConeShape:

    @pytest.mark.unit
    def test_range_one_is_three_cells(self):
        assert set(cone_cells((5, 5), Direction.NORTH, 1, 20)) == {(4, 4), (4, 5), (4, 6)}

    @pytest.mark.unit
    def test_cell_count_without_edges(self):
        # 3 + 5 + 7 + 9
        assert len(cone_cells((10, 10), Direction.WEST, 4, 20)) == 24

    @pytest.mark.unit
    def test_zero_range_sees_nothing(self):
        assert cone_cells((10, 10), Direction.EAST, 0, 20) == []

    @pytest.mark.unit
    def test_clipped_at_table_edge(self):
        cells = cone_cells((0, 0), Direction.NORTH, 4, 20)
        assert cells == []

    @pytest.mark.unit
    def test_range_beyond_table_is_capped(self):
        full = cone_cells((10, 10), Direction.WEST, 20, 20)
        assert cone_cells((10, 10), Direction.WEST, 10**9, 20) == full
        assert len(full) > 0

    @pytest.mark.unit
    def test_never_includes_own_cell_or_behind(self):
        cells = cone_cells((10, 10), Direction.SOUTH, 3, 20)
        assert (10, 10) not in cells
        assert all(r > 10 for r, _ in cells)

    @pytest.mark.unit
    def test_lateral_bounded_by_forward(self):
        cells = set(cone_cells((10, 10), Direction.EAST, 3, 20))
        assert (10, 11) in cells
        assert (11, 11) in cells
        assert (12, 11) not in cells
        assert (12, 12) in cells


class TestOcclusion:

    @pytest.mark.unit
    def test_wall_blocks_player(self, walled_table):
        guard = walled_table.guards[0]
        cone = cells_of(VisionConeCalculator().compute(guard, walled_table))
        assert (5, 5) not in cone
        assert (5, 7) in cone

    @pytest.mark.unit
    def test_wall_cell_itself_not_visible(self, walled_table):
        guard = walled_table.guards[0]
        cone = cells_of(VisionConeCalculator().compute(guard, walled_table))
        assert (5, 6) not in cone

    @pytest.mark.unit
    def test_open_line_sees_player(self, open_table):
        guard = open_table.guards[0]
        cone = VisionConeCalculator().compute(guard, open_table)
        assert ((5, 5), VisibilityKind.PLAYER_VISIBLE) in cone
        assert ((5, 6), VisibilityKind.VISIBLE) in cone

    @pytest.mark.unit
    def test_player_and_guards_do_not_block(self, make_table):
        viewer = GuardState(position=(5, 9), facing=Direction.WEST, vision_range=4)
        between = GuardState(position=(5, 7), facing=Direction.EAST, vision_range=0)
        table = make_table(guards=[viewer, between])
        cone = cells_of(VisionConeCalculator().compute(viewer, table))
        assert (5, 7) in cone
        assert (5, 5) in cone

    @pytest.mark.unit
    def test_compute_is_pure(self, open_table):
        guard = open_table.guards[0]
        before = (guard.position, guard.facing, open_table.get_player_coords())
        VisionConeCalculator().compute(guard, open_table)
        assert (guard.position, guard.facing, open_table.get_player_coords()) == before


class TestOverlay:

    @pytest.mark.unit
    def test_compute_overlay_marks_player(self, open_table):
        overlay = VisionConeCalculator().compute_overlay(open_table)
        assert overlay.kind_at(5, 5) == VisibilityKind.PLAYER_VISIBLE
        assert overlay.kind_at(5, 6) == VisibilityKind.VISIBLE
        assert overlay.kind_at(0, 0) == VisibilityKind.NOT_VISIBLE

    @pytest.mark.unit
    def test_overlay_is_union_of_cones(self, make_table):
        a = GuardState(position=(2, 2), facing=Direction.SOUTH, vision_range=2)
        b = GuardState(position=(15, 15), facing=Direction.NORTH, vision_range=2)
        table = make_table(guards=[a, b])
        calc = VisionConeCalculator()
        overlay = calc.compute_overlay(table)
        expected = cells_of(calc.compute(a, table)) | cells_of(calc.compute(b, table))
        assert set(overlay.visible_cells()) == expected

    @pytest.mark.unit
    def test_recompute_clears_stale_cells(self, open_table):
        calc = VisionConeCalculator()
        overlay = calc.compute_overlay(open_table)
        open_table.guards[0].facing = Direction.EAST
        calc.compute_overlay(open_table, overlay)
        assert not overlay.is_visible(5, 5)
        assert overlay.is_visible(5, 9)

    @pytest.mark.unit
    def test_merge_keeps_stronger_kind(self):
        overlay = VisibilityOverlay(4)
        overlay.merge([((1, 1), VisibilityKind.PLAYER_VISIBLE)])
        overlay.merge([((1, 1), VisibilityKind.VISIBLE)])
        assert overlay.kind_at(1, 1) == VisibilityKind.PLAYER_VISIBLE

    @pytest.mark.unit
    def test_relocate_player_moves_mark(self):
        overlay = VisibilityOverlay(4)
        overlay.merge([((1, 1), VisibilityKind.PLAYER_VISIBLE), ((1, 2), VisibilityKind.VISIBLE)])
        overlay.relocate_player((1, 1), (1, 2))
        assert overlay.kind_at(1, 1) == VisibilityKind.VISIBLE
        assert overlay.kind_at(1, 2) == VisibilityKind.PLAYER_VISIBLE

    @pytest.mark.unit
    def test_relocate_into_dark_cell(self):
        overlay = VisibilityOverlay(4)
        overlay.relocate_player((0, 0), (0, 1))
        assert overlay.kind_at(0, 1) == VisibilityKind.NOT_VISIBLE

    @pytest.mark.unit
    def test_grid_view_is_read_only(self):
        overlay = VisibilityOverlay(3)
        with pytest.raises(ValueError):
            overlay.grid[0, 0] = 1

    @pytest.mark.unit
    def test_copy_and_equality(self):
        overlay = VisibilityOverlay(3)
        overlay.merge([((0, 1), VisibilityKind.VISIBLE)])
        clone = overlay.copy()
        assert clone == overlay
        assert clone.tobytes() == overlay.tobytes()
        clone.clear()
        assert clone != overlay
