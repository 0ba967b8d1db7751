#!/usr/bin/env python3
"""
Tests for the edit session gesture state machine
"""

import io

import pytest
from PIL import Image

from pixel_forge.core.pixel_forge_exceptions import LastLayerDeletionRefused, ToolError
from pixel_forge.core.pixel_forge_managers import ToolType
from pixel_forge.core.pixel_forge_models import Cell
from pixel_forge.core.pixel_forge_session import (
    CHANGE_COLOR,
    CHANGE_IMAGE,
    CHANGE_LAYERS,
    CHANGE_PREVIEW,
    CHANGE_TOOL,
    IDLE,
    EditSession,
    GestureEvent,
    GestureType,
    ShapeDrag,
    StrokeDrag,
)


@pytest.fixture
def changes(session):
    """List collecting every change kind the session reports"""
    seen = []
    session.add_change_listener(seen.append)
    return seen


def drag(session, *cells):
    """Start on the first cell, move through the rest, end on the last"""
    session.gesture_start(cells[0])
    for cell in cells[1:]:
        session.gesture_move(cell)
    session.gesture_end(cells[-1])


@pytest.mark.unit
class TestInitialState:
    def test_defaults(self, session):
        assert session.state is IDLE
        assert not session.is_dragging
        assert session.current_tool is ToolType.PENCIL
        assert session.current_color == "#ff0000"
        assert session.grid_size == 8
        assert len(session.layer_store) == 1

    def test_flattened_raster_starts_empty(self, session):
        assert session.get_flattened_raster() == [[None] * 8 for _ in range(8)]


@pytest.mark.unit
class TestStrokes:
    def test_pencil_paints_each_visited_cell(self, session, changes):
        session.gesture_start((1, 1))
        assert session.state == StrokeDrag(ToolType.PENCIL, Cell(1, 1))
        session.gesture_move((2, 1))
        session.gesture_move((4, 1))
        session.gesture_end((4, 1))

        rows = session.get_flattened_raster()
        assert rows[1][1] == "#ff0000"
        assert rows[1][2] == "#ff0000"
        assert rows[1][4] == "#ff0000"
        # Skipped cells are not interpolated
        assert rows[1][3] is None
        assert session.state is IDLE
        assert changes.count(CHANGE_IMAGE) == 3

    def test_move_without_start_is_ignored(self, session):
        session.gesture_move((3, 3))
        session.gesture_end((3, 3))
        assert session.read_cell(3, 3) is None

    def test_eraser(self, session):
        drag(session, (0, 0), (1, 0))
        session.set_tool("eraser")
        drag(session, (0, 0))
        assert session.read_cell(0, 0) is None
        assert session.read_cell(1, 0) == "#ff0000"

    def test_off_grid_cells_are_ignored(self, session):
        session.gesture_start(None)
        session.gesture_start((8, 0))
        session.gesture_start((-1, 2))
        assert session.state is IDLE

        session.gesture_start((0, 0))
        session.gesture_move(None)
        session.gesture_move((0, 9))
        assert session.state == StrokeDrag(ToolType.PENCIL, Cell(0, 0))

    def test_strokes_paint_active_layer_only(self, session):
        first = session.active_layer_id
        second = session.add_layer()
        drag(session, (2, 2))
        assert session.read_cell(2, 2, second) == "#ff0000"
        assert session.read_cell(2, 2, first) is None


@pytest.mark.unit
class TestFillAndEyedropper:
    def test_fill_gesture(self, session, changes):
        session.set_tool("fill")
        session.gesture_start((4, 4))
        assert session.state is IDLE
        session.gesture_end((4, 4))
        assert all(cell == "#ff0000" for row in session.get_flattened_raster() for cell in row)
        assert CHANGE_IMAGE in changes

    def test_eyedropper_adopts_color_and_switches_to_pencil(self, session, changes):
        session.layer_store.set_cell(session.active_layer_id, 5, 5, "#00ff00")
        session.set_tool(ToolType.EYEDROPPER)

        session.gesture_start((5, 5))

        assert session.current_color == "#00ff00"
        assert session.current_tool is ToolType.PENCIL
        assert CHANGE_COLOR in changes
        assert changes[-1] == CHANGE_TOOL

    def test_eyedropper_on_empty_cell_changes_nothing(self, session):
        session.set_tool("eyedropper")
        session.gesture_start((0, 0))
        assert session.current_color == "#ff0000"
        assert session.current_tool is ToolType.EYEDROPPER

    def test_eyedropper_reads_active_layer(self, session):
        bottom = session.active_layer_id
        session.layer_store.set_cell(bottom, 1, 1, "#0000ff")
        session.add_layer()
        session.set_tool("eyedropper")

        session.gesture_start((1, 1))

        assert session.current_color == "#ff0000"


@pytest.mark.unit
class TestShapes:
    def test_line_is_previewed_then_committed(self, session, changes):
        session.set_tool("line")
        session.gesture_start((0, 0))
        session.gesture_move((3, 0))

        assert session.state == ShapeDrag(ToolType.LINE, Cell(0, 0), Cell(3, 0))
        assert session.preview_cells() == {Cell(x, 0) for x in range(4)}
        assert session.read_cell(1, 0) is None
        assert CHANGE_IMAGE not in changes

        session.gesture_end((3, 0))

        assert session.state is IDLE
        assert [session.read_cell(x, 0) for x in range(5)] == ["#ff0000"] * 4 + [None]
        assert session.preview_cells() == set()
        assert changes[-2:] == [CHANGE_PREVIEW, CHANGE_IMAGE]

    def test_rectangle_commit_matches_last_preview(self, session):
        session.set_tool("rectangle")
        session.gesture_start((1, 1))
        session.gesture_move((3, 3))
        previewed = session.preview_cells()
        session.gesture_end((5, 5))

        painted = {
            Cell(x, y)
            for y, row in enumerate(session.get_flattened_raster())
            for x, color in enumerate(row)
            if color is not None
        }
        assert painted == previewed
        assert len(painted) == 8
        assert session.read_cell(5, 5) is None
        assert session.read_cell(2, 2) is None

    def test_line_end_without_move_paints_anchor(self, session):
        session.set_tool("line")
        session.gesture_start((2, 2))
        session.gesture_end((6, 2))

        assert session.read_cell(2, 2) == "#ff0000"
        assert session.read_cell(3, 2) is None

    def test_shape_is_one_grid_edit(self, session):
        grid = session.layer_store.active_layer.grid
        before = grid.version
        session.set_tool("rectangle")
        drag(session, (0, 0), (7, 7))
        assert grid.version == before + 1

    def test_ending_off_grid_discards_shape(self, session):
        session.set_tool("line")
        session.gesture_start((0, 0))
        session.gesture_move((5, 5))
        session.gesture_end(None)

        assert session.state is IDLE
        assert session.layer_store.active_layer.grid.is_empty()

    def test_cancel_discards_shape(self, session, changes):
        session.set_tool("rectangle")
        session.gesture_start((0, 0))
        session.gesture_move((4, 4))
        session.cancel_gesture()

        assert session.state is IDLE
        assert session.layer_store.active_layer.grid.is_empty()
        assert changes[-1] == CHANGE_PREVIEW

    def test_tool_change_abandons_drag(self, session):
        session.set_tool("line")
        session.gesture_start((0, 0))
        session.gesture_move((4, 0))
        session.set_tool("pencil")
        session.gesture_end((4, 0))

        assert session.state is IDLE
        assert session.layer_store.active_layer.grid.is_empty()

    def test_new_start_restarts_shape(self, session):
        session.set_tool("line")
        session.gesture_start((0, 0))
        session.gesture_move((4, 0))
        session.gesture_start((0, 2))
        session.gesture_move((2, 2))
        session.gesture_end((2, 2))

        assert session.read_cell(4, 0) is None
        assert session.read_cell(1, 2) == "#ff0000"

    def test_get_preview_cells(self, session):
        cells = session.get_preview_cells("line", (0, 0), (2, 2))
        assert cells == {Cell(0, 0), Cell(1, 1), Cell(2, 2)}
        assert session.layer_store.active_layer.grid.is_empty()

    def test_get_preview_cells_rejects_non_shape_tools(self, session):
        with pytest.raises(ToolError):
            session.get_preview_cells("pencil", (0, 0), (1, 1))


@pytest.mark.unit
class TestEvents:
    def test_handle_event_dispatch(self, session):
        session.handle_event(GestureEvent(GestureType.START, Cell(0, 0)))
        session.handle_event(GestureEvent(GestureType.MOVE, Cell(1, 0)))
        session.handle_event(GestureEvent(GestureType.END, Cell(1, 0)))
        assert session.read_cell(1, 0) == "#ff0000"
        assert session.state is IDLE

    def test_event_from_dict(self):
        event = GestureEvent.from_dict({"type": "move", "cell": {"x": 2, "y": 3}})
        assert event == GestureEvent(GestureType.MOVE, Cell(2, 3))
        assert GestureEvent.from_dict({"type": "end", "cell": None}).cell is None


@pytest.mark.unit
class TestToolAndColor:
    def test_invalid_color_keeps_previous(self, session, changes):
        assert session.set_color("not-a-color") is False
        assert session.current_color == "#ff0000"
        assert CHANGE_COLOR not in changes

    def test_trailing_newline_color_is_rejected(self, session, changes):
        assert session.set_color("#00ff00\n") is False
        assert session.current_color == "#ff0000"
        assert changes == []

    def test_same_color_does_not_notify(self, session, changes):
        assert session.set_color("#FF0000") is True
        assert changes == []

    def test_unknown_tool(self, session):
        with pytest.raises(ToolError):
            session.set_tool("spray")
        assert session.current_tool is ToolType.PENCIL

    def test_removed_listener_is_not_called(self, session):
        seen = []
        session.add_change_listener(seen.append)
        session.remove_change_listener(seen.append)
        session.set_color("#00ff00")
        assert seen == []


@pytest.mark.unit
class TestLayers:
    def test_add_layer_becomes_active(self, session, changes):
        layer_id = session.add_layer()
        assert session.active_layer_id == layer_id
        assert changes == [CHANGE_LAYERS]

    def test_delete_last_layer_is_refused(self, session):
        only = session.active_layer_id
        with pytest.raises(LastLayerDeletionRefused):
            session.delete_layer(only)
        assert only in session.layer_store

    def test_delete_active_reassigns(self, session):
        first = session.active_layer_id
        second = session.add_layer()
        assert session.delete_layer(second) is True
        assert session.active_layer_id == first

    def test_delete_unknown_layer(self, session):
        session.add_layer()
        assert session.delete_layer("missing") is False

    def test_hidden_layer_is_not_composited(self, session):
        layer_id = session.active_layer_id
        drag(session, (0, 0))
        assert session.toggle_visibility(layer_id) is True
        assert session.get_flattened_raster()[0][0] is None
        assert session.read_cell(0, 0) == "#ff0000"

    def test_switching_layers_abandons_drag(self, session):
        first = session.active_layer_id
        session.add_layer()
        session.set_tool("line")
        session.gesture_start((0, 0))
        assert session.set_active_layer(first) is True
        assert session.state is IDLE

    def test_set_active_unknown(self, session):
        assert session.set_active_layer("missing") is False

    def test_clear_active_layer(self, session):
        drag(session, (0, 0), (1, 1))
        assert session.clear_active_layer() is True
        assert session.clear_active_layer() is False
        assert session.layer_store.active_layer.grid.is_empty()


@pytest.mark.unit
class TestExport:
    def test_export_image(self, session):
        drag(session, (7, 7))
        data, name = session.export_image(3)

        assert name == "pixel-art.png"
        image = Image.open(io.BytesIO(data)).convert("RGBA")
        assert image.size == (24, 24)
        assert image.getpixel((23, 23)) == (255, 0, 0, 255)
        assert image.getpixel((20, 20))[3] == 0

    def test_shared_layer_store(self, layer_store):
        session = EditSession(layer_store=layer_store)
        assert session.grid_size == 8
        assert session.layer_store is layer_store
