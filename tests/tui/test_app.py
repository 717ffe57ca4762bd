"""Tests for key routing in the explorer app, run headless."""

import asyncio

from kvlens.tui import ExplorerApp
from kvlens.views import StatusDone, StatusPhase, ViewKind
from kvlens.views.schema import schema_from_dict


def run_with_keys(app, keys, before=None):
    """Mount *app* headless, optionally call *before*, then press *keys*."""

    async def scenario():
        async with app.run_test() as pilot:
            await pilot.pause()
            if before is not None:
                before(app)
                await pilot.pause()
            for key in keys:
                await pilot.press(key)

    asyncio.run(scenario())


def status_app():
    schema = schema_from_dict(
        {
            "displaySchema": "v1",
            "status": {"titleField": "title", "doneBehavior": "wait-for-key"},
        }
    )
    return ExplorerApp({"title": "Deploying"}, schema=schema)


def list_app(providers):
    schema = schema_from_dict({"displaySchema": "v1", "list": {"titleField": "name"}})
    return ExplorerApp(providers, schema=schema)


class TestStatusKeys:
    """Test that every key reaches the status view."""

    def test_tab_quits_after_completion(self):
        app = status_app()
        views = []

        def finish(app):
            app.dispatch(StatusDone(message="Live"))
            views.append(app.current_view)

        run_with_keys(app, ["tab"], before=finish)
        assert views[0].phase is StatusPhase.SUCCESS
        assert views[0].quitting
        assert app._quitting

    def test_shift_tab_quits_after_completion(self):
        app = status_app()
        run_with_keys(app, ["shift+tab"], before=lambda app: app.dispatch(StatusDone()))
        assert app._quitting

    def test_tab_while_waiting_keeps_running(self):
        app = status_app()
        views = []
        run_with_keys(app, ["tab"], before=lambda app: views.append(app.current_view))
        assert views[0].phase is StatusPhase.WAITING
        assert not app._quitting


class TestListKeys:
    """Test Home and End reaching the list view."""

    def test_end_and_home_move_selection(self, providers):
        app = list_app(providers)
        selections = []

        def record_selection(app):
            selections.append(app.current_view.selected)

        async def scenario():
            async with app.run_test() as pilot:
                await pilot.pause()
                assert app.view_state.mode is ViewKind.LIST
                await pilot.press("end")
                record_selection(app)
                await pilot.press("home")
                record_selection(app)

        asyncio.run(scenario())
        assert selections == [len(providers) - 1, 0]

    def test_home_moves_cursor_without_a_view(self, record):
        app = ExplorerApp(record)
        positions = []

        async def scenario():
            async with app.run_test() as pilot:
                await pilot.pause()
                app.expression.value = "_.items"
                await pilot.press("home")
                positions.append(app.expression.cursor_position)
                await pilot.press("end")
                positions.append(app.expression.cursor_position)

        asyncio.run(scenario())
        assert positions == [0, len("_.items")]
