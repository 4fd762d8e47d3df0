"""Runtime-level tests: registration validation, tabs, export and rendering."""

from __future__ import annotations

import unittest

from devdash import DashboardConfig, DevDash, RegistrationError
from devdash.help_tab import SHORTCUTS_TAB_TITLE, ShortcutsGuide


class Writer:
    def __init__(self, name: str = "writer") -> None:
        self._name = name
        self.log = None

    def name(self) -> str:
        return self._name

    def set_log(self, log) -> None:
        self.log = log


class Mode:
    def __init__(self) -> None:
        self.val = "dev"

    def name(self) -> str:
        return "mode"

    def label(self) -> str:
        return "Mode"

    def value(self) -> str:
        return self.val

    def change(self, new_value: str) -> None:
        self.val = new_value

    def shortcuts(self) -> list[dict[str, str]]:
        return [{"p": "production"}]


class BrokenMode(Mode):
    def value(self) -> str:
        raise RuntimeError("backend down")


class ChattyWizard:
    """Streams many lines per step; one answer finishes it."""

    def __init__(self, lines_per_step: int = 20) -> None:
        self.lines_per_step = lines_per_step
        self.answers: list[str] = []
        self.log = None

    def name(self) -> str:
        return "wizard"

    def label(self) -> str:
        return "Wizard"

    def value(self) -> str:
        return f"step{len(self.answers)}"

    def change(self, new_value: str) -> None:
        if not new_value:
            return
        for n in range(self.lines_per_step):
            self.log(f"line {n}")
        self.answers.append(new_value)

    def waiting_for_user(self) -> bool:
        return not self.answers

    def set_log(self, log) -> None:
        self.log = log

    def always_show_all_logs(self) -> bool:
        return True


def make_dash(**kwargs) -> DevDash:
    kwargs.setdefault("no_color", True)
    return DevDash(DashboardConfig(**kwargs))


class RegistrationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.dash = make_dash()
        self.addCleanup(self.dash.close)

    def test_none_tab_is_rejected_with_usage(self) -> None:
        with self.assertRaises(RegistrationError) as ctx:
            self.dash.add_handler(Writer(), "", None)
        self.assertIn("DevDash.add_handler", str(ctx.exception))
        self.assertIn("new_tab_section", str(ctx.exception))

    def test_wrong_tab_type_is_rejected(self) -> None:
        with self.assertRaises(RegistrationError) as ctx:
            self.dash.add_handler(Writer(), "", "BUILD")
        self.assertIn("invalid tab section type str", str(ctx.exception))

    def test_foreign_tab_is_rejected(self) -> None:
        other = make_dash()
        self.addCleanup(other.close)
        foreign = other.new_tab_section("BUILD")

        with self.assertRaises(RegistrationError) as ctx:
            self.dash.add_handler(Writer(), "", foreign)
        self.assertIn("different DevDash instance", str(ctx.exception))

    def test_unknown_handler_shape_is_rejected(self) -> None:
        tab = self.dash.new_tab_section("BUILD")
        with self.assertRaises(RegistrationError):
            self.dash.add_handler(object(), "", tab)

    def test_registration_returns_field_for_primary_capability(self) -> None:
        tab = self.dash.new_tab_section("BUILD")
        self.assertIsNone(self.dash.add_handler(Writer(), "#ffffff", tab))
        field = self.dash.add_handler(Mode(), "", tab, timeout=5)
        self.assertEqual(field.adapter.timeout(), 5.0)
        self.assertEqual(self.dash.shortcuts.get("p").tab_index, tab.index)


class TabTests(unittest.TestCase):
    def test_shortcuts_tab_comes_first(self) -> None:
        dash = make_dash()
        self.addCleanup(dash.close)
        dash.new_tab_section("BUILD", "Compiler")

        self.assertEqual(dash.section_titles(), [SHORTCUTS_TAB_TITLE, "BUILD"])
        self.assertIsInstance(dash.tabs[0].fields[0].adapter.name_fn.__self__, ShortcutsGuide)

    def test_shortcuts_tab_can_be_disabled(self) -> None:
        dash = make_dash(show_shortcuts_tab=False)
        self.addCleanup(dash.close)
        self.assertEqual(dash.section_titles(), [])
        self.assertIsNone(dash.active_tab)

    def test_start_shows_help_text(self) -> None:
        dash = make_dash(app_name="Shop")
        self.addCleanup(dash.close)
        dash.new_tab_section("BUILD")
        dash.add_handler(Mode(), "", dash.tabs[1])

        dash.start()
        text = dash.export_tab_logs(SHORTCUTS_TAB_TITLE)
        self.assertIn("Shop keyboard shortcuts", text)
        self.assertIn("production (mode)", text)

    def test_set_active_tab(self) -> None:
        dash = make_dash()
        self.addCleanup(dash.close)
        build = dash.new_tab_section("BUILD")

        dash.set_active_tab(build)
        self.assertIs(dash.active_tab, build)
        self.assertGreaterEqual(dash.pump_events(), 1)

        with self.assertLogs("devdash.runtime.app", level="WARNING"):
            dash.set_active_tab("nope")
        self.assertIs(dash.active_tab, build)

    def test_export_tab_logs(self) -> None:
        dash = make_dash()
        self.addCleanup(dash.close)
        tab = dash.new_tab_section("BUILD")
        writer = Writer()
        dash.add_handler(writer, "", tab)

        self.assertEqual(dash.export_tab_logs("BUILD"), "")
        writer.log("ready")
        self.assertTrue(dash.export_tab_logs("BUILD").endswith("ready"))
        self.assertEqual(dash.tab_logs_plain(tab), dash.export_tab_logs("BUILD"))
        self.assertIsNone(dash.export_tab_logs("MISSING"))


class LoopSurfaceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.dash = make_dash(show_shortcuts_tab=False)
        self.addCleanup(self.dash.close)

    def test_refresh_ui_is_applied_by_pump(self) -> None:
        self.dash.dirty = False
        self.dash.refresh_ui()
        self.assertEqual(self.dash.pump_events(timeout=0.5), 1)
        self.assertTrue(self.dash.dirty)
        self.assertEqual(self.dash.pump_events(), 0)

    def test_commit_settles_through_pump(self) -> None:
        tab = self.dash.new_tab_section("BUILD")
        mode = Mode()
        self.dash.add_handler(mode, "", tab)

        for key in ("ENTER", "BACKSPACE", "BACKSPACE", "BACKSPACE", "q", "a", "ENTER"):
            self.assertFalse(self.dash.handle_key(key))
        field = tab.fields[0]
        self.assertTrue(field.executor.operation.is_running or mode.val == "qa")
        for _ in range(40):
            self.dash.pump_events(timeout=0.05)
            if not field.executor.is_running and mode.val == "qa":
                break
        self.assertEqual(mode.val, "qa")
        self.assertFalse(self.dash.dispatcher.editing)

    def test_ctrl_c_quits(self) -> None:
        self.assertTrue(self.dash.handle_key("CTRL_C"))
        self.assertTrue(self.dash.exit_event.is_set())

    def test_build_context_renders_plain_frame(self) -> None:
        from devdash.render import build_frame

        tab = self.dash.new_tab_section("BUILD")
        writer = Writer()
        self.dash.add_handler(writer, "#ff0000", tab)
        writer.log("compiled")
        self.dash.resize(60, 10)
        tab.scroll_offset = 99

        ctx = self.dash.build_context()
        self.assertEqual(tab.scroll_offset, 0)
        frame = build_frame(ctx)
        self.assertEqual(frame.count("\033"), 2)
        self.assertIn("DevDash/BUILD", frame)
        self.assertIn("compiled", frame)

    def test_resize_enforces_minimum(self) -> None:
        self.dash.resize(5, 1)
        self.assertEqual((self.dash.columns, self.dash.lines), (20, 4))


class FaultContainmentTests(unittest.TestCase):
    def setUp(self) -> None:
        self.dash = make_dash(show_shortcuts_tab=False)
        self.addCleanup(self.dash.close)

    def test_failing_value_does_not_escape_render_or_keys(self) -> None:
        tab = self.dash.new_tab_section("BUILD")
        self.dash.add_handler(BrokenMode(), "", tab)

        with self.assertLogs("devdash.field.field", level="ERROR"):
            ctx = self.dash.build_context()
            self.assertFalse(self.dash.handle_key("ENTER"))
        self.assertEqual(ctx.footer.text, "")
        self.assertTrue(self.dash.dispatcher.editing)
        self.assertEqual(tab.fields[0].temp_edit_value, "")

    def test_settled_event_survives_a_full_queue(self) -> None:
        dash = make_dash(show_shortcuts_tab=False, queue_capacity=10)
        self.addCleanup(dash.close)
        tab = dash.new_tab_section("SETUP")
        wizard = ChattyWizard()
        dash.add_handler(wizard, "", tab)

        dash.start()
        self.assertTrue(dash.dispatcher.editing)
        dash.handle_key("x")
        dash.handle_key("ENTER")
        for _ in range(40):
            dash.pump_events(timeout=0.05)
            if not dash.dispatcher.awaiting_operation:
                break

        self.assertGreater(dash.events.dropped, 0)
        self.assertEqual(wizard.answers, ["step0x"])
        self.assertFalse(dash.dispatcher.awaiting_operation)
        self.assertFalse(dash.dispatcher.editing)


if __name__ == "__main__":
    unittest.main()
