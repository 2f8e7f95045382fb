import pytest

from logscope.config import Config
from logscope.console import EventKind, LogConsole
from logscope.errors import ConfigurationError, ExportWriteError
from logscope.ingestion import IngestionAdapter
from logscope.models import FilterState, LogLevel

from conftest import make_entry, raw_record


def test_append_fires_follow_effect_once(console, scroll_calls) -> None:
    console.append(make_entry())
    assert scroll_calls == [True]


def test_paused_view_does_not_jump_until_jump_to_latest(console, scroll_calls) -> None:
    console.append(make_entry())
    console.report_at_bottom(False)
    console.append(make_entry())
    console.append(make_entry())
    assert scroll_calls == [True]

    console.jump_to_latest()
    assert scroll_calls == [True, True]
    assert console.scroll_state.auto_follow

    console.append(make_entry())
    assert len(scroll_calls) == 3


def test_listeners_run_in_registration_order_after_mutation(console) -> None:
    seen = []
    console.add_listener(lambda event: seen.append(("first", event.kind, len(console.snapshot()))))
    console.add_listener(lambda event: seen.append(("second", event.kind, len(console.snapshot()))))

    console.append(make_entry())

    assert seen == [("first", EventKind.APPENDED, 1), ("second", EventKind.APPENDED, 1)]


def test_event_carries_appended_entry(console) -> None:
    events = []
    console.add_listener(events.append)
    entry = make_entry()
    console.append(entry)

    assert events[0].entry is entry
    assert events[0].kinds == frozenset({EventKind.APPENDED})


def test_remove_listener(console) -> None:
    events = []
    remove = console.add_listener(events.append)
    remove()
    console.append(make_entry())
    assert events == []


def test_failing_listener_does_not_block_others(console) -> None:
    events = []

    def broken(event):
        raise RuntimeError("boom")

    console.add_listener(broken)
    console.add_listener(events.append)
    console.append(make_entry())

    assert len(events) == 1


def test_batch_notifies_once(console, scroll_calls) -> None:
    events = []
    console.add_listener(events.append)

    with console.batch():
        console.append(make_entry())
        console.append(make_entry())
        with console.batch():
            console.set_search_term("x")

    assert len(events) == 1
    assert events[0].kind is EventKind.BATCH
    assert events[0].kinds == frozenset({EventKind.APPENDED, EventKind.SEARCH_CHANGED})
    assert scroll_calls == [True]


def test_jump_inside_batch_fires_effect_once(console, scroll_calls) -> None:
    console.report_at_bottom(False)

    with console.batch():
        console.append(make_entry())
        console.jump_to_latest()

    assert scroll_calls == [True]
    assert console.scroll_state.auto_follow


def test_resume_inside_batch_fires_effect_once(console, scroll_calls) -> None:
    console.set_auto_scroll(False)

    with console.batch():
        console.set_auto_scroll(True)
        console.append(make_entry())

    assert scroll_calls == [True]


def test_jump_then_pause_inside_batch_does_not_scroll(console, scroll_calls) -> None:
    with console.batch():
        console.jump_to_latest()
        console.report_at_bottom(False)

    assert scroll_calls == []


def test_failing_scroll_effect_does_not_block_ingestion() -> None:
    def gone():
        raise RuntimeError("view gone")

    console = LogConsole(capacity=5, scroll_to_bottom=gone)
    adapter = IngestionAdapter(console)

    entry = adapter.ingest(raw_record("still stored"))

    assert entry is not None
    assert console.snapshot() == (entry,)
    assert adapter.accepted_count == 1
    assert console.scroll.effect_count == 1


def test_clear_keeps_filter_and_search(console) -> None:
    console.set_filter([LogLevel.ERROR])
    console.set_search_term("disk")
    console.append(make_entry("disk full", LogLevel.ERROR))

    console.clear()

    assert console.snapshot() == ()
    assert console.visible() == []
    assert console.filter_state == FilterState(levels={LogLevel.ERROR}, search_term="disk")


def test_filter_and_search_changes_notify(console, scroll_calls) -> None:
    events = []
    console.add_listener(events.append)

    console.set_filter(["ERROR", "warn"])
    console.set_filter([LogLevel.WARN, LogLevel.ERROR])
    console.set_search_term("abc")
    console.set_search_term("abc")
    console.toggle_level("ERROR")

    assert [e.kind for e in events] == [
        EventKind.FILTER_CHANGED, EventKind.SEARCH_CHANGED, EventKind.FILTER_CHANGED
    ]
    assert console.enabled_levels() == [LogLevel.WARN]
    assert len(scroll_calls) == 3


def test_scroll_commands_notify_only_on_change(console) -> None:
    events = []
    console.add_listener(events.append)

    console.report_at_bottom(True)
    console.report_at_bottom(False)
    console.set_auto_scroll(False)
    console.jump_to_latest()
    console.jump_to_latest()

    assert [e.kind for e in events] == [EventKind.SCROLL_CHANGED, EventKind.SCROLL_CHANGED]


def test_visible_and_counts(console) -> None:
    console.append(make_entry("x", LogLevel.INFO))
    console.append(make_entry("y", LogLevel.ERROR))
    console.append(make_entry("z", LogLevel.WARN))
    console.set_filter({LogLevel.ERROR})

    assert [e.message for e in console.visible()] == ["y"]
    assert console.counts() == {'visible': 1, 'total': 3}
    assert console.level_counts()[LogLevel.INFO] == 1

    console.set_filter([])
    assert console.visible() == []


def test_copy_acts_on_visible_set_only(console, clipboard) -> None:
    console.append(make_entry("keep me", LogLevel.ERROR))
    console.append(make_entry("hide me", LogLevel.DEBUG))
    console.set_filter([LogLevel.ERROR])

    assert console.copy_visible() is True
    assert "keep me" in clipboard.text
    assert "hide me" not in clipboard.text


def test_export_acts_on_visible_set_only(console, file_writer) -> None:
    console.append(make_entry("alpha"))
    console.append(make_entry("beta"))
    console.set_search_term("BETA")

    filename = console.export_visible()

    lines = file_writer.files[filename].decode("utf-8").splitlines()
    assert len(lines) == 1
    assert filename.startswith("testapp-logs-")


def test_export_failure_surfaces(console, file_writer) -> None:
    file_writer.succeed = False
    console.append(make_entry())

    with pytest.raises(ExportWriteError):
        console.export_visible()


def test_console_without_formatter_cannot_export() -> None:
    console = LogConsole(capacity=2)
    with pytest.raises(RuntimeError):
        console.copy_visible()


def test_invalid_capacity_refuses_to_initialize() -> None:
    with pytest.raises(ConfigurationError):
        LogConsole(capacity=0)


def test_from_config() -> None:
    config = Config(environ={
        "LOGSCOPE_CAPACITY": "2",
        "LOGSCOPE_LEVELS": "error,warn",
        "LOGSCOPE_SEARCH": "db",
        "LOGSCOPE_AUTO_FOLLOW": "false",
    })
    console = LogConsole.from_config(config)

    assert console.store.capacity == 2
    assert console.filter_state.levels == frozenset({LogLevel.ERROR, LogLevel.WARN})
    assert console.filter_state.search_term == "db"
    assert console.scroll_state.auto_follow is False
