from __future__ import annotations

from datetime import timedelta

from pyctxstore.config import StoreConfig
from pyctxstore.statistics import StatisticsCounter


def _messages_section(report: str) -> list[str]:
    _, _, tail = report.partition("Messages:")
    return tail.split("\n")[1:]


class TestCounting:
    def test_each_counting_call_bumps_total_once(self) -> None:
        stats = StatisticsCounter()
        stats.add_processed("a")
        stats.add_success()
        stats.deleted()
        stats.add_failure("bad")
        stats.added()
        stats.updated()
        stats.upserted()
        stats.add_skip()

        assert stats.total_processed == 8
        assert stats.successes == 1
        assert stats.delete == 1
        assert stats.failures == 1
        assert stats.add == 1
        assert stats.update == 1
        assert stats.upsert == 1
        assert stats.skipped == 1

    def test_add_processed_without_message_logs_empty_entry(self) -> None:
        stats = StatisticsCounter()
        stats.add_processed()
        stats.add_processed("")

        assert stats.total_processed == 2
        assert stats.messages == ["", ""]

    def test_add_processed_with_empty_sequence_logs_empty_entry(self) -> None:
        stats = StatisticsCounter()
        stats.add_processed([])

        assert stats.total_processed == 1
        assert stats.messages == [""]
        assert "\n\nMessages:\n" in stats.message_string()

    def test_object_message_is_captured_when_logged(self) -> None:
        record = {"id": "string", "ts": 2234443}
        stats = StatisticsCounter()
        stats.add_processed(record)
        before = stats.message_string()

        record["ts"] = 1

        assert stats.message_string() == before
        assert '"ts":2234443' in stats.messages[0]

    def test_counter_with_opaque_message_serializes(self) -> None:
        class Opaque:
            def __str__(self) -> str:
                return "opaque-thing"

        stats = StatisticsCounter()
        stats.add_processed(Opaque())

        dumped = StatisticsCounter.model_validate_json(stats.model_dump_json())
        assert dumped.messages == stats.messages
        assert dumped.total_processed == 1

    def test_add_success_only_logs_given_message(self) -> None:
        stats = StatisticsCounter()
        stats.add_success()
        stats.add_success("ok")

        assert stats.successes == 2
        assert stats.messages == ["ok"]

    def test_add_message_does_not_count(self) -> None:
        stats = StatisticsCounter()
        assert stats.add_message(["x", "y"]) == 2
        assert stats.total_processed == 0

    def test_add_stats_accumulates(self) -> None:
        first = StatisticsCounter()
        first.add_success("one")
        second = StatisticsCounter()
        second.deleted("two")
        second.add_failure()

        first.add_stats(second)
        first.add_stats(None)

        assert first.total_processed == 3
        assert first.successes == 1
        assert first.delete == 1
        assert first.failures == 1
        assert first.messages == ["one", "two"]


class TestMessageString:
    def test_string_message(self) -> None:
        stats = StatisticsCounter()
        stats.add_processed("string")

        report = stats.message_string()
        assert report.startswith("Processed 1")
        assert "Messages:" in report
        assert "string" in report

    def test_string_array_message(self) -> None:
        stats = StatisticsCounter()
        stats.add_processed(["string", "array"])

        report = stats.message_string()
        assert "Processed 1" in report
        assert "\nMessages:\n" in report
        assert "string\n" in report
        assert "array" in report

    def test_object_message(self) -> None:
        stats = StatisticsCounter()
        stats.add_processed({"id": "string", "ts": 2234443})

        report = stats.message_string()
        assert "Processed 1" in report
        assert "\nMessages:\n" in report
        assert '"string"' in report
        assert '"ts":2234443' in report

    def test_mixed_messages_render_in_order(self) -> None:
        stats = StatisticsCounter()
        stats.add_processed("string")
        stats.add_processed(["string", "array"])
        stats.add_processed({"id": "string", "ts": 2234443})

        report = stats.message_string()
        assert report.index("Processed 3") < report.index("Messages:")
        assert report.count("Messages:") == 1
        assert _messages_section(report) == [
            "string",
            "string",
            "array",
            "{",
            '  "id":"string",',
            '  "ts":2234443',
            "}",
        ]

    def test_nested_objects_keep_field_order(self) -> None:
        stats = StatisticsCounter()
        stats.add_processed({"b": 1, "a": {"z": [1, 2], "y": None}})

        report = stats.message_string()
        assert report.index('"b":1') < report.index('"a":')
        assert report.index('"z":') < report.index('"y":null')

    def test_unserializable_object_degrades_to_text(self) -> None:
        class Opaque:
            def __str__(self) -> str:
                return "opaque-thing"

        stats = StatisticsCounter()
        stats.add_processed(Opaque())

        assert "opaque-thing" in stats.message_string()

    def test_no_messages_section_without_messages(self) -> None:
        stats = StatisticsCounter()
        stats.add_success()

        report = stats.message_string()
        assert report == "Processed 1 items.\nSuccesses: 1."
        assert "Messages:" not in report

    def test_rendering_is_idempotent(self) -> None:
        stats = StatisticsCounter()
        stats.add_processed({"id": 1})
        stats.deleted("gone")

        assert stats.message_string() == stats.message_string()

    def test_counter_lines_and_thousands_separator(self) -> None:
        stats = StatisticsCounter(total_processed=1233)
        stats.added()
        stats.deleted()

        report = stats.message_string()
        assert report.startswith("Processed 1,235 items.")
        assert "\nAdded: 1." in report
        assert "\nDeleted: 1." in report

    def test_one_line(self) -> None:
        stats = StatisticsCounter()
        stats.add_success("ignored in one-line mode")
        stats.add_failure()

        assert stats.message_string(one_line=True) == "Processed 2 items, Successes: 1, Failures: 1."

    def test_elapsed_time_after_finished(self) -> None:
        stats = StatisticsCounter()
        stats.add_processed("x")
        stats.finished()
        assert stats.finish_time is not None
        stats.finish_time = stats.start_time + timedelta(seconds=65)

        assert stats.processing_time_ms == 65_000
        assert stats.message_string().startswith("Processed 1 items in 1 minute, 5 seconds.")

    def test_report_uses_config_mode(self) -> None:
        stats = StatisticsCounter()
        stats.add_success()

        assert stats.report(StoreConfig(one_line_reports=True)) == "Processed 1 items, Successes: 1."
        assert stats.report() == stats.message_string()
