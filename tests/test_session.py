"""End-to-end tests for LedgerSession, the surface the UI calls."""

from datetime import date

import pytest

from allowance_ledger.audit import AuditLogger
from allowance_ledger.config import DisplaySettings, Settings, StorageSettings
from allowance_ledger.ledger import IndexOutOfRangeError
from allowance_ledger.models.audit import AuditEventType
from allowance_ledger.models.record import NO_SELECTION, IssueCode, SignState
from allowance_ledger.services.storage import InMemoryLedgerStorage, StorageWriteError
from allowance_ledger.session import create_session


def _fill(session, *amounts):
    """Submit amounts in order; the last one ends up at index 0."""
    for number, amount in enumerate(amounts):
        assert session.submit_new("2024/01/01", amount, f"m{number}").is_valid


class TestSubmitNew:
    """Tests for LedgerSession.submit_new."""

    def test_total_after_three_records(self, session):
        _fill(session, "100", "-30", "5")
        summary = session.get_total_display()
        assert summary.total == 75
        assert summary.sign_state == SignState.NONNEGATIVE
        assert summary.display == "¥75"

    def test_negative_total(self, session):
        _fill(session, "-100", "30")
        summary = session.get_total_display()
        assert summary.total == -70
        assert summary.sign_state == SignState.NEGATIVE
        assert summary.display == "¥-70"

    def test_rejected_submission_changes_nothing(self, session, memory_storage):
        _fill(session, "10")
        result = session.submit_new("2024-01-01", "5", "")
        assert result.issue.code == IssueCode.DATE_INVALID_CHARS
        assert len(session.get_snapshot()) == 1
        assert memory_storage.save_count == 1

    def test_rejection_is_audited(self, session, audit_logger):
        session.submit_new("1/1", "5-", "")
        event = audit_logger.recent_events()[0]
        assert event.event_type == AuditEventType.VALIDATION_FAILED
        assert event.details["code"] == "amount_bad_sign"

    def test_normalized_values_stored(self, session):
        session.submit_new(" 2024/01/01 ", " -50 ", " memo ")
        record = session.get_snapshot().records[0]
        assert (record.date, record.amount, record.memo) == ("2024/01/01", "-50", " memo ")

    def test_overlong_amount_rejected(self, session, memory_storage):
        result = session.submit_new("1/1", "9" * 5000, "")
        assert result.issue.code == IssueCode.AMOUNT_NOT_NUMERIC
        assert len(session.get_snapshot()) == 0
        assert memory_storage.save_count == 0

    def test_storage_failure_surfaces(self, session, memory_storage):
        memory_storage.fail_next_save = True
        with pytest.raises(StorageWriteError):
            session.submit_new("1/1", "5", "")
        assert len(session.get_snapshot()) == 0

    def test_selection_and_marks_follow_records(self, session):
        _fill(session, "1", "2", "3")
        session.select(0)
        session.toggle_mark(2)
        session.submit_new("1/1", "4", "new")
        assert session.selection.selected_index == 1
        assert session.selection.marked == frozenset({3})


class TestSubmitUpdate:
    """Tests for LedgerSession.submit_update."""

    def test_update_in_place(self, session):
        _fill(session, "1", "2")
        result = session.submit_update(1, "2024/02/02", "40", "fixed")
        assert result.is_valid
        records = session.get_snapshot().records
        assert records[1].memo == "fixed"
        assert session.get_total_display().total == 42

    def test_out_of_range_leaves_storage_unchanged(self, session, memory_storage):
        _fill(session, "1", "2")
        before = memory_storage.load()
        with pytest.raises(IndexOutOfRangeError):
            session.submit_update(2, "1/1", "3", "")
        assert memory_storage.load() == before

    def test_invalid_input_rejected(self, session):
        _fill(session, "1")
        result = session.submit_update(0, "", "3", "")
        assert result.issue.code == IssueCode.EMPTY_DATE
        assert session.get_snapshot().records[0].amount == "1"

    def test_save_selected(self, session):
        _fill(session, "1", "2")
        session.select(1)
        assert session.save_selected("1/1", "9", "edited").is_valid
        assert session.get_snapshot().records[1].amount == "9"

    def test_save_without_selection(self, session):
        _fill(session, "1")
        with pytest.raises(IndexOutOfRangeError):
            session.save_selected("1/1", "9", "")


class TestDeleteMarked:
    """Tests for LedgerSession.request_delete_marked."""

    def test_delete_two_of_five(self, session, memory_storage):
        _fill(session, "1", "2", "3", "4", "5")
        before = [r.amount for r in session.get_snapshot().records]
        session.toggle_mark(1)
        session.toggle_mark(3)

        assert session.request_delete_marked() == 2

        after = [r.amount for r in session.get_snapshot().records]
        assert after == [before[0], before[2], before[4]]
        assert memory_storage.load().splitlines() == [
            f"2024/01/01,{amount},m{int(amount) - 1}" for amount in after
        ]
        assert session.can_delete is False

    def test_selection_remapped_after_delete(self, session):
        _fill(session, "1", "2", "3", "4")
        session.toggle_mark(0)
        session.toggle_mark(1)
        session.select(3)
        session.request_delete_marked()
        assert session.selection.selected_index == 1
        assert session.get_snapshot().records[1].amount == "1"

    def test_nothing_marked(self, session):
        _fill(session, "1")
        assert session.request_delete_marked() == 0
        assert len(session.get_snapshot()) == 1

    def test_failed_delete_keeps_marks(self, session, memory_storage):
        _fill(session, "1", "2")
        session.toggle_mark(0)
        memory_storage.fail_next_save = True
        with pytest.raises(StorageWriteError):
            session.request_delete_marked()
        assert session.is_marked(0)
        assert len(session.get_snapshot()) == 2


class TestSelection:
    """Selection and mark-for-deletion interplay."""

    def test_select_returns_draft(self, session):
        session.submit_new("2024/03/03", "-1200", "rent, partial")
        draft = session.select(0)
        assert (draft.date, draft.amount, draft.memo) == ("2024/03/03", "-1200", "rent, partial")
        assert session.can_save is True

    def test_select_does_not_touch_other_marks(self, session):
        _fill(session, "1", "2", "3")
        session.toggle_mark(0)
        session.toggle_mark(2)
        session.select(1)
        assert session.selection.marked == frozenset({0, 2})
        assert session.can_delete is True

    def test_selecting_marked_record_unmarks_it(self, session):
        _fill(session, "1", "2")
        session.toggle_mark(0)
        session.select(0)
        assert session.is_marked(0) is False
        assert session.selection.selected_index == 0

    def test_marking_selected_record_clears_selection(self, session):
        _fill(session, "1", "2")
        session.select(1)
        assert session.toggle_mark(1) is True
        assert session.selection.selected_index == NO_SELECTION
        assert session.can_save is False

    def test_toggle_twice_unmarks(self, session):
        _fill(session, "1")
        session.toggle_mark(0)
        assert session.toggle_mark(0) is False
        assert session.can_delete is False

    def test_invalid_index(self, session):
        _fill(session, "1")
        with pytest.raises(IndexOutOfRangeError):
            session.select(5)
        with pytest.raises(IndexOutOfRangeError):
            session.toggle_mark(-1)

    def test_clear_selection_keeps_marks(self, session):
        _fill(session, "1", "2")
        session.toggle_mark(0)
        session.select(1)
        session.clear_selection()
        assert session.selection.selected_index == NO_SELECTION
        assert session.selection.marked == frozenset({0})


class TestViews:
    """Snapshots and rendering helpers."""

    def test_snapshot_is_immutable_view(self, session):
        _fill(session, "1")
        snapshot = session.get_snapshot()
        _fill(session, "2")
        assert len(snapshot) == 1
        assert len(session.get_snapshot()) == 2

    def test_render_rows(self, session):
        session.submit_new("2024/01/01", "-2500", "shoes")
        rows = session.render_rows()
        assert rows[0].text == " 2024/01/01 ¥-2,500\n shoes"
        assert rows[0].sign_state == SignState.NEGATIVE

    def test_default_date(self, session):
        assert session.default_date(date(2024, 7, 9)) == "2024/07/09"


class TestCreateSession:
    """Tests for the session factory."""

    def test_builds_from_settings(self, tmp_path):
        settings = Settings(
            storage=StorageSettings(data_dir=tmp_path, file_name="ledger.txt"),
            display=DisplaySettings(currency_symbol="$", total_label="Sum: ", date_format="%d.%m.%Y"),
        )
        session = create_session(settings)
        session.submit_new("1/1", "1500", "x")

        assert session.get_total_display().label == "Sum: $1,500"
        assert (tmp_path / "ledger.txt").read_text(encoding="utf-8") == "1/1,1500,x"
        assert session.default_date(date(2024, 7, 9)) == "09.07.2024"

        reopened = create_session(settings)
        assert reopened.get_snapshot().records == session.get_snapshot().records

    def test_storage_override_and_logger(self, tmp_path):
        logger = AuditLogger()
        storage = InMemoryLedgerStorage("1/1,5,a\nbad line")
        settings = Settings(storage=StorageSettings(data_dir=tmp_path))
        session = create_session(settings, storage=storage, audit_logger=logger)

        assert len(session.get_snapshot()) == 1
        assert session.audit_logger is logger
        types = [e.event_type for e in logger.recent_events()]
        assert AuditEventType.MALFORMED_LINE_SKIPPED in types
