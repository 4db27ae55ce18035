"""Unit tests for Notifier orchestration.

Tests:
- Unknown notification names are silent no-ops
- Message building (subject, recipients, sender, reply-to, HTML flag)
- Suppression within the window and re-send after it
- Transport failures propagate and are not recorded
- close() persistence and transport release
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from rgnotify.models.config import NotifierSettings
from rgnotify.models.notification import (
    Notification,
    NotificationMessage,
    NotificationStatus,
    OutgoingMessage,
)
from rgnotify.observability.metrics import NOTIFICATIONS_TOTAL
from rgnotify.services.notification import HistoryState, HistoryStore
from rgnotify.services.notification_service import EmailMessageBuilder, Notifier
from rgnotify.services.transport import MailTransport
from rgnotify.utils.exceptions import DuplicateNotificationError, TransportError

DAY_ONE = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Controllable clock for notifier tests."""

    def __init__(self, start: datetime = DAY_ONE) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def transport() -> MagicMock:
    return MagicMock(spec=MailTransport)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(tmp_path) -> HistoryStore:
    return HistoryStore(path=tmp_path / "test.notify.json")


@pytest.fixture
def settings() -> NotifierSettings:
    return NotifierSettings(days_to_wait=7, sender="monitor@example.com")


@pytest.fixture
def notifier(transport, settings, store, clock) -> Notifier:
    n = Notifier(transport, settings=settings, history_store=store, clock=clock)
    n.add_notification("alerts", "Disk Full:", ["ops@example.com"])
    return n


def sent_messages(transport: MagicMock) -> list:
    return [c.args[0] for c in transport.send.call_args_list]


class TestEmailMessageBuilder:
    """Tests for EmailMessageBuilder."""

    def test_subject_joins_prefix_and_suffix(self) -> None:
        builder = EmailMessageBuilder(NotifierSettings(sender="a@x.com"))
        notification = Notification(
            name="alerts", subject_prefix="Disk Full:", recipients="ops@example.com"
        )
        message = NotificationMessage(
            notification_name="alerts", subject_suffix="host1", content="disk at 95%"
        )

        outgoing = builder.build(notification, message)

        assert outgoing.subject == "Disk Full: host1"
        assert outgoing.body == "disk at 95%"
        assert outgoing.sender == "a@x.com"
        assert outgoing.reply_to == "a@x.com"
        assert outgoing.recipients == ["ops@example.com"]

    @pytest.mark.parametrize(
        "prefix,suffix,expected",
        [
            ("Disk Full:", "", "Disk Full:"),
            ("", "host1", "host1"),
            ("", "", ""),
            ("  Prefix ", " suffix  ", "Prefix   suffix"),
        ],
    )
    def test_subject_trimmed(self, prefix: str, suffix: str, expected: str) -> None:
        builder = EmailMessageBuilder(NotifierSettings())
        notification = Notification(name="n", subject_prefix=prefix)
        message = NotificationMessage(notification_name="n", subject_suffix=suffix)

        assert builder.build(notification, message).subject == expected

    def test_explicit_reply_to_and_html(self) -> None:
        builder = EmailMessageBuilder(
            NotifierSettings(sender="a@x.com", reply_to="ops@x.com")
        )
        notification = Notification(
            name="n", recipients=["c@x.com", "b@x.com"], body_is_html=True
        )
        message = NotificationMessage(notification_name="n", content="<b>hi</b>")

        outgoing = builder.build(notification, message)

        assert outgoing.reply_to == "ops@x.com"
        assert outgoing.is_html is True
        assert outgoing.recipients == ["b@x.com", "c@x.com"]


class TestNotifierRegistration:
    """Tests for add_notification."""

    def test_add_by_fields_and_object(self, transport, store) -> None:
        notifier = Notifier(transport, history_store=store)
        notifier.add_notification("a", "A", "a@x.com")
        notifier.add_notification(Notification(name="b", recipients="b@x.com"))

        assert notifier.registry.names() == ["a", "b"]

    def test_duplicate_fails_fast(self, notifier) -> None:
        with pytest.raises(DuplicateNotificationError):
            notifier.add_notification("alerts", "Other", "x@example.com")

    def test_registry_populated_from_settings(self, transport, store) -> None:
        settings = NotifierSettings(
            notifications=[{"name": "alerts", "recipients": "ops@example.com"}]
        )

        notifier = Notifier(transport, settings=settings, history_store=store)

        assert "alerts" in notifier.registry


class TestSendNotification:
    """Tests for send_notification."""

    def test_unknown_name_is_noop(self, notifier, transport, store) -> None:
        before = NOTIFICATIONS_TOTAL.labels(outcome="unknown")._value.get()

        result = notifier.send_notification("doesNotExist", "x")

        assert result.status == NotificationStatus.UNKNOWN
        transport.send.assert_not_called()
        assert store.state == HistoryState.UNLOADED
        assert NOTIFICATIONS_TOTAL.labels(outcome="unknown")._value.get() == before + 1

    def test_first_send_dispatches(self, notifier, transport) -> None:
        result = notifier.send_notification("alerts", "disk at 95%", "host1")

        assert result.sent
        assert result.subject == "Disk Full: host1"
        assert result.recipients == ["ops@example.com"]
        transport.send.assert_called_once()
        message = sent_messages(transport)[0]
        assert isinstance(message, OutgoingMessage)
        assert message.subject == "Disk Full: host1"
        assert message.body == "disk at 95%"
        assert message.sender == "monitor@example.com"
        assert message.reply_to == "monitor@example.com"

    def test_repeat_within_window_suppressed(self, notifier, transport, clock) -> None:
        notifier.send_notification("alerts", "disk at 95%", "host1")
        clock.advance(days=2)

        result = notifier.send_notification("alerts", "disk at 95%", "host1")

        assert result.status == NotificationStatus.SUPPRESSED
        assert transport.send.call_count == 1
        assert len(notifier.history) == 1

    def test_repeat_after_window_sent(self, notifier, transport, clock) -> None:
        notifier.send_notification("alerts", "disk at 95%", "host1")
        clock.advance(days=7)

        result = notifier.send_notification("alerts", "disk at 95%", "host1")

        assert result.sent
        assert transport.send.call_count == 2
        assert [m.active for m in notifier.history] == [False, True]

    def test_different_content_not_suppressed(self, notifier, transport) -> None:
        notifier.send_notification("alerts", "disk at 95%", "host1")
        notifier.send_notification("alerts", "disk at 96%", "host1")
        notifier.send_notification("alerts", "disk at 95%", "host2")

        assert transport.send.call_count == 3

    def test_same_content_different_types_not_suppressed(
        self, notifier, transport
    ) -> None:
        notifier.add_notification("capacity", "Capacity:", "cap@example.com")

        notifier.send_notification("alerts", "disk at 95%")
        result = notifier.send_notification("capacity", "disk at 95%")

        assert result.sent
        assert transport.send.call_count == 2

    @pytest.mark.parametrize("days", [0, -1])
    def test_never_suppress_mode(self, transport, store, clock, days) -> None:
        notifier = Notifier(
            transport,
            settings=NotifierSettings(days_to_wait=days),
            history_store=store,
            clock=clock,
        )
        notifier.add_notification("alerts", "Disk Full:", "ops@example.com")

        for _ in range(5):
            assert notifier.send_notification("alerts", "same", "same").sent

        assert transport.send.call_count == 5

    def test_transport_error_propagates_and_is_not_recorded(
        self, notifier, transport
    ) -> None:
        transport.send.side_effect = TransportError("smtp down")

        with pytest.raises(TransportError):
            notifier.send_notification("alerts", "disk at 95%", "host1")

        assert notifier.history == []

        # A retry is treated as a new notification
        transport.send.side_effect = None
        assert notifier.send_notification("alerts", "disk at 95%", "host1").sent

    def test_failed_resend_keeps_previous_record(
        self, notifier, transport, clock
    ) -> None:
        """A window-expired send that fails leaves the history as it was."""
        notifier.send_notification("alerts", "disk at 95%", "host1")
        clock.advance(days=8)
        transport.send.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            notifier.send_notification("alerts", "disk at 95%", "host1")

        assert len(notifier.history) == 1
        assert notifier.history[0].active is True

    def test_send_after_close_raises(self, notifier) -> None:
        notifier.close()

        with pytest.raises(RuntimeError):
            notifier.send_notification("alerts", "x")

    def test_candidate_uses_clock(self, notifier, clock) -> None:
        notifier.send_notification("alerts", "x")

        assert notifier.history[0].date_sent == clock.now


class TestNotifierClose:
    """Tests for close()."""

    def test_close_saves_only_active_records(
        self, notifier, store, transport, clock
    ) -> None:
        notifier.send_notification("alerts", "a")
        clock.advance(days=8)
        notifier.send_notification("alerts", "a")  # supersedes the first

        notifier.close()

        saved = HistoryStore(path=store.path).load()
        assert len(saved) == 1
        assert saved[0].date_sent == clock.now
        transport.close.assert_called_once()

    def test_close_without_history_access_leaves_file(
        self, transport, store
    ) -> None:
        store.path.write_text("{ untouched")
        notifier = Notifier(transport, history_store=store)

        notifier.close()

        assert store.path.read_text() == "{ untouched"
        transport.close.assert_called_once()

    def test_close_is_idempotent(self, notifier, transport) -> None:
        notifier.send_notification("alerts", "a")

        notifier.close()
        notifier.close()

        assert notifier.closed
        transport.close.assert_called_once()

    def test_transport_closed_when_save_raises(self, transport) -> None:
        store = MagicMock(spec=HistoryStore)
        store.path = "mock.json"
        store.state = HistoryState.LOADED
        store.load.return_value = []
        store.save.side_effect = OSError("read-only")
        notifier = Notifier(transport, history_store=store)

        with pytest.raises(OSError):
            notifier.close()

        transport.close.assert_called_once()

    def test_unwritable_history_dir_does_not_raise(
        self, transport, settings, clock, tmp_path
    ) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = HistoryStore(path=blocker / "test.notify.json")

        with Notifier(
            transport, settings=settings, history_store=store, clock=clock
        ) as notifier:
            notifier.add_notification("alerts", "Disk Full:", "ops@example.com")
            notifier.send_notification("alerts", "a")

        assert notifier.closed
        transport.close.assert_called_once()

    def test_context_manager_closes(self, transport, store, settings, clock) -> None:
        with Notifier(
            transport, settings=settings, history_store=store, clock=clock
        ) as notifier:
            notifier.add_notification("alerts", "Disk Full:", "ops@example.com")
            notifier.send_notification("alerts", "a")

        assert notifier.closed
        assert store.path.exists()
        transport.close.assert_called_once()
