"""Tests for desktop notifications."""

from unittest.mock import Mock

from hiworks_commute.app.notifier import APP_NAME, Notifier


class TestNotifier:
    """Test Notifier."""

    def test_initialization_enabled(self) -> None:
        """Test notifier initialization when enabled."""
        notifier = Notifier(enabled=True)

        assert notifier.enabled
        assert notifier.backend == "auto"

    def test_initialization_disabled(self) -> None:
        """Test notifier initialization when disabled."""
        notifier = Notifier(enabled=False)

        assert not notifier.enabled
        assert notifier._notifier is None

    def test_notify_when_disabled(self) -> None:
        """Test notify does nothing when disabled."""
        notifier = Notifier(enabled=False)

        # Should not raise
        notifier.notify("Test", "Message")

    def test_notify_when_notifier_unavailable(self) -> None:
        """Test notify handles unavailable notifier."""
        notifier = Notifier(enabled=True)
        notifier._notifier = None

        # Should not raise
        notifier.notify("Test", "Message")

    def test_notify_with_mock_notifier(self) -> None:
        """Test notify calls the notifier correctly."""
        notifier = Notifier(enabled=True)
        mock_notif = Mock()
        notifier._notifier = mock_notif

        notifier.notify("Test Title", "Test Message")

        mock_notif.notify.assert_called_once()
        call_kwargs = mock_notif.notify.call_args[1]
        assert call_kwargs["title"] == "Test Title"
        assert call_kwargs["message"] == "Test Message"
        assert call_kwargs["app_name"] == APP_NAME

    def test_notify_handles_errors(self) -> None:
        """Test delivery errors do not propagate."""
        notifier = Notifier(enabled=True)
        mock_notif = Mock()
        mock_notif.notify.side_effect = Exception("no dbus")
        notifier._notifier = mock_notif

        # Should not raise
        notifier.notify("Test", "Message")

    def test_notify_result(self) -> None:
        """Test result notifications use the action title."""
        notifier = Notifier()
        mock_notif = Mock()
        notifier._notifier = mock_notif

        notifier.notify_result("Hiworks Check-in", "Checked in")

        call_kwargs = mock_notif.notify.call_args[1]
        assert call_kwargs["title"] == "Hiworks Check-in"
        assert call_kwargs["message"] == "Checked in"

    def test_notify_error(self) -> None:
        """Test error notifications include the error text."""
        notifier = Notifier()
        mock_notif = Mock()
        notifier._notifier = mock_notif

        notifier.notify_error(RuntimeError("worker exploded"))

        call_kwargs = mock_notif.notify.call_args[1]
        assert call_kwargs["message"] == "Error: worker exploded"
        assert call_kwargs["timeout"] == 10
