"""Tests for the caller-side session."""

import pytest

from safetylayer import ScrubberSession
from safetylayer.errors import ConfigError, SecretMapError
from safetylayer.models import Category, Intensity


@pytest.fixture
def session():
    return ScrubberSession()


class TestSessionScrub:
    """Tests for scrubbing through a session."""

    def test_scrub_updates_state(self, session):
        """Test that scrub fills output fields and the map."""
        session.raw_input = "Mail a@b.com"
        session.restored_output = "stale"
        session.scrub()

        assert session.sanitized_output == "Mail [EMAIL_1]"
        assert session.restore_input == "Mail [EMAIL_1]"
        assert session.restored_output == ""
        assert [e.token for e in session.secrets] == ["[EMAIL_1]"]

    def test_new_scrub_replaces_map(self, session):
        """Test that a second scrub does not merge into the first map."""
        session.scrub("Mail a@b.com")
        session.scrub("Call 555-123-4567")

        assert [e.type for e in session.secrets] == [Category.PHONE]

    def test_options_respected(self, session):
        """Test that session options reach the scanner."""
        session.set_options(email=False)
        session.scrub("Mail a@b.com")

        assert session.sanitized_output == "Mail a@b.com"
        assert session.secrets == []

    def test_intensity_respected(self, session):
        session.set_intensity("aggressive")
        session.scrub("4111-1111-1111-1112")

        assert session.intensity == Intensity.AGGRESSIVE
        assert session.sanitized_output == "[CC_1]"

    def test_camel_case_option(self, session):
        """Test the creditCard alias used by stored UI settings."""
        session.set_options(creditCard=False)

        assert session.options.credit_card is False

    def test_unknown_option(self, session):
        with pytest.raises(ValueError, match="Unknown scrubber option"):
            session.set_options(name=True)

    def test_counts(self, session):
        session.scrub("a@b.com c@d.com 555-123-4567")

        assert session.counts() == {"EMAIL": 2, "PHONE": 1}


class TestSessionRestore:
    """Tests for restore source selection."""

    def test_restore_explicit_text(self, session):
        """Test that an explicit text argument wins."""
        session.scrub("Mail a@b.com")

        assert session.restore("Thanks [EMAIL_1]!") == "Thanks a@b.com!"
        assert session.restored_output == "Thanks a@b.com!"

    def test_restore_defaults_to_sanitized_output(self, session):
        session.scrub("Mail a@b.com")

        assert session.restore() == "Mail a@b.com"

    def test_restore_prefers_tokenized_raw_input(self, session):
        """Test that a reply pasted into raw input is restored first."""
        session.scrub("Mail a@b.com")
        session.raw_input = "Reply sent to [EMAIL_1]"

        assert session.restore() == "Reply sent to a@b.com"

    def test_restore_falls_back_to_restore_input(self, session):
        session.scrub("Mail a@b.com")
        session.sanitized_output = ""
        session.restore_input = "Hello [EMAIL_1]"

        assert session.restore() == "Hello a@b.com"

    def test_clear(self, session):
        """Test that clear drops text and secrets but keeps settings."""
        session.set_options(phone=False)
        session.set_intensity(Intensity.AGGRESSIVE)
        session.scrub("Mail a@b.com")
        session.clear()

        assert session.raw_input == ""
        assert session.sanitized_output == ""
        assert session.secrets == []
        assert session.options.phone is False
        assert session.intensity == Intensity.AGGRESSIVE
        assert session.restore("[EMAIL_1]") == "[EMAIL_1]"


class TestSessionSnapshot:
    """Tests for the persisted subset."""

    def test_snapshot_contents(self, session):
        """Test that only secrets, options and intensity are persisted."""
        session.scrub("Mail a@b.com")
        data = session.snapshot()

        assert set(data) == {"secrets", "options", "intensity"}
        assert data["secrets"] == [
            {"token": "[EMAIL_1]", "type": "EMAIL", "value": "a@b.com", "validated": True}
        ]
        assert data["intensity"] == "standard"

    def test_from_snapshot(self, session):
        """Test restoring a reply after reloading a snapshot."""
        session.set_options(ssn=False)
        session.scrub("Mail a@b.com")
        reloaded = ScrubberSession.from_snapshot(session.snapshot())

        assert reloaded.options.ssn is False
        assert reloaded.raw_input == ""
        assert reloaded.restore("Re: [EMAIL_1]") == "Re: a@b.com"

    def test_from_snapshot_bad_entry(self):
        with pytest.raises(SecretMapError):
            ScrubberSession.from_snapshot({"secrets": [{"token": "[EMAIL_1]"}]})

    def test_from_snapshot_unknown_intensity(self):
        with pytest.raises(ConfigError, match="Invalid session snapshot"):
            ScrubberSession.from_snapshot({"intensity": "extreme"})

    def test_from_snapshot_unknown_option(self):
        """Test that a stale option key surfaces as a typed error."""
        with pytest.raises(ConfigError):
            ScrubberSession.from_snapshot({"options": {"fax": True}})
