# =============================================================================
# tests/test_sms_templates.py - SMS Template Renderer Tests
# =============================================================================
# Run with: pytest tests/test_sms_templates.py -v
# =============================================================================

import logging

import pytest

from lib.sms_templates import TemplateKind, is_template_kind, render_template


class TestRenderTemplate:
    """Tests for render_template()."""

    @pytest.mark.parametrize("kind", list(TemplateKind))
    def test_every_argument_appears(self, kind):
        """Each known template interpolates all three arguments."""
        args = ["Acme Rentals", "Mini Excavator", "March 3"]

        message = render_template(kind, args)

        assert message
        for arg in args:
            assert arg in message

    def test_string_kind_is_accepted(self):
        message = render_template("pickup_reminder", ["Acme", "Scissor Lift", "Friday"])

        assert message.startswith("📦 Acme: Pickup scheduled for Scissor Lift on Friday.")

    def test_rental_confirmation_wording(self):
        message = render_template(
            TemplateKind.RENTAL_CONFIRMATION,
            ["Summit", "CAT 320", "2025-03-01"],
        )

        assert message == (
            "🏗️ Summit: Your rental of CAT 320 is confirmed for 2025-03-01. "
            "We'll send delivery updates soon!"
        )

    def test_payment_due_puts_amount_second(self):
        message = render_template("payment_due", ["Summit", "$1,250.00", "April 1"])

        assert "Payment of $1,250.00 is due by April 1" in message

    def test_unknown_kind_returns_empty(self):
        assert render_template("custom", ["a", "b", "c"]) == ""
        assert render_template("not_a_template", ["a", "b", "c"]) == ""

    def test_wrong_argument_count_returns_empty_and_logs(self, caplog):
        with caplog.at_level(logging.ERROR, logger="lib.sms_templates"):
            message = render_template("delivery_reminder", ["Acme", "Skid Steer"])

        assert message == ""
        assert "expects 3 args, got 2" in caplog.text


class TestIsTemplateKind:

    def test_known_kinds(self):
        for kind in TemplateKind:
            assert is_template_kind(kind.value)

    def test_custom_and_none_are_not_templates(self):
        assert not is_template_kind("custom")
        assert not is_template_kind(None)
