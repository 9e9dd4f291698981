"""Unit tests for value types."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from provision.domain.error import ValidationError
from provision.domain.value import (
    Email,
    InvitationToken,
    Permission,
    Role,
    parse_email,
    parse_role,
)


class TestEmail:
    """Tests for Email normalization."""

    def test_email_is_trimmed_and_lowercased(self):
        assert Email("  Jane.Doe@Example.COM ").root == "jane.doe@example.com"

    def test_emails_differing_in_case_are_equal(self):
        assert Email("A@B.io") == Email("a@b.io")

    def test_domain(self):
        assert Email("ops@Example.com").domain == "example.com"

    def test_malformed_email_is_rejected(self):
        with pytest.raises(PydanticValidationError):
            Email("not-an-email")

    def test_parse_email_raises_domain_error(self):
        with pytest.raises(ValidationError, match="Invalid email"):
            parse_email("missing-at.example.com")


class TestRole:
    """Tests for roles and their permissions."""

    def test_legacy_user_role_reads_as_client(self):
        assert Role("user") == Role.CLIENT
        assert parse_role("USER") == Role.CLIENT

    def test_role_parsing_ignores_case(self):
        assert Role("Pilot") == Role.PILOT

    def test_unknown_role_is_rejected(self):
        with pytest.raises(ValidationError, match="Invalid role"):
            parse_role("superuser")

    def test_admin_holds_every_permission(self):
        assert Role.ADMIN.permissions() == frozenset(Permission)

    def test_only_admin_manages_users(self):
        assert Role.ADMIN.has_permission(Permission.MANAGE_USERS)
        assert not Role.PILOT.has_permission(Permission.MANAGE_USERS)
        assert not Role.CLIENT.has_permission(Permission.MANAGE_USERS)


class TestInvitationToken:
    def test_preview_hides_most_of_the_token(self):
        token = InvitationToken("abcdefghijklmnop")
        assert token.preview == "abcdefgh..."

    def test_try_parse_rejects_empty_and_oversized(self):
        assert InvitationToken.try_parse("") is None
        assert InvitationToken.try_parse("x" * 256) is None
        assert InvitationToken.try_parse("abc") == InvitationToken("abc")


class TestTryParse:
    def test_normalizes_email(self):
        assert Email.try_parse("  Ann@Example.ORG ") == Email("ann@example.org")
        assert Email.try_parse("not-an-email") is None
