import pytest

from errors import AuthenticationError
from services.identity import IdentityService


class TestIdentityService:
    """Tests for IdentityService."""

    def test_register_signs_in(self, services):
        """Test that registering starts a session."""
        session = services.identity.register("Anna@Example.com ", "secret123")

        assert session.email == "anna@example.com"
        assert session.user_id
        assert services.identity.current_session() == session

    def test_register_duplicate_email(self, services):
        """Test that an email can only be registered once."""
        services.identity.register("anna@example.com", "secret123")

        with pytest.raises(AuthenticationError, match="already exists"):
            services.identity.register("anna@example.com", "other-pass")

    @pytest.mark.parametrize(
        "email, password", [("not-an-email", "secret123"), ("anna@example.com", "12345")]
    )
    def test_register_invalid_input(self, services, email, password):
        """Test that bad emails and short passwords are rejected."""
        with pytest.raises(AuthenticationError):
            services.identity.register(email, password)

        assert services.identity.current_session() is None

    def test_authenticate(self, services):
        """Test signing in with correct credentials."""
        registered = services.identity.register("anna@example.com", "secret123")
        services.identity.sign_out()

        session = services.identity.authenticate("anna@example.com", "secret123")

        assert session.user_id == registered.user_id

    @pytest.mark.parametrize(
        "email, password",
        [("anna@example.com", "wrong-pass"), ("nobody@example.com", "secret123")],
    )
    def test_authenticate_failure(self, services, email, password):
        """Test that wrong passwords and unknown emails fail alike."""
        services.identity.register("anna@example.com", "secret123")
        services.identity.sign_out()

        with pytest.raises(AuthenticationError, match="Invalid email or password"):
            services.identity.authenticate(email, password)

        assert services.identity.current_session() is None

    def test_require_session(self, services):
        """Test that require_session fails when signed out."""
        with pytest.raises(AuthenticationError, match="Not signed in"):
            services.identity.require_session()

    def test_subscribe_notifies_changes(self, services):
        """Test that listeners see sign-in and sign-out."""
        seen = []
        unsubscribe = services.identity.subscribe(seen.append)

        session = services.identity.register("anna@example.com", "secret123")
        services.identity.sign_out()
        unsubscribe()
        services.identity.authenticate("anna@example.com", "secret123")

        assert seen == [session, None]

    def test_sign_out_when_signed_out(self, services):
        """Test that signing out twice notifies only once."""
        seen = []
        services.identity.subscribe(seen.append)

        services.identity.sign_out()

        assert seen == []

    def test_session_file_persists(self, db_manager_with_schema, tmp_path):
        """Test that a remembered session survives a new service instance."""
        session_path = tmp_path / "session.toml"
        identity = IdentityService(db_manager_with_schema, session_path=session_path)
        session = identity.register("anna@example.com", "secret123")

        restored = IdentityService(db_manager_with_schema, session_path=session_path)
        assert restored.current_session() == session

        restored.sign_out()
        assert not session_path.exists()
        assert IdentityService(
            db_manager_with_schema, session_path=session_path
        ).current_session() is None

    def test_password_stored_as_bcrypt_hash(self, services, test_db):
        """Test that only a bcrypt hash of the password is stored."""
        services.identity.register("anna@example.com", "secret123")

        stored = test_db.execute(
            "SELECT password_hash FROM users WHERE email = ?", ("anna@example.com",)
        ).fetchone()[0]

        assert stored != "secret123"
        assert stored.startswith("$2")
