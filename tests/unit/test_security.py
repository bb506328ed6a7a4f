import pytest

from chatapp.security import BCRYPT_ROUNDS, dummy_verify, hash_password, verify_password


@pytest.mark.unit
class TestPasswordHashing:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("pass")

        assert hashed != "pass"
        assert hashed.startswith("$2b$")

    def test_cost_factor_is_fixed(self):
        assert hash_password("pass").split("$")[2] == f"{BCRYPT_ROUNDS:02d}"

    def test_same_password_gets_new_salt(self):
        assert hash_password("pass") != hash_password("pass")

    def test_verify(self):
        hashed = hash_password("pass")

        assert verify_password("pass", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_dummy_verify_never_succeeds(self):
        assert dummy_verify() is False

    def test_verify_nul_byte_password(self):
        assert verify_password("pa\x00ss", hash_password("pass")) is False

    def test_verify_plaintext_stored_password(self, caplog: pytest.LogCaptureFixture):
        assert verify_password("pass", "pass") is False
        assert any(r.levelname == "ERROR" and r.name == "chatapp.security" for r in caplog.records)
