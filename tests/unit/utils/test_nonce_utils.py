"""Tests for CSRF nonce creation and verification."""

import pytest

from clawpress.config import AppConfig, SecurityConfig, set_config
from clawpress.utils.nonce_utils import NONCE_LENGTH, create_nonce, nonce_tick, verify_nonce

LIFETIME = 86400
HALF = LIFETIME // 2


@pytest.fixture
def fixed_secret():
    set_config(AppConfig(security=SecurityConfig(nonce_secret="test-secret")))


class TestNonceTick:
    def test_tick_is_half_lifetime_window(self):
        assert nonce_tick(now=1, lifetime=LIFETIME) == 1
        assert nonce_tick(now=HALF, lifetime=LIFETIME) == 1
        assert nonce_tick(now=HALF + 1, lifetime=LIFETIME) == 2


@pytest.mark.usefixtures("fixed_secret")
class TestNonces:
    """Nonces bind an action, a user and a time window."""

    now = HALF * 1000 + 10

    def test_shape(self):
        nonce = create_nonce("clawpress_create", 1, now=self.now)
        assert len(nonce) == NONCE_LENGTH
        int(nonce, 16)

    def test_verifies_in_current_window(self):
        nonce = create_nonce("clawpress_create", 1, now=self.now)
        assert verify_nonce(nonce, "clawpress_create", 1, now=self.now) == 1

    def test_verifies_in_next_window(self):
        nonce = create_nonce("clawpress_create", 1, now=self.now)
        assert verify_nonce(nonce, "clawpress_create", 1, now=self.now + HALF) == 2

    def test_expires_after_two_windows(self):
        nonce = create_nonce("clawpress_create", 1, now=self.now)
        assert verify_nonce(nonce, "clawpress_create", 1, now=self.now + 2 * HALF) == 0

    def test_bound_to_action(self):
        nonce = create_nonce("clawpress_create", 1, now=self.now)
        assert verify_nonce(nonce, "clawpress_revoke", 1, now=self.now) == 0

    def test_bound_to_user(self):
        nonce = create_nonce("clawpress_create", 1, now=self.now)
        assert verify_nonce(nonce, "clawpress_create", 2, now=self.now) == 0

    def test_bound_to_secret(self):
        nonce = create_nonce("clawpress_create", 1, now=self.now)
        set_config(AppConfig(security=SecurityConfig(nonce_secret="rotated")))
        assert verify_nonce(nonce, "clawpress_create", 1, now=self.now) == 0

    @pytest.mark.parametrize("nonce", [None, "", "0000000000"])
    def test_missing_or_garbage(self, nonce):
        assert verify_nonce(nonce, "clawpress_create", 1, now=self.now) == 0
