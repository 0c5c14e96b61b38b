"""
Tests for log secret masking.
"""

import logging

from finfusion.shared.logging import MASK, SecretMaskingFilter, mask_secrets


class TestMaskSecrets:
    """Tests for mask_secrets."""

    def test_masks_known_keys(self) -> None:
        assert mask_secrets("mpin=123456 amount=5") == f"mpin={MASK} amount=5"
        assert mask_secrets('{"password": "hunter22"}') == f'{{"password": "{MASK}"}}'
        assert mask_secrets("API_KEY: abc") == f"API_KEY: {MASK}"

    def test_leaves_other_text_alone(self) -> None:
        assert mask_secrets("Transfer settled for receiver=9000") == (
            "Transfer settled for receiver=9000"
        )


class TestSecretMaskingFilter:
    """Tests for the logging filter."""

    def test_rewrites_formatted_message(self) -> None:
        record = logging.LogRecord(
            "finfusion", logging.INFO, __file__, 1, "login mpin=%s", ("654321",), None
        )

        assert SecretMaskingFilter().filter(record)
        assert record.getMessage() == f"login mpin={MASK}"

    def test_untouched_record_keeps_args(self) -> None:
        record = logging.LogRecord(
            "finfusion", logging.INFO, __file__, 1, "loaded %d holdings", (3,), None
        )

        SecretMaskingFilter().filter(record)

        assert record.args == (3,)
