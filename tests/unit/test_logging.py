from src.shared.logging import SecretRedactionProcessor, mask_secret


def test_mask_secret():
    assert mask_secret("") == "<unset>"
    assert mask_secret("short") == "***"
    assert mask_secret("0123456789abcdef") == "01…ef"


def test_redacts_secret_keys_recursively():
    processor = SecretRedactionProcessor()
    event = {
        "event": "token_exchange_failed",
        "appid": "wx1234567890",
        "secret": "abcdefghijklmnop",
        "details": {"access_token": "TOKEN-VALUE-123456"},
    }
    out = processor(None, "error", event)
    assert out["appid"] == "wx1234567890"
    assert out["secret"] == "ab…op"
    assert out["details"]["access_token"] == "TO…56"


def test_redacts_access_token_in_urls():
    processor = SecretRedactionProcessor()
    out = processor(None, "info", {"event": "x", "url": "https://api/send?access_token=abc123&x=1"})
    assert out["url"] == "https://api/send?access_token=***&x=1"
