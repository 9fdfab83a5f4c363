from __future__ import annotations

from ordersync._redact import mask_name, redact_for_log


def test_order_list_contact_details_are_redacted() -> None:
    payload = {
        "orders": [
            {
                "id": 1,
                "status": "배송중",
                "sender_name": "홍길동",
                "sender_phone": "010-1111-2222",
                "receiver_name": "김철수",
                "receiver_phone": "010-1234-5678",
                "receiver_email": "kim@example.com",
                "receiver_address": "서울시 강남구",
                "receiver_detail_address": "101동 202호",
                "receiver_zipcode": "06236",
                "tracking_number": "1234567890",
            }
        ]
    }

    [order] = redact_for_log(payload)["orders"]

    assert order["status"] == "배송중"
    assert order["tracking_number"] == "1234567890"
    assert order["sender_name"] == "홍**"
    assert order["receiver_name"] == "김**"
    for key in (
        "sender_phone",
        "receiver_phone",
        "receiver_email",
        "receiver_address",
        "receiver_detail_address",
        "receiver_zipcode",
    ):
        assert order[key] == "<redacted>", key


def test_credentials_are_redacted() -> None:
    redacted = redact_for_log({"Authorization": "Bearer abc", "token": "abc", "status": "반송"})
    assert redacted == {"Authorization": "<redacted>", "token": "<redacted>", "status": "반송"}


def test_long_order_lists_are_cut() -> None:
    redacted = redact_for_log({"orders": [{"id": i} for i in range(12)]}, max_items=3)
    assert redacted["orders"] == [{"id": 0}, {"id": 1}, {"id": 2}, "<+9 more>"]


def test_long_strings_are_truncated() -> None:
    redacted = redact_for_log({"memo": "x" * 600}, max_string=10)
    assert redacted["memo"].startswith("x" * 10)
    assert "<truncated>" in redacted["memo"]


def test_mask_name() -> None:
    assert mask_name("") == ""
    assert mask_name("이") == "이"
    assert mask_name("Kim") == "K**"


def test_none_passes_through() -> None:
    assert redact_for_log(None) is None
