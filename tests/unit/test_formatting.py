from datetime import datetime, timezone

from storefront.utils.formatting import (
    format_datetime_kigali,
    format_rwf,
    normalize_phone,
    parse_backend_date,
)


def test_format_rwf():
    assert format_rwf(0) == "0"
    assert format_rwf(950) == "950"
    assert format_rwf(15000) == "15,000"
    assert format_rwf(1234567) == "1,234,567"


class TestParseBackendDate:
    def test_naive_timestamp_is_utc(self):
        parsed = parse_backend_date("2024-03-01T08:30:00")
        assert parsed == datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc)

    def test_zulu_suffix(self):
        parsed = parse_backend_date("2024-03-01T08:30:00Z")
        assert parsed == datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc)

    def test_explicit_offset_kept(self):
        parsed = parse_backend_date("2024-03-01T10:30:00+02:00")
        assert parsed == datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc)

    def test_empty_and_garbage(self):
        assert parse_backend_date(None) is None
        assert parse_backend_date("   ") is None
        assert parse_backend_date("yesterday") is None

    def test_naive_datetime_object(self):
        parsed = parse_backend_date(datetime(2024, 3, 1, 8, 30))
        assert parsed.tzinfo == timezone.utc


def test_format_datetime_kigali():
    #Kigali is UTC+2 all year
    assert format_datetime_kigali("2024-03-01T08:30:00", "%Y-%m-%d %H:%M") == "2024-03-01 10:30"
    assert format_datetime_kigali(None) == "-"


class TestNormalizePhone:
    def test_local_format(self):
        assert normalize_phone("0788 123 456") == "250788123456"

    def test_international_format(self):
        assert normalize_phone("+250 788-123-456") == "250788123456"

    def test_nine_digits(self):
        assert normalize_phone("788123456") == "250788123456"

    def test_blank(self):
        assert normalize_phone(None) is None
        assert normalize_phone("  ") is None
        assert normalize_phone("abc") is None
