import io
import re
from datetime import datetime, timedelta, timezone

from conftest import FIXED_DATE, FIXED_NOW
from webserver.http_response import NOT_FOUND_BODY, SERVER_NAME, create_header, format_http_date, write_header

HTTP_DATE = re.compile(r"^(Mon|Tue|Wed|Thu|Fri|Sat|Sun), \d{2} [A-Z][a-z]{2} \d{4} \d{2}:\d{2}:\d{2} GMT$")


def test_format_http_date():
    assert format_http_date(FIXED_NOW) == FIXED_DATE


def test_format_http_date_converts_to_gmt():
    local = datetime(2026, 10, 19, 16, 5, 9, tzinfo=timezone(timedelta(hours=2)))
    assert format_http_date(local) == FIXED_DATE


def test_format_http_date_treats_naive_as_utc():
    assert format_http_date(datetime(2026, 10, 19, 14, 5, 9)) == FIXED_DATE


def test_format_http_date_uses_english_names():
    assert format_http_date(datetime(2024, 2, 29, 23, 59, 1, tzinfo=timezone.utc)) == "Thu, 29 Feb 2024 23:59:01 GMT"


def test_format_http_date_defaults_to_now():
    assert HTTP_DATE.match(format_http_date())


def test_found_header_fields_in_order():
    header = create_header(True, "image/png", FIXED_DATE)

    assert header == (
        "HTTP/1.1 200 OK\r\n"
        f"Date: {FIXED_DATE}\r\n"
        f"Server: {SERVER_NAME}\r\n"
        "Connection: close\r\n"
        "Content-Type: image/png\r\n"
        "\r\n"
    ).encode("utf-8")


def test_not_found_header():
    header = create_header(False, "text/html", FIXED_DATE)
    assert header.startswith(b"HTTP/1.1 404 NOT FOUND\r\n")
    assert header.endswith(b"Content-Type: text/html\r\n\r\n")


def test_header_block_ends_with_one_blank_line():
    header = create_header(True, "text/html", FIXED_DATE)
    assert header.count(b"\r\n\r\n") == 1
    assert header.endswith(b"\r\n\r\n")


def test_write_header():
    wfile = io.BytesIO()
    header = write_header(wfile, True, "text/html", FIXED_NOW)
    assert wfile.getvalue() == header
    assert f"Date: {FIXED_DATE}".encode("utf-8") in header


def test_not_found_body_is_literal():
    assert NOT_FOUND_BODY == b"404 NOT FOUND!"
