"""Unit tests for document parsing and intent classification."""

import pytest
from fakes import request_bytes

from headline_bot.exceptions import ParseError
from headline_bot.mail.parsing import derive_intent, filter_malformed_headers, parse_document
from headline_bot.models import Intent

MBOX_DOCUMENT = (
    b">From someone\n"
    b"From bob did something\n"
    b"From: legit@x\n"
    b"\n"
    b"From the editor:\n"
    b">From a quote\n"
)


class TestFilterMalformedHeaders:
    """Test suite for mbox artifact removal."""

    def test_strips_artifacts_from_header_block_only(self) -> None:
        result = filter_malformed_headers(MBOX_DOCUMENT)

        assert result == b"From: legit@x\n\nFrom the editor:\n>From a quote\n"

    def test_is_idempotent(self) -> None:
        once = filter_malformed_headers(MBOX_DOCUMENT)

        assert filter_malformed_headers(once) == once

    def test_crlf_blank_line_ends_headers(self) -> None:
        content = b"From: a@x\r\nSubject: 1\r\n\r\nFrom here on\r\n"

        assert filter_malformed_headers(content) == content

    def test_leaves_clean_documents_alone(self) -> None:
        content = request_bytes("2")

        assert filter_malformed_headers(content) == content


class TestParseDocument:
    """Test suite for parse_document."""

    def test_parses_from_subject_and_body(self) -> None:
        document = parse_document(request_bytes("2", sender="Alice <alice@ubikom.cc>"))

        assert document.from_address == "alice@ubikom.cc"
        assert document.subject == "2"
        assert document.body == "hello\n"
        assert document.headers["to"] == ["news@ubikom.cc"]

    def test_parses_document_with_mbox_artifacts(self) -> None:
        document = parse_document(MBOX_DOCUMENT)

        assert document.from_address == "legit@x"
        assert document.subject == ""
        assert document.body.startswith("From the editor:")

    def test_missing_from_is_a_parse_error(self) -> None:
        with pytest.raises(ParseError):
            parse_document(b"Subject: 1\n\nbody\n")

    def test_multiple_from_addresses_is_a_parse_error(self) -> None:
        with pytest.raises(ParseError):
            parse_document(b"From: a@x, b@x\nSubject: 1\n\nbody\n")

    def test_empty_from_is_a_parse_error(self) -> None:
        with pytest.raises(ParseError):
            parse_document(b"From:\nSubject: 1\n\nbody\n")


class TestDeriveIntent:
    """Test suite for subject classification."""

    @pytest.mark.parametrize(
        ("subject", "article_id"),
        [
            ("1", 1),
            ("2", 2),
            ("42", 42),
            ("007", 7),
            ("+5", 5),
            ("-3", -3),
            ("2147483647", 2147483647),
        ],
    )
    def test_non_zero_integers_request_articles(self, subject: str, article_id: int) -> None:
        assert derive_intent(subject) == Intent.article(article_id)

    @pytest.mark.parametrize(
        ("subject", "article_id"),
        [("2147483648", 2147483647), ("3000000000", 2147483647), ("-3000000000", -2147483648)],
    )
    def test_out_of_range_integers_saturate(self, subject: str, article_id: int) -> None:
        assert derive_intent(subject) == Intent.article(article_id)

    @pytest.mark.parametrize(
        "subject",
        ["", "0", "-0", "+0", "000", " 2", "2 ", "news", "2a", "1_000", "٣", "1.5"],
    )
    def test_everything_else_requests_the_digest(self, subject: str) -> None:
        assert derive_intent(subject) == Intent.digest()
