"""Tests for the header string parser."""

from __future__ import annotations

import pytest

from cspkit import (
    ContentSecurityPolicy,
    CspParser,
    InvalidArgument,
    InvalidDirective,
    InvalidSourceListItem,
    Mode,
    OutputMode,
)
from cspkit.registry import DIRECTIVES, SANDBOX, SANDBOX_TOKENS


@pytest.fixture
def strict():
    return CspParser(Mode.STRICT)


@pytest.fixture
def loose():
    return CspParser(Mode.LOOSE)


# ── Header prefix ────────────────────────────────────────────────────────


class TestHeaderPrefix:
    def test_empty(self, strict):
        assert strict.parse("").get_directives() == {}
        assert strict.parse("   ").get_directives() == {}

    def test_value_only(self, strict):
        result = strict.parse("default-src https://www.example.com")
        assert result.get_directives() == {"default-src": ["https://www.example.com"]}
        assert result.report_only is False

    @pytest.mark.parametrize("header", [
        "Content-Security-Policy:",
        "Content-Security-Policy: ",
        "content-security-policy:",
        "CONTENT-SECURITY-POLICY :",
        "  Content-Security-Policy:   ",
    ])
    def test_with_header(self, strict, header):
        result = strict.parse(header + "default-src https://www.example.com")
        assert result.get_directives() == {"default-src": ["https://www.example.com"]}
        assert result.report_only is False

    def test_report_only(self, strict):
        result = strict.parse("Content-Security-Policy-Report-Only: default-src 'self'")
        assert result.report_only is True
        assert result.get_directives() == {"default-src": ["'self'"]}

    def test_report_only_case_insensitive(self, strict):
        result = strict.parse("content-security-policy-report-only:default-src 'self'")
        assert result.report_only is True

    def test_unrelated_header_name_is_a_directive(self, strict):
        with pytest.raises(InvalidDirective):
            strict.parse("X-Content-Security-Policy: default-src 'self'")


# ── Tokenization ─────────────────────────────────────────────────────────


class TestTokenization:
    @pytest.mark.parametrize("directive", [d for d in DIRECTIVES if d != SANDBOX])
    def test_every_basic_directive(self, strict, directive):
        result = strict.parse(f"{directive} https://www.example.com")
        assert result.get_directives() == {directive: ["https://www.example.com"]}

    def test_multiple_directives(self, strict):
        for text in [
            "default-src https://www.example.com;script-src 'self'",
            "default-src https://www.example.com ; script-src 'self' ;",
            "default-src https://www.example.com ; ;; ; ;; ;; ;; ;script-src 'self' ;",
        ]:
            result = strict.parse(text)
            assert result.get_directives() == {
                "default-src": ["https://www.example.com"],
                "script-src": ["'self'"],
            }

    def test_tabs_and_repeated_spaces(self, strict):
        result = strict.parse("script-src\t'self'    https:\t\thttps://cdn.example.com")
        assert result.get_directive("script-src") == ["'self'", "https:", "https://cdn.example.com"]

    def test_directive_case_normalized(self, strict):
        result = strict.parse("Default-Src 'self'")
        assert "default-src" in result.get_directives()

    def test_repeated_directive_merges_values(self, strict):
        result = strict.parse("img-src data:; img-src blob: data:")
        assert result.get_directive("img-src") == ["data:", "blob:"]

    def test_directive_without_values(self, strict):
        result = strict.parse("upgrade-insecure-requests; default-src 'self'")
        assert result.get_directive("upgrade-insecure-requests") == []
        assert result.get_directive("default-src") == ["'self'"]

    def test_multiline_header(self, strict):
        result = strict.parse("Content-Security-Policy:\n  default-src 'self';\n  img-src data:")
        assert result.get_directives() == {"default-src": ["'self'"], "img-src": ["data:"]}

    def test_returns_policy_with_parser_mode(self, loose):
        result = loose.parse("default-src 'self'")
        assert isinstance(result, ContentSecurityPolicy)
        assert result.mode is Mode.LOOSE

    def test_invalid_parser_mode(self):
        with pytest.raises(InvalidArgument):
            CspParser("medium")


# ── Grammar through the parser ───────────────────────────────────────────


class TestPredefinedValues:
    def test_keywords(self, strict):
        assert strict.parse("default-src 'none'").get_directive("default-src") == ["'none'"]
        assert strict.parse("default-src 'self'").get_directive("default-src") == ["'self'"]

        result = strict.parse("style-src 'self' 'unsafe-inline'")
        assert result.get_directive("style-src") == ["'self'", "'unsafe-inline'"]

        result = strict.parse("script-src 'self' 'unsafe-inline' 'unsafe-eval'")
        assert result.get_directive("script-src") == ["'self'", "'unsafe-inline'", "'unsafe-eval'"]

    def test_strict_invalid_keyword(self, strict):
        with pytest.raises(InvalidSourceListItem):
            strict.parse("default-src 'self' 'invalid'")

    def test_strict_keyword_not_allowed_for_directive(self, strict):
        with pytest.raises(InvalidSourceListItem):
            strict.parse("default-src 'self' 'unsafe-inline'")

    def test_strict_quoted_report_endpoint(self, strict):
        with pytest.raises(InvalidSourceListItem):
            strict.parse("report-to 'my-endpoint'")

    def test_loose_drops_invalid(self, loose):
        assert loose.parse("default-src 'self' 'invalid'").get_directive("default-src") == ["'self'"]
        assert loose.parse("default-src 'self' 'unsafe-inline'").get_directive("default-src") == ["'self'"]

        result = loose.parse("style-src 'self' 'unsafe-inline'")
        assert result.get_directive("style-src") == ["'self'", "'unsafe-inline'"]

        result = loose.parse("script-src 'self' 'unsafe-inline' 'unsafe-eval'")
        assert len(result.get_directive("script-src")) == 3

    def test_loose_continues_after_drop(self, loose):
        result = loose.parse("default-src 'bogus' https://example.com; img-src data:")
        assert result.get_directives() == {
            "default-src": ["https://example.com"],
            "img-src": ["data:"],
        }

    def test_nonce(self, strict):
        result = strict.parse("style-src 'self' 'nonce-dmFsaWQgbm9uY2U='")
        assert "'nonce-dmFsaWQgbm9uY2U='" in result.get_directive("style-src")

        result = strict.parse("style-src 'self' 'nonce-not+valid+base64+but+valid+enough'")
        assert "'nonce-not+valid+base64+but+valid+enough'" in result.get_directive("style-src")

        with pytest.raises(InvalidSourceListItem):
            strict.parse("style-src 'self' 'nonce-inv#alid'")

    @pytest.mark.parametrize("sha", ["sha256", "sha384", "sha512"])
    def test_sha(self, strict, sha):
        result = strict.parse(f"style-src '{sha}-dmFsaWQgbm9uY2U='")
        assert f"'{sha}-dmFsaWQgbm9uY2U='" in result.get_directive("style-src")

    def test_sha_invalid_algorithm(self, strict):
        with pytest.raises(InvalidSourceListItem):
            strict.parse("style-src 'self' 'sha666-dmFsaWQgbm9uY2U='")

    def test_sha_invalid_base64(self, strict):
        with pytest.raises(InvalidSourceListItem):
            strict.parse("style-src 'self' 'sha256-inv#alid'")

    def test_script_level3_keywords(self, strict):
        result = strict.parse("script-src 'strict-dynamic' 'unsafe-hashes'")
        assert result.get_directive("script-src") == ["'strict-dynamic'", "'unsafe-hashes'"]

    @pytest.mark.parametrize("directive", ["worker-src", "prefetch-src", "manifest-src"])
    def test_worker_manifest_prefetch(self, strict, directive):
        result = strict.parse(f"{directive} 'self' 'unsafe-hashes'")
        assert result.get_directive(directive) == ["'self'", "'unsafe-hashes'"]


class TestSandbox:
    def test_bare(self, strict):
        assert strict.parse("sandbox").get_directive("sandbox") == []

    def test_single_token(self, strict):
        assert strict.parse("sandbox allow-forms").get_directive("sandbox") == ["allow-forms"]

    def test_all_tokens(self, strict):
        result = strict.parse("sandbox " + " ".join(sorted(SANDBOX_TOKENS)))
        assert len(result.get_directive("sandbox")) == 10
        assert "allow-orientation-lock" in result.get_directive("sandbox")

    @pytest.mark.parametrize("mode", [Mode.STRICT, Mode.LOOSE])
    def test_invalid_token(self, mode):
        """Invalid sandbox tokens abort parsing even in loose mode."""
        with pytest.raises(InvalidSourceListItem):
            CspParser(mode).parse("sandbox allow-forms invalid")


class TestInvalidDirective:
    @pytest.mark.parametrize("mode", [Mode.STRICT, Mode.LOOSE])
    def test_unknown_directive(self, mode):
        with pytest.raises(InvalidDirective):
            CspParser(mode).parse("invalid-src x")

    def test_fails_on_first_offending_item(self, strict):
        with pytest.raises(InvalidDirective) as exc_info:
            strict.parse("default-src 'self'; bogus-src x; other-src y")
        assert exc_info.value.directive == "bogus-src"


# ── Round trip ───────────────────────────────────────────────────────────


class TestRoundTrip:
    def _build(self) -> ContentSecurityPolicy:
        csp = ContentSecurityPolicy()
        csp.add_to_directive("worker-src", "blob:")
        csp.add_to_directive("default-src", "https://example.com")
        csp.add_to_directive("default-src", "*.cdn.example.com")
        csp.add_to_directive("img-src", "data:")
        csp.add_to_directive("report-uri", "/csp-report")
        csp.add_to_directive("upgrade-insecure-requests", None)
        csp.add_to_directive("sandbox", None)
        return csp

    def test_full_header(self):
        csp = self._build()
        parsed = ContentSecurityPolicy.from_string(str(csp))
        assert parsed.get_directives() == csp.get_directives()
        assert parsed == csp

    def test_value_only_report_only(self):
        csp = self._build()
        csp.report_only = True
        assert ContentSecurityPolicy.from_string(str(csp)).report_only is True
        csp.output_mode = OutputMode.VALUE_ONLY
        parsed = ContentSecurityPolicy.from_string(str(csp))
        assert parsed == csp
        assert parsed.report_only is False

    def test_canonical_output_is_stable(self):
        text = "script-src 'self'; default-src 'none'; sandbox allow-scripts; img-src data:"
        first = str(ContentSecurityPolicy.from_string(text))
        second = str(ContentSecurityPolicy.from_string(first))
        assert first == second == (
            "Content-Security-Policy: default-src 'none'; img-src data:; "
            "sandbox allow-scripts; script-src 'self';"
        )
