"""Tests for decoder.py: family-specific decoding of libclang status values.

Covers:
- Success sentinels per family
- Every documented sentinel per family table
- Unknown codes decode to UNKNOWN (never success, never a contract violation)
- check_* helpers raise the family's ClangError with structured detail
- Overlapping integer ranges decode differently per family

Python 3.13+.
"""

from __future__ import annotations

import logging

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from clangengine.decoder import (
    LAYOUT_TABLES,
    SAVE_TABLE,
    SOURCE_TABLE,
    check_layout,
    check_save_status,
    check_source_status,
    decode_handle,
    decode_layout,
    decode_save_status,
    decode_source_status,
)
from clangengine.errors import (
    AlignofError,
    ErrorCode,
    LayoutError,
    LayoutErrorKind,
    LayoutFamily,
    OffsetofError,
    SaveError,
    SaveErrorKind,
    SizeofError,
    SourceError,
    SourceErrorKind,
)

# ============================================================================
# Source family
# ============================================================================


class TestDecodeSourceStatus:
    """CXErrorCode decoding for parse and reparse."""

    def test_zero_is_success(self) -> None:
        """Status 0 decodes to None."""
        assert decode_source_status(0) is None

    @pytest.mark.parametrize(
        ("code", "kind"),
        [
            (1, SourceErrorKind.UNKNOWN),
            (2, SourceErrorKind.CRASH),
            (4, SourceErrorKind.AST_DESERIALIZATION),
        ],
    )
    def test_documented_codes(self, code: int, kind: SourceErrorKind) -> None:
        """Each documented CXErrorCode maps to its kind."""
        assert decode_source_status(code) is kind

    def test_invalid_arguments_is_unknown(self, caplog: pytest.LogCaptureFixture) -> None:
        """CXError_InvalidArguments is not in the table and decodes to UNKNOWN."""
        with caplog.at_level(logging.WARNING, logger="clangengine.decoder"):
            assert decode_source_status(3) is SourceErrorKind.UNKNOWN
        assert "Unknown source status code 3" in caplog.text

    @given(code=st.integers().filter(lambda c: c != 0))
    def test_nonzero_never_success(self, code: int) -> None:
        """Property: every nonzero code is an error of some kind."""
        kind = decode_source_status(code)
        event(f"kind={kind}")
        assert kind is not None
        if code not in SOURCE_TABLE:
            assert kind is SourceErrorKind.UNKNOWN


class TestCheckSourceStatus:
    """check_source_status raises SourceError with structured detail."""

    def test_success_returns_none(self) -> None:
        """No exception on success."""
        assert check_source_status(0, operation="parse", path="main.c") is None

    def test_crash_raises(self, caplog: pytest.LogCaptureFixture) -> None:
        """CRASH raises SourceError carrying kind, path and raw status."""
        with (
            caplog.at_level(logging.ERROR, logger="clangengine.decoder"),
            pytest.raises(SourceError) as exc_info,
        ):
            check_source_status(2, operation="reparse", path="main.c")

        error = exc_info.value
        assert error.kind is SourceErrorKind.CRASH
        assert error.detail is not None
        assert error.detail.code is ErrorCode.SOURCE_CRASH
        assert error.detail.path == "main.c"
        assert error.detail.raw_status == 2
        assert "Failed to reparse 'main.c'" in str(error)
        assert "Failed to reparse 'main.c'" in caplog.text


# ============================================================================
# Save family
# ============================================================================


class TestDecodeSaveStatus:
    """CXSaveError decoding."""

    def test_zero_is_success(self) -> None:
        """CXSaveError_None decodes to None."""
        assert decode_save_status(0) is None

    @pytest.mark.parametrize(
        ("code", "kind"),
        [(1, SaveErrorKind.UNKNOWN), (2, SaveErrorKind.ERRORS), (3, SaveErrorKind.ERRORS)],
    )
    def test_documented_codes(self, code: int, kind: SaveErrorKind) -> None:
        """Translation errors and invalid unit both decode to ERRORS."""
        assert decode_save_status(code) is kind

    def test_unlisted_code_is_unknown(self) -> None:
        """Codes outside the table decode to UNKNOWN."""
        assert decode_save_status(42) is SaveErrorKind.UNKNOWN
        assert 42 not in SAVE_TABLE

    def test_check_raises_save_error(self) -> None:
        """check_save_status raises SaveError with the decoded kind."""
        with pytest.raises(SaveError) as exc_info:
            check_save_status(3, path="out.ast")
        assert exc_info.value.kind is SaveErrorKind.ERRORS
        assert exc_info.value.detail is not None
        assert exc_info.value.detail.code is ErrorCode.SAVE_ERRORS


# ============================================================================
# Layout families
# ============================================================================


class TestDecodeLayout:
    """CXTypeLayoutError decoding, one table per query family."""

    @given(value=st.integers(min_value=0, max_value=2**63 - 1), family=st.sampled_from(LayoutFamily))
    def test_non_negative_is_magnitude(self, value: int, family: LayoutFamily) -> None:
        """Property: non-negative values are successful magnitudes."""
        assert decode_layout(value, family) is None
        assert check_layout(value, family, type_name="int") == value

    @pytest.mark.parametrize(
        ("family", "value", "kind"),
        [
            (LayoutFamily.SIZEOF, -1, LayoutErrorKind.INVALID),
            (LayoutFamily.SIZEOF, -2, LayoutErrorKind.INCOMPLETE),
            (LayoutFamily.SIZEOF, -3, LayoutErrorKind.DEPENDENT),
            (LayoutFamily.SIZEOF, -4, LayoutErrorKind.VARIABLE_SIZE),
            (LayoutFamily.SIZEOF, -6, LayoutErrorKind.UNDEDUCED),
            (LayoutFamily.ALIGNOF, -1, LayoutErrorKind.INVALID),
            (LayoutFamily.ALIGNOF, -2, LayoutErrorKind.INCOMPLETE),
            (LayoutFamily.ALIGNOF, -3, LayoutErrorKind.DEPENDENT),
            (LayoutFamily.ALIGNOF, -6, LayoutErrorKind.UNDEDUCED),
            (LayoutFamily.OFFSETOF, -1, LayoutErrorKind.INVALID),
            (LayoutFamily.OFFSETOF, -2, LayoutErrorKind.INCOMPLETE),
            (LayoutFamily.OFFSETOF, -3, LayoutErrorKind.DEPENDENT),
            (LayoutFamily.OFFSETOF, -5, LayoutErrorKind.INVALID_FIELD_NAME),
            (LayoutFamily.OFFSETOF, -6, LayoutErrorKind.UNDEDUCED),
        ],
    )
    def test_documented_sentinels(
        self, family: LayoutFamily, value: int, kind: LayoutErrorKind
    ) -> None:
        """Each family decodes its own documented sentinels."""
        assert decode_layout(value, family) is kind

    def test_sentinel_outside_family_is_unknown(self) -> None:
        """-5 (invalid field name) is only meaningful for offsetof."""
        assert decode_layout(-5, LayoutFamily.SIZEOF) is LayoutErrorKind.UNKNOWN
        assert decode_layout(-5, LayoutFamily.ALIGNOF) is LayoutErrorKind.UNKNOWN
        assert decode_layout(-4, LayoutFamily.ALIGNOF) is LayoutErrorKind.UNKNOWN

    @given(value=st.integers(max_value=-1), family=st.sampled_from(LayoutFamily))
    def test_negative_never_success(self, value: int, family: LayoutFamily) -> None:
        """Property: every negative value is an error kind."""
        kind = decode_layout(value, family)
        event(f"family={family} known={value in LAYOUT_TABLES[family]}")
        assert kind is not None

    @pytest.mark.parametrize(
        ("family", "error_type", "code"),
        [
            (LayoutFamily.SIZEOF, SizeofError, ErrorCode.SIZEOF_FAILED),
            (LayoutFamily.ALIGNOF, AlignofError, ErrorCode.ALIGNOF_FAILED),
            (LayoutFamily.OFFSETOF, OffsetofError, ErrorCode.OFFSETOF_FAILED),
        ],
    )
    def test_check_layout_raises_family_error(
        self, family: LayoutFamily, error_type: type[LayoutError], code: ErrorCode
    ) -> None:
        """check_layout raises the family's LayoutError subclass."""
        with pytest.raises(error_type) as exc_info:
            check_layout(-2, family, type_name="struct opaque")
        assert exc_info.value.kind is LayoutErrorKind.INCOMPLETE
        assert exc_info.value.detail is not None
        assert exc_info.value.detail.code is code
        assert "struct opaque" in str(exc_info.value)

    def test_offsetof_message_names_field(self) -> None:
        """The offsetof error message includes the field name."""
        with pytest.raises(OffsetofError, match=r"struct point\.z"):
            check_layout(-5, LayoutFamily.OFFSETOF, type_name="struct point", field="z")


class TestOverlappingRanges:
    """The same integer means different things in different families."""

    def test_two_is_crash_for_source_but_errors_for_save(self) -> None:
        """2 decodes per family, never through a shared table."""
        assert decode_source_status(2) is SourceErrorKind.CRASH
        assert decode_save_status(2) is SaveErrorKind.ERRORS

    def test_minus_two_is_incomplete_only_for_layout(self) -> None:
        """-2 is INCOMPLETE for layout and UNKNOWN for source."""
        assert decode_layout(-2, LayoutFamily.SIZEOF) is LayoutErrorKind.INCOMPLETE
        assert decode_source_status(-2) is SourceErrorKind.UNKNOWN


class TestDecodeHandle:
    """Opaque pointer normalization."""

    @pytest.mark.parametrize("pointer", [None, 0])
    def test_null_is_none(self, pointer: int | None) -> None:
        """NULL in either ctypes spelling decodes to None."""
        assert decode_handle(pointer) is None

    @given(pointer=st.integers(min_value=1, max_value=2**64 - 1))
    def test_non_null_is_identity(self, pointer: int) -> None:
        """Property: non-null pointers pass through unchanged."""
        assert decode_handle(pointer) == pointer
