"""Tests for IT8951 wire-format utility functions."""

from unittest.mock import MagicMock, patch

import pytest

from photoframe.display.drivers.it8951.utils import (
    delay_ms,
    iter_chunks,
    pack_words,
    unpack_words,
    validate_buffer_size,
    vcom_to_millivolts,
    words_to_string,
)


class TestDelayMs:
    """Test cases for delay_ms function."""

    @patch("photoframe.display.drivers.it8951.utils.time.sleep")
    def test_delay_ms_when_called_then_sleeps_correct_duration(self, mock_sleep: MagicMock) -> None:
        for ms in [0, 10, 100]:
            delay_ms(ms)
            mock_sleep.assert_called_with(ms / 1000.0)


class TestPackWords:
    """Test cases for 16-bit word packing."""

    def test_pack_words_when_multi_byte_value_then_big_endian(self) -> None:
        assert pack_words(0x1234) == b"\x12\x34"

    def test_pack_words_when_several_values_then_concatenated_in_order(self) -> None:
        assert pack_words(0x6000, 0x0001, 1872) == b"\x60\x00\x00\x01\x07\x50"

    def test_pack_words_when_value_exceeds_16_bits_then_value_error(self) -> None:
        with pytest.raises(ValueError, match="16-bit"):
            pack_words(0x10000)

    def test_pack_words_when_negative_then_value_error(self) -> None:
        with pytest.raises(ValueError):
            pack_words(-1)

    def test_unpack_words_when_even_length_then_returns_words(self) -> None:
        assert unpack_words(b"\x07\x50\x05\x7c") == [1872, 1404]

    def test_unpack_words_when_odd_length_then_value_error(self) -> None:
        with pytest.raises(ValueError):
            unpack_words(b"\x00\x01\x02")

    def test_words_to_string_when_nul_padded_then_trimmed(self) -> None:
        words = unpack_words(b"M641".ljust(16, b"\x00"))
        assert words_to_string(words) == "M641"


class TestIterChunks:
    """Test cases for iter_chunks function."""

    def test_iter_chunks_when_buffer_not_multiple_then_last_chunk_shorter(self) -> None:
        assert list(iter_chunks(b"abcdefg", 3)) == [b"abc", b"def", b"g"]

    def test_iter_chunks_when_empty_buffer_then_no_chunks(self) -> None:
        assert list(iter_chunks(b"", 4096)) == []

    def test_iter_chunks_when_chunk_size_not_positive_then_value_error(self) -> None:
        with pytest.raises(ValueError):
            list(iter_chunks(b"abc", 0))


class TestValidateBufferSize:
    """Test cases for validate_buffer_size function."""

    def test_validate_buffer_size_when_correct_size_then_returns_true(self) -> None:
        assert validate_buffer_size(b"\x00\x01\x02", 3) is True

    @patch("photoframe.display.drivers.it8951.utils.logger")
    def test_validate_buffer_size_when_wrong_size_then_logs_and_returns_false(
        self, mock_logger: MagicMock
    ) -> None:
        assert validate_buffer_size(b"\x00\x01", 3) is False
        mock_logger.error.assert_called_once()


class TestVcomToMillivolts:
    """Test cases for VCOM conversion."""

    def test_vcom_to_millivolts_when_negative_volts_then_magnitude_in_mv(self) -> None:
        assert vcom_to_millivolts(-1.53) == 1530

    def test_vcom_to_millivolts_when_default_then_2000(self) -> None:
        assert vcom_to_millivolts(-2.0) == 2000

    def test_vcom_to_millivolts_when_zero_then_value_error(self) -> None:
        with pytest.raises(ValueError):
            vcom_to_millivolts(0.0)
