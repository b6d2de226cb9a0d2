"""Tests for identifier and clock helpers."""

from datetime import UTC, datetime

import pytest
from shared.ids import ID_ALPHABET, ID_LENGTH, is_valid_id, ms_to_datetime, new_id, random_string


class TestIds:
    def test_new_id_has_fixed_length_and_alphabet(self):
        value = new_id()
        assert len(value) == ID_LENGTH
        assert set(value) <= set(ID_ALPHABET)
        assert is_valid_id(value)

    def test_ids_do_not_repeat(self):
        assert len({new_id() for _ in range(200)}) == 200

    def test_random_string_length(self):
        assert len(random_string(5)) == 5

    def test_random_string_rejects_non_positive_length(self):
        with pytest.raises(ValueError):
            random_string(0)

    @pytest.mark.parametrize("value", ["short", "A" * 20, "a" * 21, 12345, None, "abcdefghij-klmnopqrs"])
    def test_invalid_ids(self, value):
        assert is_valid_id(value) is False


class TestClock:
    def test_ms_to_datetime_is_utc(self):
        assert ms_to_datetime(1_704_067_200_000) == datetime(2024, 1, 1, tzinfo=UTC)
