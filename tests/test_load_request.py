"""Tests for load argument normalization and LoadOptions."""

import pytest

from imgpool.loader.load_request import LoadOptions, normalize_load_args


def cb(result):
    return result


class TestNormalizeLoadArgs:
    """Tests for the positional overload rules."""

    def test_no_args(self):
        """Test src alone has no callback and no deposit."""
        options = normalize_load_args()
        assert options == LoadOptions()
        assert not options.deposit

    def test_callback_only(self):
        """Test load(src, callback)."""
        assert normalize_load_args(cb) == LoadOptions(callback=cb)

    def test_callback_and_pool(self):
        """Test load(src, callback, pool_name)."""
        options = normalize_load_args(cb, "gallery")
        assert options.callback is cb
        assert options.pool_name == "gallery"
        assert options.copies is None

    def test_callback_pool_copies(self):
        """Test load(src, callback, pool_name, copies)."""
        options = normalize_load_args(cb, "gallery", 3)
        assert options == LoadOptions(callback=cb, pool_name="gallery", copies=3)

    def test_string_shifts_left(self):
        """Test load(src, pool_name) treats the string as the pool name."""
        options = normalize_load_args("gallery")
        assert options.callback is None
        assert options.pool_name == "gallery"
        assert options.deposit

    def test_string_shift_with_copies(self):
        """Test load(src, pool_name, copies)."""
        options = normalize_load_args("gallery", 2)
        assert options == LoadOptions(pool_name="gallery", copies=2)
        assert options.copy_count == 2

    def test_explicit_none_callback(self):
        """Test a None placeholder keeps positions."""
        assert normalize_load_args(None, "gallery", 2) == LoadOptions(pool_name="gallery", copies=2)

    def test_keywords(self):
        """Test keyword form."""
        options = normalize_load_args(pool_name="gallery", copies=2, callback=cb)
        assert options == LoadOptions(callback=cb, pool_name="gallery", copies=2)

    def test_mixed_positional_and_keyword(self):
        """Test a positional pool name with keyword copies."""
        assert normalize_load_args("gallery", copies=4) == LoadOptions(pool_name="gallery", copies=4)

    def test_conflict_raises(self):
        """Test the same slot cannot be given twice."""
        with pytest.raises(TypeError, match="multiple values"):
            normalize_load_args("gallery", pool_name="other")

    def test_too_many_raises(self):
        """Test more than three trailing arguments is an error."""
        with pytest.raises(TypeError, match="at most 3"):
            normalize_load_args(cb, "gallery", 2, "extra")

    def test_too_many_after_shift_raises(self):
        """Test the shift counts toward the limit."""
        with pytest.raises(TypeError):
            normalize_load_args("gallery", 2, "extra")


class TestLoadOptions:
    """Tests for option validation."""

    def test_copies_must_be_positive(self):
        """Test zero copies is rejected."""
        with pytest.raises(ValueError):
            LoadOptions(pool_name="p", copies=0)

    def test_copies_must_be_int(self):
        """Test non-integer copies is rejected."""
        with pytest.raises(TypeError):
            LoadOptions(pool_name="p", copies="2")

    def test_callback_must_be_callable(self):
        """Test non-callable callback is rejected."""
        with pytest.raises(TypeError):
            LoadOptions(callback=42)

    def test_without_callback(self):
        """Test without_callback keeps deposit settings."""
        options = LoadOptions(callback=cb, pool_name="p", copies=2).without_callback()
        assert options == LoadOptions(pool_name="p", copies=2)

    def test_default_copy_count(self):
        """Test one copy is deposited by default."""
        assert LoadOptions(pool_name="p").copy_count == 1
