"""Tests for channel name normalization."""

import pytest

from normalize import IsUsableKey, NormalizeName


class TestCctvNames:
    @pytest.mark.parametrize("name", ["CCTV1", "CCTV 1", "CCTV-1", "cctv-1", "CCTV-1 [IPv6] HD"])
    def test_variants_share_key(self, name):
        assert NormalizeName(name) == "CCTV-1"

    def test_plus_suffix_kept(self):
        assert NormalizeName("CCTV5+") == "CCTV-5+"
        assert NormalizeName("CCTV 5+ 体育赛事") != NormalizeName("CCTV-5 体育")

    def test_multi_digit(self):
        assert NormalizeName("CCTV 13") == "CCTV-13"


class TestAnnotations:
    def test_strips_square_brackets(self):
        assert NormalizeName("湖南卫视[IPv6]") == "湖南卫视"

    def test_strips_full_width_parentheses(self):
        assert NormalizeName("湖南卫视（备用）") == "湖南卫视"

    def test_strips_parentheses(self):
        assert NormalizeName("ESPN (HEVC)") == "ESPN"

    def test_strips_noise_words(self):
        assert NormalizeName("浙江卫视 高清 1080P") == "浙江卫视"
        assert NormalizeName("Phoenix FHD") == "PHOENIX"

    def test_strips_trailing_separators(self):
        assert NormalizeName("CGTN-") == "CGTN"
        assert NormalizeName("CGTN_HD") == "CGTN"

    def test_removes_whitespace(self):
        assert NormalizeName("Star  Movies") == "STARMOVIES"


class TestUsableKey:
    def test_empty_rejected(self):
        assert not IsUsableKey(NormalizeName(""))

    def test_single_character_rejected(self):
        assert not IsUsableKey(NormalizeName("A"))

    def test_noise_only_name_rejected(self):
        assert not IsUsableKey(NormalizeName("HD"))

    def test_normal_key_accepted(self):
        assert IsUsableKey(NormalizeName("CCTV-1"))
