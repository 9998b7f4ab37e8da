"""Tests for the Forge resolver: promotions, build parsing, file selection and latest."""

from unittest.mock import MagicMock

import pytest

from errors import DataIntegrityFault, UnparseableMetadata
from resolvers.forge import (
    ForgeResolver,
    normalize_hash,
    parse_long_version,
    parse_promotions,
    select_files,
)

HASH = "0123456789abcdef0123456789abcdef"


def _manifest(_long_version):
    return {"classifiers": {"installer": {"jar": HASH}, "universal": {"jar": HASH}}}


def _resolve(promos, builds, provider=_manifest):
    return ForgeResolver(provider).resolve({"homepage": "https://files.minecraftforge.net", "promos": promos}, builds)


class TestResolve:
    """End-to-end resolution of the derived index."""

    def test_recommended_and_latest(self):
        index = _resolve(
            {"1.12.2-recommended": "14.23.5.2855"},
            {"1.12.2": ["1.12.2-14.23.5.2847", "1.12.2-14.23.5.2855"]},
        )
        info = index.mc_versions["1.12.2"]
        assert info.latest == "1.12.2-14.23.5.2855"
        assert info.recommended == "1.12.2-14.23.5.2855"
        assert info.versions == ["1.12.2-14.23.5.2847", "1.12.2-14.23.5.2855"]
        assert index.versions["1.12.2-14.23.5.2855"].recommended is True
        assert index.versions["1.12.2-14.23.5.2847"].recommended is False

    def test_latest_is_positional_not_numeric(self):
        index = _resolve({}, {"1.7.10": ["1.7.10-10.13.4.1614", "1.7.10-10.13.4.1558"]})
        assert index.mc_versions["1.7.10"].latest == "1.7.10-10.13.4.1558"
        assert index.versions["1.7.10-10.13.4.1558"].latest is True
        assert index.versions["1.7.10-10.13.4.1614"].latest is False

    def test_exactly_one_latest_per_mc_version(self):
        index = _resolve({}, {
            "1.7.10": ["1.7.10-10.13.4.1558", "1.7.10-10.13.4.1614-1.7.10"],
            "1.12.2": ["1.12.2-14.23.5.2847"],
        })
        latest = [entry.long_version for entry in index.versions.values() if entry.latest]
        assert sorted(latest) == ["1.12.2-14.23.5.2847", "1.7.10-10.13.4.1614-1.7.10"]
        assert index.mc_versions["1.7.10"].recommended is None

    def test_branch_build(self):
        index = _resolve({}, {"1.7.10": ["1.7.10-10.13.4.1614-1.7.10"]})
        entry = index.versions["1.7.10-10.13.4.1614-1.7.10"]
        assert entry.version == "10.13.4.1614"
        assert entry.build == 1614
        assert entry.branch == "1.7.10"

    def test_files_come_from_provider(self):
        provider = MagicMock(side_effect=_manifest)
        index = _resolve({}, {"1.12.2": ["1.12.2-14.23.5.2847"]}, provider)
        provider.assert_called_once_with("1.12.2-14.23.5.2847")
        assert set(index.versions["1.12.2-14.23.5.2847"].files) == {"installer", "universal"}

    def test_mc_mismatch_aborts(self):
        with pytest.raises(DataIntegrityFault):
            _resolve({}, {"1.12.2": ["1.12.1-14.22.1.2478"]})

    def test_malformed_build_string_aborts(self):
        with pytest.raises(UnparseableMetadata):
            _resolve({}, {"1.12.2": ["not-a-build"]})

    def test_non_list_builds_abort(self):
        with pytest.raises(UnparseableMetadata):
            _resolve({}, {"1.12.2": "1.12.2-14.23.5.2847"})

    def test_to_dict_shape(self):
        index = _resolve(
            {"1.12.2-recommended": "14.23.5.2855"},
            {"1.12.2": ["1.12.2-14.23.5.2855"]},
        )
        out = index.to_dict()
        assert out["mc_versions"]["1.12.2"] == {
            "latest": "1.12.2-14.23.5.2855",
            "recommended": "1.12.2-14.23.5.2855",
            "versions": ["1.12.2-14.23.5.2855"],
        }
        entry = out["versions"]["1.12.2-14.23.5.2855"]
        assert entry["longversion"] == "1.12.2-14.23.5.2855"
        assert entry["mcversion"] == "1.12.2"
        assert entry["build"] == 2855
        assert entry["files"]["installer"] == {"classifier": "installer", "hash": HASH, "extension": "jar"}


class TestPromotions:
    """Promotion key handling."""

    def test_only_recommended_without_branch(self):
        promos = {
            "1.12.2-recommended": "14.23.5.2855",
            "1.12.2-latest": "14.23.5.2860",
            "1.7.10-latest-1.7.10": "10.13.4.1614",
            "1.7.10-recommended-1.7.10": "10.13.4.1614",
        }
        assert parse_promotions(promos) == {"14.23.5.2855"}

    def test_malformed_key_skipped(self):
        assert parse_promotions({"garbage": "1.0", "1.8-recommended": "11.14.4.1563"}) == {"11.14.4.1563"}

    def test_unknown_kind_raises(self):
        with pytest.raises(UnparseableMetadata):
            parse_promotions({"1.12.2-featured": "14.23.5.2855"})


class TestLongVersion:
    """Build string grammar."""

    def test_parse(self):
        assert parse_long_version("1.12.2-14.23.5.2855") == ("1.12.2", "14.23.5.2855", 2855, None)

    def test_prerelease_mc_version(self):
        mc, version, build, branch = parse_long_version("1.7.10_pre4-10.12.2.1149-prerelease")
        assert mc == "1.7.10_pre4"
        assert build == 1149
        assert branch == "prerelease"

    def test_rejects_non_numeric_version(self):
        with pytest.raises(UnparseableMetadata):
            parse_long_version("1.12.2-latest")


class TestSelectFiles:
    """Artifact selection from a files manifest."""

    def test_punctuated_hash_is_normalized(self):
        files = select_files("1.12.2-14.23.5.2855", {
            "classifiers": {"installer": {"jar": "A1:B2-C3D4E5F6A1B2C3D4E5F6A1B2C3D4"}}
        })
        assert files["installer"].hash == "a1b2c3d4e5f6a1b2c3d4e5f6a1b2c3d4"

    @pytest.mark.parametrize("raw_hash", [HASH[:30], HASH + "ab"])
    def test_wrong_length_hash_dropped(self, raw_hash, caplog):
        files = select_files("1.12.2-14.23.5.2855", {
            "classifiers": {"installer": {"jar": raw_hash}, "changelog": {"txt": HASH}}
        })
        assert "installer" not in files
        assert "changelog" in files
        assert "Skipping invalid hash" in caplog.text

    def test_last_string_hash_wins(self):
        files = select_files("1.5.2-7.8.1.738", {
            "classifiers": {"universal": {"zip": HASH, "jar": None}}
        })
        assert files["universal"].extension == "zip"

        files = select_files("1.5.2-7.8.1.738", {
            "classifiers": {"universal": {"jar": HASH, "zip": HASH}}
        })
        assert files["universal"].extension == "zip"

    def test_duplicate_classifier_after_normalization(self):
        with pytest.raises(DataIntegrityFault):
            select_files("1.12.2-14.23.5.2855", {
                "classifiers": {"installer": {"jar": HASH}, " Installer": {"jar": HASH}}
            })

    def test_duplicate_classifier_with_invalid_hash(self):
        with pytest.raises(DataIntegrityFault):
            select_files("1.12.2-14.23.5.2855", {
                "classifiers": {"installer": {"jar": "not-a-hash"}, " Installer": {"jar": HASH}}
            })

    def test_missing_classifiers(self):
        with pytest.raises(UnparseableMetadata):
            select_files("1.12.2-14.23.5.2855", {})

    def test_normalize_hash(self):
        assert normalize_hash("AB:cd-12") == "abcd12"
