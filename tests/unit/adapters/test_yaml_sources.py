"""Tests for the YAML unit and layer sources."""

import logging

import pytest
import yaml

from devium.adapters import DocumentLoader, YamlLayerSource, YamlUnitSource, load_document
from devium.domains.page_resolution import LayerSource, UnitSource

from tests.app_fixtures import write_app


class TestDocumentLoader:
    __test__ = True

    def test_version_suffixes_stay_strings(self):
        document = yaml.load("1_0: a\n12_1: b\n10: c\n", Loader=DocumentLoader)
        assert document == {"1_0": "a", "12_1": "b", 10: "c"}

    def test_safe_loader_still_rejects_python_tags(self):
        with pytest.raises(yaml.YAMLError):
            yaml.load("!!python/object:os.system {}", Loader=DocumentLoader)

    def test_missing_file(self, tmp_path):
        assert load_document(str(tmp_path / "missing.yaml")) is None


class TestYamlUnitSource:
    __test__ = True

    def test_enumerate_units_in_declaration_order(self, apps_root):
        source = YamlUnitSource(str(apps_root / "Shop"))
        assert source.enumerate_units("Login") == [
            "Android_9", "Android_10", "Samsung_4_0", "Android_12_1", "Shop_2_0",
        ]
        assert source.enumerate_units("Settings") == []
        assert source.enumerate_units("Cart") is None

    def test_list_pages(self, apps_root):
        source = YamlUnitSource(str(apps_root / "Shop"))
        assert source.list_pages() == ["Login", "Home", "Checkout", "Settings"]
        assert isinstance(source, UnitSource)

    def test_missing_pages_file(self, tmp_path):
        source = YamlUnitSource(str(tmp_path / "Nothing"))
        assert source.list_pages() == []
        assert source.enumerate_units("Login") is None

    def test_non_list_units_rejected(self, tmp_path):
        write_app(tmp_path, "Bad", {"pages.yaml": "Login: Android_9\n"})
        with pytest.raises(ValueError):
            YamlUnitSource(str(tmp_path / "Bad")).enumerate_units("Login")

    def test_non_mapping_document_rejected(self, tmp_path):
        write_app(tmp_path, "Bad", {"pages.yaml": "- Android_9\n"})
        with pytest.raises(ValueError):
            YamlUnitSource(str(tmp_path / "Bad")).list_pages()

    def test_cache_until_cleared(self, tmp_path):
        app_dir = write_app(tmp_path, "Shop", {"pages.yaml": "Login: [Android_9]\n"})
        source = YamlUnitSource(str(app_dir))
        assert source.enumerate_units("Login") == ["Android_9"]

        (app_dir / "pages.yaml").write_text("Login: [Android_10]\n", encoding="utf-8")
        assert source.enumerate_units("Login") == ["Android_9"]

        source.clear_cache()
        assert source.enumerate_units("Login") == ["Android_10"]

    def test_uncached_source_rereads(self, tmp_path):
        app_dir = write_app(tmp_path, "Shop", {"pages.yaml": "Login: [Android_9]\n"})
        source = YamlUnitSource(str(app_dir), cache=False)
        (app_dir / "pages.yaml").write_text("Login: [Android_10]\n", encoding="utf-8")
        assert source.enumerate_units("Login") == ["Android_10"]


class TestYamlLayerSource:
    __test__ = True

    def test_tag_matched_case_insensitively(self, apps_root):
        source = YamlLayerSource(str(apps_root / "Shop" / "ui_map"))
        assert isinstance(source, LayerSource)

        android = source.load_layer_document("Android")
        assert set(android) == {"9", "10", "12_1"}
        assert android["12_1"] == {"login": {"submit": "id/sign_in"}}
        assert source.load_layer_document("samsung")["4_0"]["login"]["password"] == "samsung/pass"

    def test_yml_extension(self, apps_root):
        source = YamlLayerSource(str(apps_root / "Shop" / "ui_map"))
        assert source.load_layer_document("Shop") == {"2_0": {"banner": "id/promo"}}

    def test_missing_document_or_directory(self, apps_root, tmp_path):
        assert YamlLayerSource(str(apps_root / "Shop" / "ui_map")).load_layer_document("Ios") is None
        assert YamlLayerSource(str(tmp_path / "none")).load_layer_document("Android") is None

    def test_non_mapping_root_ignored(self, tmp_path, caplog):
        app_dir = write_app(tmp_path, "Shop", {"ui_map/android.yaml": "- a\n- b\n"})
        source = YamlLayerSource(str(app_dir / "ui_map"))

        with caplog.at_level(logging.WARNING):
            assert source.load_layer_document("Android") is None
        assert "not a mapping" in caplog.text
