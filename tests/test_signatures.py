"""Unit tests for the signature catalog module."""

import json
from pathlib import Path

import pytest

from dmascan.classification.signatures import (
    DEFAULT_SIGNATURES,
    SignatureCatalog,
    create_default_catalog,
    load_catalog,
    load_catalog_file,
    parse_category,
)
from dmascan.core.models import SignatureCategory


class TestDefaultCatalog:
    """Tests for the built-in catalog."""

    def test_priority_order(self, default_catalog):
        """Test device-specific categories come before the generic DMA class."""
        names = [c.name for c in default_catalog.categories()]

        assert names == ["KMBOX-pattern", "Fuzer-pattern", "DMA-capable"]

    def test_reasons(self, default_catalog):
        """Test each category carries its detection reason."""
        reasons = {c.name: c.reason for c in default_catalog}

        assert reasons["KMBOX-pattern"] == "[$] KMBox pattern detected"
        assert reasons["Fuzer-pattern"] == "[$] Fuzer pattern detected"
        assert reasons["DMA-capable"] == "[$] DMA-capable device detected"

    def test_patterns(self, default_catalog):
        """Test the known patterns are present."""
        assert "VID_1A2C&PID_2124" in default_catalog.get_category("KMBOX-pattern").patterns
        assert "STM32" in default_catalog.get_category("Fuzer-pattern").patterns
        assert "PCI\\CC_0800" in default_catalog.get_category("DMA-capable").patterns
        assert default_catalog.pattern_count == 17

    def test_categories_stable(self, default_catalog):
        """Test categories() returns the same ordered sequence every call."""
        assert default_catalog.categories() == default_catalog.categories()
        assert isinstance(default_catalog.categories(), tuple)

    def test_default_table_not_shared(self):
        """Test building a catalog does not alter the default table."""
        before = json.dumps(DEFAULT_SIGNATURES)
        create_default_catalog()

        assert json.dumps(DEFAULT_SIGNATURES) == before


class TestParseCategory:
    """Tests for parse_category."""

    def test_full_category(self):
        """Test parsing all fields."""
        category = parse_category({
            "name": "Custom",
            "patterns": ["ABC", "DEF"],
            "reason": "[$] Custom device detected",
            "description": "Custom hardware",
        })

        assert category == SignatureCategory(
            name="Custom",
            patterns=("ABC", "DEF"),
            reason="[$] Custom device detected",
            description="Custom hardware",
        )

    def test_default_reason(self):
        """Test a missing reason is derived from the name."""
        assert parse_category({"name": "Custom", "patterns": []}).reason == "[$] Custom detected"

    def test_empty_patterns_allowed(self):
        """Test an empty pattern list is legal."""
        assert parse_category({"name": "Empty", "patterns": []}).patterns == ()

    def test_missing_name(self):
        """Test a category without a name is rejected."""
        with pytest.raises(ValueError, match="name"):
            parse_category({"patterns": ["ABC"]})

    def test_patterns_must_be_list(self):
        """Test a bare string is not accepted as a pattern list."""
        with pytest.raises(ValueError, match="patterns"):
            parse_category({"name": "Bad", "patterns": "ABC"})


class TestSignatureCatalog:
    """Tests for SignatureCatalog class."""

    def test_empty_catalog(self):
        """Test creating an empty catalog."""
        catalog = SignatureCatalog()

        assert len(catalog) == 0
        assert catalog.categories() == ()
        assert catalog.pattern_count == 0

    def test_duplicate_names_rejected(self):
        """Test two categories may not share a name."""
        with pytest.raises(ValueError, match="Duplicate"):
            SignatureCatalog([SignatureCategory("A"), SignatureCategory("A")])

    def test_get_category_missing(self, default_catalog):
        """Test looking up an unknown category."""
        assert default_catalog.get_category("nope") is None

    def test_from_dict_list_format(self):
        """Test loading from a bare list of categories."""
        catalog = SignatureCatalog.from_dict([{"name": "A", "patterns": ["X"]}])

        assert [c.name for c in catalog] == ["A"]

    def test_from_dict_invalid(self):
        """Test rejecting a non-catalog value."""
        with pytest.raises(ValueError):
            SignatureCatalog.from_dict("not a catalog")  # type: ignore[arg-type]

    def test_merge_replaces_in_place(self, default_catalog):
        """Test an existing category is replaced without changing priority."""
        override = SignatureCatalog([SignatureCategory("Fuzer-pattern", ("NEWFUZER",), "new")])

        merged = default_catalog.merged_with(override)

        assert [c.name for c in merged] == ["KMBOX-pattern", "Fuzer-pattern", "DMA-capable"]
        assert merged.get_category("Fuzer-pattern").patterns == ("NEWFUZER",)
        # Original untouched
        assert "STM32" in default_catalog.get_category("Fuzer-pattern").patterns

    def test_merge_appends_new(self, default_catalog):
        """Test new categories get the lowest priority."""
        extra = SignatureCatalog([SignatureCategory("Capture-card", ("CAPTURE",), "cap")])

        merged = default_catalog.merged_with(extra)

        assert [c.name for c in merged][-1] == "Capture-card"
        assert len(merged) == 4

    def test_export_and_reload(self, tmp_path: Path, default_catalog):
        """Test an exported catalog loads back identically."""
        path = tmp_path / "out" / "catalog.json"

        default_catalog.export_to_file(path)
        loaded = load_catalog_file(path)

        assert loaded.categories() == default_catalog.categories()
        assert "generated" in json.loads(path.read_text())


class TestLoadCatalog:
    """Tests for loading catalog files."""

    def test_load_file_not_found(self):
        """Test loading from non-existent file raises error."""
        with pytest.raises(FileNotFoundError):
            load_catalog_file(Path("/nonexistent/catalog.json"))

    def test_load_invalid_json(self, tmp_path: Path):
        """Test loading invalid JSON raises error."""
        path = tmp_path / "invalid.json"
        path.write_text("not valid json {{{")

        with pytest.raises(ValueError, match="Invalid JSON"):
            load_catalog_file(path)

    def test_load_invalid_category(self, tmp_path: Path):
        """Test a malformed category fails the whole file."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"categories": [{"patterns": ["X"]}]}))

        with pytest.raises(ValueError, match="Invalid signature file"):
            load_catalog_file(path)

    def test_load_version(self, tmp_path: Path):
        """Test the file version is kept."""
        path = tmp_path / "v.json"
        path.write_text(json.dumps({"version": "2.3", "categories": []}))

        assert load_catalog_file(path).version == "2.3"

    def test_load_catalog_defaults(self):
        """Test no paths yields the built-in catalog."""
        assert load_catalog().categories() == create_default_catalog().categories()

    def test_load_catalog_directory_sorted(self, tmp_path: Path):
        """Test directory files are applied in name order."""
        (tmp_path / "b.json").write_text(json.dumps([{"name": "B", "patterns": ["BB"]}]))
        (tmp_path / "a.json").write_text(json.dumps([{"name": "A", "patterns": ["AA"]}]))
        (tmp_path / "notes.txt").write_text("ignored")

        catalog = load_catalog([tmp_path])

        assert [c.name for c in catalog][-2:] == ["A", "B"]

    def test_load_catalog_with_base(self, tmp_path: Path):
        """Test merging onto an explicit base catalog."""
        path = tmp_path / "extra.json"
        path.write_text(json.dumps([{"name": "X", "patterns": ["XX"]}]))

        catalog = load_catalog([path], base=SignatureCatalog())

        assert [c.name for c in catalog] == ["X"]
