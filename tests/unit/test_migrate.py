"""
Tests for schema migration (version 1 -> version 2).

Tests cover:
- Version detection for documents and raw mappings
- Idempotence and identity on version 2 input
- Derived extended, status, chart and sidebar tokens
- Preservation of typography, radius and legacy fields
"""

import pytest

from themeforge.core.errors import ThemeMigrationError
from themeforge.core.ir import ThemeDocument
from themeforge.core.migrate import (
    derive_chart_colors,
    derive_extended_tokens,
    detect_theme_version,
    is_v2_theme,
    migrate_theme,
)
from themeforge.core.tokens import EXTENDED_TOKENS, REQUIRED_COLORS, STATUS_COLORS


class TestVersionDetection:
    def test_flat_colors_are_version_1(self, v1_data):
        assert detect_theme_version(v1_data) == "1"
        assert not is_v2_theme(v1_data)

    def test_explicit_version(self, v2_data):
        assert detect_theme_version(v2_data) == "2"
        assert detect_theme_version({"version": "2.0"}) == "2"
        assert detect_theme_version({"version": 1}) == "1"

    def test_indicator_keys_imply_version_2(self):
        assert detect_theme_version({"semanticTokens": {}}) == "2"
        assert detect_theme_version({"effects": {"glow": {}}}) == "2"

    def test_missing_document(self):
        assert detect_theme_version(None) == "1"

    def test_unsupported_version_on_raw_mapping(self):
        assert detect_theme_version({"version": "7"}) == "1"

    def test_document_version_is_normalized(self, v2_theme, v1_theme):
        assert v2_theme.version == "2"
        assert v1_theme.version == "1"


class TestMigrateTheme:
    def test_version_2_is_returned_unchanged(self, v2_theme):
        assert migrate_theme(v2_theme) is v2_theme

    def test_migration_is_idempotent(self, v1_theme):
        once = migrate_theme(v1_theme)
        twice = migrate_theme(once)
        assert twice == once
        assert once.is_v2

    def test_raw_mapping_is_accepted(self, v1_data):
        migrated = migrate_theme(v1_data)
        assert isinstance(migrated, ThemeDocument)
        assert migrated.id == "ocean-blue"

    def test_semantic_tokens_keep_v1_colors(self, v1_theme):
        migrated = migrate_theme(v1_theme)
        for mode in ("light", "dark"):
            tokens = migrated.semantic_tokens[mode]
            for name in REQUIRED_COLORS:
                assert tokens[name] == v1_theme.colors[mode][name]
            for name in EXTENDED_TOKENS:
                assert name in tokens

    def test_hover_tokens_shift_lightness(self, v1_theme):
        migrated = migrate_theme(v1_theme)
        assert migrated.semantic_tokens["light"]["primary-hover"] == "221.2 83.2% 49.3%"
        assert migrated.semantic_tokens["dark"]["primary-hover"] == "217.2 91.2% 63.8%"

    def test_status_colors(self, v1_theme):
        migrated = migrate_theme(v1_theme)
        for mode in ("light", "dark"):
            for name in STATUS_COLORS:
                assert name in migrated.status_colors[mode]
        # destructive comes from the v1 palette, not the defaults
        assert migrated.status_colors["light"]["destructive"] == "0 84.2% 60.2%"

    def test_chart_and_sidebar(self, v1_theme):
        migrated = migrate_theme(v1_theme)
        assert migrated.chart_colors["1"] == v1_theme.colors["light"]["primary"]
        assert set(migrated.chart_colors) == {"1", "2", "3", "4", "5"}
        sidebar = migrated.sidebar_tokens["dark"]
        assert sidebar["background"] == "0 0% 5%"
        assert sidebar["primary"] == v1_theme.colors["dark"]["primary"]

    def test_typography_and_spacing(self, v1_theme):
        migrated = migrate_theme(v1_theme)
        assert migrated.typography.font_family.sans == "Inter, sans-serif"
        assert migrated.typography.font_family.mono == "JetBrains Mono, monospace"
        assert migrated.spacing.radius == "0.5rem"
        assert migrated.radius == "0.5rem"
        assert migrated.colors == v1_theme.colors

    def test_input_is_not_mutated(self, v1_theme):
        before = v1_theme.model_dump()
        migrate_theme(v1_theme)
        assert v1_theme.model_dump() == before

    def test_missing_document_raises(self):
        with pytest.raises(ThemeMigrationError):
            migrate_theme(None)

    def test_malformed_mapping_raises(self):
        with pytest.raises(ThemeMigrationError):
            migrate_theme({"colors": "not a mapping"})


class TestDerivation:
    def test_partial_palette_skips_missing_bases(self):
        derived = derive_extended_tokens({"background": "0 0% 100%"}, "light")
        assert derived["surface"] == "0 0% 100%"
        assert derived["panel-translucent"] == "0 0% 100% / 0.8"
        assert "primary-hover" not in derived

    def test_chart_colors_honor_existing_entries(self):
        chart = derive_chart_colors({"primary": "1 1% 1%", "chart-3": "3 3% 3%"})
        assert chart["1"] == "1 1% 1%"
        assert chart["3"] == "3 3% 3%"
