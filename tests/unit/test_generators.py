"""
Tests for format generators.

Tests cover:
- Determinism of every registered generator
- Well-formed JSON for token formats
- CSS, SCSS and Tailwind structure
- Dispatch errors and per-format isolation
"""

import json

import pytest

from themeforge.core.errors import UnknownFormatError
from themeforge.generators import (
    GENERATORS,
    GeneratorInfo,
    export_theme,
    generate_all_formats,
    generate_css,
    generate_css_for_mode,
    generate_figma_tokens,
    generate_scss,
    generate_style_dictionary,
    generate_tailwind,
    generate_tailwind_minimal,
    generate_theme,
    generate_tokens_studio,
    get_format_extension,
)


class TestDispatch:
    @pytest.mark.parametrize("fmt", sorted(GENERATORS))
    def test_output_is_deterministic(self, v2_theme, fmt):
        assert generate_theme(v2_theme, fmt) == generate_theme(v2_theme, fmt)

    @pytest.mark.parametrize("fmt", ["figma", "style-dictionary"])
    def test_json_formats_parse(self, v1_theme, fmt):
        assert isinstance(json.loads(generate_theme(v1_theme, fmt)), dict)

    def test_unknown_format(self, v2_theme):
        with pytest.raises(UnknownFormatError) as exc_info:
            generate_theme(v2_theme, "less")
        assert exc_info.value.format == "less"
        assert "css" in exc_info.value.available

    def test_extensions(self):
        assert get_format_extension("css") == ".css"
        assert get_format_extension("scss") == ".scss"
        assert get_format_extension("tailwind") == ".js"
        assert get_format_extension("figma") == ".json"
        assert get_format_extension("style-dictionary") == ".json"
        assert get_format_extension("unknown") == ".txt"


class TestGenerateAll:
    def test_all_formats_succeed(self, v2_theme):
        results = generate_all_formats(v2_theme)
        assert set(results) == set(GENERATORS)
        assert all(output.success for output in results.values())

    def test_failing_generator_is_isolated(self, v2_theme, monkeypatch):
        def broken(document, **options):
            raise RuntimeError("boom")

        monkeypatch.setitem(
            GENERATORS, "scss", GeneratorInfo("SCSS", "broken", broken, ".scss", "text/x-scss")
        )
        results = generate_all_formats(v2_theme)

        assert not results["scss"].success
        assert results["scss"].error == "boom"
        assert results["css"].success
        assert results["tailwind"].success

    def test_per_format_options(self, v2_theme):
        results = generate_all_formats(
            v2_theme, options={"tailwind": {"format": "js"}}, formats=["tailwind"]
        )
        assert list(results) == ["tailwind"]
        assert "module.exports = {" in results["tailwind"].content

    def test_unknown_format_is_reported(self, v2_theme):
        results = generate_all_formats(v2_theme, formats=["css", "less"])
        assert results["css"].success
        assert results["less"].extension == ".txt"
        assert "Unknown format" in results["less"].error

    def test_export_writes_files(self, v2_theme, tmp_path):
        written = export_theme(v2_theme, tmp_path / "out", formats=["css", "figma", "tailwind"])
        assert written["css"] == tmp_path / "out" / "teal-glow.css"
        assert written["figma"] == tmp_path / "out" / "teal-glow.figma.json"
        assert written["tailwind"] == tmp_path / "out" / "teal-glow.js"
        assert written["css"].read_text() == generate_css(v2_theme)
        tailwind = written["tailwind"].read_text()
        assert "module.exports = {" in tailwind
        assert "import type" not in tailwind

    def test_tailwind_default_is_javascript(self, v2_theme):
        assert generate_theme(v2_theme, "tailwind").startswith("/** @type")
        result = generate_all_formats(v2_theme, formats=["tailwind"])["tailwind"]
        assert result.extension == ".js"
        assert result.content.startswith("/** @type")

    def test_typescript_tailwind_gets_ts_extension(self, v2_theme, tmp_path):
        options = {"tailwind": {"format": "ts"}}
        result = generate_all_formats(v2_theme, options=options, formats=["tailwind"])["tailwind"]
        assert result.extension == ".ts"
        assert result.content.startswith("import type { Config }")

        written = export_theme(v2_theme, tmp_path, formats=["tailwind"], options=options)
        assert written["tailwind"] == tmp_path / "teal-glow.ts"
        assert not (tmp_path / "teal-glow.js").exists()


def _max_depth(text: str, opener: str, closer: str) -> int:
    """Deepest nesting of ``opener``/``closer``; fails on an early close or an unclosed block."""
    depth = deepest = 0
    for ch in text:
        if ch == opener:
            depth += 1
            deepest = max(deepest, depth)
        elif ch == closer:
            depth -= 1
            assert depth >= 0, f"unmatched {closer!r}"
    assert depth == 0, f"{depth} unclosed {opener!r}"
    return deepest


class TestWellFormedness:
    @pytest.mark.parametrize("fmt", ["css", "scss", "tailwind"])
    @pytest.mark.parametrize("theme", ["v1_theme", "v2_theme"])
    def test_blocks_are_balanced(self, request, theme, fmt):
        output = generate_theme(request.getfixturevalue(theme), fmt)
        assert _max_depth(output, "{", "}") > 0
        _max_depth(output, "(", ")")
        _max_depth(output, "[", "]")

    def test_css_ends_with_closed_block(self, v2_theme):
        assert generate_css(v2_theme).rstrip().endswith("}")
        assert generate_css_for_mode(v2_theme, "light").rstrip().endswith("}")

    @pytest.mark.parametrize("theme", ["v1_theme", "v2_theme"])
    def test_js_tailwind_has_no_typescript_syntax(self, request, theme):
        config = generate_tailwind(request.getfixturevalue(theme), format="js")
        assert "import type" not in config
        assert ": Config" not in config
        assert "export default" not in config
        assert "satisfies" not in config

    @pytest.mark.parametrize("theme", ["v1_theme", "v2_theme"])
    def test_scss_unquote_arguments_are_single_strings(self, request, theme):
        scss = generate_scss(request.getfixturevalue(theme))
        assert 'unquote(""' not in scss
        for line in scss.splitlines():
            if "unquote(" in line:
                argument = line.split("unquote(", 1)[1].rsplit(")", 1)[0]
                assert argument.count('"') == 2, line


class TestCss:
    def test_light_and_dark_blocks(self, v2_theme):
        css = generate_css(v2_theme)
        assert "@layer base {" in css
        assert "  :root {" in css
        assert "    --primary: 173 60% 37%;" in css
        assert "  .dark {" in css
        assert "    --primary: 173 60% 63%;" in css
        assert "    --radius: 0.5rem;" in css
        assert "@keyframes fadeIn {" in css
        assert "--animation-fadeIn: fadeIn 0.3s ease-out;" in css

    def test_without_base_layer(self, v1_theme):
        css = generate_css(v1_theme, include_base=False)
        assert "@layer base" not in css
        assert ":root {" in css
        assert "/* Version: 1.0 */" in css

    def test_unresolved_references_are_omitted(self, v2_data):
        from themeforge.core.ir import ThemeDocument

        v2_data["semanticTokens"]["light"]["accent"] = {"$ref": "scales.missing.1"}
        css = generate_css(ThemeDocument.model_validate(v2_data))
        assert "--accent:" not in css.split(".dark")[0]

    def test_single_mode(self, v2_theme):
        css = generate_css_for_mode(v2_theme, "dark")
        assert ".dark" not in css
        assert "  --primary: 173 60% 63%;" in css


class TestScss:
    def test_variables_and_maps(self, v2_theme):
        scss = generate_scss(v2_theme)
        assert "$theme-light-primary: 173 60% 37%;" in scss
        assert "$theme-dark-primary: 173 60% 63%;" in scss
        assert '$theme-light-teal-a3: unquote("173 60% 50% / 0.15");' in scss
        assert '  "primary": $theme-light-primary,' in scss
        assert "@function theme-color(" in scss

    def test_prefix(self, v1_theme):
        scss = generate_scss(v1_theme, prefix="brand", include_mixins=False)
        assert "$brand-light-background: 0 0% 100%;" in scss
        assert "@function" not in scss

    def test_quoted_font_families_are_kept_as_lists(self, theme_factory):
        from themeforge.core.ir import ThemeDocument

        data = theme_factory.v1(fontFamily={"sans": '"Geist Sans", system-ui, sans-serif'})
        scss = generate_scss(ThemeDocument.model_validate(data))
        assert '$theme-font-sans: "Geist Sans", system-ui, sans-serif;' in scss
        assert "unquote(" not in scss.split("$theme-font-sans")[1].splitlines()[0]


class TestTailwind:
    def test_ts_config(self, v2_theme):
        config = generate_tailwind(v2_theme)
        assert config.startswith('import type { Config } from "tailwindcss";')
        assert config.rstrip().endswith("export default config;")
        assert 'primary: {\n          DEFAULT: "hsl(var(--primary))",' in config
        assert '"a12": "hsl(var(--teal-a12))",' in config
        assert "animation: {" in config

    def test_js_config(self, v1_theme):
        config = generate_tailwind(v1_theme, format="js")
        assert config.startswith("/** @type {import('tailwindcss').Config} */")
        assert "module.exports = {" in config

    def test_invalid_format(self, v1_theme):
        with pytest.raises(ValueError):
            generate_tailwind(v1_theme, format="mjs")

    def test_minimal(self, v2_theme):
        config = generate_tailwind_minimal(v2_theme)
        assert "teal-a12" not in config
        assert "keyframes: {" not in config


class TestTokenFormats:
    def test_figma_structure(self, v2_theme):
        tokens = json.loads(generate_figma_tokens(v2_theme))
        assert [t["id"] for t in tokens["$themes"]] == ["teal-glow-light", "teal-glow-dark"]
        assert tokens["$metadata"]["version"] == "2.0"
        assert set(tokens) >= {"global", "light", "dark"}
        primary = tokens["light"]["colors"]["primary"]["DEFAULT"]
        assert primary["value"] == "173 60% 37%"
        assert primary["type"] == "color"
        assert primary["$extensions"]["figma"]["hexValue"].startswith("#")

    def test_tokens_studio_uses_dollar_keys(self, v2_theme):
        tokens = json.loads(generate_tokens_studio(v2_theme))
        primary = tokens["light"]["colors"]["primary"]["DEFAULT"]
        assert primary["$value"] == "173 60% 37%"
        assert primary["$type"] == "color"

    def test_style_dictionary(self, v2_theme):
        tokens = json.loads(generate_style_dictionary(v2_theme, generated_at="2024-01-01"))
        assert tokens["$meta"]["generatedAt"] == "2024-01-01"
        assert tokens["color"]["primary"]["light"]["primary"]["value"] == "173 60% 37%"
        assert tokens["color"]["scale"]["teal"]["dark"]["9"]["value"] == "173 60% 63%"

    def test_design_tool_exports_share_scales(self, v2_theme):
        figma = json.loads(generate_figma_tokens(v2_theme))["global"]
        style = json.loads(generate_style_dictionary(v2_theme))

        def values(group, key):
            return {name: leaf[key] for name, leaf in group.items()}

        assert values(figma["spacing"], "value") == values(style["spacing"], "value")
        assert figma["spacing"]["64"]["value"] == "16rem"
        typography = figma["typography"]
        assert values(typography["fontSize"], "value") == values(style["font"]["size"], "value")
        assert typography["fontSize"]["5xl"]["value"] == "3rem"
        assert values(typography["fontWeight"], "value") == values(style["font"]["weight"], "value")
        assert values(typography["lineHeight"], "value") == values(
            style["font"]["lineHeight"], "value"
        )

    def test_style_dictionary_flat(self, v1_theme):
        tokens = json.loads(generate_style_dictionary(v1_theme, flat_structure=True))
        assert tokens["color"]["dark"]["background"]["value"] == "222.2 84% 4.9%"
