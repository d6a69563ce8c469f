"""Shared pytest fixtures for ThemeForge tests."""

import json
from pathlib import Path
from typing import Any

import pytest

from themeforge.core.ir import ThemeDocument

LIGHT_COLORS = {
    "background": "0 0% 100%",
    "foreground": "222.2 84% 4.9%",
    "card": "0 0% 100%",
    "card-foreground": "222.2 84% 4.9%",
    "popover": "0 0% 100%",
    "popover-foreground": "222.2 84% 4.9%",
    "primary": "221.2 83.2% 53.3%",
    "primary-foreground": "210 40% 98%",
    "secondary": "210 40% 96.1%",
    "secondary-foreground": "222.2 47.4% 11.2%",
    "muted": "210 40% 96.1%",
    "muted-foreground": "215.4 16.3% 46.9%",
    "accent": "210 40% 96.1%",
    "accent-foreground": "222.2 47.4% 11.2%",
    "destructive": "0 84.2% 60.2%",
    "destructive-foreground": "210 40% 98%",
    "border": "214.3 31.8% 91.4%",
    "input": "214.3 31.8% 91.4%",
    "ring": "221.2 83.2% 53.3%",
}

DARK_COLORS = {
    **LIGHT_COLORS,
    "background": "222.2 84% 4.9%",
    "foreground": "210 40% 98%",
    "primary": "217.2 91.2% 59.8%",
    "primary-foreground": "222.2 47.4% 11.2%",
}


def make_v1_theme(theme_id: str = "ocean-blue", **overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": theme_id,
        "name": theme_id.replace("-", " ").title(),
        "category": "minimal-clean",
        "description": "Test theme",
        "colors": {"light": dict(LIGHT_COLORS), "dark": dict(DARK_COLORS)},
        "radius": "0.5rem",
        "fontFamily": {"sans": "Inter, sans-serif"},
    }
    data.update(overrides)
    return data


def make_scale(hue: int, alpha: bool = True) -> dict[str, Any]:
    steps = {
        "light": {str(n): f"{hue} 60% {100 - n * 7}%" for n in range(1, 13)},
        "dark": {str(n): f"{hue} 60% {n * 7}%" for n in range(1, 13)},
    }
    scale: dict[str, Any] = {"hue": hue, "steps": steps}
    if alpha:
        scale["alpha"] = {
            mode: {str(n): f"{hue} 60% 50% / {n / 20:.2f}" for n in range(1, 13)}
            for mode in ("light", "dark")
        }
    return scale


def make_v2_theme(theme_id: str = "teal-glow", **overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "version": "2",
        "id": theme_id,
        "name": "Teal Glow",
        "category": "tech-ai",
        "scales": {"teal": make_scale(173)},
        "semanticTokens": {
            "light": {
                "background": "0 0% 100%",
                "foreground": "222 47% 11%",
                "primary": {"$ref": "scales.teal.9"},
                "primary-foreground": "0 0% 100%",
                "card-foreground": {"$ref": "semanticTokens.light.foreground"},
                "ring": {"$ref": "scales.teal.steps.light.8"},
            },
            "dark": {
                "background": "222 47% 6%",
                "foreground": "0 0% 98%",
                "primary": {"$ref": "scales.teal.9"},
                "primary-foreground": "0 0% 0%",
                "card-foreground": {"$ref": "semanticTokens.dark.foreground"},
                "ring": {"$ref": "scales.teal.steps.dark.8"},
            },
        },
        "statusColors": {
            "light": {"success": "142 76% 36%"},
            "dark": {"success": "142 70% 45%"},
        },
        "chartColors": {"1": {"$ref": "scales.teal.9"}, "2": "199 89% 48%"},
        "sidebarTokens": {
            "light": {"background": "0 0% 98%", "primary": {"$ref": "scales.teal.9"}},
            "dark": {"background": "0 0% 5%", "primary": {"$ref": "scales.teal.9"}},
        },
        "effects": {
            "glassMorphism": {"background": {"$ref": "scales.teal.a3"}, "backdropBlur": "12px"},
            "glow": {"default": "0 0 20px", "lg": "0 0 40px", "color": {"$ref": "scales.teal.a8"}},
            "gradient": {"primary": {"from": {"$ref": "scales.teal.9"}, "to": "199 89% 48%"}},
        },
        "animations": {
            "fadeIn": {
                "duration": "0.3s",
                "keyframes": {"from": {"opacity": "0"}, "to": {"opacity": "1"}},
            }
        },
    }
    data.update(overrides)
    return data


@pytest.fixture
def v1_data() -> dict[str, Any]:
    """Return a raw version 1 theme mapping."""
    return make_v1_theme()


@pytest.fixture
def v2_data() -> dict[str, Any]:
    """Return a raw version 2 theme mapping with scales and references."""
    return make_v2_theme()


@pytest.fixture
def v1_theme(v1_data: dict[str, Any]) -> ThemeDocument:
    return ThemeDocument.model_validate(v1_data)


@pytest.fixture
def v2_theme(v2_data: dict[str, Any]) -> ThemeDocument:
    return ThemeDocument.model_validate(v2_data)


BUTTON_TSX = """export function Button() {
  return <button className="bg-blue-500 text-white px-4">Go</button>
}
"""

CARD_TSX = """export function Card() {
  return <div className="bg-emerald-800 border-gray-200">Card</div>
}
"""

GLOBALS_CSS = """@tailwind base;
@tailwind components;
@tailwind utilities;
"""


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create an initialized project with two themes and a few components."""
    root = tmp_path / "webapp"
    (root / ".themeforge" / "themes").mkdir(parents=True)
    (root / "app").mkdir()
    (root / "app" / "globals.css").write_text(GLOBALS_CSS)
    components = root / "src" / "components"
    components.mkdir(parents=True)
    (components / "Button.tsx").write_text(BUTTON_TSX)
    (components / "Card.tsx").write_text(CARD_TSX)

    themes = root / ".themeforge" / "themes"
    (themes / "ocean-blue.json").write_text(json.dumps(make_v1_theme("ocean-blue")))
    (themes / "teal-glow.json").write_text(json.dumps(make_v2_theme("teal-glow")))
    return root


@pytest.fixture
def theme_factory():
    """Return builders for raw version 1 and version 2 theme mappings."""

    class Factory:
        v1 = staticmethod(make_v1_theme)
        v2 = staticmethod(make_v2_theme)
        scale = staticmethod(make_scale)

    return Factory
