"""
Compliance rules for hard-coded Tailwind color utilities.

A utility such as ``hover:bg-blue-500`` is parsed into a :class:`ColorUtility`
and mapped to a semantic utility (``hover:bg-primary``) in two stages:

1. Static rules: a table of well-known color/shade pairs. Standard mode uses
   :data:`STATIC_RULES`; full mode uses :data:`FULL_STATIC_RULES`, which adds
   status hues, opacity variants and hover/focus/dark variants.
2. Dynamic classification (full mode only): the color family is bucketed into
   a :class:`HueGroup` and the shade picks the token or opacity suffix.

When neither stage applies the suggestion is ``None`` and the usage needs
manual review.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum

UTILITY_PREFIXES: tuple[str, ...] = (
    "bg",
    "text",
    "border",
    "ring",
    "fill",
    "stroke",
    "outline",
    "divide",
    "from",
    "via",
    "to",
    "shadow",
    "decoration",
)

COLOR_FAMILIES: tuple[str, ...] = (
    "slate",
    "gray",
    "zinc",
    "neutral",
    "stone",
    "red",
    "orange",
    "amber",
    "yellow",
    "lime",
    "green",
    "emerald",
    "teal",
    "cyan",
    "sky",
    "blue",
    "indigo",
    "violet",
    "purple",
    "fuchsia",
    "pink",
    "rose",
)

# Families that take no shade
BARE_FAMILIES: tuple[str, ...] = ("white", "black")

_PREFIX_ALT = "|".join(UTILITY_PREFIXES)
_FAMILY_ALT = "|".join(COLOR_FAMILIES)
_BARE_ALT = "|".join(BARE_FAMILIES)

# variants, prefix, family + shade or bare family, optional opacity modifier
UTILITY_PATTERN = re.compile(
    rf"(?<![\w/-])((?:[a-z0-9-]+:)*)({_PREFIX_ALT})-"
    rf"(?:({_FAMILY_ALT})-(\d{{2,3}})|({_BARE_ALT}))"
    r"(/\d{1,3})?(?![\w-])"
)


# =============================================================================
# Static Rules
# =============================================================================

STATIC_RULES: dict[str, str] = {
    # Backgrounds
    "bg-white": "bg-background",
    "bg-gray-50": "bg-muted",
    "bg-gray-100": "bg-secondary",
    "bg-gray-200": "bg-muted",
    "bg-gray-900": "bg-foreground",
    "bg-slate-50": "bg-muted",
    "bg-slate-100": "bg-secondary",
    "bg-slate-900": "bg-foreground",
    "bg-zinc-50": "bg-muted",
    "bg-zinc-100": "bg-muted",
    "bg-zinc-900": "bg-foreground",
    # Text
    "text-black": "text-foreground",
    "text-white": "text-background",
    "text-gray-900": "text-foreground",
    "text-gray-800": "text-foreground",
    "text-gray-700": "text-foreground",
    "text-gray-600": "text-muted-foreground",
    "text-gray-500": "text-muted-foreground",
    "text-gray-400": "text-muted-foreground",
    "text-slate-900": "text-foreground",
    "text-slate-600": "text-muted-foreground",
    "text-slate-500": "text-muted-foreground",
    "text-zinc-900": "text-foreground",
    "text-zinc-600": "text-muted-foreground",
    "text-zinc-500": "text-muted-foreground",
    # Borders
    "border-gray-100": "border-border",
    "border-gray-200": "border-border",
    "border-gray-300": "border-input",
    "border-slate-200": "border-border",
    "border-slate-300": "border-input",
    "border-zinc-200": "border-border",
    "border-zinc-300": "border-input",
    # Primary
    "bg-blue-500": "bg-primary",
    "bg-blue-600": "bg-primary",
    "bg-blue-700": "bg-primary",
    "text-blue-500": "text-primary",
    "text-blue-600": "text-primary",
    "text-blue-700": "text-primary",
    "ring-blue-500": "ring-ring",
    "ring-blue-600": "ring-ring",
    # Destructive
    "bg-red-500": "bg-destructive",
    "bg-red-600": "bg-destructive",
    "text-red-500": "text-destructive",
    "text-red-600": "text-destructive",
    "border-red-500": "border-destructive",
    # Interactive surfaces
    "hover:bg-gray-100": "hover:bg-accent",
    "hover:bg-slate-100": "hover:bg-accent",
}


def _shade_rules(
    family: str,
    token: str,
    backgrounds: dict[int, str],
    text: tuple[int, ...] = (),
    border: tuple[int, ...] = (),
    ring: tuple[int, ...] = (),
    text_token: str | None = None,
) -> dict[str, str]:
    """Expand one family's table row into utility -> utility rules."""
    rules: dict[str, str] = {}
    for shade, suffix in backgrounds.items():
        rules[f"bg-{family}-{shade}"] = f"bg-{token}{suffix}"
    for shade in text:
        rules[f"text-{family}-{shade}"] = f"text-{text_token or token}"
    for shade in border:
        rules[f"border-{family}-{shade}"] = f"border-{token}"
    for shade in ring:
        rules[f"ring-{family}-{shade}"] = f"ring-{token}"
    return rules


_TINTS = {50: "/10", 100: "/20", 200: "/30", 300: "/50", 400: "/70"}


def _tints(*shades: int) -> dict[int, str]:
    return {shade: _TINTS[shade] for shade in shades}


def _solid(*shades: int) -> dict[int, str]:
    return dict.fromkeys(shades, "")


_ACCENT_TEXT = "accent-foreground"

FULL_STATIC_RULES: dict[str, str] = {
    **STATIC_RULES,
    # Success
    **_shade_rules(
        "green",
        "success",
        {**_tints(50, 100, 200, 300, 400), **_solid(500, 600, 700, 800, 900)},
        text=(500, 600, 700, 800),
        border=(500,),
        ring=(500,),
    ),
    **_shade_rules(
        "emerald",
        "success",
        {**_tints(50, 100, 200, 300, 400), **_solid(500, 600, 700)},
        text=(500, 600, 700),
        border=(500,),
    ),
    **_shade_rules("teal", "success", _solid(500, 600), text=(500, 600)),
    **_shade_rules("lime", "success", _solid(500, 600), text=(500, 600)),
    # Warning
    **_shade_rules(
        "yellow",
        "warning",
        {**_tints(50, 100, 200, 300, 400), **_solid(500, 600)},
        text=(500, 600, 700),
        border=(500,),
    ),
    **_shade_rules(
        "amber",
        "warning",
        {**_tints(50, 100, 300, 400), **_solid(500, 600)},
        text=(500, 600),
        border=(500,),
    ),
    **_shade_rules("orange", "warning", _solid(500, 600), text=(500, 600), border=(500,)),
    # Primary and info
    **_shade_rules(
        "blue",
        "primary",
        {**_tints(50, 100, 200, 300, 400), **_solid(500, 600, 700, 800, 900)},
        text=(500, 600, 700, 800, 900),
    ),
    **_shade_rules(
        "cyan",
        "info",
        {**_tints(50, 100, 300, 400), **_solid(500, 600)},
        text=(500, 600),
        border=(500,),
    ),
    **_shade_rules(
        "sky",
        "info",
        {**_tints(50, 100, 400), **_solid(500, 600)},
        text=(500, 600),
        border=(500,),
    ),
    # Destructive
    **_shade_rules(
        "red",
        "destructive",
        {**_tints(50, 100, 200, 300, 400), **_solid(500, 600, 700, 800, 900)},
        text=(500, 600, 700, 800),
        border=(500, 600),
    ),
    **_shade_rules(
        "rose",
        "destructive",
        {**_tints(50, 100, 400), **_solid(500, 600)},
        text=(500, 600),
        border=(500,),
    ),
    # Accent
    **_shade_rules(
        "purple",
        "accent",
        {**_tints(50, 100, 200, 400), **_solid(500, 600, 700)},
        text=(500, 600, 700),
        border=(500,),
        text_token=_ACCENT_TEXT,
    ),
    **_shade_rules(
        "violet",
        "accent",
        {**_tints(50, 100, 400), **_solid(500, 600)},
        text=(500, 600),
        border=(500,),
        text_token=_ACCENT_TEXT,
    ),
    **_shade_rules(
        "indigo",
        "accent",
        {**_tints(50, 100, 400), **_solid(500, 600)},
        text=(500, 600),
        border=(500,),
        text_token=_ACCENT_TEXT,
    ),
    **_shade_rules(
        "pink",
        "accent",
        {**_tints(50, 100, 400), **_solid(500, 600)},
        text=(500, 600),
        text_token=_ACCENT_TEXT,
    ),
    **_shade_rules(
        "fuchsia", "accent", _solid(500, 600), text=(500, 600), text_token=_ACCENT_TEXT
    ),
    # Extended neutrals
    "bg-neutral-50": "bg-muted",
    "bg-neutral-100": "bg-muted",
    "bg-neutral-200": "bg-muted",
    "bg-neutral-800": "bg-foreground",
    "bg-neutral-900": "bg-foreground",
    "text-neutral-900": "text-foreground",
    "text-neutral-800": "text-foreground",
    "text-neutral-600": "text-muted-foreground",
    "text-neutral-500": "text-muted-foreground",
    "border-neutral-200": "border-border",
    "border-neutral-300": "border-input",
    "bg-stone-50": "bg-muted",
    "bg-stone-100": "bg-muted",
    "bg-stone-200": "bg-muted",
    "text-stone-900": "text-foreground",
    "text-stone-600": "text-muted-foreground",
    "text-stone-500": "text-muted-foreground",
    "border-stone-200": "border-border",
    "border-stone-300": "border-input",
    # Hover
    "hover:bg-gray-50": "hover:bg-muted",
    "hover:bg-gray-200": "hover:bg-muted",
    "hover:bg-slate-50": "hover:bg-muted",
    "hover:bg-slate-200": "hover:bg-muted",
    "hover:bg-zinc-50": "hover:bg-muted",
    "hover:bg-zinc-100": "hover:bg-accent",
    "hover:bg-zinc-200": "hover:bg-muted",
    "hover:bg-blue-600": "hover:bg-primary/90",
    "hover:bg-blue-700": "hover:bg-primary/90",
    "hover:bg-red-600": "hover:bg-destructive/90",
    "hover:bg-red-700": "hover:bg-destructive/90",
    "hover:bg-green-600": "hover:bg-success/90",
    "hover:bg-green-700": "hover:bg-success/90",
    # Focus
    "focus:ring-blue-500": "focus:ring-ring",
    "focus:ring-blue-600": "focus:ring-ring",
    "focus:border-blue-500": "focus:border-ring",
    "focus:border-blue-600": "focus:border-ring",
    # Dark mode
    "dark:bg-gray-800": "dark:bg-muted",
    "dark:bg-gray-900": "dark:bg-background",
    "dark:bg-slate-800": "dark:bg-muted",
    "dark:bg-slate-900": "dark:bg-background",
    "dark:text-gray-100": "dark:text-foreground",
    "dark:text-gray-200": "dark:text-foreground",
    "dark:text-gray-300": "dark:text-muted-foreground",
    "dark:text-gray-400": "dark:text-muted-foreground",
    "dark:border-gray-700": "dark:border-border",
    "dark:border-gray-800": "dark:border-border",
}


# =============================================================================
# Dynamic Classification
# =============================================================================


class HueGroup(StrEnum):
    """Semantic bucket for a Tailwind color family."""

    SUCCESS = "success"
    DESTRUCTIVE = "destructive"
    WARNING = "warning"
    PRIMARY = "primary"
    INFO = "info"
    ACCENT = "accent"
    NEUTRAL = "neutral"


FAMILY_GROUPS: dict[str, HueGroup] = {
    "green": HueGroup.SUCCESS,
    "emerald": HueGroup.SUCCESS,
    "teal": HueGroup.SUCCESS,
    "lime": HueGroup.SUCCESS,
    "red": HueGroup.DESTRUCTIVE,
    "rose": HueGroup.DESTRUCTIVE,
    "yellow": HueGroup.WARNING,
    "amber": HueGroup.WARNING,
    "orange": HueGroup.WARNING,
    "blue": HueGroup.PRIMARY,
    "cyan": HueGroup.INFO,
    "sky": HueGroup.INFO,
    "purple": HueGroup.ACCENT,
    "violet": HueGroup.ACCENT,
    "indigo": HueGroup.ACCENT,
    "fuchsia": HueGroup.ACCENT,
    "pink": HueGroup.ACCENT,
    "slate": HueGroup.NEUTRAL,
    "gray": HueGroup.NEUTRAL,
    "zinc": HueGroup.NEUTRAL,
    "neutral": HueGroup.NEUTRAL,
    "stone": HueGroup.NEUTRAL,
    "white": HueGroup.NEUTRAL,
    "black": HueGroup.NEUTRAL,
}

# (max shade, opacity suffix) for light shades of chromatic families
OPACITY_STEPS: tuple[tuple[int, str], ...] = (
    (100, "/10"),
    (200, "/20"),
    (300, "/30"),
    (400, "/70"),
)

NEUTRAL_LIGHT_MAX = 200
NEUTRAL_DARK_MIN = 700


@dataclass(frozen=True)
class ColorUtility:
    """A parsed color utility such as ``dark:hover:bg-blue-500/50``."""

    variants: tuple[str, ...]
    prefix: str
    family: str
    shade: int | None = None
    opacity: str | None = None

    @property
    def variant_prefix(self) -> str:
        return "".join(f"{v}:" for v in self.variants)

    @property
    def base(self) -> str:
        """Utility without variants or opacity modifier."""
        if self.shade is None:
            return f"{self.prefix}-{self.family}"
        return f"{self.prefix}-{self.family}-{self.shade}"

    @property
    def text(self) -> str:
        return f"{self.variant_prefix}{self.base}{self.opacity or ''}"

    @property
    def hue_group(self) -> HueGroup | None:
        return FAMILY_GROUPS.get(self.family)


def _from_match(match: re.Match[str]) -> ColorUtility:
    variants, prefix, family, shade, bare, opacity = match.groups()
    return ColorUtility(
        variants=tuple(v for v in variants.split(":") if v),
        prefix=prefix,
        family=family or bare,
        shade=int(shade) if shade else None,
        opacity=opacity,
    )


def parse_utility(text: str) -> ColorUtility | None:
    """Parse a single utility class; ``None`` if it is not a color utility."""
    match = UTILITY_PATTERN.fullmatch(text.strip())
    if match is None:
        return None
    return _from_match(match)


def iter_utilities(text: str) -> Iterator[tuple[re.Match[str], ColorUtility]]:
    """Yield ``(match, ColorUtility)`` for every color utility in ``text``."""
    for match in UTILITY_PATTERN.finditer(text):
        yield match, _from_match(match)


def opacity_suffix(shade: int) -> str:
    for limit, suffix in OPACITY_STEPS:
        if shade <= limit:
            return suffix
    return ""


def _neutral_token(utility: ColorUtility) -> str:
    if utility.family == "white":
        return "background"
    if utility.family == "black" or utility.shade is None:
        return "foreground"
    if utility.shade <= NEUTRAL_LIGHT_MAX:
        return "muted"
    if utility.shade >= NEUTRAL_DARK_MIN:
        return "foreground"
    return "muted-foreground"


def _chromatic_token(utility: ColorUtility) -> str:
    group = FAMILY_GROUPS[utility.family]
    if utility.shade is None:
        return group.value
    return f"{group.value}{opacity_suffix(utility.shade)}"


_TOKEN_BUILDERS = {HueGroup.NEUTRAL: _neutral_token}


def classify_utility(utility: ColorUtility) -> str | None:
    """Derive a semantic utility from hue group and shade.

    ``bg-emerald-800`` becomes ``bg-success``, ``bg-sky-100`` becomes
    ``bg-info/10`` and ``text-stone-400`` becomes ``text-muted-foreground``.
    Variants are carried over. Returns ``None`` for unknown families.
    """
    group = utility.hue_group
    if group is None:
        return None
    token = _TOKEN_BUILDERS.get(group, _chromatic_token)(utility)
    return f"{utility.variant_prefix}{utility.prefix}-{token}"


# =============================================================================
# Suggestions
# =============================================================================


class SuggestionSource(StrEnum):
    STATIC = "static"
    DYNAMIC = "dynamic"


@dataclass(frozen=True)
class Suggestion:
    value: str
    source: SuggestionSource


def _with_opacity(suggestion: str, opacity: str | None) -> str:
    # An explicit modifier in the source wins over a derived one
    if opacity is None:
        return suggestion
    return suggestion.split("/", 1)[0] + opacity


def _lookup_static(utility: ColorUtility, table: dict[str, str]) -> str | None:
    key = f"{utility.variant_prefix}{utility.base}"
    if key in table:
        return table[key]
    if utility.variants and utility.base in table:
        return f"{utility.variant_prefix}{table[utility.base]}"
    return None


def suggest(utility: ColorUtility, full_mode: bool = False) -> Suggestion | None:
    """Suggest a semantic replacement for ``utility``.

    Static rules are tried first; the dynamic classifier only runs in full
    mode. ``None`` means no safe mapping exists.
    """
    table = FULL_STATIC_RULES if full_mode else STATIC_RULES
    value = _lookup_static(utility, table)
    if value is not None:
        return Suggestion(_with_opacity(value, utility.opacity), SuggestionSource.STATIC)
    if not full_mode:
        return None
    value = classify_utility(utility)
    if value is None:
        return None
    return Suggestion(_with_opacity(value, utility.opacity), SuggestionSource.DYNAMIC)


def suggest_for(text: str, full_mode: bool = False) -> str | None:
    """Convenience wrapper: suggestion for a utility string, or ``None``."""
    utility = parse_utility(text)
    if utility is None:
        return None
    suggestion = suggest(utility, full_mode)
    return suggestion.value if suggestion else None
