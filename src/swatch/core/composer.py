"""
Theme composer.

Builds the per-theme token trees by merging:
1. The theme-independent tree (files without a theme tag)
2. The theme fragment (files tagged with the theme name, highest precedence)

Each theme is composed in isolation; a theme never sees another theme's
fragment, so references must resolve within the theme's own composed tree.
"""

from __future__ import annotations

import logging

from .ir.tokens import TokenTree
from .loader import check_structure

logger = logging.getLogger(__name__)


def compose(base: TokenTree, fragment: TokenTree) -> TokenTree:
    """
    Overlay a theme fragment onto the theme-independent tree.

    Precedence: fragment > base. Tokens only present in the base pass
    through unchanged, in their original position.
    """
    overridden = [path for path in fragment.paths() if path in base]
    if overridden:
        logger.debug("Theme fragment overrides %d shared token(s)", len(overridden))
    composed = base.overlay(fragment)
    check_structure(composed)
    return composed


def compose_themes(base: TokenTree, fragments: dict[str, TokenTree]) -> dict[str, TokenTree]:
    """
    Compose one tree per theme.

    Args:
        base: Theme-independent tree
        fragments: Theme name -> theme fragment, in declaration order

    Returns:
        Theme name -> composed tree, in declaration order
    """
    return {theme: compose(base, fragment) for theme, fragment in fragments.items()}


def compose_shared(
    base: TokenTree, fragments: dict[str, TokenTree], reference_theme: str | None
) -> TokenTree:
    """
    Compose the tree for shared, theme-agnostic platforms.

    Shared artifacts (variable name declarations, lookup maps) need the
    complete token surface, so the reference theme's fragment completes the
    theme-independent tree. Without themes the base tree is used as-is.
    """
    if reference_theme is None:
        return base
    return compose(base, fragments.get(reference_theme, TokenTree()))
