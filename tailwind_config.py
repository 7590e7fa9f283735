"""Tailwind CSS build configuration for the site templates and notes."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from site_writer import template_environment

TAILWIND_CONFIG_PATH = os.getenv("TAILWIND_CONFIG_PATH", "tailwind.config.js")
TEMPLATE_NAME = "tailwind.config.js.j2"

LOGGER = logging.getLogger(__name__)

# Paths Tailwind scans for class names.
DEFAULT_CONTENT_GLOBS = (
    "./_includes/**/*.html",
    "./_layouts/*.html",
    "./_notes/**/*.{html,md}",
    "./_pages/**/*.{html,md}",
    "./*.html",
    "./templates/**/*.html",
)


@dataclass(frozen=True, slots=True)
class TailwindConfig:
    content: tuple[str, ...] = DEFAULT_CONTENT_GLOBS
    font_sans: tuple[str, ...] = ("'Inter'", "sans-serif")
    plugins: tuple[str, ...] = ("@tailwindcss/typography",)


def render_tailwind_config(config: TailwindConfig | None = None) -> str:
    """Return the `tailwind.config.js` source for the given config."""
    cfg = config or TailwindConfig()
    return template_environment().get_template(TEMPLATE_NAME).render(
        content=cfg.content,
        font_sans=cfg.font_sans,
        plugins=cfg.plugins,
    )


def write_tailwind_config(path: str | None = None, config: TailwindConfig | None = None) -> Path:
    """Write the Tailwind config file and return its path."""
    target = Path(path or TAILWIND_CONFIG_PATH)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(render_tailwind_config(config), encoding="utf-8")
    LOGGER.info("tailwind: wrote config → %s", target)
    return target
