"""CLI helper that prints the prompt overrides for a directory."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from ..config import SettingsStore
from ..host import EventBusHost, LogLevel, fire, notify
from ..project import find_project_root
from ..prompts import PromptBundle, resolve_prompts
from ..utils.logging import coerce_level, configure_from_settings

LOGGER = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Show the prompts resolved from .codecompanion folders.")
    parser.add_argument("--cwd", type=Path, default=Path.cwd(), help="Working directory to resolve from.")
    parser.add_argument(
        "--project-root",
        type=Path,
        help="Project root to fall back to. Detected from --cwd when omitted.",
    )
    parser.add_argument("--adapter", help="Print only the prompt that applies to this adapter.")
    parser.add_argument("--json", action="store_true", help="Emit the whole bundle as JSON.")
    parser.add_argument("--settings", type=Path, help="Alternate settings.json path.")
    parser.add_argument("--verbose", action="store_true", help="Log resolver activity to stderr.")
    parser.add_argument("--log-dir", type=Path, help="Also write a rotating codecompanion.log here.")
    args = parser.parse_args(argv)

    settings = SettingsStore(args.settings).load()
    stderr_level = logging.DEBUG if args.verbose else coerce_level(settings.effective_log_level)
    logging.basicConfig(level=stderr_level, stream=sys.stderr)
    if args.log_dir is not None:
        configure_from_settings(settings, log_dir=args.log_dir)

    project_root = args.project_root or _detect_root(args.cwd, settings.project_markers)
    bundle = resolve_prompts(
        args.cwd,
        project_root,
        config_dir_name=settings.config_dir_name,
        suffix=settings.prompt_suffix,
    )

    host = EventBusHost.from_settings(settings)
    for warning in bundle.warnings:
        notify(host, warning, LogLevel.WARN)
    fire(host, "PromptsResolved", {"source": str(bundle.source) if bundle.source else None})

    if args.json:
        print(json.dumps(bundle.to_dict(), indent=2, ensure_ascii=False))
    elif args.adapter is not None:
        print(bundle.prompt_for(args.adapter))
    else:
        print(_format_bundle(bundle))
    return 0


def _detect_root(cwd: Path, markers: Sequence[str]) -> Path | None:
    try:
        return find_project_root(cwd, markers)
    except OSError as exc:
        LOGGER.warning("Project root lookup failed from %s: %s", cwd, exc)
        return None


def _format_bundle(bundle: PromptBundle) -> str:
    if bundle.source is None:
        return "No prompt directory found."
    lines = [f"source: {bundle.source}", f"default: {bundle.default_prompt!r}"]
    for adapter in sorted(bundle.adapter_prompts):
        lines.append(f"{adapter}: {bundle.adapter_prompts[adapter]!r}")
    return "\n".join(lines)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
