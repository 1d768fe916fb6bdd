"""
Plugin wrappers — one stable entry point per packaged plugin.

A packaged plugin lands wherever the distribution puts it
(``/usr/share/...`` on Debian, ``/usr/share/zsh/plugins/...`` on Arch,
the Homebrew prefix on macOS). The wrapper written to
``$ZSH_CUSTOM/plugins/<name>/<name>.plugin.zsh`` searches those places
at shell start-up and sources the first readable file, so ``.zshrc``
can list the plugin by name whatever the install method.
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path

from zshinit.core.models.plugin import PluginSpec
from zshinit.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

WRAPPER_HEADER = "# Generated by zshinit. Do not edit; re-run `zshinit plugins` instead."

_LOOP_VAR = "_zshinit_candidate"


def render_wrapper(spec: PluginSpec) -> str:
    """Render the wrapper script for ``spec``.

    Per-plugin setup comes from ``spec.post_source_env``: each entry is
    exported after sourcing, pointing at a sub-directory next to the
    file that was found.
    """
    lines = [
        WRAPPER_HEADER,
        f"# Loads {spec.name} from the first readable location.",
        f"for {_LOOP_VAR} in \\",
    ]
    for path in spec.candidate_paths:
        lines.append(f"  {shlex.quote(path)} \\")
    lines.append("; do")
    lines.append(f'  if [[ -r "${_LOOP_VAR}" ]]; then')
    lines.append(f'    source "${_LOOP_VAR}"')
    for var, subdir in spec.post_source_env.items():
        lines.append(f'    export {var}="${{{_LOOP_VAR}:h}}/{subdir}"')
    lines.append("    break")
    lines.append("  fi")
    lines.append("done")
    lines.append(f"unset {_LOOP_VAR}")
    return "\n".join(lines) + "\n"


def wrapper_path(spec: PluginSpec, custom_root: Path) -> Path:
    return custom_root / spec.category / spec.name / spec.wrapper_filename


def is_generated(path: Path) -> bool:
    """Whether ``path`` is a wrapper this tool wrote earlier."""
    try:
        with path.open(encoding="utf-8") as f:
            return f.readline().rstrip("\n") == WRAPPER_HEADER
    except (OSError, UnicodeDecodeError):
        return False


def write_wrapper(spec: PluginSpec, custom_root: Path) -> Receipt:
    """Materialize the wrapper, refusing to touch foreign content.

    Skips (with a warning) when the plugin directory is a git checkout
    or the target file exists and was not generated by this tool.
    """
    target = wrapper_path(spec, custom_root)
    plugin_dir = target.parent

    if (plugin_dir / ".git").exists():
        logger.warning(
            "%s: %s is a git checkout; leaving it in place of a wrapper",
            spec.name, plugin_dir,
        )
        return Receipt.skip(
            step="wrapper",
            target=spec.name,
            reason=f"{plugin_dir} is a git checkout",
            metadata={"path": str(target)},
        )

    if target.exists() and not is_generated(target):
        logger.warning("%s: %s exists and was not generated here; not overwriting", spec.name, target)
        return Receipt.skip(
            step="wrapper",
            target=spec.name,
            reason=f"{target} is not a generated wrapper",
            metadata={"path": str(target)},
        )

    content = render_wrapper(spec)
    plugin_dir.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    logger.info("Wrote wrapper %s", target)
    return Receipt.success(
        step="wrapper",
        target=spec.name,
        output=f"Wrapper written to {target}",
        metadata={"path": str(target), "candidates": len(spec.candidate_paths)},
    )
