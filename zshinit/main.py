"""
zshinit — CLI entrypoint.

Usage:
    zshinit install
    zshinit patch ~/.zshrc --extra-theme
    zshinit probe git zsh --optional eza
    zshinit plugins
    zshinit platform
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from zshinit import __version__
from zshinit.core.observability.logging_config import resolve_level, setup_from_env

_STATUS_MARKS = {"ok": ("✅", "green"), "skipped": ("⏭️ ", "white"), "failed": ("❌", "red")}


@click.group()
@click.version_option(version=__version__, prog_name="zshinit")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to the settings file (default: ~/.config/zshinit/config.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """zshinit — set up zsh, Oh My Zsh, plugins and the prompt theme."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_from_env(resolve_level(debug=debug, verbose=verbose, quiet=quiet))


# ── Helpers ─────────────────────────────────────────────────────


def _settings(ctx: click.Context):
    """Load settings or exit with the loader's message."""
    from zshinit.core.config.loader import ConfigError, load_settings

    try:
        return load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


def _fail(exc) -> None:
    """Report a fatal error with its captured output and exit with its code."""
    click.secho(f"❌ {exc}", fg="red", bold=True, err=True)
    if getattr(exc, "output", ""):
        click.echo(exc.output, err=True)
    sys.exit(exc.exit_code)


def _echo_receipt(receipt) -> None:
    mark, color = _STATUS_MARKS[receipt.status]
    detail = receipt.error if receipt.failed else receipt.output
    click.secho(f"   {mark} {receipt.step}: {receipt.target}", fg=color, nl=False)
    click.echo(f" — {detail}" if detail else "")


def _resolve_answer(flag: bool | None, configured: bool | None, prompt: str, default: bool, ask: bool) -> bool:
    """Flag, then settings file, then an interactive prompt (or its default)."""
    if flag is not None:
        return flag
    if configured is not None:
        return configured
    if not ask:
        return default
    return click.confirm(prompt, default=default)


# ── install ─────────────────────────────────────────────────────


@cli.command()
@click.option("--extra-theme/--no-extra-theme", default=None, help="Enable the pywal colour lines.")
@click.option("--change-shell/--no-change-shell", default=None, help="Make zsh the login shell.")
@click.option("--yes", "-y", is_flag=True, help="Accept defaults instead of prompting.")
@click.option("--skip-packages", is_flag=True, help="Do not run the package manager.")
@click.option("--skip-plugins", is_flag=True, help="Do not install or update plugins.")
@click.option(
    "--templates-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the zshrc and p10k.zsh templates.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(
    ctx: click.Context,
    extra_theme: bool | None,
    change_shell: bool | None,
    yes: bool,
    skip_packages: bool,
    skip_plugins: bool,
    templates_dir: Path | None,
    as_json: bool,
) -> None:
    """Provision the full zsh environment."""
    from zshinit.core.use_cases.provision import run_provision

    settings = _settings(ctx)
    if templates_dir is not None:
        settings = settings.model_copy(update={"templates_dir": templates_dir})

    ask = not (yes or as_json)
    use_extra_theme = _resolve_answer(
        extra_theme, settings.extra_theme, "Are you using pywal?", False, ask,
    )
    use_change_shell = _resolve_answer(
        change_shell, settings.change_shell, "Make zsh your default shell?", True, ask,
    )

    result = run_provision(
        settings,
        extra_theme=use_extra_theme,
        change_shell=use_change_shell,
        skip_packages=skip_packages,
        skip_plugins=skip_plugins,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.returncode)

    quiet = ctx.obj.get("quiet", False)

    if result.profile and not quiet:
        click.secho(f"\n📦 Package manager: {result.profile.package_manager_id}", fg="cyan", bold=True)

    if result.packages and not quiet:
        click.echo(f"   Installed: {', '.join(result.packages.installed) or '—'}")
        for link, target in result.packages.links.items():
            click.echo(f"   Linked {link} → {target}")

    if result.receipts and not quiet:
        click.echo()
        for receipt in result.receipts:
            _echo_receipt(receipt)

    if result.patch and not quiet:
        if result.patch.status == "skipped":
            click.echo(f"   ⏭️  {result.patch.path} not patched ({result.patch.reason})")
        elif result.patch.changed:
            click.secho(f"   ✅ Patched {result.patch.path}", fg="green")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if result.error:
        click.echo()
        click.secho(f"❌ {result.error}", fg="red", bold=True, err=True)
        if result.error_output:
            click.echo(result.error_output, err=True)
        sys.exit(result.returncode)

    click.echo()
    click.secho("✅ Installation complete. Restart your terminal to use zsh.", fg="green", bold=True)


# ── patch ───────────────────────────────────────────────────────


@cli.command()
@click.argument("path", required=False, type=click.Path(path_type=Path))
@click.option("--extra-theme", is_flag=True, help="Un-comment the pywal colour lines.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def patch(ctx: click.Context, path: Path | None, extra_theme: bool, as_json: bool) -> None:
    """Apply the idempotent rewrites to PATH (default: ~/.zshrc)."""
    from zshinit.core.errors import UnsupportedPlatform
    from zshinit.core.services.patcher import PatchOptions, patch_config
    from zshinit.core.services.platform_detect import canonical_plugins, detect_platform

    settings = _settings(ctx)
    target = path.expanduser() if path else settings.zshrc_path

    try:
        profile = detect_platform()
    except UnsupportedPlatform as e:
        # The plugin list only needs the platform for one optional entry
        click.secho(f"⚠️  {e}; using the portable plugin list", fg="yellow", err=True)
        profile = None

    try:
        result = patch_config(
            target,
            PatchOptions(use_extra_theme=extra_theme),
            plugins=canonical_plugins(profile),
        )
    except OSError as e:
        click.secho(f"❌ Cannot write {target}: {e}", fg="red", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        return

    if result.status == "skipped":
        click.echo(f"⏭️  {target} does not exist — nothing to patch")
    elif result.changed:
        click.secho(f"✅ Patched {target}", fg="green")
        click.echo(f"   Lines: {result.lines_before} → {result.lines_after}")
    else:
        click.secho(f"✅ {target} already up to date", fg="green")


# ── probe ───────────────────────────────────────────────────────


@cli.command()
@click.argument("names", nargs=-1)
@click.option("--optional", "optional_names", multiple=True, help="Optional package (repeatable).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def probe(names: tuple[str, ...], optional_names: tuple[str, ...], as_json: bool) -> None:
    """Ask the package manager which packages it can install."""
    from zshinit.core.errors import ZshInitError
    from zshinit.core.models.package import PackageRequest
    from zshinit.core.services.platform_detect import detect_platform
    from zshinit.core.services.prober import split_requests

    if not names and not optional_names:
        raise click.UsageError("Give at least one package name.")

    requests = [PackageRequest(name=n) for n in names]
    requests += [PackageRequest(name=n, is_optional=True) for n in optional_names]

    try:
        profile = detect_platform()
        split = split_requests(profile, requests)
    except ZshInitError as e:
        _fail(e)
        return

    if as_json:
        data = {"package_manager": profile.package_manager_id, **split.model_dump(mode="json")}
        click.echo(json.dumps(data, indent=2))
        sys.exit(0 if split.can_install else 1)

    click.secho(f"📦 {profile.package_manager_id}", fg="cyan", bold=True)
    for label, items, color in (
        ("Installable", split.installable, "green"),
        ("Missing (required)", split.missing_required, "red"),
        ("Missing (optional)", split.missing_optional, "yellow"),
    ):
        if items:
            click.secho(f"   {label}: ", fg=color, nl=False)
            click.echo(", ".join(items))

    if not split.can_install:
        sys.exit(1)


# ── plugins ─────────────────────────────────────────────────────


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plugins(ctx: click.Context, as_json: bool) -> None:
    """Install or update plugins and the prompt theme."""
    from zshinit.core.data.plugins import PLUGIN_TABLE
    from zshinit.core.errors import ZshInitError
    from zshinit.core.services.platform_detect import detect_platform
    from zshinit.core.services.plugins import resolve_plugins

    settings = _settings(ctx)
    try:
        profile = detect_platform()
    except ZshInitError as e:
        _fail(e)
        return

    receipts = resolve_plugins(PLUGIN_TABLE, profile, settings)

    if as_json:
        click.echo(json.dumps([r.model_dump(mode="json") for r in receipts], indent=2))
        return

    for receipt in receipts:
        _echo_receipt(receipt)
        if receipt.failed and receipt.output and not ctx.obj.get("quiet"):
            click.echo(receipt.output)


# ── platform ────────────────────────────────────────────────────


@cli.command("platform")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def platform_cmd(as_json: bool) -> None:
    """Show the detected platform profile."""
    from zshinit.core.errors import ZshInitError
    from zshinit.core.services.platform_detect import canonical_plugins, detect_platform

    try:
        profile = detect_platform()
    except ZshInitError as e:
        _fail(e)
        return

    if as_json:
        data = profile.model_dump(mode="json")
        data["plugins"] = canonical_plugins(profile)
        click.echo(json.dumps(data, indent=2))
        return

    python = ".".join(map(str, profile.python_version)) if profile.python_version else "not found"
    click.secho(f"📦 {profile.package_manager_id}", fg="cyan", bold=True)
    click.echo(f"   Distro:   {profile.distro_id or '—'}")
    click.echo(f"   Sudo:     {'yes' if profile.needs_sudo else 'no'}")
    click.echo(f"   python3:  {python}")
    click.echo(f"   Optional: {', '.join(profile.optional_package_set)}")
    click.echo(f"   Plugins:  {' '.join(canonical_plugins(profile))}")


if __name__ == "__main__":
    cli()
