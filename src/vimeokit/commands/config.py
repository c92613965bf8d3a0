"""Config commands -- view the effective configuration."""

from __future__ import annotations

import typer

from vimeokit.output import format_response, info


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration after environment and flag overrides.

    The global ``--api-version`` and ``--hostname`` flags are applied the
    same way ``vimeokit call`` applies them.

    Example::

        vimeokit config show
        VIMEO_API_VERSION=v3 vimeokit --json config show
        vimeokit --hostname staging.vimeo.com config show
    """
    from vimeokit.config import global_config_path, resolve_config

    obj = ctx.obj or {}
    config = resolve_config(
        cli_api_version=obj.get("api_version"),
        cli_hostname=obj.get("hostname"),
    )
    info(f"Config file: {global_config_path()}")
    format_response(config.model_dump(mode="json"))
