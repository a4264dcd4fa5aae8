"""CLI commands for global configuration management."""

from typing import Optional

import typer

from stagescribe import global_config
from stagescribe.config import (
    API_KEY_ENV_VARS,
    AVAILABLE_MODELS,
    SUPPORTED_SHAPES,
    CallShape,
    LLMProvider,
    load_settings,
)

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage global stagescribe configuration in ~/.stagescribe/",
    add_completion=False,
)

VALID_PROVIDERS = ", ".join(p.value for p in LLMProvider)


def _parse_provider(provider: str) -> LLMProvider:
    try:
        return LLMProvider(provider.lower())
    except ValueError:
        typer.echo(f"Invalid provider: {provider}", err=True)
        typer.echo(f"Valid providers: {VALID_PROVIDERS}")
        raise typer.Exit(1)


def _mask(api_key: str) -> str:
    if len(api_key) > 12:
        return api_key[:8] + "..." + api_key[-4:]
    return "***"


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration."""
    try:
        settings = load_settings()
    except Exception as e:
        typer.echo(f"Error reading configuration: {e}", err=True)
        raise typer.Exit(1)

    if global_config.is_configured():
        typer.echo(f"Configuration ({global_config.get_config_file_path()}):")
    else:
        typer.echo("No configuration file found, showing defaults. Run 'stagescribe config init' to create one.")
    typer.echo()
    typer.echo(f"  Provider: {settings.provider.value}")
    typer.echo(f"  Call shape: {settings.shape.value}")
    typer.echo(f"  Model: {settings.effective_model}")
    typer.echo(f"  Max Tokens: {settings.max_tokens}")
    typer.echo(f"  Temperature: {settings.temperature}")
    typer.echo(f"  Timeout: {settings.timeout}s")
    typer.echo(f"  Template: {settings.template if len(settings.template) <= 40 else '(custom)'}")
    typer.echo(f"  Language: {settings.language}")
    typer.echo(f"  File headers: {'on' if settings.file_headers else 'off'}")
    typer.echo(f"  Granularity: {settings.granularity.value}")
    typer.echo(f"  When nothing is staged: {settings.on_empty.value}")

    if settings.exclude:
        typer.echo()
        typer.echo("  Excluded paths:")
        for pattern in settings.exclude:
            typer.echo(f"    - {pattern}")

    typer.echo()
    env_var = API_KEY_ENV_VARS[settings.provider]
    api_key = global_config.get_credential(env_var)
    if api_key:
        typer.echo(f"  API Key ({env_var}): {_mask(api_key)}")
    else:
        typer.echo(f"  API Key ({env_var}): not in credentials file")


@config_app.command("init")
def config_init() -> None:
    """Create ~/.stagescribe/config.yaml with default values."""
    try:
        created = global_config.initialize_default_config()
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    path = global_config.get_config_file_path()
    if created:
        typer.echo(f"✓ Created {path}")
    else:
        typer.echo(f"Configuration already exists: {path}")


@config_app.command("set-key")
def config_set_key(
    provider: str = typer.Argument(
        ...,
        help=f"Provider name ({VALID_PROVIDERS})",
    )
) -> None:
    """Set or update an API key for a provider."""
    llm_provider = _parse_provider(provider)
    env_var = API_KEY_ENV_VARS[llm_provider]

    typer.echo(f"Setting API key for {llm_provider.value}")
    api_key = typer.prompt(f"Enter your {llm_provider.value} API key", hide_input=True)

    try:
        global_config.save_credential(env_var, api_key)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ API key saved for {llm_provider.value}")


@config_app.command("set-provider")
def config_set_provider(
    provider: str = typer.Argument(
        ...,
        help=f"Provider name ({VALID_PROVIDERS})",
    ),
    model: Optional[str] = typer.Option(
        None,
        "--model",
        "-m",
        help="Model name (optional, will prompt if not provided)",
    ),
    shape: Optional[CallShape] = typer.Option(
        None,
        "--shape",
        help="Call shape (defaults to chat when the provider supports it, otherwise its only shape)",
    ),
) -> None:
    """Set the active LLM provider, model and call shape."""
    llm_provider = _parse_provider(provider)
    supported = SUPPORTED_SHAPES[llm_provider]

    if shape is None:
        shape = supported[-1]
    elif shape not in supported:
        typer.echo(
            f"{llm_provider.value} does not support the {shape.value} call shape "
            f"(supported: {', '.join(s.value for s in supported)})",
            err=True,
        )
        raise typer.Exit(1)

    if not model:
        models = AVAILABLE_MODELS[llm_provider]
        typer.echo(f"Available models for {llm_provider.value}:")
        for i, m in enumerate(models, 1):
            typer.echo(f"  {i}. {m}")

        model_choice = typer.prompt(f"Select a model (1-{len(models)})", type=int, default=1)
        if model_choice < 1 or model_choice > len(models):
            typer.echo("Invalid choice. Aborting.", err=True)
            raise typer.Exit(1)

        model = models[model_choice - 1]
    elif model not in AVAILABLE_MODELS[llm_provider]:
        typer.echo(f"Warning: {model} is not in the list of known models for {llm_provider.value}")
        if not typer.confirm("Continue anyway?", default=False):
            raise typer.Exit(0)

    try:
        global_config.set_provider_and_model(llm_provider, model, shape)
    except global_config.GlobalConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ Provider set to: {llm_provider.value}")
    typer.echo(f"✓ Model set to: {model}")
    typer.echo(f"✓ Call shape set to: {shape.value}")


@config_app.command("list-providers")
def config_list_providers() -> None:
    """List all available LLM providers and their call shapes."""
    typer.echo("Available LLM providers:")
    typer.echo()
    for provider in LLMProvider:
        shapes = ", ".join(s.value for s in SUPPORTED_SHAPES[provider])
        typer.echo(f"  • {provider.value} ({shapes})")
    typer.echo()
    typer.echo("Use 'stagescribe config list-models <provider>' to see available models.")


@config_app.command("list-models")
def config_list_models(
    provider: Optional[str] = typer.Argument(
        None,
        help="Provider name (optional, shows all if not provided)",
    )
) -> None:
    """List available models for a provider (or all providers)."""
    if provider:
        llm_provider = _parse_provider(provider)
        typer.echo(f"Available models for {llm_provider.value}:")
        typer.echo()
        for model in AVAILABLE_MODELS[llm_provider]:
            typer.echo(f"  • {model}")
        typer.echo()
        return

    for llm_provider in LLMProvider:
        typer.echo(f"{llm_provider.value}:")
        for model in AVAILABLE_MODELS[llm_provider]:
            typer.echo(f"  • {model}")
        typer.echo()
