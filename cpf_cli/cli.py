"""
CPF Tool CLI

Validate, format and generate CPF numbers from the command line
"""
from datetime import datetime
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from cpf_cli import __version__
from cpf_cli.batch import (
    format_processor,
    generate_batch,
    length_only_processor,
    process_file,
    validate_processor,
)
from cpf_cli.checksum import CPFEngine, format_cpf
from cpf_cli.config import get_config
from cpf_cli.serialization import write_json_output
from cpf_cli.telemetry import TelemetryClient
from cpf_cli.utils import (
    CPFToolError,
    TelemetryError,
    ensure_dir,
    get_logger,
    setup_logging,
)

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


class AppContext:
    """Per-invocation state shared by all commands"""

    def __init__(self, engine: CPFEngine, telemetry: TelemetryClient | None):
        self.engine = engine
        self.telemetry = telemetry

    def track(self, command: str, success: bool = True, error: Exception | str | None = None) -> None:
        if self.telemetry is None:
            return
        self.telemetry.track(command, success, str(error) if error else None)

    def fail(self, command: str, error: Exception | str) -> None:
        """Report a single-value failure and exit non-zero"""
        self.track(command, False, error)
        err_console.print(f"[red]✗ Error: {escape(str(error))}[/red]")
        raise SystemExit(1)


pass_context = click.make_pass_decorator(AppContext)


def _write_text(output: str, text: str) -> None:
    """Write plain-text output, creating parent directories like the JSON writer"""
    path = Path(output)
    ensure_dir(path.parent)
    path.write_text(text, encoding='utf-8')


# ═══════════════════════════════════════════════════════════════════
# MAIN CLI GROUP
# ═══════════════════════════════════════════════════════════════════

@click.group()
@click.version_option(version=__version__, prog_name="CPF Tool")
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False), default=None, help='Logging level (overrides CPF_LOG_LEVEL)')
@click.pass_context
def main(ctx, log_level):
    """
    CPF Tool - validate, format and generate Brazilian CPF numbers.
    """
    try:
        config = get_config()
    except ValidationError as e:
        raise click.ClickException(f"invalid configuration: {e}")
    setup_logging(log_level or config.log_level, config.log_file)

    try:
        telemetry = TelemetryClient(config, __version__)
    except TelemetryError as e:
        logger.warning("Telemetry unavailable: %s", e)
        telemetry = None

    ctx.obj = AppContext(CPFEngine(), telemetry)


# ═══════════════════════════════════════════════════════════════════
# VALIDATE / FORMAT COMMANDS
# ═══════════════════════════════════════════════════════════════════

@main.command()
@click.argument('cpf', required=False)
@click.option('--file', 'input_file', type=click.Path(dir_okay=False), help='Validate CPFs from a file (one per line)')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write JSON output to a file')
@click.option('--length-only', is_flag=True, help='Only check length and repeated digits')
@pass_context
def validate(obj, cpf, input_file, output, length_only):
    """Validate CPF(s), printing JSON results"""
    processor = length_only_processor if length_only else validate_processor

    if input_file:
        try:
            results = process_file(input_file, processor)
        except CPFToolError as e:
            obj.fail('validate', e)
    elif cpf is None:
        obj.track('validate', False, 'missing CPF to validate')
        raise click.UsageError("Missing CPF to validate.")
    else:
        results = [processor(cpf)]

    try:
        write_json_output(results, output)
    except OSError as e:
        obj.fail('validate', e)
    obj.track('validate')


@main.command(name='format')
@click.argument('cpf', required=False)
@click.option('--file', 'input_file', type=click.Path(dir_okay=False), help='Format CPFs from a file (one per line)')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write output to a file (JSON with --file)')
@pass_context
def format_command(obj, cpf, input_file, output):
    """Format a CPF as ###.###.###-##"""
    if input_file:
        try:
            results = process_file(input_file, format_processor)
            write_json_output(results, output)
        except (CPFToolError, OSError) as e:
            obj.fail('format', e)
        obj.track('format')
        return

    if cpf is None:
        obj.track('format', False, 'missing CPF to format')
        raise click.UsageError("Missing CPF to format.")

    try:
        formatted = format_cpf(cpf)
    except CPFToolError as e:
        obj.fail('format', e)

    try:
        if output:
            _write_text(output, formatted + '\n')
        else:
            click.echo(formatted)
    except OSError as e:
        obj.fail('format', e)
    obj.track('format')


# ═══════════════════════════════════════════════════════════════════
# GENERATE COMMAND
# ═══════════════════════════════════════════════════════════════════

@main.command()
@click.option('--invalid', is_flag=True, help='Generate invalid CPF(s)')
@click.option('--unformatted', is_flag=True, help='Generate digits only, without separators')
@click.option('--count', '-n', type=click.IntRange(min=1), default=1, show_default=True, help='Number of CPFs')
@click.option('--separator', default='\n', help='Separator between CPFs (default: newline)')
@click.option('--json', 'use_json', is_flag=True, help='Output in JSON format')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write output to a file')
@pass_context
def generate(obj, invalid, unformatted, count, separator, use_json, output):
    """Generate random CPF(s)"""
    try:
        results = generate_batch(count, formatted=not unformatted, invalid=invalid, engine=obj.engine)
    except CPFToolError as e:
        obj.fail('generate', e)

    try:
        if use_json:
            write_json_output(results, output)
        else:
            text = separator.join(r.value for r in results)
            if separator == '\n':
                text += '\n'
            if output:
                _write_text(output, text)
            else:
                click.echo(text, nl=False)
    except OSError as e:
        obj.fail('generate', e)
    obj.track('generate')


# ═══════════════════════════════════════════════════════════════════
# VERSION / TELEMETRY COMMANDS
# ═══════════════════════════════════════════════════════════════════

@main.command()
@pass_context
def version(obj):
    """Show version information"""
    click.echo(f"CPF Tool version {__version__}")
    click.echo(f"Copyleft © 2024-{datetime.now().year}")
    obj.track('version')


@main.group()
def telemetry():
    """Configure anonymous usage telemetry"""
    pass


def _require_telemetry(obj: AppContext) -> TelemetryClient:
    if obj.telemetry is None:
        err_console.print("[red]✗ Error: telemetry config is not available[/red]")
        raise SystemExit(1)
    return obj.telemetry


@telemetry.command()
@pass_context
def enable(obj):
    """Enable telemetry"""
    client = _require_telemetry(obj)
    try:
        client.set_enabled(True)
    except TelemetryError as e:
        err_console.print(f"[red]✗ Error enabling telemetry: {escape(str(e))}[/red]")
        raise SystemExit(1)
    console.print("[green]✓ Telemetry enabled[/green]")


@telemetry.command()
@pass_context
def disable(obj):
    """Disable telemetry"""
    client = _require_telemetry(obj)
    try:
        client.set_enabled(False)
    except TelemetryError as e:
        err_console.print(f"[red]✗ Error disabling telemetry: {escape(str(e))}[/red]")
        raise SystemExit(1)
    console.print("[green]✓ Telemetry disabled[/green]")


@telemetry.command()
@pass_context
def status(obj):
    """Show telemetry status"""
    client = _require_telemetry(obj)
    if client.is_enabled:
        console.print("Telemetry is [green]enabled[/green]")
    elif client.state.enabled:
        console.print("Telemetry is [yellow]enabled[/yellow] but no PostHog key is configured")
    else:
        console.print("Telemetry is [red]disabled[/red]")
    console.print(f"[dim]Config: {escape(str(client.path))}[/dim]")


if __name__ == '__main__':
    main()
