"""
Command Line Interface for Lambda Memory Bench.
"""

import click
import asyncio
import json
import sys
from typing import Optional
import logging

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config_module import BenchmarkConfig, ConfigManager, default_families
from .orchestrator_module import BenchmarkOrchestrator
from .report_service import ReportGenerator
from .exceptions import BenchmarkError
from .models import BenchmarkResults
from .utils import load_config_file

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

console = Console()


@click.group()
@click.version_option(version='1.0.0', prog_name='lambda-memory-bench')
def cli():
    """Lambda Memory Bench - Measure cold and warm starts across memory tiers."""
    pass


@cli.command()
@click.option('--output', '-o', default='bench.config.json', help='Output configuration file path (.json or .yaml)')
def init(output: str):
    """Generate a sample configuration file."""
    try:
        config = BenchmarkConfig(
            base_url='https://example.execute-api.us-east-1.amazonaws.com/prod',
            families=default_families()
        )
        config.save(output)

        click.echo(f"Configuration file created: {output}")
        click.echo("\nNext steps:")
        click.echo("1. Set base_url to your API Gateway stage URL")
        click.echo("2. Adjust memory_sizes and sample targets per family")
        click.echo(f"3. Run: lambda-memory-bench run --config {output}")

    except (OSError, BenchmarkError) as e:
        click.echo(f"Error creating configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option('--config', '-c', type=click.Path(exists=True), help='Configuration file path')
@click.option('--base-url', '-u', help='Base URL of the deployed benchmark functions')
@click.option('--families', '-f', help='Comma-separated workload families (e.g., basic,computation)')
@click.option('--output-dir', '-o', help='Output directory for results')
@click.option('--no-suite-delay', is_flag=True, help='Skip the pause between workload families')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def run(config: Optional[str], base_url: Optional[str], families: Optional[str],
        output_dir: Optional[str], no_suite_delay: bool, verbose: bool):
    """Run the cold/warm start benchmark."""

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config_manager = ConfigManager()
        bench_config = config_manager.load(
            config,
            base_url=base_url,
            output_dir=output_dir,
            suite_delay_s=0 if no_suite_delay else None
        )

        for warning in config_manager.validate_config(bench_config):
            click.echo(f"Warning: {warning}", err=True)

        family_names = [f.strip() for f in families.split(',') if f.strip()] if families else None

        click.echo("Starting comprehensive cold/warm start benchmark...")
        click.echo(f"   Base URL: {bench_config.base_url}")
        click.echo(f"   Families: {family_names or [f.function_type for f in bench_config.families]}")

        orchestrator = BenchmarkOrchestrator(bench_config)
        results = asyncio.run(orchestrator.run_benchmark(family_names))

        click.echo("\nGenerating reports...")
        paths = orchestrator.save_results(results)
        click.echo(f"Results saved to: {paths['data_file']}")
        click.echo(f"Summary report saved to: {paths['summary_file']}")

        _print_summary(ReportGenerator(results, bench_config), results)

    except BenchmarkError as e:
        console.print(f"[red]Benchmark error: {escape(str(e))}[/red]")
        sys.exit(1)


@cli.command()
@click.argument('results-file', type=click.Path(exists=True))
@click.option('--format', 'output_format', type=click.Choice(['text', 'json']),
              default='text', help='Report format')
@click.option('--config', '-c', type=click.Path(exists=True),
              help='Configuration file whose pricing was used for the run')
def report(results_file: str, output_format: str, config: Optional[str]):
    """Generate a report from existing results."""
    try:
        bench_config = BenchmarkConfig.from_file(config) if config else None
        data = load_config_file(results_file)
        results = BenchmarkResults.from_dict(data)
        report_gen = ReportGenerator(results, bench_config)

        if output_format == 'text':
            click.echo(report_gen.generate_text())
        elif output_format == 'json':
            click.echo(json.dumps(report_gen.get_report_data(), indent=2, default=_json_default))

    except (ValueError, KeyError) as e:
        console.print(f"[red]Invalid results file: {escape(str(e))}[/red]")
        sys.exit(1)
    except BenchmarkError as e:
        console.print(f"[red]Error generating report: {escape(str(e))}[/red]")
        sys.exit(1)


def _json_default(value):
    to_dict = getattr(value, 'to_dict', None)
    if to_dict is None:
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
    return to_dict()


def _print_summary(report_gen: ReportGenerator, results: BenchmarkResults):
    table = Table(title="Recommended Memory Configurations")
    table.add_column("Family")
    table.add_column("Memory", justify="right")
    table.add_column("Warm Avg", justify="right")
    table.add_column("Cold Avg", justify="right")
    table.add_column("Blended $/1M", justify="right")

    for row in report_gen.get_summary():
        if row['memory_mb'] is None:
            table.add_row(row['family'], "-", "-", "-", "-")
            continue
        cold = f"{row['cold_start_avg']:.2f}ms" if row['cold_start_avg'] is not None else "N/A"
        table.add_row(
            row['family'],
            f"{row['memory_mb']}MB",
            f"{row['warm_start_avg']:.2f}ms",
            cold,
            f"${row['blended_cost']:.4f}"
        )

    console.print(table)
    for insight in results.summary.insights:
        console.print(f"  - {insight}")


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
