from favicon_stats.cli import cli

cli()
