# === FILE: favicon_stats/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для обработки результатов обхода favicon через командную строку.

Команды:
  process   Нормализовать ссылки на favicon, удалить дубликаты доменов, сохранить JSON
  stats     Построить статистику и сохранить HTML/JSON-отчёт
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Пример:
  favicon-stats process --input favicons.json --output favicons-processed.json
  favicon-stats stats --input favicons-downloaded.json --icons-dir icons --html stats.html
"""
import sys
from pathlib import Path

import click

from favicon_stats import __version__
from favicon_stats.config import load_config
from favicon_stats.engine import Engine
from favicon_stats.logger import DEFAULT_FORMAT, configure
from favicon_stats.report.html_report import render_html
from favicon_stats.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='favicon_stats, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд favicon_stats CLI."""
    configure(level=log_level, log_file=log_file, log_format=log_format)
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('process', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--input', '-i', 'input_path',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Сырые результаты обхода (override input_file)'
)
@click.option(
    '--output', '-o', 'output_path',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Куда сохранить обработанные записи (override processed_file)'
)
@click.pass_context
def process(ctx, input_path, output_path):
    """Нормализовать ссылки на favicon и удалить дубликаты доменов."""
    cfg = ctx.obj['config']
    engine = Engine(cfg)
    target = output_path or cfg.processed_file
    try:
        result = engine.process_file(input_path, target)
    except Exception as e:
        print_error(f'Ошибка при обработке: {e}')

    click.echo(
        f'Processed {len(result.normalized)} entries, '
        f'removed {result.removed} duplicates, saved {len(result.records)} to {target}'
    )


@cli.command('stats', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--input', '-i', 'input_path',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Записи для статистики (override stats_input_file)'
)
@click.option(
    '--icons-dir', 'icons_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Папка со скачанными иконками (override icons_dir)'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл (override stats_html)'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблонами'
)
@click.option('--dedupe', is_flag=True, help='Удалить дубликаты доменов перед подсчётом')
@click.option('--normalize', is_flag=True, help='Нормализовать сырые записи перед подсчётом (ошибки загрузчика сохраняются)')
@click.option('--stdout', 'to_stdout', is_flag=True, help='Вывести JSON-отчёт в stdout вместо файлов')
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def stats(
    ctx, input_path, icons_dir, html_output, json_output, template_dir, dedupe, normalize, to_stdout, pretty
):
    """Построить статистику и сгенерировать отчёты."""
    cfg = ctx.obj['config']
    engine = Engine(cfg)
    try:
        report = engine.stats_file(input_path, icons_dir, dedupe=dedupe, normalize=normalize)
    except Exception as e:
        print_error(f'Ошибка при подсчёте статистики: {e}')

    if to_stdout:
        click.echo(report.json(pretty=pretty))
        return

    json_target = json_output or cfg.stats_json
    if json_target:
        try:
            saved_json = render_json(report, json_target)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    try:
        saved_html = render_html(report, template_dir or cfg.template_dir, html_output or cfg.stats_html)
        click.echo(f'HTML report: {saved_html}')
    except Exception as e:
        print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
