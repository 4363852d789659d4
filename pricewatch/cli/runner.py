# pricewatch/cli/runner.py

"""Headless CLI runner: one-shot fetch or a scheduled watch loop."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from pricewatch.errors import PriceListUnavailableError
from pricewatch.filters.product_filter import ProductFilter
from pricewatch.models.change_log import ChangeLog
from pricewatch.models.fetch_result import FetchResult
from pricewatch.models.product import Product
from pricewatch.services.fetch_orchestrator import FetchOrchestrator
from pricewatch.services.scheduler import FetchScheduler

logger = logging.getLogger("pricewatch.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def format_rupiah(amount: int) -> str:
    """Render ``10000`` as ``'Rp 10.000'``."""
    return f"Rp {amount:,}".replace(",", ".")


def _print_table(products: tuple[Product, ...] | list[Product]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="Price List",
        show_lines=False,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=5)
    table.add_column("Category", style="magenta")
    table.add_column("Code", style="bold")
    table.add_column("Description", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Status", justify="center")

    for idx, p in enumerate(products, 1):
        if p.status.status == "open":
            status = f"[green]{p.status.text or 'open'}[/green]"
        elif p.status.status == "disturbance":
            status = f"[red]{p.status.text}[/red]"
        else:
            status = f"[yellow]{p.status.text or '?'}[/yellow]"
        table.add_row(
            str(idx),
            p.category,
            p.code,
            p.description,
            format_rupiah(p.price),
            status,
        )

    Console().print(table)


def _print_result(result: FetchResult, output_format: str) -> None:
    if output_format == "table":
        _print_table(result.products)
        return
    payload = result.to_dict()
    payload["stats"] = ProductFilter.catalog_stats(
        result.products
    ).to_dict()
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def print_change_log(change_log: ChangeLog) -> None:
    """Console notifier used by the watch loop."""
    s = change_log.summary
    _err.print(
        f"[bold]Changes at {change_log.timestamp:%Y-%m-%d %H:%M:%S}[/bold] "
        f"up={s.increased} down={s.decreased} new={s.new} "
        f"removed={s.removed} opened={s.opened} disturbed={s.disturbed}"
    )
    for record in change_log.records[:10]:
        detail = record.change_type
        if record.price_change is not None:
            pc = record.price_change
            sign = "+" if pc.delta > 0 else ""
            detail += (
                f" {format_rupiah(pc.old)} → {format_rupiah(pc.new)}"
                f" ({sign}{pc.percent}%)"
            )
        if record.status_change is not None:
            sc = record.status_change
            detail += f" {sc.old.text or '?'} → {sc.new.text or '?'}"
        _err.print(
            f"  [dim]{record.category}/{record.code}[/dim] "
            f"{record.description}: {detail}"
        )


async def run_once(source_url: str | None, output_format: str) -> int:
    """Run a single fetch cycle and print it; 0 on data, 1 on failure."""
    orchestrator = FetchOrchestrator(source_url=source_url)
    _err.print(f"[bold]Fetching:[/bold] {orchestrator.source_url}")
    try:
        result = await orchestrator.fetch_data()
    except PriceListUnavailableError as exc:
        logger.error("One-shot fetch failed: %s", exc)
        _err.print(f"[red]{exc}[/red]")
        return 1
    finally:
        orchestrator.close()

    stats = ProductFilter.catalog_stats(result.products)
    _err.print(
        f"[green]✓ {stats.total} products in {stats.categories} "
        f"categories ({stats.available} available)[/green]"
    )
    _print_result(result, output_format)
    return 0


async def run_watch(
    source_url: str | None,
    interval: float | None,
    cycles: int | None,
) -> int:
    """Run the scheduler until *cycles* ticks complete (or forever)."""
    orchestrator = FetchOrchestrator(
        source_url=source_url,
        notifier=print_change_log,
    )
    scheduler = FetchScheduler(orchestrator, interval)
    _err.print(
        f"[bold]Watching:[/bold] {orchestrator.source_url} "
        f"[dim]every {scheduler.interval:.0f}s[/dim]"
    )
    scheduler.start(cycles)
    try:
        await scheduler.wait()
    finally:
        if scheduler.is_running:
            await scheduler.stop()
        orchestrator.close()

    info = orchestrator.get_cache_info()
    _err.print(
        f"[dim]{scheduler.ticks} ticks, {scheduler.failures} failures, "
        f"{info.data_count} products cached, "
        f"{len(orchestrator.history)} change logs[/dim]"
    )
    return 0 if info.has_data else 1
