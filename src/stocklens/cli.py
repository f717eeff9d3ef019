"""
stocklens command line.

Usage:
    stocklens-report 42                  Financial summary for product 42
    stocklens-report 42 --rows           Also print sale, purchase and movement rows
    stocklens-report 42 --page-size 50   Smaller pages against a slow backend

The report is printed to stdout as JSON; logs go to stderr.
"""

import argparse
import asyncio
import json
import sys
from typing import Any

from stocklens.application.use_cases.build_product_report import (
    BuildProductReportUseCase,
    ProductReport,
)
from stocklens.config import configure_logging, get_logger
from stocklens.core.exceptions import StockLensError
from stocklens.core.services.paginated_collector import PaginatedCollector
from stocklens.core.services.report_rows import RowTotals

logger = get_logger(__name__)


def _totals_payload(totals: RowTotals) -> dict[str, Any]:
    payload = totals.model_dump(mode="json")
    payload["average_unit_price"] = totals.average_unit_price
    return payload


def report_payload(report: ProductReport, include_rows: bool = False) -> dict[str, Any]:
    """JSON-ready view of a ProductReport."""
    financials = report.financials.model_dump(mode="json")
    financials["stock_status_label"] = report.financials.stock_status.label

    payload: dict[str, Any] = {
        "product": report.product.model_dump(mode="json"),
        "financials": financials,
        "sale_totals": _totals_payload(report.sale_totals),
        "purchase_totals": _totals_payload(report.purchase_totals),
        "net_adjusted_units": report.net_adjusted_units,
    }
    if include_rows:
        payload["sale_rows"] = [row.model_dump(mode="json") for row in report.sale_rows]
        payload["purchase_rows"] = [row.model_dump(mode="json") for row in report.purchase_rows]
        payload["movement_rows"] = [row.model_dump(mode="json") for row in report.movement_rows]
    return payload


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stocklens-report",
        description="Build the full financial report for one product",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("product_id", type=int, help="Backend product id")
    parser.add_argument(
        "--rows",
        action="store_true",
        help="Include per-item sale, purchase and movement rows",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        default=None,
        help="Records per page (default: COLLECTOR_PAGE_SIZE or 200)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Override LOG_LEVEL",
    )
    return parser


def main(
    argv: list[str] | None = None,
    use_case: BuildProductReportUseCase | None = None,
) -> int:
    """Entry point for the stocklens-report command. Returns the exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(log_level=args.log_level)

    if use_case is None:
        collector = PaginatedCollector(page_size=args.page_size) if args.page_size else None
        use_case = BuildProductReportUseCase(collector=collector)

    try:
        report = asyncio.run(use_case.execute(args.product_id))
    except StockLensError as exc:
        logger.error("product_report_failed", **exc.to_dict())
        return 1
    except KeyboardInterrupt:
        logger.warning("product_report_interrupted", product_id=args.product_id)
        return 130

    print(json.dumps(report_payload(report, include_rows=args.rows), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
