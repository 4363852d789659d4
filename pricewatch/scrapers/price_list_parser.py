# pricewatch/scrapers/price_list_parser.py

"""HTML price-list parser tolerant of varying table layouts.

The source publishes one ``<table>`` per product group.  Tables differ
in column order, some carry a leading row-number column, and the group
label sits either in a header row, a caption, or loose text just above
the table.  Each table is parsed independently:

1. The category is resolved from the header cell, then from preceding
   sibling text, then falls back to ``Settings.DEFAULT_CATEGORY``.
2. A :class:`RowLayout` is chosen by probing every candidate against
   the table's data rows and keeping the one that fits most of them.
3. Rows are converted with that layout, validated, and de-duplicated
   across the whole document.
"""

import logging
import re
from dataclasses import dataclass, field

from bs4 import BeautifulSoup
from bs4.element import Comment, NavigableString, Tag

from pricewatch.config.settings import Settings
from pricewatch.filters.deduplicator import ProductDeduplicator
from pricewatch.filters.normalizers import (
    classify_status,
    clean_text,
    normalize_category,
    parse_price,
)
from pricewatch.filters.product_validator import ProductValidator
from pricewatch.models.product import Product
from pricewatch.scrapers.price_list_fetcher import RawDocument

logger = logging.getLogger("pricewatch.parser")

_CODE_SHAPE = re.compile(r"[A-Za-z0-9][A-Za-z0-9._\-/]{0,31}")
_PRICE_SHAPE = re.compile(
    r"(?:rp\.?|idr)?\s*\d[\d.,]*\s*(?:,-)?", re.IGNORECASE
)
_INDEX_SHAPE = re.compile(r"\d{1,4}\.?")
_DIGIT_RE = re.compile(r"\d")

# Longest loose text accepted as a category label
_MAX_CONTEXT_LABEL = 60
# How many ancestors (table, wrapper, ...) to inspect for context text
_CONTEXT_DEPTH = 3


def _looks_like_code(text: str) -> bool:
    return bool(_CODE_SHAPE.fullmatch(text))


def _looks_like_price(text: str) -> bool:
    return bool(_PRICE_SHAPE.fullmatch(text))


def _looks_like_status(text: str) -> bool:
    if classify_status(text).status != "unknown":
        return True
    return not _DIGIT_RE.search(text)


def _is_column_label(text: str) -> bool:
    words = text.lower().split()
    return bool(words) and words[0].rstrip(".:") in Settings.COLUMN_LABELS


@dataclass(frozen=True)
class RowLayout:
    """Column positions of one supported table layout."""

    name: str
    code: int
    description: int
    price: int
    status: int
    min_cells: int
    index: int | None = None

    def fits(self, cells: list[str]) -> bool:
        """True when the cell values have the shapes this layout expects."""
        if len(cells) < self.min_cells:
            return False
        if self.index is not None and not _INDEX_SHAPE.fullmatch(
            cells[self.index]
        ):
            return False
        return (
            _looks_like_code(cells[self.code])
            and bool(cells[self.description])
            and _looks_like_price(cells[self.price])
            and _looks_like_status(cells[self.status])
        )


LAYOUTS: tuple[RowLayout, ...] = (
    RowLayout(
        name="code-desc-price-status",
        code=0, description=1, price=2, status=3, min_cells=4,
    ),
    RowLayout(
        name="index-code-desc-price-status",
        code=1, description=2, price=3, status=4, min_cells=5, index=0,
    ),
    RowLayout(
        name="code-desc-status-price",
        code=0, description=1, price=3, status=2, min_cells=4,
    ),
    RowLayout(
        name="desc-code-price-status",
        code=1, description=0, price=2, status=3, min_cells=4,
    ),
)


def select_layout(rows: list[list[str]]) -> RowLayout:
    """Pick the layout that fits the most rows (declaration order wins ties)."""
    best = LAYOUTS[0]
    best_score = 0
    for layout in LAYOUTS:
        score = sum(1 for cells in rows if layout.fits(cells))
        if score > best_score:
            best, best_score = layout, score
    return best


@dataclass
class ParseReport:
    """Products extracted from a document plus data-quality counters."""

    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    sections: int = 0
    rows_seen: int = 0
    rows_dropped: int = 0
    duplicates: int = 0
    layouts: list[str] = field(
        default_factory=lambda: list[str]()
    )


@dataclass(frozen=True)
class ParseError:
    """The document yielded no usable products."""

    reason: str
    sections: int = 0
    rows_seen: int = 0

    def __str__(self) -> str:
        return (
            f"parse failed: {self.reason} "
            f"(sections={self.sections}, rows={self.rows_seen})"
        )


class PriceListParser:
    """Converts a raw price-list document into ordered products."""

    def __init__(
        self,
        default_category: str | None = None,
        max_price: int | None = None,
    ) -> None:
        self.default_category = normalize_category(
            default_category or Settings.DEFAULT_CATEGORY
        )
        self.max_price = (
            max_price if max_price is not None
            else Settings.MAX_PLAUSIBLE_PRICE
        )

    # ── Section discovery ────────────────────────────────

    @staticmethod
    def _sections(soup: BeautifulSoup) -> list[Tag]:
        """Innermost tables, in document order."""
        return [
            table
            for table in soup.find_all("table")
            if isinstance(table, Tag) and table.find("table") is None
        ]

    @staticmethod
    def _cells(row: Tag) -> list[str]:
        return [
            clean_text(cell.get_text(" "))
            for cell in row.find_all(["td", "th"], recursive=False)
        ]

    @staticmethod
    def _is_header_row(row: Tag, cells: list[str]) -> bool:
        classes = row.get("class") or []
        if "head" in classes or "header" in classes:
            return True
        # A <th> beside filled <td> cells is a row header (e.g. the code)
        if row.find("th", recursive=False) is not None and not any(
            clean_text(td.get_text(" "))
            for td in row.find_all("td", recursive=False)
        ):
            return True
        non_empty = [c for c in cells if c]
        return bool(non_empty) and all(
            _is_column_label(c) for c in non_empty
        )

    # ── Category resolution ──────────────────────────────

    @staticmethod
    def _header_category(table: Tag) -> str | None:
        """Label from the caption or the leading header rows."""
        caption = table.find("caption")
        if isinstance(caption, Tag):
            text = clean_text(caption.get_text(" "))
            if text:
                return text

        for row in table.find_all("tr"):
            cells = PriceListParser._cells(row)
            if not PriceListParser._is_header_row(row, cells):
                break
            first = next((c for c in cells if c), "")
            if first and not _is_column_label(first):
                return first
        return None

    @staticmethod
    def _sibling_text(node: Tag | NavigableString) -> str | None:
        """Visible text of a sibling; ``None`` marks a previous section."""
        if isinstance(node, Comment):
            return ""
        if isinstance(node, Tag):
            if node.name == "table" or node.find("table") is not None:
                return None
            if node.name in ("script", "style"):
                return ""
            return clean_text(node.get_text(" "))
        return clean_text(str(node))

    @staticmethod
    def _context_category(table: Tag) -> str | None:
        """Nearest short text preceding the table or one of its wrappers.

        The walk never crosses an earlier table, so a section cannot
        inherit the label of the section above it.
        """
        node: Tag | None = table
        for _ in range(_CONTEXT_DEPTH):
            if node is None or node.name in ("body", "html", "[document]"):
                break
            for sibling in node.previous_siblings:
                text = PriceListParser._sibling_text(sibling)
                if text is None:
                    return None
                if not text:
                    continue
                if (
                    len(text) <= _MAX_CONTEXT_LABEL
                    and not _is_column_label(text)
                ):
                    return text
                break
            node = node.parent
        return None

    def _category_for(self, table: Tag) -> str:
        label = (
            self._header_category(table)
            or self._context_category(table)
        )
        return normalize_category(label) or self.default_category

    # ── Row extraction ───────────────────────────────────

    def _parse_section(
        self, table: Tag, report: ParseReport,
    ) -> list[Product]:
        category = self._category_for(table)

        rows: list[list[str]] = []
        for row in table.find_all("tr"):
            cells = self._cells(row)
            if self._is_header_row(row, cells):
                continue
            if len(cells) < 3:
                report.rows_seen += 1
                report.rows_dropped += 1
                logger.debug(
                    "Dropped row (%d cells) in %s: %r",
                    len(cells),
                    category,
                    cells,
                )
                continue
            rows.append(cells)
        if not rows:
            return []

        layout = select_layout(rows)
        report.layouts.append(layout.name)
        logger.debug(
            "Section %r: %d rows, layout %s",
            category,
            len(rows),
            layout.name,
        )

        candidates: list[Product] = []
        for cells in rows:
            report.rows_seen += 1
            if len(cells) < layout.min_cells:
                logger.debug(
                    "Dropped row (too few cells for %s): %r",
                    layout.name,
                    cells,
                )
                report.rows_dropped += 1
                continue
            price = parse_price(cells[layout.price])
            if price is None:
                logger.debug(
                    "Dropped row (unparseable price %r) in %s",
                    cells[layout.price],
                    category,
                )
                report.rows_dropped += 1
                continue
            candidates.append(
                Product(
                    category=category,
                    code=cells[layout.code],
                    description=cells[layout.description],
                    price=price,
                    status=classify_status(cells[layout.status]),
                )
            )

        valid, dropped = ProductValidator.validate(
            candidates, self.max_price
        )
        report.rows_dropped += dropped
        return valid

    # ── Public API ───────────────────────────────────────

    def parse(self, document: RawDocument) -> ParseReport | ParseError:
        """Extract ordered, de-duplicated products from *document*."""
        if not document.content.strip():
            logger.warning("Empty document from %s", document.url)
            return ParseError(reason="empty document")

        soup = BeautifulSoup(document.content, "lxml")
        report = ParseReport()
        collected: list[Product] = []

        for table in self._sections(soup):
            report.sections += 1
            collected.extend(self._parse_section(table, report))

        report.products, report.duplicates = (
            ProductDeduplicator.deduplicate(collected)
        )

        if not report.products:
            logger.warning(
                "No products extracted (%d sections, %d rows)",
                report.sections,
                report.rows_seen,
            )
            return ParseError(
                reason="no products extracted",
                sections=report.sections,
                rows_seen=report.rows_seen,
            )

        logger.info(
            "Parsed %d products from %d sections "
            "(%d rows dropped, %d duplicates)",
            len(report.products),
            report.sections,
            report.rows_dropped,
            report.duplicates,
        )
        return report
