# tests/test_normalizers.py

"""Tests for price, status and label normalisation."""

import unittest

from pricewatch.filters.normalizers import (
    classify_status,
    clean_text,
    normalize_category,
    parse_price,
)


class TestParsePrice(unittest.TestCase):
    """parse_price handles Indonesian number formatting."""

    def test_rupiah_with_thousands_dot(self) -> None:
        """'Rp 10.000' is ten thousand, not ten."""
        self.assertEqual(parse_price("Rp 10.000"), 10000)

    def test_plain_thousands(self) -> None:
        self.assertEqual(parse_price("5.600"), 5600)

    def test_millions(self) -> None:
        self.assertEqual(parse_price("IDR 1.000.000"), 1000000)

    def test_decimal_comma_rounds_half_up(self) -> None:
        """A ',50' fraction rounds up: 10.000,50 -> 10001."""
        self.assertEqual(parse_price("10.000,50"), 10001)

    def test_decimal_comma_below_half_rounds_down(self) -> None:
        self.assertEqual(parse_price("10.000,49"), 10000)

    def test_single_digit_fraction_half_rounds_up(self) -> None:
        """'2,5' is two and a half, rounded half-up to 3."""
        self.assertEqual(parse_price("2,5"), 3)

    def test_english_thousands_commas(self) -> None:
        """Three-digit groups after commas are thousands, not decimals."""
        self.assertEqual(parse_price("1,250,000"), 1250000)

    def test_english_decimal_point(self) -> None:
        self.assertEqual(parse_price("12.5"), 13)

    def test_trailing_dash_suffix(self) -> None:
        """The ',-' suffix common on Indonesian prices is ignored."""
        self.assertEqual(parse_price("Rp. 12.500,-"), 12500)

    def test_residue_after_number_discarded(self) -> None:
        self.assertEqual(parse_price("10.000 (promo)"), 10000)

    def test_currency_glued_to_number(self) -> None:
        self.assertEqual(parse_price("Rp5.800"), 5800)

    def test_non_numeric_returns_none(self) -> None:
        """Text without digits is unparseable, not zero."""
        self.assertIsNone(parse_price("Hubungi CS"))

    def test_empty_and_none(self) -> None:
        self.assertIsNone(parse_price(""))
        self.assertIsNone(parse_price(None))

    def test_negative_amount_rejected(self) -> None:
        self.assertIsNone(parse_price("-5.000"))

    def test_zero_is_parsed(self) -> None:
        """Zero parses; rejecting it is the validator's job."""
        self.assertEqual(parse_price("0"), 0)


class TestClassifyStatus(unittest.TestCase):
    """classify_status maps labels to open / disturbance / unknown."""

    def test_buka_is_open(self) -> None:
        status = classify_status("Buka")
        self.assertTrue(status.available)
        self.assertEqual(status.status, "open")

    def test_gangguan_is_disturbance(self) -> None:
        status = classify_status("Gangguan")
        self.assertFalse(status.available)
        self.assertEqual(status.status, "disturbance")

    def test_case_insensitive(self) -> None:
        self.assertEqual(classify_status("OPEN").status, "open")
        self.assertEqual(classify_status("NoRmAl").status, "open")

    def test_error_and_maintenance_are_disturbance(self) -> None:
        for label in ("Error", "MAINTENANCE", "sedang maintenance"):
            with self.subTest(label=label):
                self.assertEqual(
                    classify_status(label).status, "disturbance"
                )

    def test_disturbance_wins_over_open(self) -> None:
        """A label mentioning both is treated as a disturbance."""
        status = classify_status("Gangguan, open kembali besok")
        self.assertEqual(status.status, "disturbance")
        self.assertFalse(status.available)

    def test_unavailable_is_not_read_as_available(self) -> None:
        status = classify_status("Unavailable")
        self.assertEqual(status.status, "unknown")
        self.assertFalse(status.available)

    def test_unavailable_next_to_open_marker(self) -> None:
        """'available' elsewhere in the label still counts."""
        status = classify_status("unavailable pagi, available sore")
        self.assertEqual(status.status, "open")

    def test_unrecognised_is_unknown_and_unavailable(self) -> None:
        status = classify_status("Segera hadir")
        self.assertEqual(status.status, "unknown")
        self.assertFalse(status.available)

    def test_labels_outside_marker_lists_fall_to_default(self) -> None:
        for label in ("Tutup", "Ready", "Habis", "Closed", "Kosong"):
            with self.subTest(label=label):
                status = classify_status(label)
                self.assertEqual(status.status, "unknown")
                self.assertFalse(status.available)

    def test_empty_label(self) -> None:
        status = classify_status("")
        self.assertEqual(status.status, "unknown")
        self.assertEqual(status.text, "")

    def test_raw_text_is_kept_stripped(self) -> None:
        self.assertEqual(classify_status("  Buka \n").text, "Buka")


class TestLabels(unittest.TestCase):
    """clean_text and normalize_category."""

    def test_clean_text_collapses_whitespace(self) -> None:
        self.assertEqual(
            clean_text("  Telkomsel\n   5.000 "), "Telkomsel 5.000"
        )

    def test_normalize_category_uppercases(self) -> None:
        self.assertEqual(
            normalize_category(" Indosat  Ooredoo "), "INDOSAT OOREDOO"
        )

    def test_normalize_category_none(self) -> None:
        self.assertEqual(normalize_category(None), "")


if __name__ == "__main__":
    unittest.main()
