from decimal import Decimal

from django.test import SimpleTestCase

from core.errors import ValidationError
from core.money import money, to_int_qty, unit_cost


class MoneyTests(SimpleTestCase):
    def test_rounds_half_up_to_cents(self):
        self.assertEqual(money("2.345"), Decimal("2.35"))
        self.assertEqual(money(None), Decimal("0.00"))
        self.assertEqual(unit_cost("1.23456"), Decimal("1.2346"))

    def test_garbage_is_rejected(self):
        with self.assertRaises(ValidationError):
            money("doce")

    def test_non_finite_values_are_rejected(self):
        for raw in ("NaN", "Infinity", "-inf", Decimal("NaN"), Decimal("Infinity"), float("inf")):
            with self.subTest(raw=raw):
                with self.assertRaises(ValidationError):
                    money(raw)
                with self.assertRaises(ValidationError):
                    unit_cost(raw)

    def test_quantities_are_whole_units(self):
        self.assertEqual(to_int_qty("3"), 3)
        with self.assertRaises(ValidationError):
            to_int_qty(True)
