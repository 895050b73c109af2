import random
import unittest
from datetime import datetime, timedelta
from types import SimpleNamespace

from formbuilder.errors import ValidationFailed
from formbuilder.services import ordering

BASE_TIME = datetime(2024, 1, 1)


def _item(key, order_index=None, seconds=0):
    return SimpleNamespace(id=key, order_index=order_index, created_at=BASE_TIME + timedelta(seconds=seconds))


def _ids(items):
    return [item.id for item in items]


class OrderingTests(unittest.TestCase):
    def setUp(self):
        self.items = [_item(key, index, index) for index, key in enumerate("abc")]

    def test_insert_without_index_appends(self):
        result = ordering.insert(self.items, _item("d"))
        self.assertEqual(_ids(result), ["a", "b", "c", "d"])
        self.assertEqual([item.order_index for item in result], [0, 1, 2, 3])

    def test_insert_at_index_shifts_later_siblings(self):
        result = ordering.insert(self.items, _item("x"), 1)
        self.assertEqual(_ids(result), ["a", "x", "b", "c"])
        self.assertEqual(self.items[1].order_index, 2)
        self.assertEqual(self.items[2].order_index, 3)

    def test_insert_past_the_end_appends(self):
        result = ordering.insert(self.items, _item("x"), 42)
        self.assertEqual(_ids(result)[-1], "x")
        self.assertTrue(ordering.is_dense(result))

    def test_insert_negative_index_is_rejected(self):
        with self.assertRaises(ValidationFailed) as ctx:
            ordering.insert(self.items, _item("x"), -1)
        self.assertEqual(ctx.exception.code, "INVALID_ORDER_INDEX")

    def test_move_extracts_and_reinserts(self):
        result = ordering.move(self.items, 0, 2)
        self.assertEqual(_ids(result), ["b", "c", "a"])
        self.assertEqual([item.order_index for item in result], [0, 1, 2])

    def test_move_out_of_range(self):
        for old, new in ((0, 3), (-1, 0), (3, 0)):
            with self.assertRaises(ValidationFailed) as ctx:
                ordering.move(self.items, old, new)
            self.assertEqual(ctx.exception.code, "INVALID_ORDER_INDEX")

    def test_move_item_clamps_to_last_position(self):
        result = ordering.move_item(self.items, self.items[0], 10)
        self.assertEqual(_ids(result), ["b", "c", "a"])

    def test_remove_compacts(self):
        result = ordering.remove(self.items, self.items[1])
        self.assertEqual(_ids(result), ["a", "c"])
        self.assertEqual([item.order_index for item in result], [0, 1])

    def test_ties_break_on_created_at_then_id(self):
        items = [
            _item("z", 0, seconds=5),
            _item("b", 0, seconds=1),
            _item("a", 0, seconds=1),
        ]
        self.assertEqual(_ids(ordering.ordered(items)), ["a", "b", "z"])

    def test_reindex_repairs_gaps(self):
        items = [_item("a", 3), _item("b", 7), _item("c", 7, seconds=1)]
        result = ordering.reindex(ordering.ordered(items))
        self.assertEqual([item.order_index for item in result], [0, 1, 2])
        self.assertTrue(ordering.is_dense(result))

    def test_random_operations_keep_indexes_dense(self):
        rng = random.Random(7)
        items = []
        for counter in range(300):
            operation = rng.choice(["insert", "remove", "move"])
            if operation == "insert" or not items:
                index = rng.choice([None, rng.randint(0, len(items) + 2)])
                items = ordering.insert(items, _item(f"{counter:04d}", seconds=counter), index)
            elif operation == "remove":
                items = ordering.remove(items, rng.choice(items))
            else:
                items = ordering.move(items, rng.randrange(len(items)), rng.randrange(len(items)))
            self.assertTrue(ordering.is_dense(items))
