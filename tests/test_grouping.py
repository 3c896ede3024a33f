"""Tests for grouping, histogram and percentile helpers."""

import unittest

from store_selector.grouping import (
    categorize_by_performance,
    ceil_share,
    count_by_region,
    group_by_region,
    histogram,
    percentile,
    revenue_stats,
    unique_values,
)
from store_selector.models import PerformanceCategory, StoreRecord


def make_store(idx, region, value, channel="Stedelijk Basis"):
    return StoreRecord(
        name=f"Lidl {region} {idx}",
        crm_id=f"LIDL-{idx:03d}",
        store_id=f"LIDL-{idx:03d}",
        region=region,
        performance_value=float(value),
        channel=channel,
    )


class GroupByRegionTests(unittest.TestCase):

    def test_groups_keep_insertion_order(self):
        stores = [make_store(1, "B", 1), make_store(2, "A", 2), make_store(3, "B", 3)]
        groups = group_by_region(stores)
        self.assertEqual(list(groups), ["B", "A"])
        self.assertEqual([s.crm_id for s in groups["B"]], ["LIDL-001", "LIDL-003"])

    def test_exact_string_match(self):
        stores = [make_store(1, "Utrecht", 1), make_store(2, "utrecht", 2)]
        self.assertEqual(count_by_region(stores), {"Utrecht": 1, "utrecht": 1})

    def test_empty(self):
        self.assertEqual(group_by_region([]), {})


class HistogramTests(unittest.TestCase):

    def test_equal_width_bins_last_inclusive(self):
        stores = [make_store(i, "R", i * 1000) for i in range(11)]
        bins = histogram(stores, 10)
        self.assertEqual(len(bins), 10)
        self.assertEqual([b.count for b in bins], [1] * 9 + [2])
        self.assertEqual(bins[0].label, "€0k - €1k")
        self.assertEqual(bins[-1].label, "€9k - €10k")
        self.assertEqual(sum(b.count for b in bins), len(stores))

    def test_lower_edge_belongs_to_upper_bin(self):
        stores = [make_store(1, "R", 0), make_store(2, "R", 500), make_store(3, "R", 1000)]
        bins = histogram(stores, 2)
        self.assertEqual([b.count for b in bins], [1, 2])

    def test_single_record_degenerate(self):
        bins = histogram([make_store(1, "R", 100)], 8)
        self.assertEqual(len(bins), 8)
        self.assertEqual([b.count for b in bins if b.count], [1])
        self.assertEqual(bins[0].count, 1)

    def test_all_equal_values_land_in_first_bin(self):
        stores = [make_store(i, "R", 2500) for i in range(5)]
        bins = histogram(stores, 4)
        self.assertEqual(bins[0].count, 5)
        self.assertEqual(sum(b.count for b in bins), 5)

    def test_uneven_range_counts_every_record(self):
        stores = [make_store(i, "R", v) for i, v in enumerate([3, 7, 11, 13, 29, 31, 97])]
        bins = histogram(stores, 7)
        self.assertEqual(sum(b.count for b in bins), 7)
        self.assertEqual(bins[-1].stores[-1].performance_value, 97)

    def test_empty_and_invalid_bin_count(self):
        self.assertEqual(histogram([], 5), [])
        with self.assertRaises(ValueError):
            histogram([make_store(1, "R", 1)], 0)

    def test_other_numeric_field(self):
        stores = [
            StoreRecord("a", "1", "1", "R", 10.0, store_size=800),
            StoreRecord("b", "2", "2", "R", 10.0, store_size=1600),
        ]
        bins = histogram(stores, 2, field_name="store_size")
        self.assertEqual([b.count for b in bins], [1, 1])


class PercentileTests(unittest.TestCase):

    def test_floor_index(self):
        self.assertEqual(percentile([1, 2, 3, 4], 0.5), 3)
        self.assertEqual(percentile([1, 2, 3, 4], 0.0), 1)

    def test_clamped_to_last(self):
        self.assertEqual(percentile([1, 2, 3, 4], 1.0), 4)

    def test_empty_raises(self):
        with self.assertRaises(ValueError):
            percentile([], 0.5)

    def test_ceil_share_ignores_float_noise(self):
        self.assertEqual(ceil_share(10, 0.3), 3)
        self.assertEqual(ceil_share(4, 0.3), 2)
        self.assertEqual(ceil_share(1, 0.3), 1)


class DatasetStatisticsTests(unittest.TestCase):

    def setUp(self):
        self.stores = [make_store(i, "R", v) for i, v in enumerate([500, 100, 300, 200, 400])]

    def test_revenue_stats(self):
        stats = revenue_stats(self.stores)
        self.assertEqual(stats['min'], 100)
        self.assertEqual(stats['max'], 500)
        self.assertEqual(stats['mean'], 300)
        self.assertEqual(stats['median'], 300)
        self.assertEqual(stats['q1'], 200)
        self.assertEqual(stats['q3'], 400)

    def test_revenue_stats_empty(self):
        self.assertEqual(revenue_stats([])['mean'], 0.0)

    def test_categorize(self):
        categories = {r.performance_value: c for r, c in categorize_by_performance(self.stores)}
        self.assertEqual(categories[500], PerformanceCategory.HIGH)
        self.assertEqual(categories[400], PerformanceCategory.HIGH)
        self.assertEqual(categories[300], PerformanceCategory.MEDIUM)
        self.assertEqual(categories[200], PerformanceCategory.MEDIUM)
        self.assertEqual(categories[100], PerformanceCategory.LOW)

    def test_unique_values(self):
        stores = [make_store(1, "R", 1, "X"), make_store(2, "R", 1, "Y"), make_store(3, "R", 1, "X")]
        self.assertEqual(unique_values(stores, "channel"), ["X", "Y"])


if __name__ == "__main__":
    unittest.main()
