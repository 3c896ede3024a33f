"""Tests for result analytics and retailer brand extraction."""

import unittest

from store_selector.analytics import build_result, performance_distribution, target_metrics
from store_selector.models import StoreRecord, TargetConfig
from store_selector.retailers import extract_retailer_brand


def make_store(name, region, value):
    return StoreRecord(name=name, crm_id=name, store_id=name, region=region,
                       performance_value=float(value))


class BuildResultTests(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.pool = [
            make_store("Albert Heijn Utrecht", "Utrecht", 600),
            make_store("Albert Heijn Zeist", "Utrecht", 500),
            make_store("Jumbo Gouda", "Zuid-Holland", 400),
            make_store("Jumbo Delft", "Zuid-Holland", 300),
            make_store("Deen Supermarkt Hoorn", "Noord-Holland", 200),
            make_store("Deen Supermarkt Alkmaar", "Noord-Holland", 100),
            make_store("Plus Venlo", "Limburg", 50),
        ]
        cls.selected = cls.pool[:6]
        cls.result = build_result(cls.selected, cls.pool)

    def test_totals(self):
        self.assertEqual(self.result.total_revenue, 2100)
        self.assertEqual(self.result.average_revenue, 350)
        self.assertEqual(self.result.statistics.total_stores, 6)

    def test_region_coverage_relative_to_pool(self):
        self.assertEqual(self.result.statistics.unique_regions, 3)
        self.assertAlmostEqual(self.result.region_coverage, 3 / 4)

    def test_revenue_per_region(self):
        self.assertEqual(
            self.result.statistics.revenue_per_region,
            {"Utrecht": 1100, "Zuid-Holland": 700, "Noord-Holland": 300},
        )

    def test_unique_retailers_uses_brand_extraction(self):
        self.assertEqual(self.result.statistics.unique_retailers, 3)

    def test_self_referential_tiers(self):
        dist = self.result.performance_distribution
        self.assertEqual((dist.high, dist.medium, dist.low), (2, 2, 2))

    def test_selected_order_preserved(self):
        self.assertEqual(self.result.selected_stores, self.selected)

    def test_empty_selection_is_zeroed(self):
        result = build_result([], self.pool)
        self.assertEqual(result.total_revenue, 0)
        self.assertEqual(result.average_revenue, 0)
        self.assertEqual(result.region_coverage, 0)
        self.assertEqual(result.statistics.revenue_per_region, {})


class PerformanceDistributionTests(unittest.TestCase):

    def test_single_store_is_high(self):
        dist = performance_distribution([make_store("a", "R", 10)])
        self.assertEqual((dist.high, dist.medium, dist.low), (1, 0, 0))

    def test_ties_share_a_tier(self):
        dist = performance_distribution([make_store(str(i), "R", 10) for i in range(4)])
        self.assertEqual((dist.high, dist.medium, dist.low), (4, 0, 0))

    def test_counts_sum_to_selection(self):
        stores = [make_store(str(i), "R", (i * 13) % 7) for i in range(20)]
        dist = performance_distribution(stores)
        self.assertEqual(dist.high + dist.medium + dist.low, 20)


class TargetMetricsTests(unittest.TestCase):

    def test_pool_figures(self):
        pool = [
            make_store("Albert Heijn A", "North", 100),
            make_store("Jumbo B", "North", 200),
            make_store("Jumbo C", "South", 300),
            make_store("Lidl D", "South", 400),
        ]
        metrics = target_metrics(pool, TargetConfig(total=3))
        self.assertEqual(metrics['coverage_percentage'], "75.0")
        self.assertEqual(metrics['stores_by_region'], {"North": 2, "South": 2})
        self.assertEqual(metrics['total_revenue'], 1000)
        self.assertEqual(metrics['avg_stores_per_region'], 2)
        self.assertEqual(metrics['max_stores'], 4)
        self.assertEqual(metrics['unique_retailers'], 3)

    def test_empty_pool(self):
        metrics = target_metrics([], TargetConfig(total=3))
        self.assertEqual(metrics['coverage_percentage'], "0.0")
        self.assertEqual(metrics['avg_stores_per_region'], 0)


class RetailerBrandTests(unittest.TestCase):

    def test_known_brand_prefix(self):
        self.assertEqual(extract_retailer_brand("Albert Heijn Amsterdam Centraal"), "Albert Heijn")
        self.assertEqual(extract_retailer_brand("Jan Linders Venray"), "Jan Linders")

    def test_first_two_words_fallback(self):
        self.assertEqual(extract_retailer_brand("Deen Supermarkt Hoorn"), "Deen Supermarkt")

    def test_single_word(self):
        self.assertEqual(extract_retailer_brand("Poiesz"), "Poiesz")


if __name__ == "__main__":
    unittest.main()
