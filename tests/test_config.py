"""Tests for the YAML strategy schema and configuration resolution."""

import os
import tempfile
import unittest

import yaml

from store_selector.config import (
    get_all_strategies,
    get_default_column_mappings,
    get_parameter_defaults,
    get_required_columns,
    get_strategy_info,
    get_template,
    load_config,
    missing_required_columns,
    resolve_strategy_configuration,
)
from store_selector.models import (
    DemographicTargetingParams,
    GrowthOpportunitiesParams,
    PortfolioBalanceParams,
    RegionWeight,
    SelectionStrategy,
    params_for,
    unknown_parameters,
)


class LoadConfigTests(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.config = load_config()

    def test_all_six_strategies(self):
        self.assertEqual(
            get_all_strategies(self.config),
            [s.value for s in SelectionStrategy],
        )

    def test_strategy_info(self):
        info = get_strategy_info(self.config, SelectionStrategy.REVENUE_FOCUS)
        self.assertEqual(info['name'], "Revenue Focus")
        self.assertEqual(get_strategy_info(self.config, "nope"), {})

    def test_portfolio_defaults(self):
        self.assertEqual(
            get_parameter_defaults(self.config, "portfolio-balance"),
            {'corePercentage': 70, 'growthPercentage': 20},
        )
        self.assertEqual(get_parameter_defaults(self.config, "market-penetration"), {})

    def test_required_columns(self):
        self.assertEqual(get_required_columns(self.config, "revenue-focus"), ['performance'])

    def test_default_column_mappings(self):
        mapping = get_default_column_mappings(self.config)
        self.assertEqual(mapping['performance'], "prodSelect")
        self.assertEqual(mapping['region'], "fieldSalesRegio")

    def test_strategy_default_column_overrides_base_mapping(self):
        config = {
            'columns': {'performance': 'prodSelect', 'region': 'fieldSalesRegio'},
            'strategies': {
                'revenue-focus': {
                    'required_columns': {'performance': {'default_column': 'omzet'}},
                    'optional_columns': {'region': {'name': 'Region'}},
                },
            },
        }
        mapping = get_default_column_mappings(config, "revenue-focus")
        self.assertEqual(mapping, {'performance': 'omzet', 'region': 'fieldSalesRegio'})
        self.assertEqual(get_default_column_mappings(config)['performance'], 'prodSelect')

    def test_bundled_strategy_columns_declare_defaults(self):
        mapping = get_default_column_mappings(self.config, "demographic-targeting")
        self.assertEqual(mapping['customerSegment'], "klantgroep")
        self.assertEqual(mapping['channel'], "kanaal")

    def test_missing_required_columns(self):
        missing = missing_required_columns(
            self.config, "demographic-targeting", ['naam', 'prodSelect'])
        self.assertEqual(missing, ['customerSegment', 'channel'])
        self.assertEqual(
            missing_required_columns(self.config, "revenue-focus", ['omzet'],
                                     column_mappings={'performance': 'omzet'}),
            [],
        )

    def test_every_strategy_has_summary_template(self):
        for strategy in SelectionStrategy:
            self.assertTrue(get_template(self.config, strategy), strategy.value)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_config("/nonexistent/strategies.yaml")

    def test_invalid_yaml(self):
        with tempfile.NamedTemporaryFile('w', suffix='.yaml', delete=False) as handle:
            handle.write("strategies: [unclosed\n")
            path = handle.name
        try:
            with self.assertRaises(yaml.YAMLError):
                load_config(path)
        finally:
            os.remove(path)


class ResolveConfigurationTests(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.config = load_config()

    def test_merges_defaults_and_overrides(self):
        resolved = resolve_strategy_configuration(
            "portfolio-balance",
            parameters={'corePercentage': 60},
            column_mappings={'performance': 'omzet'},
            config=self.config,
        )
        self.assertIs(resolved.strategy, SelectionStrategy.PORTFOLIO_BALANCE)
        self.assertEqual(resolved.parameters['corePercentage'], 60)
        self.assertEqual(resolved.parameters['growthPercentage'], 20)
        self.assertEqual(resolved.column_mappings.get('performance'), 'omzet')
        self.assertEqual(resolved.column_mappings.get('region'), 'fieldSalesRegio')

    def test_region_weights_from_dicts(self):
        resolved = resolve_strategy_configuration(
            "geographic-coverage",
            region_weights=[{'region': 'Utrecht', 'weight': 2, 'targetPercentage': 25}],
            config=self.config,
        )
        self.assertEqual(resolved.region_weights, (RegionWeight("Utrecht", 2.0, 25),))

    def test_unknown_strategy(self):
        with self.assertRaises(ValueError):
            resolve_strategy_configuration("best-vibes", config=self.config)

    def test_invalid_split(self):
        with self.assertRaises(ValueError):
            resolve_strategy_configuration(
                "portfolio-balance",
                parameters={'corePercentage': 90, 'growthPercentage': 20},
                config=self.config,
            )

    def test_unknown_parameter_rejected(self):
        with self.assertRaises(ValueError) as ctx:
            resolve_strategy_configuration(
                "market-penetration",
                parameters={'marketSizeWeight': 50},
                config=self.config,
            )
        self.assertIn("marketSizeWeight", str(ctx.exception))
        with self.assertRaises(ValueError):
            resolve_strategy_configuration(
                "portfolio-balance",
                parameters={'experimentalPercentage': 50},
                config=self.config,
            )

    def test_every_schema_parameter_is_known(self):
        for strategy in SelectionStrategy:
            defaults = get_parameter_defaults(self.config, strategy)
            self.assertEqual(unknown_parameters(strategy, defaults), [], strategy.value)
            params_for(strategy, defaults)


class ParamsForTests(unittest.TestCase):

    def test_defaults(self):
        params = params_for(SelectionStrategy.GROWTH_OPPORTUNITIES)
        self.assertEqual(params, GrowthOpportunitiesParams())
        self.assertEqual((params.lower_percentile, params.upper_percentile), (0.2, 0.7))

    def test_camel_and_snake_keys(self):
        params = params_for(SelectionStrategy.PORTFOLIO_BALANCE,
                            {'corePercentage': "50", 'growth_percentage': 30})
        self.assertEqual(params, PortfolioBalanceParams(core_percentage=50.0, growth_percentage=30.0))

    def test_segments_from_string(self):
        params = params_for(SelectionStrategy.DEMOGRAPHIC_TARGETING, {'targetSegments': "A, B"})
        self.assertEqual(params, DemographicTargetingParams(target_segments=("A", "B")))

    def test_boolean_strings(self):
        params = params_for(SelectionStrategy.GROWTH_OPPORTUNITIES, {'excludeTopPerformers': "false"})
        self.assertFalse(params.exclude_top_performers)

    def test_unknown_keys_ignored(self):
        params = params_for(SelectionStrategy.REVENUE_FOCUS, {'colour': 'blue'})
        self.assertEqual(params.minimum_performance, 0.0)

    def test_portfolio_experimental_share_is_derived(self):
        params = params_for(SelectionStrategy.PORTFOLIO_BALANCE, {'corePercentage': 60})
        self.assertEqual(params.experimental_percentage, 20.0)

    def test_minimum_per_region_bounds(self):
        params = params_for(SelectionStrategy.GEOGRAPHIC_COVERAGE, {'minimumPerRegion': "3"})
        self.assertEqual(params.minimum_per_region, 3)
        with self.assertRaises(ValueError):
            params_for(SelectionStrategy.GEOGRAPHIC_COVERAGE, {'minimumPerRegion': 11})

    def test_bad_values(self):
        with self.assertRaises(ValueError):
            params_for(SelectionStrategy.GROWTH_OPPORTUNITIES, {'lowerPercentile': "abc"})
        with self.assertRaises(ValueError):
            params_for(SelectionStrategy.GROWTH_OPPORTUNITIES, {'lowerPercentile': 1.5})
        with self.assertRaises(ValueError):
            params_for(SelectionStrategy.DEMOGRAPHIC_TARGETING, {'groupQuota': -0.1})


if __name__ == "__main__":
    unittest.main()
