from django.test import SimpleTestCase

from apps.visualization.constants import (
    CATEGORICAL,
    DATE,
    ID_UNIQUE,
    NUMERICAL,
    TEXT,
)
from apps.visualization.services.analyzer import DatasetAnalyzer
from apps.visualization.services.loader import DatasetLoader
from apps.visualization.services.profiler import (
    ColumnProfile,
    DatasetProfiler,
    profile_dataset,
)


def column(rows, name):
    return {profile.name: profile for profile in profile_dataset(rows)}[name]


class TestDatasetProfiler(SimpleTestCase):
    def setUp(self):
        self.rows = [
            {"cat": "x", "n": 1},
            {"cat": "y", "n": 2},
            {"cat": "x", "n": 3},
        ]

    def test_small_cardinality_column_falls_through_to_text(self):
        profile = column(self.rows, "cat")

        self.assertEqual(profile.data_type, TEXT)
        self.assertEqual(profile.unique_count, 2)
        self.assertEqual(profile.values, ["x", "y"])
        self.assertEqual(profile.stats, {})

    def test_numerical_column_statistics(self):
        profile = column(self.rows, "n")

        self.assertEqual(profile.data_type, NUMERICAL)
        self.assertEqual(
            profile.stats,
            {"mean": 2.0, "median": 2, "min": 1, "max": 3, "stdDev": 0.82},
        )
        self.assertEqual(profile.missing_percentage, "0.00")

    def test_columns_follow_first_row_order(self):
        names = [profile.name for profile in profile_dataset(self.rows)]
        self.assertEqual(names, ["cat", "n"])

    def test_empty_dataset(self):
        self.assertEqual(DatasetProfiler().profile([]), [])

    def test_missing_values_are_counted(self):
        rows = [{"v": 1}, {"v": ""}, {"v": 3}, {"v": None}, {}]
        rows[0]["other"] = "a"
        profile = DatasetProfiler().profile(rows)[0]

        self.assertEqual(profile.data_type, NUMERICAL)
        self.assertEqual(profile.missing_count, 3)
        self.assertEqual(profile.missing_percentage, "60.00")
        self.assertEqual(profile.unique_count, 2)

    def test_missing_plus_present_equals_total(self):
        rows = [{"a": value} for value in ["p", "", "q", "p", None, "r", ""]]
        profile = column(rows, "a")
        present = sum(1 for row in rows if row["a"] not in ("", None))

        self.assertEqual(profile.missing_count + present, len(rows))
        self.assertEqual(profile.unique_count, 3)

    def test_numeric_and_textual_five_are_distinct(self):
        profile = column([{"v": 5}, {"v": "5"}, {"v": 5.0}], "v")

        self.assertEqual(profile.data_type, NUMERICAL)
        self.assertEqual(profile.unique_count, 2)
        self.assertEqual(profile.values, [5, "5"])

    def test_date_column(self):
        rows = [{"d": "2024-01-01"}, {"d": "2024-01-02"}, {"d": "oops"}]
        self.assertEqual(column(rows, "d").data_type, DATE)

    def test_time_of_day_column_is_not_a_date(self):
        rows = [{"t": "10:30"}, {"t": "11:45"}, {"t": "12:00"}]
        self.assertEqual(column(rows, "t").data_type, ID_UNIQUE)

    def test_categorical_density_heuristic(self):
        rows = [{"c": ["red", "green", "blue"][i % 3]} for i in range(40)]
        self.assertEqual(column(rows, "c").data_type, CATEGORICAL)

    def test_ratio_threshold_is_exclusive(self):
        rows = [{"c": ["red", "green", "blue"][i % 3]} for i in range(30)]
        self.assertEqual(column(rows, "c").data_type, TEXT)

    def test_fifty_categories_is_not_categorical(self):
        names = [a + b for a in "abcdefghij" for b in "vwxyz"]

        rows = [{"c": names[i % 50]} for i in range(600)]
        self.assertEqual(column(rows, "c").data_type, TEXT)

        rows = [{"c": names[i % 49]} for i in range(600)]
        self.assertEqual(column(rows, "c").data_type, CATEGORICAL)

    def test_single_value_column_is_not_categorical(self):
        rows = [{"c": "same"} for _ in range(40)]
        self.assertEqual(column(rows, "c").data_type, TEXT)

    def test_unique_column(self):
        rows = [{"id": "alpha"}, {"id": "beta"}, {"id": "gamma"}]
        self.assertEqual(column(rows, "id").data_type, ID_UNIQUE)

    def test_numeric_ids_stay_numerical(self):
        rows = [{"zip": 10001 + i} for i in range(20)]
        self.assertEqual(column(rows, "zip").data_type, NUMERICAL)

    def test_mixed_numbers_and_text(self):
        rows = [{"v": 1}, {"v": "x"}, {"v": 2}]
        profile = column(rows, "v")

        self.assertEqual(profile.data_type, ID_UNIQUE)
        self.assertEqual(profile.stats, {})

    def test_boolean_column_is_numerical(self):
        rows = [{"flag": i % 2 == 0} for i in range(30)]
        profile = column(rows, "flag")

        self.assertEqual(profile.data_type, NUMERICAL)
        self.assertEqual(profile.values, [True, False])
        self.assertEqual(
            profile.stats,
            {"mean": 0.5, "median": 0.5, "min": 0, "max": 1, "stdDev": 0.5},
        )

    def test_loaded_true_false_column_has_statistics(self):
        rows = DatasetLoader.load_from_text("flag\ntrue\nfalse\ntrue")
        profile = column(rows, "flag")

        self.assertEqual(profile.data_type, NUMERICAL)
        self.assertEqual(profile.unique_count, 2)
        self.assertEqual(
            profile.stats,
            {"mean": 0.67, "median": 1, "min": 0, "max": 1, "stdDev": 0.47},
        )

    def test_true_false_strings_are_not_numbers(self):
        rows = [{"flag": ["yes", "TRUE", "false"][i % 3]} for i in range(40)]
        self.assertEqual(column(rows, "flag").data_type, CATEGORICAL)

    def test_all_missing_column(self):
        rows = [{"v": ""}, {"v": ""}]
        profile = column(rows, "v")

        self.assertEqual(profile.data_type, TEXT)
        self.assertEqual(profile.missing_percentage, "100.00")

    def test_profile_round_trips_through_dict(self):
        profile = column(self.rows, "n")
        data = profile.to_dict()

        self.assertEqual(
            sorted(data),
            sorted(
                [
                    "name",
                    "dataType",
                    "uniqueCount",
                    "missingCount",
                    "missingPercentage",
                    "stats",
                    "values",
                ]
            ),
        )
        self.assertEqual(ColumnProfile.from_dict(data), profile)


class TestDatasetAnalyzer(SimpleTestCase):
    def test_overview(self):
        rows = [{"a": 1, "b": ""}, {"a": 2, "b": "x"}]
        analysis = DatasetAnalyzer().analyze(rows)
        overview = analysis["dataset_overview"]

        self.assertEqual(overview["row_count"], 2)
        self.assertEqual(overview["column_count"], 2)
        self.assertEqual(overview["missing_cells"], 1)
        self.assertEqual(overview["missing_overall_percent"], 25.0)
        self.assertEqual(overview["column_type_summary"][NUMERICAL], 1)
        self.assertEqual(len(analysis["columns"]), 2)

    def test_column_types(self):
        rows = [{"a": 1, "b": "x"}, {"a": 2, "b": "y"}]
        profiles = DatasetProfiler().profile(rows)
        column_types = DatasetAnalyzer().get_column_types(profiles)

        self.assertEqual(column_types[NUMERICAL], ["a"])
        self.assertEqual(column_types[ID_UNIQUE], ["b"])
