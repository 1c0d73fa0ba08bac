import json
import tempfile
from io import StringIO
from pathlib import Path

from django.core.management import CommandError, call_command
from django.test import SimpleTestCase


class TestProfileCsvCommand(SimpleTestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, name, text):
        path = Path(self.tmp.name) / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    def test_prints_profile_and_default_chart(self):
        lines = ["score,bonus"] + [f"{i},{i * 2}" for i in range(11)]
        path = self.write("scores.csv", "\n".join(lines))
        out = StringIO()

        call_command("profile_csv", path, stdout=out)
        result = json.loads(out.getvalue())

        self.assertEqual(result["dataset_overview"]["row_count"], 11)
        self.assertEqual(
            result["chart"],
            {"chart_kind": "histogram", "x_axis": "score", "y_axis": "bonus"},
        )
        self.assertEqual(sum(item["count"] for item in result["chart_data"]), 11)

    def test_explicit_chart_selection(self):
        path = self.write("pairs.csv", "a,b\n1,2\n3,4\n")
        out = StringIO()

        call_command(
            "profile_csv",
            path,
            "--chart-kind",
            "scatter",
            "--x-axis",
            "b",
            "--y-axis",
            "a",
            stdout=out,
        )
        result = json.loads(out.getvalue())

        self.assertEqual(result["chart_data"], [{"x": 2, "y": 1}, {"x": 4, "y": 3}])

    def test_empty_file(self):
        path = self.write("empty.csv", "")
        err = StringIO()

        call_command("profile_csv", path, stdout=StringIO(), stderr=err)

        self.assertIn("No data", err.getvalue())

    def test_unsupported_file(self):
        with self.assertRaises(CommandError):
            call_command("profile_csv", self.write("data.txt", "a\n1"))
