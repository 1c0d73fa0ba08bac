import json

from django.core.management.base import BaseCommand, CommandError

from apps.visualization.exceptions import DatasetLoadError
from apps.visualization.services.aggregator import ChartConfig
from apps.visualization.services.analyzer import DatasetAnalyzer
from apps.visualization.services.loader import DatasetLoader
from apps.visualization.services.profiler import ColumnProfile
from apps.visualization.services.visualizer_service import VisualizationService
from apps.visualization.utils import convert_numpy


class Command(BaseCommand):
    help = "Profile a CSV file and print column profiles and chart data as JSON."

    def add_arguments(self, parser):
        parser.add_argument("path", type=str, help="Path to a .csv file")
        parser.add_argument(
            "--chart-kind",
            type=str,
            default="",
            help="bar, histogram, scatter or line (defaults to the suggested chart)",
        )
        parser.add_argument("--x-axis", type=str, default="", help="X-axis column")
        parser.add_argument("--y-axis", type=str, default="", help="Y-axis column")

    def handle(self, *args, **options):
        try:
            rows = DatasetLoader.load_from_file(options["path"])
        except DatasetLoadError as e:
            raise CommandError(str(e)) from e

        if not rows:
            self.stderr.write("No data: the file is empty or could not be parsed.")
            return

        analysis = DatasetAnalyzer().analyze(rows)
        profiles = [ColumnProfile.from_dict(column) for column in analysis["columns"]]

        service = VisualizationService()
        default = service.default_config(profiles)
        config = ChartConfig(
            chart_kind=options["chart_kind"] or default.chart_kind,
            x_axis=options["x_axis"] or default.x_axis,
            y_axis=options["y_axis"] or default.y_axis,
        )

        output = {
            "dataset_overview": analysis["dataset_overview"],
            "columns": analysis["columns"],
            "chart": config.to_dict(),
            "chart_data": service.chart_data(rows, profiles, config),
        }
        self.stdout.write(json.dumps(convert_numpy(output), indent=2, default=str))
