import shutil
import tempfile
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from django.urls import reverse

from apps.pages.models import DatasetUploadModel, StatusChoices
from apps.pages.tasks import analyze_dataset_task, summarize_dataset_task
from apps.visualization.constants import EMPTY_DATASET_MESSAGE
from apps.visualization.exceptions import SummaryError

MEDIA_ROOT = tempfile.mkdtemp()


def sales_csv():
    regions = ["East", "West", "North"]
    lines = ["region,units,day"]
    for i in range(40):
        lines.append(f"{regions[i % 3]},{i},2024-01-{i % 28 + 1:02d}")
    return "\n".join(lines).encode()


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class DatasetTestCase(TestCase):
    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        self.user = get_user_model().objects.create_user("asha", password="secret")
        self.client.force_login(self.user)

    def create_dataset(self, content=None, user=None):
        if content is None:
            content = sales_csv()
        upload = SimpleUploadedFile("sales.csv", content)
        return DatasetUploadModel.objects.create(user=user or self.user, file=upload)

    def analyzed_dataset(self, content=None):
        dataset = self.create_dataset(content)
        with mock.patch("apps.pages.tasks.summarize_dataset_task.delay"):
            analyze_dataset_task(dataset.id)
        dataset.refresh_from_db()
        return dataset


class TestAnalyzeDatasetTask(DatasetTestCase):
    def test_profiles_and_queues_summary(self):
        dataset = self.create_dataset()

        with mock.patch("apps.pages.tasks.summarize_dataset_task.delay") as delay:
            analyze_dataset_task(dataset.id)

        dataset.refresh_from_db()
        self.assertEqual(dataset.status, StatusChoices.COMPLETED)
        self.assertEqual(dataset.metadata["dataset_overview"]["row_count"], 40)
        types = {c["name"]: c["dataType"] for c in dataset.metadata["columns"]}
        self.assertEqual(
            types, {"region": "Categorical", "units": "Numerical", "day": "Date"}
        )
        delay.assert_called_once_with(dataset.id)

    def test_empty_file_fails(self):
        dataset = self.analyzed_dataset(content=b"")

        self.assertEqual(dataset.status, StatusChoices.FAILED)
        self.assertEqual(dataset.error, EMPTY_DATASET_MESSAGE)


class TestSummarizeDatasetTask(DatasetTestCase):
    @mock.patch("apps.pages.tasks.DatasetSummarizer.summarize")
    def test_summary_is_stored(self, summarize):
        summarize.return_value = "Units sold per region."
        dataset = self.analyzed_dataset()

        summarize_dataset_task(dataset.id)

        dataset.refresh_from_db()
        self.assertEqual(dataset.summary, "Units sold per region.")
        self.assertEqual(dataset.summary_status, StatusChoices.COMPLETED)

    @mock.patch("apps.pages.tasks.DatasetSummarizer.summarize")
    def test_failure_with_retries_left_is_raised(self, summarize):
        summarize.side_effect = SummaryError("LLM request error")
        dataset = self.analyzed_dataset()

        with self.assertRaises(SummaryError):
            summarize_dataset_task(dataset.id)

        dataset.refresh_from_db()
        self.assertEqual(dataset.summary_status, StatusChoices.PENDING)

    @mock.patch("apps.pages.tasks.DatasetSummarizer.summarize")
    def test_final_failure_marks_summary_failed(self, summarize):
        summarize.side_effect = SummaryError("LLM request error")
        dataset = self.analyzed_dataset()

        with mock.patch.object(summarize_dataset_task, "max_retries", 0):
            summarize_dataset_task(dataset.id)

        dataset.refresh_from_db()
        self.assertEqual(dataset.summary_status, StatusChoices.FAILED)
        self.assertIsNone(dataset.summary)


class TestDashboardViews(DatasetTestCase):
    @mock.patch("apps.pages.tasks.analyze_dataset_task.delay")
    def test_upload_queues_analysis(self, delay):
        upload = SimpleUploadedFile("sales.csv", sales_csv(), content_type="text/csv")

        response = self.client.post(
            reverse("dashboard:dataset-upload"), {"file": upload}
        )

        self.assertEqual(response.status_code, 201)
        dataset = DatasetUploadModel.objects.get(pk=response.json()["id"])
        self.assertEqual(dataset.user, self.user)
        self.assertEqual(dataset.status, StatusChoices.PENDING)
        delay.assert_called_once_with(dataset.id)

    @mock.patch("apps.pages.tasks.analyze_dataset_task.delay")
    def test_upload_rejects_non_csv(self, delay):
        upload = SimpleUploadedFile("notes.txt", b"hello", content_type="text/plain")

        response = self.client.post(
            reverse("dashboard:dataset-upload"), {"file": upload}
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("file", response.json()["errors"])
        delay.assert_not_called()

    def test_list_only_shows_own_datasets(self):
        other = get_user_model().objects.create_user("bikash", password="secret")
        mine = self.create_dataset()
        self.create_dataset(user=other)

        response = self.client.get(reverse("dashboard:datasets"))

        self.assertEqual([d["id"] for d in response.json()["datasets"]], [mine.id])

    def test_detail(self):
        dataset = self.analyzed_dataset()

        response = self.client.get(
            reverse("dashboard:dataset-detail", args=[dataset.pk])
        )
        payload = response.json()

        self.assertEqual(response.status_code, 200)
        self.assertEqual(payload["overview"]["column_count"], 3)
        self.assertEqual(
            payload["default_chart"],
            {"chart_kind": "bar", "x_axis": "region", "y_axis": "units"},
        )
        self.assertEqual(payload["eligible_columns"]["line"]["x"], ["day"])

    def test_detail_of_pending_dataset(self):
        dataset = self.create_dataset()

        payload = self.client.get(
            reverse("dashboard:dataset-detail", args=[dataset.pk])
        ).json()

        self.assertEqual(payload["status"], StatusChoices.PENDING)
        self.assertEqual(payload["columns"], [])

    def test_chart_data_uses_default_chart(self):
        dataset = self.analyzed_dataset()

        response = self.client.get(
            reverse("dashboard:dataset-chart-data", args=[dataset.pk])
        )

        self.assertEqual(
            response.json()["data"],
            [
                {"name": "East", "value": 14},
                {"name": "West", "value": 13},
                {"name": "North", "value": 13},
            ],
        )

    def test_chart_data_for_selected_chart(self):
        dataset = self.analyzed_dataset()

        response = self.client.get(
            reverse("dashboard:dataset-chart-data", args=[dataset.pk]),
            {"chart_kind": "line", "x_axis": "day", "y_axis": "units"},
        )
        data = response.json()["data"]

        self.assertEqual(len(data), 40)
        self.assertEqual(data[0], {"date": "1/1/2024", "value": 0})
        self.assertEqual(data[-1]["date"], "1/28/2024")

    def test_other_users_dataset_is_not_found(self):
        other = get_user_model().objects.create_user("bikash", password="secret")
        dataset = self.create_dataset(user=other)

        response = self.client.get(
            reverse("dashboard:dataset-detail", args=[dataset.pk])
        )

        self.assertEqual(response.status_code, 404)

    def test_anonymous_user_is_redirected(self):
        self.client.logout()

        response = self.client.get(reverse("dashboard:datasets"))

        self.assertEqual(response.status_code, 302)

    @mock.patch("apps.pages.tasks.summarize_dataset_task.delay")
    def test_summary_request(self, delay):
        pending = self.create_dataset()
        response = self.client.post(
            reverse("dashboard:dataset-summary", args=[pending.pk])
        )
        self.assertEqual(response.status_code, 409)

        dataset = self.analyzed_dataset()
        response = self.client.post(
            reverse("dashboard:dataset-summary", args=[dataset.pk])
        )
        self.assertEqual(response.status_code, 202)
        delay.assert_called_once_with(dataset.pk)
