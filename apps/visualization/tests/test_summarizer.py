from unittest import mock

import requests
from django.test import SimpleTestCase, override_settings

from apps.visualization.exceptions import SummaryError
from apps.visualization.services.profiler import profile_dataset
from apps.visualization.services.summarizer import DatasetSummarizer


@override_settings(
    LLM_API_ENDPOINT="http://llm.test/api/generate",
    LLM_MODEL="test-model",
    LLM_TIMEOUT=5,
)
class TestDatasetSummarizer(SimpleTestCase):
    def setUp(self):
        self.rows = [{"city": f"city-{i}", "rainfall": i * 1.5} for i in range(8)]
        self.profiles = profile_dataset(self.rows)
        self.summarizer = DatasetSummarizer()

    def _response(self, payload):
        response = mock.Mock()
        response.json.return_value = payload
        response.raise_for_status.return_value = None
        return response

    def test_prompt_carries_reduced_view_and_five_rows(self):
        prompt = self.summarizer.build_prompt(self.profiles, self.rows)

        self.assertIn('"dataType": "Numerical"', prompt)
        self.assertNotIn('"values"', prompt)
        self.assertIn("city-4", prompt)
        self.assertNotIn("city-5", prompt)

    @mock.patch("apps.visualization.services.summarizer.requests.post")
    def test_summary_text_is_returned(self, post):
        post.return_value = self._response({"response": "  Rainfall by city.  "})

        summary = self.summarizer.summarize(self.profiles, self.rows)

        self.assertEqual(summary, "Rainfall by city.")
        args, kwargs = post.call_args
        self.assertEqual(args[0], "http://llm.test/api/generate")
        self.assertEqual(kwargs["json"]["model"], "test-model")
        self.assertFalse(kwargs["json"]["stream"])
        self.assertEqual(kwargs["timeout"], 5)

    @mock.patch("apps.visualization.services.summarizer.requests.post")
    def test_request_failure(self, post):
        post.side_effect = requests.ConnectionError("refused")

        with self.assertRaises(SummaryError):
            self.summarizer.summarize(self.profiles, self.rows)

    @mock.patch("apps.visualization.services.summarizer.requests.post")
    def test_timeout(self, post):
        post.side_effect = requests.Timeout()

        with self.assertRaisesMessage(SummaryError, "timeout"):
            self.summarizer.summarize(self.profiles, self.rows)

    @mock.patch("apps.visualization.services.summarizer.requests.post")
    def test_unexpected_response_structure(self, post):
        for payload in ({"choices": []}, {"response": ""}, ["response"]):
            post.return_value = self._response(payload)
            with self.assertRaisesMessage(SummaryError, "Unexpected response"):
                self.summarizer.summarize(self.profiles, self.rows)

    @mock.patch("apps.visualization.services.summarizer.requests.post")
    def test_invalid_json(self, post):
        response = self._response(None)
        response.json.side_effect = ValueError("Expecting value")
        post.return_value = response

        with self.assertRaises(SummaryError):
            self.summarizer.summarize(self.profiles, self.rows)

    def test_explicit_arguments_win_over_settings(self):
        summarizer = DatasetSummarizer(endpoint="http://other/", model="m", timeout=1)
        self.assertEqual(
            (summarizer.endpoint, summarizer.model, summarizer.timeout),
            ("http://other/", "m", 1),
        )
