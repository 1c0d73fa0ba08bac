import logging

from celery import shared_task
from django.conf import settings

from apps.pages.models import DatasetUploadModel, StatusChoices
from apps.visualization.constants import EMPTY_DATASET_MESSAGE
from apps.visualization.exceptions import SummaryError
from apps.visualization.services.summarizer import DatasetSummarizer
from apps.visualization.services.visualizer_service import VisualizationService
from apps.visualization.utils import convert_numpy

logger = logging.getLogger(__name__)


@shared_task
def analyze_dataset_task(dataset_id):
    dataset = DatasetUploadModel.objects.get(id=dataset_id)
    service = VisualizationService()

    try:
        analysis = service.analyze_dataset(dataset)

        if not analysis["columns"]:
            dataset.status = StatusChoices.FAILED
            dataset.error = EMPTY_DATASET_MESSAGE
            dataset.save(update_fields=["status", "error"])
            return

        dataset.metadata = convert_numpy(analysis)
        dataset.status = StatusChoices.COMPLETED
        dataset.error = None
        dataset.save(update_fields=["metadata", "status", "error"])

    except Exception as e:
        logger.exception("Profiling failed for dataset %s", dataset_id)
        dataset.status = StatusChoices.FAILED
        dataset.error = f"Error parsing file: {e}"
        dataset.save(update_fields=["status", "error"])
        raise

    summarize_dataset_task.delay(dataset.id)


@shared_task(bind=True, max_retries=settings.LLM_MAX_RETRIES)
def summarize_dataset_task(self, dataset_id):
    dataset = DatasetUploadModel.objects.get(id=dataset_id)
    summarizer = DatasetSummarizer()

    try:
        summary = summarizer.summarize(dataset.get_profiles, dataset.get_rows)
    except SummaryError as e:
        if self.request.retries >= self.max_retries:
            logger.error(
                "All %d LLM attempts failed for dataset %s: %s",
                self.max_retries + 1,
                dataset_id,
                e,
            )
            dataset.summary_status = StatusChoices.FAILED
            dataset.save(update_fields=["summary_status"])
            return

        wait_time = 2**self.request.retries  # 1s, 2s, 4s
        logger.warning(
            "LLM summary failed for dataset %s (attempt %d), retrying in %ds: %s",
            dataset_id,
            self.request.retries + 1,
            wait_time,
            e,
        )
        raise self.retry(exc=e, countdown=wait_time)

    dataset.summary = summary
    dataset.summary_status = StatusChoices.COMPLETED
    dataset.save(update_fields=["summary", "summary_status"])
    logger.info("Stored summary for dataset %s", dataset_id)
