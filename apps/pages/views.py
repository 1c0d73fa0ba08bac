import logging

from django.contrib.auth.mixins import LoginRequiredMixin
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.generic import View

from apps.pages.forms import ChartConfigForm, DatasetUploadForm
from apps.pages.models import DatasetUploadModel, StatusChoices
from apps.visualization.services.aggregator import ChartConfig
from apps.visualization.services.visualizer_service import VisualizationService

logger = logging.getLogger(__name__)


def serialize_dataset(dataset):
    return {
        "id": dataset.pk,
        "name": dataset.name,
        "status": dataset.status,
        "error": dataset.error,
        "summary_status": dataset.summary_status,
        "uploaded_at": dataset.uploaded_at.isoformat(),
    }


class UserDatasetMixin(LoginRequiredMixin):
    def get_dataset(self, pk):
        return get_object_or_404(DatasetUploadModel, pk=pk, user=self.request.user)


class DatasetListView(UserDatasetMixin, View):
    def get(self, request):
        datasets = DatasetUploadModel.objects.for_user(request.user)
        return JsonResponse({"datasets": [serialize_dataset(d) for d in datasets]})


class DatasetUploadView(UserDatasetMixin, View):
    def post(self, request):
        form = DatasetUploadForm(request.POST, request.FILES)

        if not form.is_valid():
            return JsonResponse({"errors": form.errors.get_json_data()}, status=400)

        dataset = DatasetUploadModel.objects.create_with_analysis(
            user=request.user, file=form.cleaned_data["file"]
        )
        logger.info("Dataset %s uploaded by %s", dataset.pk, request.user)

        return JsonResponse(serialize_dataset(dataset), status=201)


class DatasetDetailView(UserDatasetMixin, View):
    def get(self, request, pk):
        dataset = self.get_dataset(pk)
        payload = serialize_dataset(dataset)

        if dataset.status != StatusChoices.COMPLETED:
            payload.update(
                {
                    "overview": None,
                    "columns": [],
                    "default_chart": None,
                    "eligible_columns": {},
                    "summary": dataset.summary,
                }
            )
            return JsonResponse(payload)

        service = VisualizationService()
        profiles = dataset.get_profiles

        payload.update(
            {
                "overview": dataset.get_metadata["dataset_overview"],
                "columns": dataset.get_metadata["columns"],
                "default_chart": service.default_config(profiles).to_dict(),
                "eligible_columns": service.eligible_columns(profiles),
                "summary": dataset.summary,
            }
        )
        return JsonResponse(payload)


class ChartDataView(UserDatasetMixin, View):
    def get(self, request, pk):
        dataset = self.get_dataset(pk)

        if dataset.status != StatusChoices.COMPLETED:
            return JsonResponse({"chart": ChartConfig().to_dict(), "data": []})

        service = VisualizationService()
        profiles = dataset.get_profiles

        form = ChartConfigForm(request.GET)
        config = form.to_config(default=service.default_config(profiles))

        data = service.chart_data(dataset.get_rows, profiles, config)
        return JsonResponse({"chart": config.to_dict(), "data": data})


class DatasetSummaryView(UserDatasetMixin, View):
    def get(self, request, pk):
        dataset = self.get_dataset(pk)
        return JsonResponse(
            {"summary": dataset.summary, "summary_status": dataset.summary_status}
        )

    def post(self, request, pk):
        dataset = self.get_dataset(pk)

        if dataset.status != StatusChoices.COMPLETED:
            return JsonResponse(
                {"error": "Dataset has not been profiled yet."}, status=409
            )

        dataset.summary_status = StatusChoices.PENDING
        dataset.save(update_fields=["summary_status"])

        from .tasks import summarize_dataset_task

        summarize_dataset_task.delay(dataset.pk)

        return JsonResponse({"summary_status": dataset.summary_status}, status=202)
