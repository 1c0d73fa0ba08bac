from django.urls import include, path

from . import views

dashboard_urlpatterns = [
    path("datasets/", views.DatasetListView.as_view(), name="datasets"),
    path("datasets/upload/", views.DatasetUploadView.as_view(), name="dataset-upload"),
    path(
        "datasets/<int:pk>/", views.DatasetDetailView.as_view(), name="dataset-detail"
    ),
    path(
        "datasets/<int:pk>/chart-data/",
        views.ChartDataView.as_view(),
        name="dataset-chart-data",
    ),
    path(
        "datasets/<int:pk>/summary/",
        views.DatasetSummaryView.as_view(),
        name="dataset-summary",
    ),
]

urlpatterns = [
    path(
        "dashboard/",
        include((dashboard_urlpatterns, "dashboard"), namespace="dashboard"),
    ),
]
