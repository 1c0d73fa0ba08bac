from django import forms

from apps.visualization.services.aggregator import ChartConfig

from .models import DatasetUploadModel


class DatasetUploadForm(forms.ModelForm):
    class Meta:
        model = DatasetUploadModel
        fields = ["file"]

    def __init__(self, *args, **kwargs):
        super(DatasetUploadForm, self).__init__(*args, **kwargs)
        self.fields["file"].label = "Choose File"

    def clean_file(self):
        upload = self.cleaned_data["file"]
        content_type = getattr(upload, "content_type", None)
        allowed = ("text/csv", "application/vnd.ms-excel")
        if content_type and content_type not in allowed:
            raise forms.ValidationError("Please upload a CSV file.")
        return upload


class ChartConfigForm(forms.Form):
    """
    Chart kind and axes picked by the user.

    Values are free-form on purpose: a kind or column that does not fit just
    aggregates to an empty result.
    """

    chart_kind = forms.CharField(required=False)
    x_axis = forms.CharField(required=False)
    y_axis = forms.CharField(required=False)

    def to_config(self, default: ChartConfig) -> ChartConfig:
        data = self.cleaned_data if self.is_valid() else {}
        return ChartConfig(
            chart_kind=data.get("chart_kind") or default.chart_kind,
            x_axis=data.get("x_axis") or default.x_axis,
            y_axis=data.get("y_axis") or default.y_axis,
        )
