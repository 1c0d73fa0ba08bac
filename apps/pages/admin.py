from django.contrib import admin
from django.contrib.admin import register

from .models import DatasetUploadModel


# Register your models here.
@register(DatasetUploadModel)
class DatasetUploadAdmin(admin.ModelAdmin):
    list_display = ["name", "user", "status", "summary_status", "uploaded_at"]
    list_filter = ["status", "summary_status", "user"]
    readonly_fields = ["metadata", "summary"]
