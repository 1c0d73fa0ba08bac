from functools import cached_property

from django.conf import settings
from django.core.validators import FileExtensionValidator
from django.db import models

from apps.pages.managers import DatasetManager
from apps.visualization.services.analyzer import DatasetAnalyzer
from apps.visualization.services.loader import DatasetLoader
from apps.visualization.services.profiler import ColumnProfile
from apps.visualization.utils import convert_numpy


# Create your models here.
class TimestampedModel(models.Model):
    uploaded_at = models.DateTimeField(auto_now_add=True)
    edited_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class StatusChoices(models.TextChoices):
    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"


class DatasetUploadModel(TimestampedModel):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="uploads"
    )
    name = models.CharField(max_length=255, null=True, blank=True)
    file = models.FileField(
        upload_to="uploads/datasets/",
        validators=[FileExtensionValidator(allowed_extensions=["csv"])],
    )

    metadata = models.JSONField(null=True, blank=True)

    status = models.CharField(
        choices=StatusChoices.choices,
        default=StatusChoices.PENDING,
        max_length=255,
    )
    error = models.TextField(null=True, blank=True)

    summary = models.TextField(null=True, blank=True)
    summary_status = models.CharField(
        choices=StatusChoices.choices,
        default=StatusChoices.PENDING,
        max_length=255,
    )

    objects = DatasetManager()

    class Meta:
        ordering = ["-uploaded_at"]
        indexes = [
            models.Index(
                fields=["user", "-uploaded_at"], name="dataset_user_uploaded_idx"
            ),
        ]

    def save(self, *args, **kwargs):
        if self.file and not self.name:
            self.name = self.file.name
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name or f"dataset-{self.pk}"

    @cached_property
    def get_rows(self):
        return DatasetLoader.load_from_model(self)

    @property
    def get_metadata(self):
        if self.metadata:
            return self.metadata

        self.metadata = convert_numpy(DatasetAnalyzer().analyze(self.get_rows))
        self.save(update_fields=["metadata"])
        return self.metadata

    @property
    def get_profiles(self):
        return [
            ColumnProfile.from_dict(column) for column in self.get_metadata["columns"]
        ]
