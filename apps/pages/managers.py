from django.db import models


class DatasetManager(models.Manager):
    def for_user(self, user):
        return self.filter(user=user)

    def create_with_analysis(self, **kwargs):
        dataset = self.create(**kwargs)

        from .tasks import analyze_dataset_task

        analyze_dataset_task.delay(dataset.id)

        return dataset
