import apps.workers.models
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="WorkerProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("display_name", models.CharField(max_length=150, verbose_name="Display name")),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("plumbing", "Plumbing"),
                            ("electrical", "Electrical"),
                            ("cleaning", "Cleaning"),
                            ("gardening", "Gardening"),
                            ("other", "Other"),
                        ],
                        max_length=20,
                        verbose_name="Category",
                    ),
                ),
                (
                    "other_category",
                    models.CharField(
                        blank=True,
                        help_text="Service name shown when the category is 'other'.",
                        max_length=100,
                        verbose_name="Other category",
                    ),
                ),
                ("description", models.TextField(verbose_name="Description")),
                ("service_area", models.CharField(max_length=255, verbose_name="Service area")),
                (
                    "hourly_rate",
                    models.PositiveIntegerField(
                        validators=[django.core.validators.MinValueValidator(0)],
                        verbose_name="Hourly rate",
                    ),
                ),
                ("phone_number", models.CharField(max_length=20, verbose_name="Phone number")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                (
                    "profile_image",
                    models.ImageField(
                        blank=True,
                        upload_to=apps.workers.models.worker_image_upload_to,
                        verbose_name="Profile image",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="worker_profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Worker profile",
                "verbose_name_plural": "Worker profiles",
                "ordering": ["display_name", "owner_id"],
                "indexes": [
                    models.Index(fields=["category", "is_active"], name="workers_wor_categor_3b1c2e_idx"),
                    models.Index(fields=["hourly_rate"], name="workers_wor_hourly__8f0d4a_idx"),
                ],
            },
        ),
    ]
