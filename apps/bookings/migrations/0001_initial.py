import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("job_details", models.TextField(verbose_name="Job details")),
                (
                    "date_time",
                    models.CharField(
                        help_text="As entered by the client, e.g. 'Monday, Feb 10, 2026 at 2:00 PM'.",
                        max_length=100,
                        verbose_name="Requested date and time",
                    ),
                ),
                ("location", models.CharField(max_length=255, verbose_name="Location")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("requested", "Requested"),
                            ("accepted", "Accepted"),
                            ("declined", "Declined"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="requested",
                        max_length=20,
                    ),
                ),
                ("status_changed_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "client",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="client_bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "worker",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="worker_bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["-created_at", "-id"],
                "indexes": [models.Index(fields=["status"], name="bookings_bo_status_5c1f0e_idx")],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("client", models.F("worker")), _negated=True),
                        name="booking_client_is_not_worker",
                    )
                ],
            },
        ),
    ]
