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
            name="AppSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("app_name", models.CharField(default="HandyConnect", max_length=100)),
                (
                    "maintenance_mode",
                    models.BooleanField(
                        default=False,
                        help_text="When enabled, non-admin users cannot access the application.",
                    ),
                ),
                (
                    "subscription_fee_cents",
                    models.PositiveIntegerField(
                        default=999,
                        help_text="One-time subscription fee charged during onboarding, in cents.",
                    ),
                ),
                ("subscription_currency", models.CharField(default="usd", max_length=3)),
                ("admin_sign_in_title", models.CharField(default="Welcome to the Admin Portal", max_length=200)),
                (
                    "admin_sign_in_subtitle",
                    models.TextField(
                        blank=True,
                        default="Please enter your credentials to access the admin console.",
                    ),
                ),
                (
                    "admin_sign_in_helper_text",
                    models.TextField(
                        blank=True,
                        default="Contact your super admin if you encounter login issues.",
                    ),
                ),
                ("stripe_secret_key", models.CharField(blank=True, max_length=255)),
                ("stripe_allowed_countries", models.JSONField(blank=True, default=list)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Application settings",
                "verbose_name_plural": "Application settings",
            },
        ),
        migrations.CreateModel(
            name="AdminCredentials",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("username", models.CharField(blank=True, max_length=150)),
                ("password", models.CharField(blank=True, max_length=128)),
                ("recovery_phone", models.CharField(blank=True, max_length=20)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Admin credentials",
                "verbose_name_plural": "Admin credentials",
            },
        ),
        migrations.CreateModel(
            name="AdminSession",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="admin_sessions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Admin session",
                "verbose_name_plural": "Admin sessions",
                "ordering": ["-created_at"],
            },
        ),
    ]
