import uuid
from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("events", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="TrackingLink",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("name", models.CharField(max_length=150)),
                (
                    "destination_kind",
                    models.CharField(
                        choices=[("event", "Event"), ("organization", "Organization")],
                        max_length=20,
                    ),
                ),
                ("destination_id", models.UUIDField(db_index=True)),
                ("code", models.CharField(db_index=True, max_length=32)),
                (
                    "path",
                    models.CharField(help_text="Public path, always derived from the code.", max_length=64),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("paused", "Paused"), ("disabled", "Disabled")],
                        default="active",
                        max_length=20,
                    ),
                ),
                (
                    "icon_key",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("instagram", "Instagram"),
                            ("facebook", "Facebook"),
                            ("x", "X"),
                            ("linkedin", "Linkedin"),
                            ("google", "Google"),
                            ("youtube", "Youtube"),
                            ("snapchat", "Snapchat"),
                            ("reddit", "Reddit"),
                            ("tiktok", "Tiktok"),
                            ("telegram", "Telegram"),
                        ],
                        max_length=20,
                        null=True,
                    ),
                ),
                ("icon_url", models.URLField(blank=True, max_length=500, null=True)),
                ("views", models.PositiveIntegerField(default=0)),
                ("tickets_sold", models.PositiveIntegerField(default=0)),
                ("revenue", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=12)),
                ("archived", models.BooleanField(db_index=True, default=False)),
                ("last_viewed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="tracking_links",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "organization",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tracking_links",
                        to="events.organization",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("organization", "code"), name="unique_tracking_code_per_organization"
                    )
                ],
            },
        ),
    ]
