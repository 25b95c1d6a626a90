# Generated manually for initial schema.
from __future__ import annotations

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Response",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("form_id", models.CharField(db_index=True, max_length=64)),
                ("user_id", models.IntegerField()),
                ("submitted_at", models.DateTimeField()),
            ],
            options={"ordering": ["-submitted_at", "id"]},
        ),
        migrations.CreateModel(
            name="ResponseDetail",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("question_id", models.CharField(max_length=64)),
                ("answer", models.TextField(blank=True)),
                ("position", models.PositiveIntegerField(default=0)),
                (
                    "response",
                    models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="details", to="submissions.response"),
                ),
            ],
            options={"ordering": ["position", "id"]},
        ),
        migrations.CreateModel(
            name="FileAttachment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("question_id", models.CharField(max_length=64)),
                ("file_name", models.CharField(max_length=255)),
                ("file_type", models.CharField(max_length=255)),
                ("file_size", models.BigIntegerField(default=0)),
                ("base64_content", models.TextField()),
                ("uploaded_at", models.DateTimeField()),
                (
                    "response",
                    models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="attachments", to="submissions.response"),
                ),
            ],
            options={
                "ordering": ["id"],
                "indexes": [models.Index(fields=["response", "question_id"], name="attachment_response_question_idx")],
            },
        ),
    ]
