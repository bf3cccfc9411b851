from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="MonetizationUsagePublishInfo",
            fields=[
                (
                    "id",
                    models.CharField(
                        default="USAGE_PUBLISHER_JOB",
                        editable=False,
                        max_length=100,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "state",
                    models.CharField(
                        choices=[("INITIATED", "Initiated"), ("RUNNING", "Running"), ("IDLE", "Idle")],
                        default="INITIATED",
                        max_length=20,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("INPROGRESS", "In progress"), ("ACCEPTED", "Accepted"), ("ERROR", "Error")],
                        default="INPROGRESS",
                        max_length=20,
                    ),
                ),
                (
                    "started_time",
                    models.DateTimeField(help_text="When the current or most recent publishing run started"),
                ),
                (
                    "last_publish_time",
                    models.DateTimeField(help_text="Usage up to this instant has been published"),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "monetization usage publish info",
                "verbose_name_plural": "monetization usage publish info",
            },
        ),
    ]
