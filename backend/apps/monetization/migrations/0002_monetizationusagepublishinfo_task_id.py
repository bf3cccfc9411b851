from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("monetization", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="monetizationusagepublishinfo",
            name="task_id",
            field=models.CharField(
                blank=True,
                help_text="Celery task that owns the current or most recent run",
                max_length=255,
            ),
        ),
    ]
