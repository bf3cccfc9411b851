import uuid

import django.db.models.deletion
from django.db import migrations, models

import backend.apps.gateway_policies.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CommonOperationPolicy",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_domain", models.CharField(db_index=True, max_length=255)),
                ("name", models.CharField(max_length=255)),
                ("version", models.CharField(default="v1", max_length=30)),
                ("display_name", models.CharField(blank=True, max_length=255)),
                ("description", models.TextField(blank=True)),
                (
                    "applicable_flows",
                    models.JSONField(
                        default=backend.apps.gateway_policies.models.default_applicable_flows,
                        help_text="Flows this policy may be attached to",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "common operation policy",
                "verbose_name_plural": "common operation policies",
                "ordering": ["name", "version"],
            },
        ),
        migrations.AddConstraint(
            model_name="commonoperationpolicy",
            constraint=models.UniqueConstraint(
                fields=("tenant_domain", "name", "version"), name="unique_common_policy_per_tenant"
            ),
        ),
        migrations.CreateModel(
            name="GatewayPolicyMapping",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_domain", models.CharField(db_index=True, max_length=255)),
                ("display_name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "gateway policy mapping",
                "verbose_name_plural": "gateway policy mappings",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="GatewayPolicyMappingEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "direction",
                    models.CharField(
                        choices=[("request", "Request"), ("response", "Response"), ("fault", "Fault")],
                        max_length=10,
                    ),
                ),
                ("order", models.PositiveIntegerField(default=1)),
                ("parameters", models.JSONField(blank=True, default=dict)),
                (
                    "mapping",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="policies",
                        to="gateway_policies.gatewaypolicymapping",
                    ),
                ),
                (
                    "policy",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="mapping_entries",
                        to="gateway_policies.commonoperationpolicy",
                    ),
                ),
            ],
            options={
                "verbose_name": "gateway policy mapping entry",
                "verbose_name_plural": "gateway policy mapping entries",
                "ordering": ["direction", "order"],
            },
        ),
        migrations.CreateModel(
            name="GatewayPolicyDeployment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tenant_domain", models.CharField(max_length=255)),
                ("gateway_label", models.CharField(max_length=255)),
                ("deployed_at", models.DateTimeField(auto_now_add=True)),
                (
                    "mapping",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="deployments",
                        to="gateway_policies.gatewaypolicymapping",
                    ),
                ),
            ],
            options={
                "verbose_name": "gateway policy deployment",
                "verbose_name_plural": "gateway policy deployments",
                "ordering": ["gateway_label"],
            },
        ),
        migrations.AddConstraint(
            model_name="gatewaypolicydeployment",
            constraint=models.UniqueConstraint(
                fields=("tenant_domain", "gateway_label"), name="unique_mapping_per_gateway"
            ),
        ),
    ]
