from django.contrib import admin

from .models import (
    CommonOperationPolicy,
    GatewayPolicyDeployment,
    GatewayPolicyMapping,
    GatewayPolicyMappingEntry,
)


class GatewayPolicyMappingEntryInline(admin.TabularInline):
    model = GatewayPolicyMappingEntry
    extra = 0


class GatewayPolicyDeploymentInline(admin.TabularInline):
    model = GatewayPolicyDeployment
    extra = 0
    readonly_fields = ('deployed_at',)


@admin.register(CommonOperationPolicy)
class CommonOperationPolicyAdmin(admin.ModelAdmin):
    list_display = ('name', 'version', 'tenant_domain', 'display_name', 'created_at')
    list_filter = ('tenant_domain',)
    search_fields = ('name', 'display_name', 'description')
    readonly_fields = ('id', 'created_at')


@admin.register(GatewayPolicyMapping)
class GatewayPolicyMappingAdmin(admin.ModelAdmin):
    list_display = ('id', 'display_name', 'tenant_domain', 'created_at', 'updated_at')
    list_filter = ('tenant_domain',)
    search_fields = ('display_name', 'description')
    readonly_fields = ('id', 'created_at', 'updated_at')
    inlines = [GatewayPolicyMappingEntryInline, GatewayPolicyDeploymentInline]
