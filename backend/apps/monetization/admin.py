from django.contrib import admin

from .models import MonetizationUsagePublishInfo


@admin.register(MonetizationUsagePublishInfo)
class MonetizationUsagePublishInfoAdmin(admin.ModelAdmin):
    list_display = ('id', 'state', 'status', 'started_time', 'last_publish_time', 'updated_at')
    list_filter = ('state', 'status')
    readonly_fields = ('id', 'updated_at')
