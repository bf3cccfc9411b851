from django.contrib import admin

from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'role', 'tenant_domain', 'is_active', 'date_joined')
    list_filter = ('role', 'tenant_domain', 'is_active')
    search_fields = ('email', 'first_name', 'last_name')
    readonly_fields = ('id', 'date_joined', 'updated_at', 'last_login')
    exclude = ('password',)
