# FILE: backend/apps/monetization/serializers.py
from rest_framework import serializers

from .models import MonetizationUsagePublishInfo


class PublishStatusSerializer(serializers.Serializer):
    """Outcome of a publish trigger request."""
    status = serializers.CharField(read_only=True)
    message = serializers.CharField(read_only=True)


class MonetizationUsagePublishInfoSerializer(serializers.ModelSerializer):
    """State of the most recent usage publishing run."""
    startedTime = serializers.DateTimeField(source='started_time', read_only=True)
    lastPublishTime = serializers.DateTimeField(source='last_publish_time', read_only=True)

    class Meta:
        model = MonetizationUsagePublishInfo
        fields = ['state', 'status', 'startedTime', 'lastPublishTime']
        read_only_fields = fields
