import bleach
from rest_framework import serializers


def clean_text(v):
    return bleach.clean((v or '').strip(), tags=set(), strip=True)


class CleanCharField(serializers.CharField):
    """CharField that strips markup before length checks apply."""

    def to_internal_value(self, data):
        return super().to_internal_value(clean_text(str(data)) if data is not None else data)


class NameField(CleanCharField):
    def __init__(self, **kwargs):
        kwargs.setdefault('min_length', 2)
        kwargs.setdefault('max_length', 100)
        super().__init__(**kwargs)


class DateRangeQuerySerializer(serializers.Serializer):
    startDate = serializers.DateField()
    endDate = serializers.DateField()

    def validate(self, attrs):
        if attrs['startDate'] > attrs['endDate']:
            raise serializers.ValidationError({'endDate': 'End date must not be before start date'})
        return attrs


class DateTimeRangeQuerySerializer(serializers.Serializer):
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()

    def validate(self, attrs):
        if attrs['start'] > attrs['end']:
            raise serializers.ValidationError({'end': 'End must not be before start'})
        return attrs
