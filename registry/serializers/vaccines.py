from decimal import Decimal

from rest_framework import serializers

from registry.serializers.common import CleanCharField


class VaccineSerializer(serializers.Serializer):
    name = CleanCharField(min_length=2, max_length=100)
    description = CleanCharField(required=False, allow_blank=True, max_length=2000)
    manufacturer = CleanCharField(required=False, allow_blank=True, max_length=100)
    diseasePrevented = CleanCharField(source='disease_prevented', max_length=200)
    doseCount = serializers.IntegerField(source='dose_count', min_value=1, max_value=20, required=False)
    minimumAgeMonths = serializers.IntegerField(source='minimum_age_months', min_value=0, max_value=1200, required=False)
    storageTemperatureMin = serializers.DecimalField(
        source='storage_temperature_min', max_digits=4, decimal_places=1,
        min_value=Decimal('-99.9'), max_value=Decimal('99.9'), required=False, allow_null=True,
    )
    storageTemperatureMax = serializers.DecimalField(
        source='storage_temperature_max', max_digits=4, decimal_places=1,
        min_value=Decimal('-99.9'), max_value=Decimal('99.9'), required=False, allow_null=True,
    )
    isActive = serializers.BooleanField(source='is_active', required=False)

    def validate(self, attrs):
        low = attrs.get('storage_temperature_min')
        high = attrs.get('storage_temperature_max')
        if low is not None and high is not None and low > high:
            raise serializers.ValidationError({'storageTemperatureMax': 'Maximum temperature must not be below minimum'})
        return attrs


class DiseaseQuerySerializer(serializers.Serializer):
    disease = CleanCharField(min_length=2, max_length=100)


class MandatoryQuerySerializer(serializers.Serializer):
    ageMonths = serializers.IntegerField(min_value=0, max_value=1200)
    country = serializers.RegexField(r'^[A-Za-z]{2}$', required=False)
