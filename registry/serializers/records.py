from rest_framework import serializers

from registry.serializers.common import CleanCharField


class VaccinationRecordSerializer(serializers.Serializer):
    childId = serializers.IntegerField(source='child_id', min_value=1)
    vaccineId = serializers.IntegerField(source='vaccine_id', min_value=1)
    scheduleId = serializers.IntegerField(source='schedule_id', min_value=1, required=False, allow_null=True)
    doseNumber = serializers.IntegerField(source='dose_number', min_value=1, max_value=20)
    administrationDate = serializers.DateField(source='administration_date')
    batchNumber = CleanCharField(source='batch_number', max_length=50)
    expirationDate = serializers.DateField(source='expiration_date', required=False, allow_null=True)
    administrationSite = CleanCharField(source='administration_site', max_length=50, required=False, allow_blank=True)
    notes = CleanCharField(required=False, allow_blank=True, max_length=2000)
    nextDoseDate = serializers.DateField(source='next_dose_date', required=False, allow_null=True)

    def validate(self, attrs):
        nxt = attrs.get('next_dose_date')
        if nxt and nxt <= attrs['administration_date']:
            raise serializers.ValidationError({'nextDoseDate': 'Next dose date must be after administration date'})
        return attrs


class UpcomingQuerySerializer(serializers.Serializer):
    daysAhead = serializers.IntegerField(min_value=0, max_value=365, required=False, default=30)


class EligibilityQuerySerializer(serializers.Serializer):
    childId = serializers.IntegerField(min_value=1)
    vaccineId = serializers.IntegerField(min_value=1)
