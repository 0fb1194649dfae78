from rest_framework import serializers

from registry.serializers.common import CleanCharField

STATUSES = ['SCHEDULED', 'CONFIRMED', 'COMPLETED', 'CANCELLED', 'NO_SHOW']


class AppointmentSerializer(serializers.Serializer):
    childId = serializers.IntegerField(source='child_id', min_value=1)
    appointmentDate = serializers.DateTimeField(source='appointment_date')
    appointmentType = CleanCharField(source='appointment_type', max_length=50)
    assignedToId = serializers.IntegerField(source='assigned_to_id', min_value=1, required=False, allow_null=True)
    scheduledVaccines = CleanCharField(source='scheduled_vaccines', required=False, allow_blank=True, max_length=500)
    notes = CleanCharField(required=False, allow_blank=True, max_length=2000)


class AppointmentUpdateSerializer(serializers.Serializer):
    appointmentDate = serializers.DateTimeField(source='appointment_date', required=False)
    appointmentType = CleanCharField(source='appointment_type', max_length=50, required=False)
    assignedToId = serializers.IntegerField(source='assigned_to_id', min_value=1, required=False)
    scheduledVaccines = CleanCharField(source='scheduled_vaccines', required=False, allow_blank=True, max_length=500)
    notes = CleanCharField(required=False, allow_blank=True, max_length=2000)


class AppointmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=STATUSES)
