from decimal import Decimal

from django.utils import timezone
from rest_framework import serializers

from registry.serializers.common import CleanCharField, NameField


class ChildSerializer(serializers.Serializer):
    firstName = NameField(source='first_name')
    lastName = NameField(source='last_name')
    documentNumber = serializers.RegexField(
        r'^\d{6,8}$', source='document_number',
        error_messages={'invalid': 'Document number must have 6 to 8 digits'},
    )
    dateOfBirth = serializers.DateField(source='date_of_birth')
    gender = serializers.ChoiceField(choices=['M', 'F', 'O'])
    bloodType = serializers.CharField(source='blood_type', max_length=10, required=False, allow_blank=True)
    birthWeight = serializers.DecimalField(
        source='birth_weight', max_digits=4, decimal_places=2,
        min_value=Decimal('0'), max_value=Decimal('99.99'), required=False, allow_null=True,
    )
    birthHeight = serializers.DecimalField(
        source='birth_height', max_digits=4, decimal_places=2,
        min_value=Decimal('0'), max_value=Decimal('99.99'), required=False, allow_null=True,
    )

    def validate_dateOfBirth(self, v):
        if v >= timezone.localdate():
            raise serializers.ValidationError('Date of birth must be in the past')
        return v


class ChildSearchQuerySerializer(serializers.Serializer):
    query = CleanCharField(min_length=2, max_length=100)


class GuardianSerializer(serializers.Serializer):
    firstName = NameField(source='first_name')
    lastName = NameField(source='last_name')
    documentNumber = serializers.RegexField(
        r'^\d{6,8}$', source='document_number',
        error_messages={'invalid': 'Document number must have 6 to 8 digits'},
    )
    phone = serializers.RegexField(r'^\+?[\d\s-]{6,20}$', max_length=20)
    email = serializers.EmailField(required=False, allow_blank=True)
    address = CleanCharField(required=False, allow_blank=True, max_length=500)
    relationship = CleanCharField(max_length=50)
    userId = serializers.IntegerField(source='user_id', min_value=1, required=False, allow_null=True)


class GuardianSearchQuerySerializer(serializers.Serializer):
    query = CleanCharField(min_length=2, max_length=100)
