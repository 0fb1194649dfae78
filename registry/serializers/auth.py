from rest_framework import serializers

from registry.serializers.common import NameField


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False)

    def validate_username(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Username is required')
        return v


class RegisterSerializer(serializers.Serializer):
    username = serializers.RegexField(r'^[\w.@+-]+$', min_length=3, max_length=50)
    password = serializers.CharField(min_length=6, max_length=128, trim_whitespace=False, write_only=True)
    email = serializers.EmailField(max_length=254)
    firstName = NameField(source='first_name')
    lastName = NameField(source='last_name')
    role = serializers.ChoiceField(choices=['DOCTOR', 'NURSE', 'PARENT'])
    licenseNumber = serializers.CharField(source='license_number', max_length=50, required=False, allow_blank=True)


class RefreshSerializer(serializers.Serializer):
    refreshToken = serializers.CharField()


class LogoutSerializer(serializers.Serializer):
    refreshToken = serializers.CharField(required=False)
