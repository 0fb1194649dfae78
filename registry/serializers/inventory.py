from rest_framework import serializers

from registry.serializers.common import CleanCharField

STATUSES = ['AVAILABLE', 'RESERVED', 'DEPLETED', 'EXPIRED', 'RECALLED']


class InventoryBatchSerializer(serializers.Serializer):
    vaccineId = serializers.IntegerField(source='vaccine_id', min_value=1)
    batchNumber = CleanCharField(source='batch_number', max_length=50)
    quantity = serializers.IntegerField(min_value=0)
    manufactureDate = serializers.DateField(source='manufacture_date', required=False, allow_null=True)
    expirationDate = serializers.DateField(source='expiration_date')
    storageLocation = CleanCharField(source='storage_location', max_length=100, required=False, allow_blank=True)
    receivedDate = serializers.DateField(source='received_date', required=False, allow_null=True)
    notes = CleanCharField(required=False, allow_blank=True, max_length=2000)


class QuantityUpdateSerializer(serializers.Serializer):
    # Negative values are rejected by the service with a business error
    quantity = serializers.IntegerField()


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=STATUSES)


class ExpiringQuerySerializer(serializers.Serializer):
    days = serializers.IntegerField(min_value=0, max_value=365, required=False)


class LowStockQuerySerializer(serializers.Serializer):
    threshold = serializers.IntegerField(min_value=1, required=False)
