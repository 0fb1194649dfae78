"""
Django admin registrations for the registry models.

Superusers can inspect and correct data via ``/admin/``.  Children are
listed including soft-deleted rows so they can be audited.
"""

from django.contrib import admin

from .models import (
    User,
    Guardian,
    Child,
    ChildGuardian,
    Vaccine,
    VaccinationSchedule,
    VaccinationRecord,
    VaccineInventory,
    Appointment,
    Notification,
    AuditEvent,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'email', 'is_active', 'last_login')
    list_filter = ('role', 'is_active')
    search_fields = ('username', 'first_name', 'last_name', 'email', 'license_number')


@admin.register(Guardian)
class GuardianAdmin(admin.ModelAdmin):
    list_display = ('id', 'first_name', 'last_name', 'document_number', 'relationship', 'user')
    search_fields = ('first_name', 'last_name', 'document_number', 'phone')


class ChildGuardianInline(admin.TabularInline):
    model = ChildGuardian
    extra = 0


@admin.register(Child)
class ChildAdmin(admin.ModelAdmin):
    list_display = ('id', 'first_name', 'last_name', 'document_number', 'date_of_birth', 'deleted_at')
    list_filter = ('gender',)
    search_fields = ('first_name', 'last_name', 'document_number')
    inlines = [ChildGuardianInline]


@admin.register(Vaccine)
class VaccineAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'manufacturer', 'dose_count', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('name', 'disease_prevented')


@admin.register(VaccinationSchedule)
class VaccinationScheduleAdmin(admin.ModelAdmin):
    list_display = ('vaccine', 'country_code', 'dose_number', 'recommended_age_months', 'is_mandatory')
    list_filter = ('country_code', 'is_mandatory')
    search_fields = ('vaccine__name',)


@admin.register(VaccinationRecord)
class VaccinationRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'child', 'vaccine', 'dose_number', 'administration_date', 'batch_number', 'administered_by')
    list_filter = ('vaccine',)
    search_fields = ('child__document_number', 'batch_number')


@admin.register(VaccineInventory)
class VaccineInventoryAdmin(admin.ModelAdmin):
    list_display = ('id', 'vaccine', 'batch_number', 'quantity', 'expiration_date', 'status')
    list_filter = ('status', 'vaccine')
    search_fields = ('batch_number', 'vaccine__name')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'child', 'appointment_date', 'appointment_type', 'status', 'assigned_to', 'created_by')
    list_filter = ('status', 'appointment_type')
    search_fields = ('child__document_number', 'created_by__username')


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('id', 'recipient_type', 'recipient_id', 'notification_type', 'title', 'is_read', 'sent_at')
    list_filter = ('notification_type', 'is_read')
    search_fields = ('title',)


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'object_type', 'object_id', 'user', 'created_at')
    list_filter = ('action',)
    search_fields = ('object_type',)
