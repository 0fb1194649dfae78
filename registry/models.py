"""
Database models for the vaccination registry.

Children and their guardians, the vaccine catalogue with its national
schedule, administered doses, stock batches, appointments and user
notifications.  Children are never physically removed: a non-null
``deleted_at`` marks them as gone and :meth:`ChildQuerySet.active` must be
used by every query that lists live records.
"""
from __future__ import annotations

import datetime

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone

from .exceptions import BusinessRuleViolation, InsufficientStock


class User(AbstractUser):
    """Staff or parent account.

    Doctors and nurses operate the registry; parents can follow their own
    children's records and book appointments.
    """
    ROLE_DOCTOR = 'DOCTOR'
    ROLE_NURSE = 'NURSE'
    ROLE_PARENT = 'PARENT'
    ROLE_CHOICES = [
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_NURSE, 'Nurse'),
        (ROLE_PARENT, 'Parent'),
    ]
    MEDICAL_ROLES = (ROLE_DOCTOR, ROLE_NURSE)

    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_PARENT, db_index=True)
    license_number = models.CharField(max_length=50, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def is_medical_staff(self) -> bool:
        return self.role in self.MEDICAL_ROLES

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Guardian(models.Model):
    """Adult responsible for one or more children.

    A guardian may optionally own a :class:`User` account, which is how
    parents reach their children through the API.
    """
    user = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='guardian_profiles'
    )
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    document_number = models.CharField(max_length=20, unique=True)
    phone = models.CharField(max_length=20)
    email = models.EmailField(blank=True)
    address = models.TextField(blank=True)
    relationship = models.CharField(max_length=50)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __str__(self) -> str:
        return f"{self.full_name} ({self.document_number})"


class ChildQuerySet(models.QuerySet):
    def active(self):
        return self.filter(deleted_at__isnull=True)


class Child(models.Model):
    GENDER_CHOICES = [
        ('M', 'Male'),
        ('F', 'Female'),
        ('O', 'Other'),
    ]

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    document_number = models.CharField(max_length=20, unique=True)
    date_of_birth = models.DateField(db_index=True)
    gender = models.CharField(max_length=1, choices=GENDER_CHOICES)
    blood_type = models.CharField(max_length=10, blank=True)
    birth_weight = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    birth_height = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    guardians = models.ManyToManyField(Guardian, through='ChildGuardian', related_name='children', blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    # Soft delete marker; null means the child is live
    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = ChildQuerySet.as_manager()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        self.deleted_at = timezone.now()

    def age_in_months(self, on: datetime.date | None = None) -> int:
        """Whole months elapsed since birth (years * 12 + remaining months)."""
        on = on or timezone.localdate()
        months = (on.year - self.date_of_birth.year) * 12 + (on.month - self.date_of_birth.month)
        if on.day < self.date_of_birth.day:
            months -= 1
        return max(months, 0)

    def __str__(self) -> str:
        return f"{self.full_name} ({self.document_number})"


class ChildGuardian(models.Model):
    """Join row between a child and one of its guardians."""
    child = models.ForeignKey(Child, on_delete=models.CASCADE, related_name='guardian_links')
    guardian = models.ForeignKey(Guardian, on_delete=models.CASCADE, related_name='child_links')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'child_guardians'
        constraints = [
            models.UniqueConstraint(fields=['child', 'guardian'], name='uniq_child_guardian'),
        ]

    def __str__(self) -> str:
        return f"{self.guardian_id} -> {self.child_id}"


class Vaccine(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    manufacturer = models.CharField(max_length=100, blank=True)
    disease_prevented = models.CharField(max_length=200)
    dose_count = models.PositiveSmallIntegerField(default=1)
    minimum_age_months = models.PositiveSmallIntegerField(default=0)
    storage_temperature_min = models.DecimalField(max_digits=4, decimal_places=1, null=True, blank=True)
    storage_temperature_max = models.DecimalField(max_digits=4, decimal_places=1, null=True, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.name


class VaccinationSchedule(models.Model):
    """Recommended timing of one dose of a vaccine in a national programme."""
    vaccine = models.ForeignKey(Vaccine, on_delete=models.CASCADE, related_name='schedules')
    country_code = models.CharField(max_length=2, default='PY', db_index=True)
    dose_number = models.PositiveSmallIntegerField()
    recommended_age_months = models.PositiveSmallIntegerField()
    age_range_start_months = models.PositiveSmallIntegerField(null=True, blank=True)
    age_range_end_months = models.PositiveSmallIntegerField(null=True, blank=True)
    is_mandatory = models.BooleanField(default=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['vaccine', 'country_code', 'dose_number'], name='uniq_schedule_vaccine_country_dose'
            ),
        ]

    def __str__(self) -> str:
        return f"{self.vaccine} dose {self.dose_number} @ {self.recommended_age_months}m ({self.country_code})"


class VaccinationRecord(models.Model):
    """One administered dose."""
    child = models.ForeignKey(Child, on_delete=models.PROTECT, related_name='vaccination_records')
    vaccine = models.ForeignKey(Vaccine, on_delete=models.PROTECT, related_name='records')
    schedule = models.ForeignKey(
        VaccinationSchedule, null=True, blank=True, on_delete=models.SET_NULL, related_name='records'
    )
    dose_number = models.PositiveSmallIntegerField()
    administration_date = models.DateField()
    batch_number = models.CharField(max_length=50, db_index=True)
    expiration_date = models.DateField(null=True, blank=True)
    administered_by = models.ForeignKey(User, on_delete=models.PROTECT, related_name='administered_records')
    administration_site = models.CharField(max_length=50, blank=True)
    notes = models.TextField(blank=True)
    next_dose_date = models.DateField(null=True, blank=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['child', 'administration_date'], name='record_child_date_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.vaccine} #{self.dose_number} -> child {self.child_id}"


class VaccineInventory(models.Model):
    """A received batch of one vaccine.

    Quantity changes go through :meth:`decrease_quantity` and
    :meth:`increase_quantity`, which only ever toggle between AVAILABLE and
    DEPLETED.  RESERVED, EXPIRED and RECALLED are set explicitly and stay
    put whatever happens to the quantity.
    """
    STATUS_AVAILABLE = 'AVAILABLE'
    STATUS_RESERVED = 'RESERVED'
    STATUS_DEPLETED = 'DEPLETED'
    STATUS_EXPIRED = 'EXPIRED'
    STATUS_RECALLED = 'RECALLED'
    STATUS_CHOICES = [
        (STATUS_AVAILABLE, 'Available'),
        (STATUS_RESERVED, 'Reserved'),
        (STATUS_DEPLETED, 'Depleted'),
        (STATUS_EXPIRED, 'Expired'),
        (STATUS_RECALLED, 'Recalled'),
    ]

    vaccine = models.ForeignKey(Vaccine, on_delete=models.PROTECT, related_name='inventory')
    batch_number = models.CharField(max_length=50)
    quantity = models.IntegerField(default=0)
    manufacture_date = models.DateField(null=True, blank=True)
    expiration_date = models.DateField(db_index=True)
    storage_location = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_AVAILABLE, db_index=True)
    received_date = models.DateField(default=timezone.localdate)
    received_by = models.ForeignKey(User, on_delete=models.PROTECT, related_name='received_batches')
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'vaccine inventory'
        constraints = [
            models.UniqueConstraint(fields=['vaccine', 'batch_number'], name='uniq_inventory_vaccine_batch'),
            models.CheckConstraint(condition=models.Q(quantity__gte=0), name='inventory_quantity_non_negative'),
        ]

    def decrease_quantity(self, amount: int) -> None:
        if amount < 0:
            raise BusinessRuleViolation('Amount must be positive')
        if self.quantity < amount:
            raise InsufficientStock(
                f"Insufficient quantity in batch {self.batch_number}: {self.quantity} available, {amount} requested"
            )
        self.quantity -= amount
        if self.quantity == 0 and self.status == self.STATUS_AVAILABLE:
            self.status = self.STATUS_DEPLETED

    def increase_quantity(self, amount: int) -> None:
        if amount < 0:
            raise BusinessRuleViolation('Amount must be positive')
        self.quantity += amount
        if self.status == self.STATUS_DEPLETED and self.quantity > 0:
            self.status = self.STATUS_AVAILABLE

    def is_expired(self, on: datetime.date | None = None) -> bool:
        return self.expiration_date < (on or timezone.localdate())

    def __str__(self) -> str:
        return f"{self.vaccine} batch {self.batch_number} ({self.quantity}, {self.status})"


class Appointment(models.Model):
    STATUS_SCHEDULED = 'SCHEDULED'
    STATUS_CONFIRMED = 'CONFIRMED'
    STATUS_COMPLETED = 'COMPLETED'
    STATUS_CANCELLED = 'CANCELLED'
    STATUS_NO_SHOW = 'NO_SHOW'
    STATUS_CHOICES = [
        (STATUS_SCHEDULED, 'Scheduled'),
        (STATUS_CONFIRMED, 'Confirmed'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_NO_SHOW, 'No show'),
    ]
    OPEN_STATUSES = (STATUS_SCHEDULED, STATUS_CONFIRMED)

    child = models.ForeignKey(Child, on_delete=models.PROTECT, related_name='appointments')
    appointment_date = models.DateTimeField(db_index=True)
    appointment_type = models.CharField(max_length=50)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_SCHEDULED, db_index=True)
    scheduled_vaccines = models.TextField(blank=True)
    assigned_to = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='assigned_appointments'
    )
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(User, on_delete=models.PROTECT, related_name='created_appointments')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.appointment_type} for child {self.child_id} at {self.appointment_date:%Y-%m-%d %H:%M}"


class Notification(models.Model):
    RECIPIENT_USER = 'USER'
    RECIPIENT_GUARDIAN = 'GUARDIAN'
    RECIPIENT_CHOICES = [
        (RECIPIENT_USER, 'User'),
        (RECIPIENT_GUARDIAN, 'Guardian'),
    ]
    TYPE_REMINDER = 'REMINDER'
    TYPE_ALERT = 'ALERT'
    TYPE_INFO = 'INFO'
    TYPE_WARNING = 'WARNING'
    TYPE_CHOICES = [
        (TYPE_REMINDER, 'Reminder'),
        (TYPE_ALERT, 'Alert'),
        (TYPE_INFO, 'Info'),
        (TYPE_WARNING, 'Warning'),
    ]

    recipient_id = models.BigIntegerField()
    recipient_type = models.CharField(max_length=10, choices=RECIPIENT_CHOICES, default=RECIPIENT_USER)
    notification_type = models.CharField(max_length=10, choices=TYPE_CHOICES, default=TYPE_INFO)
    title = models.CharField(max_length=200)
    message = models.TextField()
    reference_id = models.BigIntegerField(null=True, blank=True)
    reference_type = models.CharField(max_length=50, blank=True)
    is_read = models.BooleanField(default=False)
    sent_at = models.DateTimeField(auto_now_add=True)
    read_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        indexes = [
            models.Index(fields=['recipient_type', 'recipient_id', 'is_read'], name='notification_recipient_idx'),
        ]

    def mark_as_read(self) -> None:
        self.is_read = True
        self.read_at = timezone.now()

    def __str__(self) -> str:
        return f"[{self.notification_type}] {self.title} -> {self.recipient_type}:{self.recipient_id}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]
