"""
Dose administration.

Recording a dose checks the child, vaccine, batch and optional schedule
entry, then deducts one dose from the batch inside the same transaction.
"""
import datetime
import logging
from typing import Optional

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from registry.exceptions import BusinessRuleViolation, ResourceNotFound
from registry.models import Child, VaccinationRecord, VaccinationSchedule, Vaccine
from registry.services.audit import VACCINATION_RECORDED, log_action
from registry.services.children import get_child
from registry.services.inventory import deduct_dose
from registry.services.vaccines import get_vaccine

logger = logging.getLogger(__name__)

User = get_user_model()

DEFAULT_DAYS_AHEAD = 30


def format_record(r: VaccinationRecord) -> dict:
    return {
        'id': r.id,
        'childId': r.child_id,
        'childName': r.child.full_name,
        'vaccineId': r.vaccine_id,
        'vaccineName': r.vaccine.name,
        'scheduleId': r.schedule_id,
        'doseNumber': r.dose_number,
        'administrationDate': r.administration_date.isoformat(),
        'batchNumber': r.batch_number,
        'expirationDate': r.expiration_date.isoformat() if r.expiration_date else None,
        'administeredById': r.administered_by_id,
        'administeredByName': r.administered_by.get_full_name() or r.administered_by.username,
        'administrationSite': r.administration_site or None,
        'notes': r.notes or None,
        'nextDoseDate': r.next_dose_date.isoformat() if r.next_dose_date else None,
        'createdAt': r.created_at.isoformat() if r.created_at else None,
    }


def _qs():
    return VaccinationRecord.objects.select_related('child', 'vaccine', 'administered_by')


@transaction.atomic
def create_record(*, child_id: int, vaccine_id: int, administered_by_id: int, dose_number: int,
                  administration_date: datetime.date, batch_number: str,
                  expiration_date: Optional[datetime.date] = None, schedule_id: Optional[int] = None,
                  administration_site: str = '', notes: str = '',
                  next_dose_date: Optional[datetime.date] = None) -> VaccinationRecord:
    child = Child.objects.filter(id=child_id).first()
    if child is None:
        raise ResourceNotFound('Child', 'id', child_id)
    if child.is_deleted:
        raise BusinessRuleViolation('Cannot create vaccination record for deleted child')

    vaccine = Vaccine.objects.filter(id=vaccine_id).first()
    if vaccine is None:
        raise ResourceNotFound('Vaccine', 'id', vaccine_id)
    if not vaccine.is_active:
        raise BusinessRuleViolation('Cannot administer inactive vaccine')

    administrator = User.objects.filter(id=administered_by_id).first()
    if administrator is None:
        raise ResourceNotFound('User', 'id', administered_by_id)

    if expiration_date and expiration_date <= administration_date:
        raise BusinessRuleViolation('Expiration date must be after administration date')

    batch = deduct_dose(vaccine, batch_number)
    if batch is None:
        logger.warning("batch %s of vaccine %s not in inventory; recording without deduction",
                       batch_number, vaccine.id)

    schedule = None
    if schedule_id is not None:
        schedule = VaccinationSchedule.objects.filter(id=schedule_id).first()
        if schedule is None:
            raise ResourceNotFound('Vaccination schedule', 'id', schedule_id)
        if schedule.vaccine_id != vaccine.id:
            raise BusinessRuleViolation('Schedule entry does not belong to the administered vaccine')

    record = VaccinationRecord.objects.create(
        child=child,
        vaccine=vaccine,
        schedule=schedule,
        dose_number=dose_number,
        administration_date=administration_date,
        batch_number=batch_number,
        expiration_date=expiration_date,
        administered_by=administrator,
        administration_site=administration_site or '',
        notes=notes or '',
        next_dose_date=next_dose_date,
    )
    log_action(user=administrator, action=VACCINATION_RECORDED, object_type='vaccination_record',
               object_id=record.id,
               detail={'childId': child.id, 'vaccineId': vaccine.id, 'dose': dose_number,
                       'batchNumber': batch_number, 'inventoryId': batch.id if batch else None})
    logger.info("dose %s of vaccine %s recorded for child %s", dose_number, vaccine.id, child.id)
    return record


def get_record(record_id: int) -> VaccinationRecord:
    record = _qs().filter(id=record_id).first()
    if record is None:
        raise ResourceNotFound('Vaccination record', 'id', record_id)
    return record


def records_for_child(child_id: int) -> list[VaccinationRecord]:
    child = get_child(child_id)
    return list(_qs().filter(child=child).order_by('-administration_date', '-id'))


def records_for_vaccine(vaccine_id: int) -> list[VaccinationRecord]:
    vaccine = get_vaccine(vaccine_id)
    return list(_qs().filter(vaccine=vaccine).order_by('-administration_date', '-id'))


def records_for_batch(batch_number: str) -> list[VaccinationRecord]:
    return list(_qs().filter(batch_number=batch_number).order_by('-administration_date', '-id'))


def upcoming_doses(days_ahead: int = DEFAULT_DAYS_AHEAD) -> list[VaccinationRecord]:
    today = timezone.localdate()
    return list(
        _qs().filter(
            next_dose_date__range=(today, today + datetime.timedelta(days=days_ahead)),
            child__deleted_at__isnull=True,
        ).order_by('next_dose_date', 'id')
    )
