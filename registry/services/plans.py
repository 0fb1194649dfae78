"""
Per-child immunization plan derived from the national schedule.

A schedule entry is *applicable* once the child has reached its
recommended age and *satisfied* when a record exists for the same vaccine
and dose number.  An applicable, unsatisfied entry is pending; it is
overdue once the child is more than ``OVERDUE_GRACE_MONTHS`` past the
recommended age.
"""
from __future__ import annotations

import calendar
import datetime
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from django.conf import settings
from django.db.models import Sum
from django.utils import timezone

from registry.exceptions import ResourceNotFound
from registry.models import Child, VaccinationRecord, VaccinationSchedule, VaccineInventory
from registry.services.children import get_child
from registry.services.vaccines import get_vaccine

OVERDUE_GRACE_MONTHS = 1
FALLBACK_APPOINTMENT_DAYS = 7
COVERAGE_AGE_MONTHS = 60


@dataclass
class PendingDose:
    schedule: VaccinationSchedule
    overdue: bool


def add_months(day: datetime.date, months: int) -> datetime.date:
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    return datetime.date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def _country_schedule(country_code: Optional[str] = None):
    code = (country_code or settings.PAI_COUNTRY_CODE).upper()
    return VaccinationSchedule.objects.filter(country_code=code).select_related('vaccine')


def _given_doses(child: Child) -> set[tuple[int, int]]:
    return set(VaccinationRecord.objects.filter(child=child).values_list('vaccine_id', 'dose_number'))


def pending_doses(child: Child, *, today: Optional[datetime.date] = None) -> list[PendingDose]:
    age = child.age_in_months(today)
    given = _given_doses(child)
    pending = []
    for entry in _country_schedule().filter(recommended_age_months__lte=age).order_by(
            'recommended_age_months', 'dose_number', 'vaccine__name'):
        if (entry.vaccine_id, entry.dose_number) in given:
            continue
        pending.append(PendingDose(entry, age > entry.recommended_age_months + OVERDUE_GRACE_MONTHS))
    return pending


def completion_percentage(child: Child, *, today: Optional[datetime.date] = None) -> Decimal:
    age = child.age_in_months(today)
    applicable = list(_country_schedule().filter(recommended_age_months__lte=age)
                      .values_list('vaccine_id', 'dose_number'))
    if not applicable:
        return Decimal('100.00')
    given = _given_doses(child)
    done = sum(1 for key in applicable if key in given)
    return (Decimal(done) * 100 / Decimal(len(applicable))).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def next_appointment_date(child: Child, *, today: Optional[datetime.date] = None) -> Optional[datetime.date]:
    """Birth date plus the next unrecorded scheduled age, or a week out if that already passed."""
    today = today or timezone.localdate()
    age = child.age_in_months(today)
    given = _given_doses(child)
    upcoming = [
        entry.recommended_age_months
        for entry in _country_schedule().filter(recommended_age_months__gt=age)
        if (entry.vaccine_id, entry.dose_number) not in given
    ]
    if not upcoming:
        return None
    suggested = add_months(child.date_of_birth, min(upcoming))
    if suggested < today:
        suggested = today + datetime.timedelta(days=FALLBACK_APPOINTMENT_DAYS)
    return suggested


def vaccination_status(child_id: int, *, today: Optional[datetime.date] = None) -> dict:
    child = get_child(child_id)
    pending = pending_doses(child, today=today)
    nxt = next_appointment_date(child, today=today)
    return {
        'childId': child.id,
        'childName': child.full_name,
        'ageInMonths': child.age_in_months(today),
        'completionPercentage': str(completion_percentage(child, today=today)),
        'overdueCount': sum(1 for p in pending if p.overdue),
        'nextAppointmentDate': nxt.isoformat() if nxt else None,
        'pending': [
            {
                'scheduleId': p.schedule.id,
                'vaccineId': p.schedule.vaccine_id,
                'vaccineName': p.schedule.vaccine.name,
                'doseNumber': p.schedule.dose_number,
                'recommendedAgeMonths': p.schedule.recommended_age_months,
                'isMandatory': p.schedule.is_mandatory,
                'overdue': p.overdue,
            }
            for p in pending
        ],
    }


def available_stock(vaccine_id: int, *, today: Optional[datetime.date] = None) -> int:
    today = today or timezone.localdate()
    total = VaccineInventory.objects.filter(
        vaccine_id=vaccine_id,
        status=VaccineInventory.STATUS_AVAILABLE,
        expiration_date__gte=today,
        quantity__gt=0,
    ).aggregate(total=Sum('quantity'))['total']
    return total or 0


def check_eligibility(child_id: int, vaccine_id: int, *, today: Optional[datetime.date] = None) -> dict:
    """Whether the next dose of a vaccine can be given to a child right now."""
    child = Child.objects.filter(id=child_id).first()
    if child is None:
        raise ResourceNotFound('Child', 'id', child_id)
    vaccine = get_vaccine(vaccine_id)

    def answer(reason: Optional[str], next_dose: Optional[int] = None) -> dict:
        return {
            'childId': child.id,
            'vaccineId': vaccine.id,
            'eligible': reason is None,
            'reason': reason,
            'nextDoseNumber': next_dose,
        }

    if child.is_deleted:
        return answer('Child is inactive')
    if not vaccine.is_active:
        return answer('Vaccine is inactive')
    entries = list(_country_schedule().filter(vaccine=vaccine).order_by('recommended_age_months', 'dose_number'))
    if not entries:
        return answer('Vaccine is not in the schedule')
    if child.age_in_months(today) < entries[0].recommended_age_months:
        return answer('Child is too young for this vaccine')
    given = VaccinationRecord.objects.filter(child=child, vaccine=vaccine).count()
    if given >= len(entries):
        return answer('All doses already administered')
    if available_stock(vaccine.id, today=today) == 0:
        return answer('No stock available')
    return answer(None, given + 1)


def coverage(start: datetime.date, end: datetime.date) -> dict:
    """Share of live children aged 0-5 at ``end`` vaccinated within [start, end]."""
    born_after = add_months(end, -COVERAGE_AGE_MONTHS)
    cohort = Child.objects.active().filter(date_of_birth__range=(born_after, end))
    total = cohort.count()
    vaccinated = VaccinationRecord.objects.filter(
        child__in=cohort, administration_date__range=(start, end)
    ).values('child_id').distinct().count()
    pct = Decimal('0.00') if total == 0 else (
        Decimal(vaccinated) * 100 / Decimal(total)
    ).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    return {
        'startDate': start.isoformat(),
        'endDate': end.isoformat(),
        'totalChildren': total,
        'vaccinatedChildren': vaccinated,
        'coveragePercentage': str(pct),
    }
