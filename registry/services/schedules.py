"""National schedule queries; per-country payloads are cached."""
from typing import Optional

from django.conf import settings
from django.core.cache import cache

from registry.models import VaccinationSchedule
from registry.services.vaccines import get_vaccine

PARAGUAY = 'PY'


def _cache_key(country_code: str) -> str:
    return f"schedules:country={country_code}"


def format_schedule(s: VaccinationSchedule) -> dict:
    return {
        'id': s.id,
        'vaccineId': s.vaccine_id,
        'vaccineName': s.vaccine.name,
        'countryCode': s.country_code,
        'doseNumber': s.dose_number,
        'recommendedAgeMonths': s.recommended_age_months,
        'ageRangeStartMonths': s.age_range_start_months,
        'ageRangeEndMonths': s.age_range_end_months,
        'isMandatory': s.is_mandatory,
        'notes': s.notes or None,
    }


def _ordered(qs):
    return qs.select_related('vaccine').order_by('recommended_age_months', 'dose_number', 'vaccine__name')


def schedules_for_country(country_code: Optional[str] = None) -> list[VaccinationSchedule]:
    code = (country_code or settings.PAI_COUNTRY_CODE).upper()
    return list(_ordered(VaccinationSchedule.objects.filter(country_code=code)))


def country_schedule_payload(country_code: Optional[str] = None) -> list[dict]:
    code = (country_code or settings.PAI_COUNTRY_CODE).upper()
    key = _cache_key(code)
    cached = cache.get(key)
    if cached is not None:
        return cached
    payload = [format_schedule(s) for s in schedules_for_country(code)]
    cache.set(key, payload, settings.CATALOG_CACHE_SECONDS)
    return payload


def paraguay_schedule_payload() -> list[dict]:
    return country_schedule_payload(PARAGUAY)


def schedules_for_vaccine(vaccine_id: int) -> list[VaccinationSchedule]:
    vaccine = get_vaccine(vaccine_id)
    return list(_ordered(VaccinationSchedule.objects.filter(vaccine=vaccine)))


def mandatory_up_to_age(age_months: int, country_code: Optional[str] = None) -> list[VaccinationSchedule]:
    code = (country_code or settings.PAI_COUNTRY_CODE).upper()
    return list(_ordered(VaccinationSchedule.objects.filter(
        country_code=code, is_mandatory=True, recommended_age_months__lte=age_months,
    )))


def all_schedules() -> list[VaccinationSchedule]:
    return list(_ordered(VaccinationSchedule.objects.all()))


def invalidate_schedule_cache() -> None:
    codes = set(VaccinationSchedule.objects.values_list('country_code', flat=True))
    codes.add(settings.PAI_COUNTRY_CODE)
    cache.delete_many([_cache_key(c) for c in codes])
