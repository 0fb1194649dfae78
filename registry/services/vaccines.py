"""Vaccine catalogue. The active list is cached until the next catalogue write."""
import logging

from django.conf import settings
from django.core.cache import cache
from django.db import transaction

from registry.exceptions import DuplicateResource, ResourceNotFound
from registry.models import Vaccine

logger = logging.getLogger(__name__)

ACTIVE_CACHE_KEY = 'vaccines:active'

EDITABLE_FIELDS = (
    'name', 'description', 'manufacturer', 'disease_prevented', 'dose_count',
    'minimum_age_months', 'storage_temperature_min', 'storage_temperature_max', 'is_active',
)


def _decimal(v):
    return str(v) if v is not None else None


def format_vaccine(v: Vaccine) -> dict:
    return {
        'id': v.id,
        'name': v.name,
        'description': v.description or None,
        'manufacturer': v.manufacturer or None,
        'diseasePrevented': v.disease_prevented,
        'doseCount': v.dose_count,
        'minimumAgeMonths': v.minimum_age_months,
        'storageTemperatureMin': _decimal(v.storage_temperature_min),
        'storageTemperatureMax': _decimal(v.storage_temperature_max),
        'isActive': v.is_active,
    }


def get_vaccine(vaccine_id: int) -> Vaccine:
    vaccine = Vaccine.objects.filter(id=vaccine_id).first()
    if vaccine is None:
        raise ResourceNotFound('Vaccine', 'id', vaccine_id)
    return vaccine


def get_vaccine_by_name(name: str) -> Vaccine:
    vaccine = Vaccine.objects.filter(name__iexact=name).first()
    if vaccine is None:
        raise ResourceNotFound('Vaccine', 'name', name)
    return vaccine


def active_vaccines_payload() -> list[dict]:
    """Formatted active catalogue, cached because every form loads it."""
    cached = cache.get(ACTIVE_CACHE_KEY)
    if cached is not None:
        return cached
    payload = [format_vaccine(v) for v in Vaccine.objects.filter(is_active=True).order_by('name')]
    cache.set(ACTIVE_CACHE_KEY, payload, settings.CATALOG_CACHE_SECONDS)
    return payload


def list_all_vaccines() -> list[Vaccine]:
    return list(Vaccine.objects.order_by('name'))


def search_by_disease(disease: str) -> list[Vaccine]:
    return list(
        Vaccine.objects.filter(is_active=True, disease_prevented__icontains=disease.strip()).order_by('name')
    )


def invalidate_catalog_cache() -> None:
    from registry.services.schedules import invalidate_schedule_cache

    cache.delete(ACTIVE_CACHE_KEY)
    invalidate_schedule_cache()


@transaction.atomic
def create_vaccine(**fields) -> Vaccine:
    name = fields['name']
    if Vaccine.objects.filter(name__iexact=name).exists():
        raise DuplicateResource('Vaccine', 'name', name)
    vaccine = Vaccine.objects.create(**{k: v for k, v in fields.items() if k in EDITABLE_FIELDS})
    transaction.on_commit(invalidate_catalog_cache)
    logger.info("vaccine %s created", vaccine.id)
    return vaccine


@transaction.atomic
def update_vaccine(vaccine_id: int, **fields) -> Vaccine:
    vaccine = get_vaccine(vaccine_id)
    name = fields.get('name')
    if name and name.lower() != vaccine.name.lower():
        if Vaccine.objects.filter(name__iexact=name).exclude(id=vaccine.id).exists():
            raise DuplicateResource('Vaccine', 'name', name)
    for field, value in fields.items():
        if field in EDITABLE_FIELDS:
            setattr(vaccine, field, value)
    vaccine.save()
    transaction.on_commit(invalidate_catalog_cache)
    return vaccine
