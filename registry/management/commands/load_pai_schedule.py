from django.core.management.base import BaseCommand
from django.db import transaction

from registry.models import Vaccine, VaccinationSchedule
from registry.services.schedules import PARAGUAY
from registry.services.vaccines import invalidate_catalog_cache

# name -> (description, disease prevented, dose count, minimum age in months)
VACCINES = {
    'BCG': ('Bacilo Calmette-Guérin', 'Tuberculosis', 1, 0),
    'Hepatitis B': ('Hepatitis B recombinante', 'Hepatitis B', 3, 0),
    'Pentavalente': ('DPT+HB+Hib', 'Difteria, Tos ferina, Tétanos, Hepatitis B, Haemophilus influenzae tipo b', 3, 2),
    'IPV': ('Vacuna inactivada contra polio', 'Poliomielitis', 3, 2),
    'bOPV': ('Vacuna oral bivalente contra polio', 'Poliomielitis', 2, 18),
    'Rotavirus': ('Vacuna contra rotavirus', 'Gastroenteritis por rotavirus', 2, 2),
    'Neumococo': ('PCV13 - Vacuna conjugada neumocócica', 'Infecciones por neumococo', 3, 2),
    'SPR': ('Triple viral - Sarampión, Paperas, Rubéola', 'Sarampión, Paperas, Rubéola', 2, 12),
    'Varicela': ('Vacuna contra varicela', 'Varicela', 1, 18),
    'Fiebre Amarilla': ('Vacuna contra fiebre amarilla', 'Fiebre amarilla', 1, 12),
    'DPT': ('Triple bacteriana - refuerzo', 'Difteria, Tos ferina, Tétanos', 1, 18),
    'VPH': ('Virus del Papiloma Humano', 'Cáncer cervical y verrugas genitales', 2, 132),
}

# (vaccine, dose, recommended age, range start, range end, notes)
SCHEDULE = [
    ('BCG', 1, 0, 0, 1, 'Aplicar al nacer'),
    ('Hepatitis B', 1, 0, 0, 1, 'Primera dosis al nacer'),
    ('Pentavalente', 1, 2, 2, 3, 'Primera dosis'),
    ('IPV', 1, 2, 2, 3, 'Primera dosis'),
    ('Rotavirus', 1, 2, 2, 3, 'Primera dosis'),
    ('Neumococo', 1, 2, 2, 3, 'Primera dosis'),
    ('Pentavalente', 2, 4, 4, 5, 'Segunda dosis'),
    ('IPV', 2, 4, 4, 5, 'Segunda dosis'),
    ('Rotavirus', 2, 4, 4, 5, 'Segunda dosis'),
    ('Neumococo', 2, 4, 4, 5, 'Segunda dosis'),
    ('Pentavalente', 3, 6, 6, 8, 'Tercera dosis'),
    ('IPV', 3, 6, 6, 8, 'Tercera dosis'),
    ('Neumococo', 3, 6, 6, 8, 'Tercera dosis'),
    ('Hepatitis B', 2, 6, 6, 8, 'Segunda dosis de Hepatitis B'),
    ('SPR', 1, 12, 12, 15, 'Primera dosis'),
    ('Fiebre Amarilla', 1, 12, 12, 15, 'Dosis única'),
    ('Hepatitis B', 3, 12, 12, 15, 'Tercera dosis de Hepatitis B'),
    ('Varicela', 1, 18, 18, 24, 'Dosis única'),
    ('SPR', 2, 18, 18, 24, 'Segunda dosis (refuerzo)'),
    ('DPT', 1, 18, 18, 24, 'Refuerzo'),
    ('bOPV', 1, 18, 18, 24, 'Primera dosis de refuerzo'),
    ('bOPV', 2, 48, 48, 60, 'Segunda dosis de refuerzo'),
    ('VPH', 1, 132, 132, 144, 'Primera dosis - principalmente para niñas'),
    ('VPH', 2, 138, 138, 150, 'Segunda dosis - 6 meses después de la primera'),
]


class Command(BaseCommand):
    help = "Seed the Paraguayan PAI vaccines and schedule (idempotent)."

    @transaction.atomic
    def handle(self, *args, **opts):
        by_name = {}
        for name, (description, disease, doses, min_age) in VACCINES.items():
            vaccine, created = Vaccine.objects.update_or_create(
                name=name,
                defaults={
                    'description': description,
                    'disease_prevented': disease,
                    'dose_count': doses,
                    'minimum_age_months': min_age,
                    'is_active': True,
                },
            )
            by_name[name] = vaccine
            self.stdout.write(f"{'created' if created else 'updated'}: {name}")

        for name, dose, age, start, end, notes in SCHEDULE:
            VaccinationSchedule.objects.update_or_create(
                vaccine=by_name[name], country_code=PARAGUAY, dose_number=dose,
                defaults={
                    'recommended_age_months': age,
                    'age_range_start_months': start,
                    'age_range_end_months': end,
                    'is_mandatory': True,
                    'notes': notes,
                },
            )

        transaction.on_commit(invalidate_catalog_cache)
        self.stdout.write(self.style.SUCCESS(
            f"PAI schedule loaded: {len(VACCINES)} vaccines, {len(SCHEDULE)} doses."
        ))
