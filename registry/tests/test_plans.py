import datetime
from decimal import Decimal

import pytest

from registry.models import Child, VaccinationRecord, VaccinationSchedule, Vaccine
from registry.services import plans

pytestmark = pytest.mark.django_db

TODAY = datetime.date(2024, 7, 20)


@pytest.fixture
def infant(db):
    # Six months old on TODAY
    return Child.objects.create(first_name='Ema', last_name='Rojas', document_number='5550001',
                                date_of_birth=datetime.date(2024, 1, 15), gender='F')


def give(child, vaccine, dose, user, on=TODAY):
    return VaccinationRecord.objects.create(child=child, vaccine=vaccine, dose_number=dose,
                                            administration_date=on, batch_number='X', administered_by=user)


def test_add_months_clamps_to_month_end():
    assert plans.add_months(datetime.date(2024, 1, 31), 1) == datetime.date(2024, 2, 29)
    assert plans.add_months(datetime.date(2024, 11, 15), 3) == datetime.date(2025, 2, 15)
    assert plans.add_months(datetime.date(2024, 3, 10), -60) == datetime.date(2019, 3, 10)


def test_pending_and_completion(infant, vaccine, schedule, doctor):
    pending = plans.pending_doses(infant, today=TODAY)
    assert [(p.schedule.dose_number, p.overdue) for p in pending] == [(1, True), (2, True)]
    assert plans.completion_percentage(infant, today=TODAY) == Decimal('0.00')

    give(infant, vaccine, 1, doctor)
    assert [p.schedule.dose_number for p in plans.pending_doses(infant, today=TODAY)] == [2]
    assert plans.completion_percentage(infant, today=TODAY) == Decimal('50.00')


def test_grace_month_before_overdue(vaccine, schedule):
    # Five months old: the 4-month dose is pending but within the grace month
    child = Child.objects.create(first_name='Ian', last_name='Vera', document_number='5550002',
                                 date_of_birth=datetime.date(2024, 2, 15), gender='M')
    flags = {p.schedule.dose_number: p.overdue for p in plans.pending_doses(child, today=TODAY)}
    assert flags == {1: True, 2: False}


def test_newborn_has_nothing_applicable(vaccine, schedule):
    child = Child.objects.create(first_name='Noa', last_name='Vera', document_number='5550003',
                                 date_of_birth=TODAY - datetime.timedelta(days=5), gender='O')
    assert plans.pending_doses(child, today=TODAY) == []
    assert plans.completion_percentage(child, today=TODAY) == Decimal('100.00')
    assert plans.next_appointment_date(child, today=TODAY) == datetime.date(2024, 9, 15)


def test_vaccination_status_summary(infant, vaccine, schedule):
    later = Vaccine.objects.create(name='SPR', disease_prevented='Sarampión')
    VaccinationSchedule.objects.create(vaccine=later, country_code='PY', dose_number=1, recommended_age_months=12)
    status = plans.vaccination_status(infant.id, today=TODAY)
    assert status['ageInMonths'] == 6
    assert status['completionPercentage'] == '0.00'
    assert status['overdueCount'] == 2
    assert status['nextAppointmentDate'] == '2025-01-15'
    assert [p['vaccineName'] for p in status['pending']] == ['Rotavirus', 'Rotavirus']


def test_eligibility_reasons(infant, vaccine, schedule, batch, doctor):
    assert plans.check_eligibility(infant.id, vaccine.id, today=TODAY) == {
        'childId': infant.id, 'vaccineId': vaccine.id, 'eligible': True, 'reason': None, 'nextDoseNumber': 1,
    }

    give(infant, vaccine, 1, doctor)
    give(infant, vaccine, 2, doctor)
    result = plans.check_eligibility(infant.id, vaccine.id, today=TODAY)
    assert not result['eligible']
    assert result['reason'] == 'All doses already administered'


def test_eligibility_too_young_and_no_stock(vaccine, schedule):
    baby = Child.objects.create(first_name='Leo', last_name='Paz', document_number='5550004',
                                date_of_birth=datetime.date(2024, 6, 1), gender='M')
    assert plans.check_eligibility(baby.id, vaccine.id, today=TODAY)['reason'] == 'Child is too young for this vaccine'

    older = Child.objects.create(first_name='Mia', last_name='Paz', document_number='5550005',
                                 date_of_birth=datetime.date(2023, 6, 1), gender='F')
    assert plans.check_eligibility(older.id, vaccine.id, today=TODAY)['reason'] == 'No stock available'


def test_coverage_counts_live_children_under_five(infant, vaccine, doctor):
    Child.objects.create(first_name='Old', last_name='Kid', document_number='5550006',
                         date_of_birth=datetime.date(2015, 1, 1), gender='M')
    gone = Child.objects.create(first_name='Gone', last_name='Kid', document_number='5550007',
                                date_of_birth=datetime.date(2023, 1, 1), gender='M')
    gone.soft_delete()
    gone.save()
    Child.objects.create(first_name='Not', last_name='Yet', document_number='5550008',
                         date_of_birth=datetime.date(2022, 5, 5), gender='F')
    give(infant, vaccine, 1, doctor, on=datetime.date(2024, 7, 1))

    result = plans.coverage(datetime.date(2024, 7, 1), TODAY)
    assert result['totalChildren'] == 2
    assert result['vaccinatedChildren'] == 1
    assert result['coveragePercentage'] == '50.00'
