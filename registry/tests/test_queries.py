import datetime

import pytest
from django.core.management import call_command
from django.utils import timezone

from registry.models import Appointment, ChildGuardian, Guardian, VaccineInventory
from registry.services import appointments, inventory

pytestmark = pytest.mark.django_db


@pytest.fixture
def guardian(db):
    return Guardian.objects.create(first_name='Rosa', last_name='Benitez', document_number='7000001',
                                   phone='0981555555', relationship='Madre')


# Children and guardians

def test_children_without_guardians(client_for, nurse, child, guardian):
    client = client_for(nurse)
    resp = client.get('/api/v1/children/without-guardians')
    assert [c['id'] for c in resp.data] == [child.id]
    assert resp.data[0]['guardianCount'] == 0

    ChildGuardian.objects.create(child=child, guardian=guardian)
    assert client.get('/api/v1/children/without-guardians').data == []


def test_soft_deleted_children_do_not_count_for_guardians(client_for, nurse, doctor, child, guardian):
    ChildGuardian.objects.create(child=child, guardian=guardian)
    client = client_for(nurse)
    assert client.get(f'/api/v1/guardians/{guardian.id}').data['childCount'] == 1
    assert client.get('/api/v1/guardians/without-children').data == []

    assert client_for(doctor).delete(f'/api/v1/children/{child.id}').status_code == 204

    assert client.get(f'/api/v1/guardians/{guardian.id}').data['childCount'] == 0
    orphans = client.get('/api/v1/guardians/without-children').data
    assert [g['id'] for g in orphans] == [guardian.id]
    assert client.get(f'/api/v1/guardians/{guardian.id}/children').data == []


# Schedules

def test_schedule_queries_after_seeding(client_for, parent, django_capture_on_commit_callbacks):
    client = client_for(parent)
    assert client.get('/api/v1/schedules/paraguay').data == []

    with django_capture_on_commit_callbacks(execute=True):
        call_command('load_pai_schedule')

    paraguay = client.get('/api/v1/schedules/paraguay').data
    assert len(paraguay) == 24
    ages = [s['recommendedAgeMonths'] for s in paraguay]
    assert ages == sorted(ages)
    assert client.get('/api/v1/schedules/country/py').data == paraguay
    assert client.get('/api/v1/schedules/country/AR').data == []

    resp = client.get('/api/v1/schedules/mandatory', {'ageMonths': 4})
    assert len(resp.data) == 10
    assert max(s['recommendedAgeMonths'] for s in resp.data) == 4


def test_vaccine_edit_refreshes_cached_payloads(client_for, doctor, vaccine, schedule,
                                                django_capture_on_commit_callbacks):
    client = client_for(doctor)
    assert {s['vaccineName'] for s in client.get('/api/v1/schedules/paraguay').data} == {'Rotavirus'}
    assert [v['name'] for v in client.get('/api/v1/vaccines').data] == ['Rotavirus']

    with django_capture_on_commit_callbacks(execute=True):
        resp = client.put(f'/api/v1/vaccines/{vaccine.id}', {'name': 'Rotavirus RV1'}, format='json')
    assert resp.status_code == 200

    assert {s['vaccineName'] for s in client.get('/api/v1/schedules/paraguay').data} == {'Rotavirus RV1'}
    assert [v['name'] for v in client.get('/api/v1/vaccines').data] == ['Rotavirus RV1']


# Inventory

def test_expiring_and_low_stock_queries(client_for, nurse, doctor, vaccine, batch):
    today = timezone.localdate()
    soon = VaccineInventory.objects.create(vaccine=vaccine, batch_number='RV-SOON', quantity=30,
                                           expiration_date=today + datetime.timedelta(days=10), received_by=doctor)
    low = VaccineInventory.objects.create(vaccine=vaccine, batch_number='RV-LOW', quantity=3,
                                          expiration_date=today + datetime.timedelta(days=100), received_by=doctor)
    VaccineInventory.objects.create(vaccine=vaccine, batch_number='RV-RECALL', quantity=2,
                                    status=VaccineInventory.STATUS_RECALLED,
                                    expiration_date=today + datetime.timedelta(days=5), received_by=doctor)
    VaccineInventory.objects.create(vaccine=vaccine, batch_number='RV-EMPTY', quantity=0,
                                    status=VaccineInventory.STATUS_DEPLETED,
                                    expiration_date=today + datetime.timedelta(days=200), received_by=doctor)
    client = client_for(nurse)

    assert [b['id'] for b in client.get('/api/v1/inventory/expiring').data] == [soon.id]
    assert [b['id'] for b in client.get('/api/v1/inventory/expiring', {'days': 120}).data] == [soon.id, low.id]
    assert [b['id'] for b in client.get('/api/v1/inventory/low-stock').data] == [low.id]
    assert [b['id'] for b in client.get('/api/v1/inventory/low-stock', {'threshold': 25}).data] == [low.id, batch.id]


def test_quantity_edits_leave_expired_batch_expired(doctor, batch):
    batch.status = VaccineInventory.STATUS_EXPIRED
    batch.save()
    assert inventory.set_quantity(batch.id, 0, user=doctor).status == VaccineInventory.STATUS_EXPIRED
    assert inventory.set_quantity(batch.id, 5, user=doctor).status == VaccineInventory.STATUS_EXPIRED

    batch.refresh_from_db()
    batch.decrease_quantity(5)
    assert (batch.quantity, batch.status) == (0, VaccineInventory.STATUS_EXPIRED)


# Appointments

def _book(child, user, delta, **extra):
    return Appointment.objects.create(child=child, appointment_type='VACCINATION', created_by=user,
                                      appointment_date=timezone.now() + delta, **extra)


def test_generic_status_update_skips_confirmation(client_for, nurse, parent, child):
    appointment = _book(child, parent, datetime.timedelta(days=20))
    resp = client_for(nurse).put(f'/api/v1/appointments/{appointment.id}/status',
                                 {'status': 'COMPLETED'}, format='json')
    assert resp.status_code == 200
    assert resp.data['status'] == 'COMPLETED'
    assert appointments.get_appointment(appointment.id).status == Appointment.STATUS_COMPLETED


def test_upcoming_and_range_queries(client_for, nurse, parent, child):
    nxt = _book(child, parent, datetime.timedelta(days=2))
    later = _book(child, parent, datetime.timedelta(days=40), status=Appointment.STATUS_CONFIRMED)
    _book(child, parent, datetime.timedelta(days=5), status=Appointment.STATUS_CANCELLED)
    past = _book(child, parent, -datetime.timedelta(days=3))
    client = client_for(nurse)

    assert [a['id'] for a in client.get('/api/v1/appointments/upcoming').data] == [nxt.id, later.id]

    now = timezone.now()
    resp = client.get('/api/v1/appointments/range', {
        'start': (now - datetime.timedelta(days=7)).isoformat(),
        'end': (now + datetime.timedelta(days=3)).isoformat(),
    })
    assert resp.status_code == 200
    assert [a['id'] for a in resp.data] == [past.id, nxt.id]

    resp = client.get('/api/v1/appointments/range', {
        'start': now.isoformat(), 'end': (now - datetime.timedelta(days=1)).isoformat(),
    })
    assert resp.status_code == 400


def test_reschedule_into_the_past_is_rejected(client_for, nurse, parent, child):
    appointment = _book(child, parent, datetime.timedelta(days=20))
    original = appointment.appointment_date
    resp = client_for(nurse).put(f'/api/v1/appointments/{appointment.id}', {
        'appointmentDate': (timezone.now() - datetime.timedelta(days=1)).isoformat(),
    }, format='json')
    assert resp.status_code == 400
    assert resp.data['message'] == 'Appointment date must be in the future'
    appointment.refresh_from_db()
    assert appointment.appointment_date == original
