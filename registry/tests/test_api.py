"""
Integration tests for the vaccination registry API.

These exercise soft delete, role based access, dose administration
against stock, inventory edits and appointment booking through the HTTP
layer with DRF's APIClient.
"""
import datetime

from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from ..models import (
    Appointment,
    AuditEvent,
    Child,
    ChildGuardian,
    Guardian,
    User,
    VaccinationRecord,
    VaccinationSchedule,
    Vaccine,
    VaccineInventory,
)


class RegistryAPITests(APITestCase):
    def setUp(self) -> None:
        """Create one user per role, a child with a guardian and a stocked vaccine."""
        self.doctor = User.objects.create_user(username='doc', password='P@ssw0rd1', role='DOCTOR')
        self.nurse = User.objects.create_user(username='nurse', password='P@ssw0rd1', role='NURSE')
        self.parent = User.objects.create_user(username='parent', password='P@ssw0rd1', role='PARENT')

        self.today = timezone.localdate()
        self.child = Child.objects.create(
            first_name='Sofia', last_name='Acosta', document_number='4567890',
            date_of_birth=self.today - datetime.timedelta(days=400), gender='F',
        )
        self.guardian = Guardian.objects.create(
            user=self.parent, first_name='Laura', last_name='Acosta', document_number='3456789',
            phone='0981123456', relationship='Madre',
        )
        ChildGuardian.objects.create(child=self.child, guardian=self.guardian)

        self.vaccine = Vaccine.objects.create(name='SPR', disease_prevented='Sarampión, Paperas, Rubéola', dose_count=2)
        self.batch = VaccineInventory.objects.create(
            vaccine=self.vaccine, batch_number='SPR-01', quantity=12,
            expiration_date=self.today + datetime.timedelta(days=200), received_by=self.doctor,
        )

    def as_user(self, user) -> None:
        self.client.force_authenticate(user=user)

    # Children

    def test_nurse_registers_child(self):
        self.as_user(self.nurse)
        resp = self.client.post('/api/v1/children', {
            'firstName': 'Mateo', 'lastName': 'Gimenez', 'documentNumber': '7654321',
            'dateOfBirth': (self.today - datetime.timedelta(days=10)).isoformat(), 'gender': 'M',
            'birthWeight': '3.25',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['documentNumber'], '7654321')
        self.assertEqual(resp.data['ageInMonths'], 0)

    def test_duplicate_child_document_is_conflict(self):
        self.as_user(self.doctor)
        resp = self.client.post('/api/v1/children', {
            'firstName': 'Otra', 'lastName': 'Persona', 'documentNumber': '4567890',
            'dateOfBirth': '2023-01-01', 'gender': 'F',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data['error'], 'Conflict')

    def test_child_validation_errors_are_reported_per_field(self):
        self.as_user(self.doctor)
        resp = self.client.post('/api/v1/children', {
            'firstName': 'A', 'lastName': 'Gimenez', 'documentNumber': '12',
            'dateOfBirth': (self.today + datetime.timedelta(days=1)).isoformat(), 'gender': 'M',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        errors = resp.data['validationErrors']
        self.assertIn('firstName', errors)
        self.assertEqual(errors['documentNumber'], 'Document number must have 6 to 8 digits')
        self.assertEqual(errors['dateOfBirth'], 'Date of birth must be in the past')

    def test_parent_cannot_register_child(self):
        self.as_user(self.parent)
        resp = self.client.post('/api/v1/children', {}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.data['status'], 403)

    def test_only_doctor_deletes_and_deleted_child_disappears(self):
        url = f'/api/v1/children/{self.child.id}'
        self.as_user(self.nurse)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_403_FORBIDDEN)

        self.as_user(self.doctor)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertIsNotNone(Child.objects.get(id=self.child.id).deleted_at)
        self.assertTrue(AuditEvent.objects.filter(action='child_deleted', object_id=self.child.id).exists())

        self.assertEqual(self.client.get(url).status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.get('/api/v1/children').data, [])
        resp = self.client.get('/api/v1/children/search', {'query': 'Sofia'})
        self.assertEqual(resp.data, [])
        self.assertEqual(self.client.get(f'/api/v1/children/document/{self.child.document_number}').status_code, 404)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_404_NOT_FOUND)

        history = self.client.get(f'/api/v1/audit/child/{self.child.id}')
        self.assertEqual(history.status_code, status.HTTP_200_OK)
        self.assertEqual(history.data[0]['action'], 'child_deleted')

    def test_parent_sees_own_children(self):
        self.as_user(self.parent)
        resp = self.client.get('/api/v1/children/my')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([c['id'] for c in resp.data], [self.child.id])
        self.assertEqual(resp.data[0]['guardianCount'], 1)

    def test_guardian_link_and_unlink(self):
        other = Guardian.objects.create(first_name='Pedro', last_name='Acosta', document_number='2345678',
                                        phone='0981000000', relationship='Padre')
        url = f'/api/v1/children/{self.child.id}/guardians/{other.id}'
        self.as_user(self.nurse)
        resp = self.client.post(url)
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['guardianCount'], 2)
        self.assertEqual(self.client.post(url).status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_404_NOT_FOUND)

    def test_guardians_are_staff_only(self):
        self.as_user(self.parent)
        self.assertEqual(self.client.get('/api/v1/guardians').status_code, status.HTTP_403_FORBIDDEN)
        self.as_user(self.nurse)
        resp = self.client.get(f'/api/v1/guardians/{self.guardian.id}')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['childCount'], 1)

    # Vaccines

    def test_only_doctor_maintains_catalogue(self):
        body = {'name': 'BCG', 'diseasePrevented': 'Tuberculosis'}
        self.as_user(self.nurse)
        self.assertEqual(self.client.post('/api/v1/vaccines', body, format='json').status_code, 403)
        self.as_user(self.doctor)
        self.assertEqual(self.client.post('/api/v1/vaccines', body, format='json').status_code, 201)
        self.assertEqual(self.client.post('/api/v1/vaccines', body, format='json').status_code, 409)

        names = [v['name'] for v in self.client.get('/api/v1/vaccines').data]
        self.assertIn('BCG', names)

    # Vaccination records

    def record_body(self, **overrides):
        body = {
            'childId': self.child.id, 'vaccineId': self.vaccine.id, 'doseNumber': 1,
            'administrationDate': self.today.isoformat(), 'batchNumber': 'SPR-01',
        }
        body.update(overrides)
        return body

    def test_recording_dose_deducts_stock(self):
        self.as_user(self.nurse)
        resp = self.client.post('/api/v1/vaccinations', self.record_body(), format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['administeredById'], self.nurse.id)
        self.batch.refresh_from_db()
        self.assertEqual(self.batch.quantity, 11)

        self.as_user(self.parent)
        resp = self.client.get(f'/api/v1/vaccinations/child/{self.child.id}')
        self.assertEqual(len(resp.data), 1)
        self.assertEqual(self.client.get('/api/v1/vaccinations/batch/SPR-01').status_code, 403)

    def test_unknown_batch_is_recorded_without_deduction(self):
        self.as_user(self.doctor)
        resp = self.client.post('/api/v1/vaccinations', self.record_body(batchNumber='EXTERNAL-9'), format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.batch.refresh_from_db()
        self.assertEqual(self.batch.quantity, 12)

    def test_empty_batch_refuses_dose(self):
        self.batch.quantity = 0
        self.batch.status = VaccineInventory.STATUS_DEPLETED
        self.batch.save()
        self.as_user(self.doctor)
        resp = self.client.post('/api/v1/vaccinations', self.record_body(), format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(VaccinationRecord.objects.exists())

    def test_inactive_vaccine_and_deleted_child_are_refused(self):
        self.as_user(self.doctor)
        self.vaccine.is_active = False
        self.vaccine.save()
        resp = self.client.post('/api/v1/vaccinations', self.record_body(), format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['message'], 'Cannot administer inactive vaccine')

        self.vaccine.is_active = True
        self.vaccine.save()
        self.child.soft_delete()
        self.child.save()
        resp = self.client.post('/api/v1/vaccinations', self.record_body(), format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(VaccinationRecord.objects.exists())

    def test_schedule_entry_must_match_vaccine(self):
        other = Vaccine.objects.create(name='BCG', disease_prevented='Tuberculosis')
        entry = VaccinationSchedule.objects.create(vaccine=other, country_code='PY', dose_number=1,
                                                   recommended_age_months=0)
        self.as_user(self.doctor)
        resp = self.client.post('/api/v1/vaccinations', self.record_body(scheduleId=entry.id), format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['message'], 'Schedule entry does not belong to the administered vaccine')
        self.assertFalse(VaccinationRecord.objects.exists())
        self.batch.refresh_from_db()
        self.assertEqual(self.batch.quantity, 12)

    def test_next_dose_must_follow_administration(self):
        self.as_user(self.doctor)
        resp = self.client.post('/api/v1/vaccinations',
                                self.record_body(nextDoseDate=self.today.isoformat()), format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('nextDoseDate', resp.data['validationErrors'])

    # Inventory

    def test_inventory_add_and_quantity_edits(self):
        self.as_user(self.nurse)
        resp = self.client.post('/api/v1/inventory', {
            'vaccineId': self.vaccine.id, 'batchNumber': 'SPR-02', 'quantity': 50,
            'expirationDate': (self.today + datetime.timedelta(days=300)).isoformat(),
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['status'], 'AVAILABLE')
        batch_id = resp.data['id']

        resp = self.client.put(f'/api/v1/inventory/{batch_id}/quantity', {'quantity': 0}, format='json')
        self.assertEqual(resp.data['status'], 'DEPLETED')
        resp = self.client.put(f'/api/v1/inventory/{batch_id}/quantity', {'quantity': 5}, format='json')
        self.assertEqual(resp.data['status'], 'AVAILABLE')
        resp = self.client.put(f'/api/v1/inventory/{batch_id}/quantity', {'quantity': -1}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['message'], 'Quantity cannot be negative')

        total = self.client.get(f'/api/v1/inventory/vaccine/{self.vaccine.id}/total')
        self.assertEqual(total.data, {'vaccineId': self.vaccine.id, 'totalAvailable': 17})

    def test_expired_batch_cannot_be_added(self):
        self.as_user(self.doctor)
        resp = self.client.post('/api/v1/inventory', {
            'vaccineId': self.vaccine.id, 'batchNumber': 'OLD-1', 'quantity': 5,
            'expirationDate': (self.today - datetime.timedelta(days=1)).isoformat(),
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['message'], 'Cannot add expired vaccine to inventory')

    def test_inventory_is_staff_only(self):
        self.as_user(self.parent)
        self.assertEqual(self.client.get('/api/v1/inventory').status_code, status.HTTP_403_FORBIDDEN)

    # Appointments

    def test_parent_books_future_appointment(self):
        self.as_user(self.parent)
        when = timezone.now() + datetime.timedelta(days=10)
        resp = self.client.post('/api/v1/appointments', {
            'childId': self.child.id, 'appointmentDate': when.isoformat(), 'appointmentType': 'VACCINATION',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['status'], 'SCHEDULED')
        self.assertEqual(resp.data['createdById'], self.parent.id)

        mine = self.client.get('/api/v1/appointments/my')
        self.assertEqual([a['id'] for a in mine.data], [resp.data['id']])
        self.assertEqual(self.client.get('/api/v1/appointments').status_code, status.HTTP_403_FORBIDDEN)

    def test_past_appointment_is_rejected_and_not_saved(self):
        self.as_user(self.nurse)
        resp = self.client.post('/api/v1/appointments', {
            'childId': self.child.id, 'appointmentType': 'VACCINATION',
            'appointmentDate': (timezone.now() - datetime.timedelta(hours=1)).isoformat(),
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['message'], 'Appointment date must be in the future')
        self.assertFalse(Appointment.objects.exists())

    def test_appointment_for_deleted_child_is_rejected(self):
        self.child.soft_delete()
        self.child.save()
        self.as_user(self.nurse)
        resp = self.client.post('/api/v1/appointments', {
            'childId': self.child.id, 'appointmentType': 'CONTROL',
            'appointmentDate': (timezone.now() + datetime.timedelta(days=2)).isoformat(),
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Appointment.objects.exists())

    def test_status_shortcuts(self):
        appointment = Appointment.objects.create(
            child=self.child, appointment_date=timezone.now() + datetime.timedelta(days=20),
            appointment_type='VACCINATION', created_by=self.parent,
        )
        self.as_user(self.parent)
        resp = self.client.put(f'/api/v1/appointments/{appointment.id}/confirm')
        self.assertEqual(resp.data['status'], 'CONFIRMED')
        self.assertEqual(self.client.put(f'/api/v1/appointments/{appointment.id}/complete').status_code, 403)

        self.as_user(self.doctor)
        resp = self.client.put(f'/api/v1/appointments/{appointment.id}/complete')
        self.assertEqual(resp.data['status'], 'COMPLETED')
        resp = self.client.put(f'/api/v1/appointments/{appointment.id}/status', {'status': 'NO_SHOW'}, format='json')
        self.assertEqual(resp.data['status'], 'NO_SHOW')
        resp = self.client.get('/api/v1/appointments/status/no_show')
        self.assertEqual(len(resp.data), 1)

    # Users

    def test_user_listing_roles(self):
        self.as_user(self.nurse)
        self.assertEqual(self.client.get('/api/v1/users').status_code, status.HTTP_403_FORBIDDEN)
        resp = self.client.get('/api/v1/users/medical-staff')
        self.assertEqual({u['username'] for u in resp.data}, {'doc', 'nurse'})
        self.assertEqual(self.client.get('/api/v1/users/role/ADMIN').status_code, status.HTTP_400_BAD_REQUEST)
        self.as_user(self.doctor)
        self.assertEqual(len(self.client.get('/api/v1/users').data), 3)
