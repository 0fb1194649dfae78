"""
URL mappings for the vaccination registry API.

Every endpoint lives under ``api/v1/``.  Trailing slashes are
deliberately omitted and ``APPEND_SLASH`` is off, so clients must use the
exact paths below.
"""
from django.urls import path, include

from .auth_views import login_view, register_view, refresh_view, logout_view, me_view
from .views import appointments
from .views import audit
from .views import children
from .views import guardians
from .views import health
from .views import inventory
from .views import notifications
from .views import records
from .views import users
from .views import vaccines

API = 'api/v1/'

urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),

    # Auth
    path(API + 'auth/login', login_view, name='login_view'),
    path(API + 'auth/register', register_view, name='register_view'),
    path(API + 'auth/refresh', refresh_view, name='refresh_view'),
    path(API + 'auth/logout', logout_view, name='logout_view'),
    path(API + 'auth/me', me_view, name='me_view'),

    # Users
    path(API + 'users', users.users_list, name='users_list'),
    path(API + 'users/medical-staff', users.medical_staff, name='users_medical_staff'),
    path(API + 'users/doctors', users.doctors, name='users_doctors'),
    path(API + 'users/nurses', users.nurses, name='users_nurses'),
    path(API + 'users/role/<str:role>', users.users_by_role, name='users_by_role'),
    path(API + 'users/<int:pk>', users.user_detail, name='user_detail'),

    # Children
    path(API + 'children', children.children_collection, name='children_collection'),
    path(API + 'children/search', children.search_children, name='children_search'),
    path(API + 'children/my', children.my_children, name='children_my'),
    path(API + 'children/without-guardians', children.children_without_guardians, name='children_without_guardians'),
    path(API + 'children/born-between', children.children_born_between, name='children_born_between'),
    path(API + 'children/document/<str:document_number>', children.child_by_document, name='child_by_document'),
    path(API + 'children/guardian/<int:guardian_id>', children.children_by_guardian, name='children_by_guardian'),
    path(API + 'children/<int:pk>', children.child_detail, name='child_detail'),
    path(API + 'children/<int:pk>/guardians', children.child_guardians, name='child_guardians'),
    path(API + 'children/<int:pk>/guardians/<int:guardian_id>', children.child_guardian_link, name='child_guardian_link'),
    path(API + 'children/<int:pk>/vaccination-status', children.child_vaccination_status, name='child_vaccination_status'),

    # Guardians
    path(API + 'guardians', guardians.guardians_collection, name='guardians_collection'),
    path(API + 'guardians/search', guardians.search_guardians, name='guardians_search'),
    path(API + 'guardians/without-children', guardians.guardians_without_children, name='guardians_without_children'),
    path(API + 'guardians/document/<str:document_number>', guardians.guardian_by_document, name='guardian_by_document'),
    path(API + 'guardians/<int:pk>', guardians.guardian_detail, name='guardian_detail'),
    path(API + 'guardians/<int:pk>/children', guardians.guardian_children, name='guardian_children'),

    # Vaccines and schedules
    path(API + 'vaccines', vaccines.vaccines_collection, name='vaccines_collection'),
    path(API + 'vaccines/all', vaccines.all_vaccines, name='vaccines_all'),
    path(API + 'vaccines/search', vaccines.search_vaccines, name='vaccines_search'),
    path(API + 'vaccines/name/<str:name>', vaccines.vaccine_by_name, name='vaccine_by_name'),
    path(API + 'vaccines/<int:pk>', vaccines.vaccine_detail, name='vaccine_detail'),
    path(API + 'schedules', vaccines.schedules_list, name='schedules_list'),
    path(API + 'schedules/paraguay', vaccines.paraguay_schedule, name='schedules_paraguay'),
    path(API + 'schedules/mandatory', vaccines.mandatory_schedules, name='schedules_mandatory'),
    path(API + 'schedules/country/<str:country_code>', vaccines.schedules_for_country, name='schedules_for_country'),
    path(API + 'schedules/vaccine/<int:vaccine_id>', vaccines.schedules_for_vaccine, name='schedules_for_vaccine'),

    # Vaccination records
    path(API + 'vaccinations', records.create_record, name='vaccinations_create'),
    path(API + 'vaccinations/upcoming', records.upcoming_doses, name='vaccinations_upcoming'),
    path(API + 'vaccinations/eligibility', records.eligibility, name='vaccinations_eligibility'),
    path(API + 'vaccinations/coverage', records.coverage, name='vaccinations_coverage'),
    path(API + 'vaccinations/child/<int:child_id>', records.records_for_child, name='vaccinations_for_child'),
    path(API + 'vaccinations/vaccine/<int:vaccine_id>', records.records_for_vaccine, name='vaccinations_for_vaccine'),
    path(API + 'vaccinations/batch/<str:batch_number>', records.records_for_batch, name='vaccinations_for_batch'),
    path(API + 'vaccinations/<int:pk>', records.record_detail, name='vaccination_detail'),

    # Inventory
    path(API + 'inventory', inventory.inventory_collection, name='inventory_collection'),
    path(API + 'inventory/expiring', inventory.expiring, name='inventory_expiring'),
    path(API + 'inventory/low-stock', inventory.low_stock, name='inventory_low_stock'),
    path(API + 'inventory/vaccine/<int:vaccine_id>/available', inventory.available_for_vaccine, name='inventory_available'),
    path(API + 'inventory/vaccine/<int:vaccine_id>/total', inventory.total_for_vaccine, name='inventory_total'),
    path(API + 'inventory/<int:pk>', inventory.batch_detail, name='inventory_detail'),
    path(API + 'inventory/<int:pk>/quantity', inventory.update_quantity, name='inventory_quantity'),
    path(API + 'inventory/<int:pk>/status', inventory.update_status, name='inventory_status'),

    # Appointments
    path(API + 'appointments', appointments.appointments_collection, name='appointments_collection'),
    path(API + 'appointments/my', appointments.my_appointments, name='appointments_my'),
    path(API + 'appointments/upcoming', appointments.upcoming, name='appointments_upcoming'),
    path(API + 'appointments/range', appointments.in_range, name='appointments_range'),
    path(API + 'appointments/status/<str:status_value>', appointments.by_status, name='appointments_by_status'),
    path(API + 'appointments/assigned/<int:user_id>', appointments.assigned_to, name='appointments_assigned'),
    path(API + 'appointments/created-by/<int:user_id>', appointments.created_by, name='appointments_created_by'),
    path(API + 'appointments/child/<int:child_id>', appointments.appointments_for_child, name='appointments_for_child'),
    path(API + 'appointments/<int:pk>', appointments.appointment_detail, name='appointment_detail'),
    path(API + 'appointments/<int:pk>/status', appointments.update_status, name='appointment_status'),
    path(API + 'appointments/<int:pk>/confirm', appointments.confirm, name='appointment_confirm'),
    path(API + 'appointments/<int:pk>/complete', appointments.complete, name='appointment_complete'),
    path(API + 'appointments/<int:pk>/cancel', appointments.cancel, name='appointment_cancel'),

    # Notifications
    path(API + 'notifications', notifications.my_notifications, name='notifications_list'),
    path(API + 'notifications/unread', notifications.unread_notifications, name='notifications_unread'),
    path(API + 'notifications/unread-count', notifications.unread_count, name='notifications_unread_count'),
    path(API + 'notifications/read-all', notifications.mark_all_read, name='notifications_read_all'),
    path(API + 'notifications/<int:pk>/read', notifications.mark_read, name='notification_read'),

    # Audit trail
    path(API + 'audit/<str:object_type>/<int:object_id>', audit.object_history, name='audit_history'),
]
