"""Vaccination registry application.

Children, guardians, the vaccine catalogue and national schedule,
administered doses, stock batches, appointments and notifications.
"""
