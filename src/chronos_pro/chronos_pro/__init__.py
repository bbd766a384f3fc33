"""Chronos Pro package.

Kiosk attendance (face / PIN punches inside a geofence) plus the admin side:
employees, weekly schedules, vacations, monthly timesheets and exports.
Organized by feature modules with a thin Flask controller layer over
service/repository layers.
"""
