"""Attendance Tracker package.

Personal attendance tracking organized by feature modules (subjects,
attendance, timetable, notifications, ...) with a thin Flask controller layer
over service/repository layers.
"""
